from pydantic import BaseModel, Field, field_validator
from typing import Any, Optional
from datetime import datetime

VALID_ACCOUNT_TYPES = ["ACTIVO", "PASIVO", "PATRIMONIO", "INGRESO", "GASTO"]
VALID_LEVEL_TYPES = ["1er Nivel", "2do Nivel", "3er Nivel", "Imputable"]


def _check_account_type(v):
    if v is not None and v not in VALID_ACCOUNT_TYPES:
        raise ValueError(f"account_type debe ser uno de {VALID_ACCOUNT_TYPES}")
    return v


class ChartOfAccountsBase(BaseModel):
    code: str
    name: str
    account_type: str  # ACTIVO, PASIVO, PATRIMONIO, INGRESO, GASTO
    level_type: str = "Imputable"
    parent_code: Optional[str] = None
    description: Optional[str] = None
    is_active: bool = True

    @field_validator('account_type')
    @classmethod
    def validate_account_type(cls, v):
        return _check_account_type(v)

    @field_validator('level_type')
    @classmethod
    def validate_level_type(cls, v):
        if v not in VALID_LEVEL_TYPES:
            raise ValueError(f"level_type debe ser uno de {VALID_LEVEL_TYPES}")
        return v


class ChartOfAccountsCreate(ChartOfAccountsBase):
    company_id: Optional[int] = None


class ChartOfAccountsUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    account_type: Optional[str] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator('name', 'account_type', 'is_active')
    @classmethod
    def not_null(cls, v, info):
        if v is None:
            raise ValueError(f"El campo {info.field_name} no puede ser nulo")
        return v

    @field_validator('account_type')
    @classmethod
    def validate_account_type(cls, v):
        return _check_account_type(v)


class ChartOfAccounts(ChartOfAccountsBase):
    id: int
    company_id: Optional[int] = None
    level: int
    is_detail: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ChartOfAccountsImport(BaseModel):
    data: Any = None
    format: str = "csv"
    replace_existing: bool = False
    company_id: Optional[int] = None

    @field_validator('format')
    @classmethod
    def validate_format(cls, v):
        if v not in ("csv", "json"):
            raise ValueError("format debe ser csv o json")
        return v
