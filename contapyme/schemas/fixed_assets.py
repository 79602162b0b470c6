from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional
from datetime import date, datetime
from decimal import Decimal

VALID_ASSET_STATUSES = ["active", "disposed", "fully_depreciated"]
RESIDUAL_ABOVE_PURCHASE = "El valor residual no puede superar el valor de compra"


class FixedAssetCategory(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    default_useful_life_years: int
    default_residual_rate: Decimal
    asset_account_code: Optional[str] = None
    depreciation_account_code: Optional[str] = None
    expense_account_code: Optional[str] = None

    class Config:
        from_attributes = True


class FixedAssetBase(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    category: str = "Activo Fijo"
    asset_account_code: Optional[str] = None
    depreciation_account_code: Optional[str] = None
    expense_account_code: Optional[str] = None
    serial_number: Optional[str] = None
    brand: Optional[str] = None
    model: Optional[str] = None
    location: Optional[str] = None
    responsible_person: Optional[str] = None


class FixedAssetCreate(FixedAssetBase):
    purchase_value: Decimal = Field(..., gt=0)
    residual_value: Decimal = Field(default=Decimal(0), ge=0)
    purchase_date: date
    start_depreciation_date: Optional[date] = None
    useful_life_years: int = Field(..., gt=0)

    @model_validator(mode='after')
    def check_values(self):
        if self.residual_value > self.purchase_value:
            raise ValueError(RESIDUAL_ABOVE_PURCHASE)
        if self.start_depreciation_date is None:
            self.start_depreciation_date = self.purchase_date
        return self


class FixedAssetUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    category: Optional[str] = None
    purchase_value: Optional[Decimal] = Field(default=None, gt=0)
    residual_value: Optional[Decimal] = Field(default=None, ge=0)
    start_depreciation_date: Optional[date] = None
    useful_life_years: Optional[int] = Field(default=None, gt=0)
    asset_account_code: Optional[str] = None
    depreciation_account_code: Optional[str] = None
    expense_account_code: Optional[str] = None
    status: Optional[str] = None
    disposal_date: Optional[date] = None
    disposal_value: Optional[Decimal] = Field(default=None, ge=0)
    serial_number: Optional[str] = None
    brand: Optional[str] = None
    model: Optional[str] = None
    location: Optional[str] = None
    responsible_person: Optional[str] = None

    @field_validator('name', 'category', 'purchase_value', 'residual_value', 'start_depreciation_date', 'useful_life_years', 'status')
    @classmethod
    def not_null(cls, v, info):
        if v is None:
            raise ValueError(f"El campo {info.field_name} no puede ser nulo")
        return v

    @field_validator('status')
    @classmethod
    def validate_status(cls, v):
        if v not in VALID_ASSET_STATUSES:
            raise ValueError(f"status debe ser uno de {VALID_ASSET_STATUSES}")
        return v


class FixedAsset(FixedAssetBase):
    id: int
    user_id: int
    purchase_value: Decimal
    residual_value: Decimal
    purchase_date: date
    start_depreciation_date: date
    useful_life_years: int
    depreciation_method: str
    status: str
    disposal_date: Optional[date] = None
    disposal_value: Optional[Decimal] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
