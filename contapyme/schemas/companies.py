from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime


class CompanyBase(BaseModel):
    business_name: str
    rut: str
    legal_name: Optional[str] = None
    industry_sector: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None


class CompanyCreate(CompanyBase):

    @field_validator('business_name', 'rut')
    @classmethod
    def required_text(cls, v):
        if v is None or not str(v).strip():
            raise ValueError("Faltan datos requeridos")
        return str(v).strip()


class Company(CompanyBase):
    id: int
    user_id: int
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
