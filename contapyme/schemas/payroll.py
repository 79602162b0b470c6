from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal


class AfpUpdate(BaseModel):
    rut: str = Field(..., min_length=1)
    afp_name: str = Field(..., min_length=1)


class AfpUpdateResult(BaseModel):
    rut: str
    liquidations_updated: int = 0
    config_updated: int = 0
    success: bool
    error: Optional[str] = None


class PayrollLiquidation(BaseModel):
    id: int
    company_id: int
    employee_rut: str
    employee_name: Optional[str] = None
    afp_name: Optional[str] = None
    health_institution: Optional[str] = None
    period_year: int
    period_month: int
    total_taxable_income: Decimal
    total_deductions: Decimal
    net_salary: Decimal
    status: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
