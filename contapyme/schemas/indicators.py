import math

from pydantic import BaseModel, StrictFloat, StrictInt, field_validator
from typing import Optional, Union
from datetime import date as date_type, datetime
from decimal import Decimal


class IndicatorUpdate(BaseModel):
    code: str
    value: Union[StrictInt, StrictFloat]
    date: Optional[date_type] = None

    @field_validator('code')
    @classmethod
    def code_required(cls, v):
        if not v or not v.strip():
            raise ValueError("Código y valor son requeridos")
        return v.strip()

    @field_validator('value')
    @classmethod
    def non_negative(cls, v):
        if not math.isfinite(v) or v < 0:
            raise ValueError("El valor debe ser un número positivo")
        return v


class EconomicIndicator(BaseModel):
    id: int
    code: str
    name: str
    unit: str
    category: str
    value: Decimal
    date: date_type
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
