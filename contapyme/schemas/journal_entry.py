from pydantic import BaseModel, Field, model_validator
from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal


class JournalEntryLineBase(BaseModel):
    account_code: str = Field(..., min_length=1)
    account_name: Optional[str] = None
    line_description: Optional[str] = None
    debit_amount: Decimal = Field(default=Decimal(0), ge=0, decimal_places=2)
    credit_amount: Decimal = Field(default=Decimal(0), ge=0, decimal_places=2)


class JournalEntryLineCreate(JournalEntryLineBase):
    line_number: Optional[int] = None


class JournalEntryLine(JournalEntryLineBase):
    id: int
    journal_entry_id: int
    line_number: int

    class Config:
        from_attributes = True


class JournalEntryBase(BaseModel):
    entry_date: date
    description: str = Field(..., min_length=1)
    reference: Optional[str] = None
    entry_type: str = "manual"


class JournalEntryCreate(JournalEntryBase):
    company_id: Optional[int] = None
    lines: List[JournalEntryLineCreate] = []

    @model_validator(mode='after')
    def check_debits_equal_credits(self):
        if len(self.lines) < 2:
            raise ValueError('Se requieren al menos 2 líneas')
        total_debit = sum(line.debit_amount for line in self.lines)
        total_credit = sum(line.credit_amount for line in self.lines)
        if total_debit != total_credit:
            raise ValueError('El asiento debe estar balanceado')
        if total_debit == 0 and total_credit == 0:
            raise ValueError('El asiento debe tener montos distintos de cero')
        return self

    @property
    def total_debit(self) -> Decimal:
        return sum((line.debit_amount for line in self.lines), Decimal(0))

    @property
    def total_credit(self) -> Decimal:
        return sum((line.credit_amount for line in self.lines), Decimal(0))


class JournalEntry(JournalEntryBase):
    id: int
    company_id: int
    entry_number: int
    status: str
    total_debit: Decimal
    total_credit: Decimal
    created_at: Optional[datetime] = None
    lines: List[JournalEntryLine] = []

    class Config:
        from_attributes = True


class JournalEntrySummary(JournalEntryBase):
    id: int
    entry_number: int
    status: str
    total_debit: Decimal
    total_credit: Decimal
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
