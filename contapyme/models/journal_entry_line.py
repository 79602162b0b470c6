from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from contapyme.database import Base
from contapyme.models.audit_mixin import TimestampMixin


class JournalEntryLine(Base, TimestampMixin):
    __tablename__ = "journal_entry_lines"

    id = Column(Integer, primary_key=True, index=True)
    journal_entry_id = Column(Integer, ForeignKey("journal_entries.id"), nullable=False, index=True)
    line_number = Column(Integer, nullable=False)
    account_code = Column(String(20), nullable=False)
    account_name = Column(String(150), nullable=True)
    line_description = Column(String, nullable=True)
    debit_amount = Column(Numeric(14, 2), CheckConstraint('debit_amount >= 0'), nullable=False, default=0)
    credit_amount = Column(Numeric(14, 2), CheckConstraint('credit_amount >= 0'), nullable=False, default=0)

    # Relationships
    journal_entry = relationship("JournalEntry", back_populates="lines")
