from sqlalchemy import Column, Date, Integer, Numeric, String
from sqlalchemy.orm import relationship

from contapyme.database import Base
from contapyme.models.audit_mixin import TimestampMixin


class JournalEntry(Base, TimestampMixin):
    __tablename__ = "journal_entries"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, index=True, nullable=False)
    entry_number = Column(Integer, nullable=False)
    entry_date = Column(Date, nullable=False)
    description = Column(String, nullable=False)
    reference = Column(String, nullable=True)
    entry_type = Column(String(30), nullable=False, default="manual")
    status = Column(String(20), nullable=False, default="approved")
    total_debit = Column(Numeric(14, 2), nullable=False, default=0)
    total_credit = Column(Numeric(14, 2), nullable=False, default=0)

    # Relationships
    lines = relationship(
        "JournalEntryLine",
        back_populates="journal_entry",
        cascade="all, delete-orphan",
        order_by="JournalEntryLine.line_number",
    )
