from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload
from contapyme.models import journal_entry as journal_entry_model
from contapyme.models import journal_entry_line as journal_entry_line_model
from contapyme.schemas.journal_entry import JournalEntryCreate
from typing import Optional
from datetime import date
import logging

logger = logging.getLogger(__name__)

JournalEntry = journal_entry_model.JournalEntry


def get_next_entry_number(db: Session, company_id: int) -> int:
    last_number = db.query(func.max(JournalEntry.entry_number)).filter(
        JournalEntry.company_id == company_id
    ).scalar()
    return (last_number or 0) + 1


def create_journal_entry(db: Session, entry: JournalEntryCreate, company_id: int):
    """
    Creates a new journal entry and its lines in a single transaction.

    Balance and line count are already enforced by JournalEntryCreate.
    """
    db_entry = JournalEntry(
        company_id=company_id,
        entry_number=get_next_entry_number(db, company_id),
        entry_date=entry.entry_date,
        description=entry.description,
        reference=entry.reference,
        entry_type=entry.entry_type,
        status="approved",
        total_debit=entry.total_debit,
        total_credit=entry.total_credit,
    )
    db.add(db_entry)
    db.flush()  # Flush to get the ID for the parent entry before creating children

    for index, line_data in enumerate(entry.lines, start=1):
        db_line = journal_entry_line_model.JournalEntryLine(
            journal_entry_id=db_entry.id,
            line_number=line_data.line_number or index,
            account_code=line_data.account_code,
            account_name=line_data.account_name,
            line_description=line_data.line_description,
            debit_amount=line_data.debit_amount,
            credit_amount=line_data.credit_amount,
        )
        db.add(db_line)

    db.commit()
    db.refresh(db_entry)
    logger.info("Journal entry #%s created for company %s", db_entry.entry_number, company_id)
    return db_entry


def get_journal_entry(db: Session, entry_id: int, company_id: Optional[int] = None):
    query = db.query(JournalEntry).options(selectinload(JournalEntry.lines)).filter(JournalEntry.id == entry_id)
    if company_id is not None:
        query = query.filter(JournalEntry.company_id == company_id)
    return query.first()


def _filtered_query(db: Session, company_id, date_from, date_to, entry_type, status):
    query = db.query(JournalEntry).filter(JournalEntry.company_id == company_id)
    if date_from:
        query = query.filter(JournalEntry.entry_date >= date_from)
    if date_to:
        query = query.filter(JournalEntry.entry_date <= date_to)
    if entry_type:
        query = query.filter(JournalEntry.entry_type == entry_type)
    if status:
        query = query.filter(JournalEntry.status == status)
    return query


def get_journal_entries(
    db: Session,
    company_id: int,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    entry_type: Optional[str] = None,
    status: Optional[str] = None,
    include_lines: bool = False,
    page: int = 1,
    limit: int = 50,
):
    """
    Retrieves one page of journal entries plus statistics over every entry
    matching the filters (not only the page).
    """
    query = _filtered_query(db, company_id, date_from, date_to, entry_type, status)
    if include_lines:
        query = query.options(selectinload(JournalEntry.lines))

    total = query.count()
    entries = query.order_by(
        JournalEntry.entry_date.desc(), JournalEntry.entry_number.desc()
    ).offset((page - 1) * limit).limit(limit).all()

    totals = _filtered_query(db, company_id, date_from, date_to, entry_type, status).with_entities(
        func.coalesce(func.sum(JournalEntry.total_debit), 0),
        func.coalesce(func.sum(JournalEntry.total_credit), 0),
    ).one()

    entries_by_type = dict(
        _filtered_query(db, company_id, date_from, date_to, entry_type, status)
        .with_entities(JournalEntry.entry_type, func.count(JournalEntry.id))
        .group_by(JournalEntry.entry_type)
        .all()
    )
    entries_by_status = dict(
        _filtered_query(db, company_id, date_from, date_to, entry_type, status)
        .with_entities(JournalEntry.status, func.count(JournalEntry.id))
        .group_by(JournalEntry.status)
        .all()
    )

    statistics = {
        "total_entries": total,
        "total_debit": float(totals[0]),
        "total_credit": float(totals[1]),
        "entries_by_type": entries_by_type,
        "entries_by_status": entries_by_status,
    }
    pagination = {
        "page": page,
        "limit": limit,
        "total": total,
        "hasMore": page * limit < total,
    }
    return entries, statistics, pagination
