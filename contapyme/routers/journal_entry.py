from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from datetime import date
from contapyme import config
from contapyme.crud import journal_entry as journal_entry_crud
from contapyme.database import get_db
from contapyme.exceptions import NotFoundError
from contapyme.schemas.journal_entry import JournalEntry, JournalEntryCreate, JournalEntrySummary
from contapyme.utils.responses import ok

router = APIRouter(
    prefix="/api/accounting/journal",
    tags=["Journal Entries"],
)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_journal_entry(entry: JournalEntryCreate, db: Session = Depends(get_db)):
    """
    Create a new journal entry.
    The line count and the debits-equal-credits check are handled in the JournalEntryCreate schema.
    """
    company_id = entry.company_id or config.DEFAULT_COMPANY_ID
    db_entry = journal_entry_crud.create_journal_entry(db=db, entry=entry, company_id=company_id)
    return ok(
        data={"entry_id": db_entry.id, "entry_number": db_entry.entry_number},
        message="Asiento creado exitosamente",
    )


@router.get("")
def get_journal_entries(
    company_id: Optional[int] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    entry_type: Optional[str] = None,
    status: Optional[str] = None,
    include_lines: bool = False,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
):
    """
    Retrieve a page of journal entries with statistics over the whole filtered set.
    """
    entries, statistics, pagination = journal_entry_crud.get_journal_entries(
        db=db,
        company_id=company_id or config.DEFAULT_COMPANY_ID,
        date_from=date_from,
        date_to=date_to,
        entry_type=entry_type,
        status=status,
        include_lines=include_lines,
        page=page,
        limit=limit,
    )
    schema = JournalEntry if include_lines else JournalEntrySummary
    return ok(data={
        "entries": [schema.model_validate(e).model_dump(mode="json") for e in entries],
        "statistics": statistics,
        "pagination": pagination,
    })


@router.get("/{entry_id}")
def get_journal_entry(entry_id: int, db: Session = Depends(get_db)):
    db_entry = journal_entry_crud.get_journal_entry(db=db, entry_id=entry_id)
    if db_entry is None:
        raise NotFoundError("Asiento no encontrado")
    return ok(data=JournalEntry.model_validate(db_entry).model_dump(mode="json"))
