"""
Diagnostics endpoints used while setting up a new database.

They report what the service can see of the schema; nothing here writes.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import func, inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from contapyme import config
from contapyme.database import Base, check_connection, get_db
from contapyme.utils import model_to_dict
from contapyme.models.journal_entry import JournalEntry
from contapyme.utils.responses import ok

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/debug", tags=["Debug"])
database_router = APIRouter(prefix="/api/database", tags=["Debug"])

CHECKED_TABLES = [
    "users",
    "companies",
    "chart_of_accounts",
    "journal_entries",
    "journal_entry_lines",
    "fixed_assets",
    "fixed_assets_categories",
    "indicator_config",
    "economic_indicators",
    "payroll_liquidations",
    "payroll_config",
]


@router.get("/check-journal")
def check_journal(db: Session = Depends(get_db)):
    """Report whether journal_entries exists, its columns and one sample row."""
    columns = []
    sample = None
    test_error = None

    try:
        inspector = inspect(db.get_bind())
        exists = inspector.has_table(JournalEntry.__tablename__)
        if exists:
            columns = [
                {
                    "column_name": column["name"],
                    "data_type": str(column["type"]),
                    "is_nullable": "YES" if column.get("nullable", True) else "NO",
                }
                for column in inspector.get_columns(JournalEntry.__tablename__)
            ]
            sample = model_to_dict(db.query(JournalEntry).first())
        else:
            test_error = f'relation "{JournalEntry.__tablename__}" does not exist'
    except SQLAlchemyError as e:
        logger.exception("Journal table probe failed")
        exists = False
        test_error = str(e)

    return ok(journal_entries={
        "exists": exists,
        "columns": columns,
        "sampleData": sample,
        "columnCount": len(columns),
        "testError": test_error,
    })


@database_router.get("/check")
def check_database(db: Session = Depends(get_db)):
    connected = check_connection(db)
    tables = {}
    if connected:
        inspector = inspect(db.get_bind())
        for name in CHECKED_TABLES:
            exists = inspector.has_table(name)
            count = 0
            if exists:
                table = Base.metadata.tables[name]
                count = db.execute(select(func.count()).select_from(table)).scalar()
            tables[name] = {"exists": exists, "count": count}

    return ok(
        connected=connected,
        supabase_configured=config.is_supabase_configured(),
        tables=tables,
    )
