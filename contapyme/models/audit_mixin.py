from datetime import datetime

import pytz
from sqlalchemy import Column, DateTime, String

from contapyme.config import TIMEZONE


def now_santiago():
    return datetime.now(pytz.timezone(TIMEZONE))


class TimestampMixin:
    """Mixin that provides created/updated timestamps and user info.

    Timestamps are timezone-aware and recorded in Chile's local time
    (America/Santiago), which is what users see on their reports.
    """
    created_at = Column(DateTime(timezone=True), default=now_santiago)
    updated_at = Column(DateTime(timezone=True), onupdate=now_santiago)
    created_by = Column(String, nullable=True)
    updated_by = Column(String, nullable=True)


class SoftDeleteMixin:
    """Mixin for soft-delete columns (deleted_at, deleted_by).

    Rows carrying these columns are hidden from ORM selects by the
    listener in contapyme.database once deleted_at is set.
    """
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    deleted_by = Column(String, nullable=True)
