"""
Database Configuration Module

This module handles the database configuration and connection setup for ContaPyme.
It uses SQLAlchemy for ORM (Object-Relational Mapping) with the hosted Supabase
PostgreSQL instance as the database.

The module includes:
- Database connection setup
- Session management
- Base model class definition
- Soft delete filter implementation
"""

import logging

from sqlalchemy import create_engine, event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker, Session, with_loader_criteria
from sqlalchemy.pool import StaticPool

from contapyme import config

logger = logging.getLogger(__name__)

# Create SQLAlchemy engine
# The engine is built once per process and shared by every request
if config.DATABASE_URL.startswith("sqlite"):
    # In-memory SQLite (tests) must share one connection across threads
    engine = create_engine(
        config.DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
else:
    engine = create_engine(config.DATABASE_URL, pool_pre_ping=True)

# Create SessionLocal class
# autocommit=False means we need to explicitly commit transactions
# autoflush=False means we need to explicitly flush changes to the database
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base is the declarative base class that our ORM models will inherit from
Base = declarative_base()


@event.listens_for(Session, "do_orm_execute")
def add_soft_delete_filter(execute_state):
    """
    Event listener that automatically filters out "soft-deleted" records.

    This function adds a filter to all SELECT queries to exclude records
    where the 'deleted_at' field is not NULL.

    Args:
        execute_state: The current execution state of the query
    """
    if (
        execute_state.is_select
        and not execute_state.is_relationship_load
        and not execute_state.execution_options.get("include_deleted", False)
    ):
        for entity in execute_state.statement.column_descriptions:
            entity_type = entity.get('entity')
            if entity_type is not None and hasattr(entity_type, 'deleted_at'):
                execute_state.statement = execute_state.statement.options(
                    with_loader_criteria(
                        entity_type,
                        lambda cls: cls.deleted_at.is_(None),
                        include_aliases=True
                    )
                )


def get_db():
    """
    Dependency function that provides a database session.

    A new session is created for each request and closed once the
    request is completed.

    Yields:
        Session: A SQLAlchemy database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_connection(db: Session) -> bool:
    """Run a trivial query to confirm the database answers."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.error("Database connection check failed: %s", e)
        return False
