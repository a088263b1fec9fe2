"""Database configuration and session management for SQLite.

This module configures the SQLite database engine with settings suited to
a kiosk backend where several stations check families in at once.

SQLite Configuration Choices:
    - **WAL (Write-Ahead Logging)**: Allows the roster screens to keep
      reading attendance while a check-in or checkout is being written.

    - **Foreign Keys**: Disabled by default in SQLite. We enable it so an
      Attendance or PickupCode row can never point at a missing Event or
      Person, which is why event deletion removes children first.

    - **check_same_thread=False**: ``get_session`` is a sync dependency, so
      FastAPI opens the session on a threadpool worker while the async
      check-in and checkout handlers query it from the event loop thread.

Concurrent kiosks are reconciled by the schema, not by locks: unique
constraints on attendance and pickup codes, savepoint inserts that retry
or update on conflict, and the conditional UPDATE that redeems a code.
"""

from sqlalchemy import event as sa_event
from sqlmodel import Session, SQLModel, create_engine

from kiosk.core.config import settings

connect_args = {"check_same_thread": False}

engine = create_engine(
    settings.database_url,
    connect_args=connect_args,
    echo=settings.debug,  # Log SQL statements when DEBUG=true
)


@sa_event.listens_for(engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    """Configure SQLite pragmas on each new connection.

    These settings are connection-level, not database-level, so they must
    be set each time a new connection is established from the pool.
    """
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_and_tables():
    """Create all database tables."""
    # Register every table on the metadata before creating
    import kiosk.models  # noqa: F401

    SQLModel.metadata.create_all(engine)


def get_session():
    """Dependency for getting database session."""
    with Session(engine) as session:
        yield session
