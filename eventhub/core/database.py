"""Database configuration for the SQLite-backed document store.

Each collection of the store (users, events, registrations, feedback) is a
SQLModel table on a single engine.

SQLite Configuration Choices:
    - **WAL (Write-Ahead Logging)**: Allows concurrent readers while writing.
      Registrations increment the event counter while other clients list
      events, so readers must not block on the writer.

    - **Foreign Keys**: Enabled for integrity of any declared references.
      Registrations and feedback deliberately carry no foreign key to the
      event table, because deleting an event leaves them in place.

    - **check_same_thread=False**: Required for FastAPI, whose threadpool
      may hand a connection to a different thread than the one that opened it.
"""

from sqlalchemy import event as sa_event
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine

from eventhub.core.config import settings

connect_args = {"check_same_thread": False}

engine = create_engine(
    settings.database_url,
    connect_args=connect_args,
    echo=settings.debug,  # Log SQL statements when DEBUG=true
)


@sa_event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    """Configure SQLite pragmas on each new connection.

    These settings are connection-level, not database-level, so they must
    be set each time a new connection is established from the pool.
    Non-SQLite drivers are left untouched.
    """
    if type(dbapi_connection).__module__.split(".")[0] != "sqlite3":
        return
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_and_tables(bind: Engine | None = None):
    """Create all database tables."""
    # Import for side effects: registers every table on SQLModel.metadata
    import eventhub.models  # noqa: F401

    SQLModel.metadata.create_all(bind or engine)
