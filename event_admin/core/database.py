"""Database configuration and session management.

The console stores events in SQLite by default. Roster categories,
schedules and publication windows live in JSON columns, mirroring the
shape the editing surface works with.

SQLite Configuration Choices:
    - **WAL (Write-Ahead Logging)**: Lets the stale-draft job and request
      handlers read while a save is being written.

    - **Foreign Keys**: Disabled by default in SQLite. Enabled so an
      NWTA extension row cannot outlive its base event.

    - **check_same_thread=False**: FastAPI may hand a session to a
      different worker thread than the one that opened it.
"""

from sqlalchemy import event as sa_event
from sqlmodel import Session, SQLModel, create_engine

from event_admin.core.config import settings

connect_args = (
    {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}
)

engine = create_engine(
    settings.database_url,
    connect_args=connect_args,
    echo=settings.debug,  # Log SQL statements when DEBUG=true
)


@sa_event.listens_for(engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    """Configure SQLite pragmas on each new connection."""
    if not settings.database_url.startswith("sqlite"):
        return
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_and_tables():
    """Create all database tables."""
    SQLModel.metadata.create_all(engine)


def get_session():
    """Dependency for getting database session."""
    with Session(engine) as session:
        yield session
