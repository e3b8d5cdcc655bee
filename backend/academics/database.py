"""Database engine and helpers.

This module configures the SQLModel/SQLAlchemy engine from
`settings.DATABASE_URL` (a local SQLite file by default) and provides
small helpers used by the application and tests.
"""

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine, Session

from .config import settings


def make_engine(url: str, **kwargs) -> Engine:
    """Create an engine for `url`, enabling foreign keys on SQLite.

    SQLite ignores `FOREIGN KEY` clauses unless the pragma is turned on
    for every connection, so semesters pointing at a missing program
    would otherwise be accepted.
    """
    if url.startswith("sqlite"):
        connect_args = kwargs.setdefault("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
    eng = create_engine(url, echo=settings.SQL_ECHO, **kwargs)
    if eng.dialect.name == "sqlite":
        event.listen(eng, "connect", _enable_sqlite_foreign_keys)
    return eng


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


engine = make_engine(settings.DATABASE_URL)


def create_db_and_tables(bind: Engine = None):
    """Create database tables using SQLModel metadata.

    This function is intended for local development and tests;
    deployments can bootstrap the schema with `run_migrations.py`
    instead.
    """
    # Register the table classes on the metadata before creating.
    from . import models  # noqa: F401

    SQLModel.metadata.create_all(bind or engine)


def get_session():
    """Yield a database `Session` for FastAPI dependency injection.

    The generator yields a session and ensures it is closed when the
    request scope finishes.
    """
    with Session(engine) as session:
        yield session
