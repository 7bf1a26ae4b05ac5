"""Database engine and session management."""

import logging
from collections.abc import Generator
from typing import Any

import sqlalchemy
import sqlalchemy.event
import sqlmodel

from .settings import get_settings

logger = logging.getLogger(__name__)

_engine: sqlalchemy.Engine | None = None


def _enable_sqlite_wal(dbapi_connection: Any, connection_record: Any) -> None:
    """Switch each new SQLite connection to write-ahead logging."""
    cursor = dbapi_connection.cursor()
    cursor.execute('PRAGMA journal_mode=WAL')
    cursor.close()


def make_engine(database_url: str, echo: bool = False) -> sqlalchemy.Engine:
    """Create an engine for the given URL, tuned for SQLite when applicable."""
    is_sqlite = database_url.startswith('sqlite')
    connect_args = {'check_same_thread': False} if is_sqlite else {}
    engine = sqlmodel.create_engine(database_url, connect_args=connect_args, echo=echo)
    if is_sqlite:
        sqlalchemy.event.listen(engine, 'connect', _enable_sqlite_wal)
    return engine


def get_engine() -> sqlalchemy.Engine:
    """Return the process-wide engine, creating it on first use."""
    global _engine
    if _engine is None:
        settings = get_settings()
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        _engine = make_engine(settings.resolved_database_url, echo=settings.sql_echo)
        logger.info('Opened database %s', _engine.url.render_as_string())
    return _engine


def create_db_and_tables() -> None:
    """Create database tables if they don't exist."""
    # Import models to ensure they're registered with SQLModel
    from . import models  # noqa: F401 # pyright: ignore[reportUnusedImport]

    sqlmodel.SQLModel.metadata.create_all(get_engine())


def get_session() -> Generator[sqlmodel.Session, None, None]:
    """Get database session."""
    with sqlmodel.Session(get_engine()) as session:
        yield session
