"""
Database engine, session factory, and initialization utilities.

There is no module-level engine: main() builds one from Settings, hands a
session factory to CollectionController and disposes the engine on exit.
Tests build their own engine against in-memory SQLite.

Usage:
    from vgc_manager.data.database import create_db_engine, make_session_factory, session_scope

    engine = create_db_engine(settings)
    factory = make_session_factory(engine)

    with session_scope(factory) as session:
        game = session.get(Game, 1)
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from vgc_manager.config.settings import Settings
from vgc_manager.core.exceptions import DatabaseConnectionError
from vgc_manager.data.models import Base

logger = logging.getLogger("vgc.database")

SessionFactory = Callable[[], Session]


def create_db_engine(settings: Settings) -> Engine:
    """Create the process-wide engine. No connection is opened yet."""
    engine = create_engine(settings.sqlalchemy_url, echo=settings.db_echo)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _configure_sqlite)
    return engine


def _configure_sqlite(dbapi_connection, connection_record):
    """Enforce foreign key constraints so ON DELETE CASCADE clears join rows."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def check_connection(engine: Engine) -> None:
    """Open one connection and run a trivial query; fail fast at startup."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        raise DatabaseConnectionError(f"Unable to connect to database: {exc}") from exc
    logger.info("Connected to %s", engine.url.render_as_string(hide_password=True))


def init_db(engine: Engine) -> None:
    """
    Create any missing tables. Existing tables are left untouched.
    Safe to call multiple times (idempotent).
    """
    Base.metadata.create_all(engine)


def make_session_factory(engine: Engine) -> sessionmaker:
    # expire_on_commit=False keeps loaded attributes readable after the
    # session closes; the GUI works with detached instances.
    return sessionmaker(bind=engine, expire_on_commit=False)


@contextmanager
def session_scope(factory: SessionFactory) -> Generator[Session, None, None]:
    """
    Context manager providing a transactional database session.

    Automatically rolls back on exception and always closes the session.
    Callers commit explicitly.

    Usage:
        with session_scope(factory) as session:
            session.add(obj)
            session.commit()
    """
    session = factory()
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
