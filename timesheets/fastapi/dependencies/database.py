"""
Database engine, session factory and declarative base.

Every request gets its own synchronous SQLAlchemy session through the
``get_sync_db`` dependency; the engines commit or roll back explicitly.
"""

import logging
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from timesheets.fastapi.core.exceptions import StorageFailure, TimesheetError
from timesheets.fastapi.core.init_settings import global_settings

logger = logging.getLogger(__name__)

Base = declarative_base()


def build_engine(url: str, **kwargs) -> Engine:
    """
    Create an engine for ``url``.

    SQLite connections get ``check_same_thread`` disabled (FastAPI runs sync
    dependencies in a threadpool) and foreign keys switched on, since SQLite
    ignores them unless asked.
    """
    if url.startswith("sqlite"):
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        engine = create_engine(url, connect_args=connect_args, **kwargs)

        @event.listens_for(engine, "connect")
        def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    return create_engine(url, pool_pre_ping=True, **kwargs)


engine = build_engine(global_settings.DB_URL)

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


def init_db(bind: Engine = None) -> None:
    """Create all tables that do not exist yet."""
    # Import models so they register with Base.metadata
    import timesheets.fastapi.models  # noqa: F401

    target = bind or engine
    Base.metadata.create_all(bind=target)
    logger.info("Database initialised (%s)", target.url.render_as_string(hide_password=True))


def get_sync_db() -> Generator[Session, None, None]:
    """Yield a database session and close it once the request is done."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def unit_of_work(db: Session, action: str) -> Generator[Session, None, None]:
    """
    Run a block as one transaction: commit on success, roll back on any error.

    Integrity errors are re-raised untouched so callers can translate
    constraint violations; other storage errors become ``StorageFailure``.

    Usage:
        with unit_of_work(db, "complete project"):
            ...
    """
    try:
        yield db
        db.commit()
    except (TimesheetError, IntegrityError):
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Failed to %s", action)
        raise StorageFailure(f"Failed to {action}") from e
    except Exception:
        db.rollback()
        raise
