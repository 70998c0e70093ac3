"""Engine, sessions and schema bootstrap for the clinic database."""

import logging
from collections.abc import Generator
from contextlib import contextmanager

from sqlalchemy import create_engine, event, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from config import Settings, get_settings
from db.models import Base

logger = logging.getLogger(__name__)

_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None

REQUIRED_TABLES = ("patients", "appointments", "financial_entries")

SQLITE_PRAGMAS = (
    "PRAGMA foreign_keys=ON",
    "PRAGMA journal_mode=WAL",
    "PRAGMA busy_timeout=30000",
)


def _engine_options(settings: Settings) -> dict:
    opts: dict = {"echo": settings.debug}
    if settings.database._use_postgres():
        opts.update(
            pool_size=settings.database.pool_size,
            pool_timeout=settings.database.pool_timeout,
            pool_recycle=settings.database.pool_recycle,
            pool_pre_ping=True,
        )
    return opts


def _apply_sqlite_pragmas(dbapi_conn, connection_record) -> None:
    cur = dbapi_conn.cursor()
    for pragma in SQLITE_PRAGMAS:
        cur.execute(pragma)
    cur.close()


def get_engine() -> Engine:
    """Shared engine, built from settings on first use."""
    global _engine

    if _engine is None:
        settings = get_settings()
        _engine = create_engine(settings.database.url, **_engine_options(settings))
        if not settings.database._use_postgres():
            event.listen(_engine, "connect", _apply_sqlite_pragmas)
        logger.debug("Engine ready: %s", settings.database.db_info_for_logging())

    return _engine


def get_session_factory() -> sessionmaker[Session]:
    global _session_factory

    if _session_factory is None:
        _session_factory = sessionmaker(
            bind=get_engine(),
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
        )
    return _session_factory


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Session that commits on success and rolls back on error."""
    session = get_session_factory()()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency wrapping :func:`get_session`."""
    with get_session() as session:
        yield session


def table_status(engine: Engine | None = None) -> tuple[list[str], list[str]]:
    """``(present, missing)`` for the clinic tables."""
    existing = set(inspect(engine or get_engine()).get_table_names())
    present = sorted(existing)
    missing = [t for t in REQUIRED_TABLES if t not in existing]
    return present, missing


def init_database(engine: Engine | None = None) -> list[str]:
    """Create any missing clinic tables; returns the ones created."""
    engine = engine or get_engine()
    _, before = table_status(engine)
    if not before:
        logger.info("Schema init: all tables present")
        return []

    Base.metadata.create_all(engine)

    _, still_missing = table_status(engine)
    if still_missing:
        raise RuntimeError(f"Schema init failed: missing tables {still_missing}")

    logger.info("Schema init: created tables %s", before)
    return before
