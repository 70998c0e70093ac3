"""Liveness and database readiness endpoints."""

import logging
import os

from fastapi import APIRouter, Depends

from app.dependencies import get_api_key
from clinic.services._types import DbInfoDict
from config import DatabaseSettings, get_settings
from db.connection import REQUIRED_TABLES, table_status

logger: logging.Logger = logging.getLogger(__name__)

router: APIRouter = APIRouter(prefix="/health", tags=["health"])


def get_db_info() -> DbInfoDict:
    """Describe the configured database and which clinic tables exist. Never raises."""
    db: DatabaseSettings = get_settings().database
    info: DbInfoDict = DbInfoDict(
        backend_type="postgres" if db._use_postgres() else "sqlite",
        database_url_or_path=(
            db._redacted_postgres_dsn() if db._use_postgres() else db._resolved_sqlite_path().as_posix()
        ),
        pid=os.getpid(),
    )
    try:
        present, missing = table_status()
    except Exception as e:
        logger.exception("Health DB check failed: %s", e)
        info.update(
            tables_present=[],
            tables_missing=list(REQUIRED_TABLES),
            schema_initialized=False,
            error=str(e),
        )
        return info

    info.update(tables_present=present, tables_missing=missing, schema_initialized=not missing)
    return info


@router.get("")
def health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/db", dependencies=[Depends(get_api_key)])
def health_db() -> DbInfoDict:
    return get_db_info()
