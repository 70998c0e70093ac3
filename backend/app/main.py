"""FastAPI application for the clinic dashboard backend."""

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.routes import dashboard, exports, health, statuses
from config import Settings, get_settings
from db.connection import init_database

logger: logging.Logger = logging.getLogger(__name__)

DASHBOARD_ORIGINS: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings: Settings = get_settings()
    logger.info("Environment: %s", settings.environment)
    logger.info("DB: %s", settings.database.db_info_for_logging())
    logger.info("Exports: %s", settings.export_dir.resolve().as_posix())

    created: list[str] = init_database()
    if created:
        logger.info("Created tables on startup: %s", ", ".join(created))
    yield


def create_app() -> FastAPI:
    app: FastAPI = FastAPI(
        title="Clinic Dashboard Backend",
        version="0.1.0",
        lifespan=_lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=DASHBOARD_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        # the dashboard reads the download name and row count from these
        expose_headers=["Content-Disposition", "X-Export-Rows"],
    )

    @app.exception_handler(Exception)
    async def _on_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled: %s", exc)
        if get_settings().environment == "production":
            return JSONResponse(status_code=500, content={"detail": "Internal server error"})
        return JSONResponse(
            status_code=500,
            content={"detail": str(exc), "type": type(exc).__name__},
        )

    app.include_router(health.router)
    app.include_router(exports.router)
    app.include_router(statuses.router)
    app.include_router(dashboard.router)

    return app


app: FastAPI = create_app()


def start() -> None:
    """Entry point for clinic-api."""
    backend_root: Path = Path(__file__).resolve().parent.parent
    os.chdir(backend_root)

    for candidate in (backend_root / ".env", backend_root.parent / ".env"):
        if candidate.exists():
            load_dotenv(candidate, override=False)

    uvicorn.run(
        "app.main:app",
        host=os.environ.get("CLINIC_HOST", "127.0.0.1"),
        port=int(os.environ.get("CLINIC_PORT", "8000")),
        reload=os.environ.get("CLINIC_RELOAD", "false").lower() in ("1", "true", "yes"),
    )
