"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from analyst_ratings import __version__
from analyst_ratings.api.routes import get_api_router
from analyst_ratings.api.routes.items import FeedFactory
from analyst_ratings.config import AppSettings, get_settings
from analyst_ratings.core.logging import setup_logging
from analyst_ratings.core.telemetry import TelemetryExporters, setup_telemetry
from analyst_ratings.db.database import Database

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI, db: Database):
    await db.create_all()
    logger.info("Item table created/verified")
    yield
    await db.dispose()


def create_app(
    db: Database | None = None,
    settings: AppSettings | None = None,
    feed_factory: FeedFactory | None = None,
    telemetry_exporters: TelemetryExporters | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level)
    database_instance = db or Database(settings.database_url)
    logger.info("Starting %s with settings %s", settings.app_name, settings.dict_for_logging())

    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        lifespan=lambda app: _lifespan(app, database_instance),
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["*"],
    )
    app.include_router(get_api_router(database_instance, settings, feed_factory))

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
            for err in exc.errors()
        ]
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": errors})

    @app.get("/health", tags=["health"])
    async def health() -> dict[str, str]:
        """Return service readiness metadata."""

        return {
            "status": "ok",
            "service": settings.app_name,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    setup_telemetry(app, settings, engine=database_instance.engine, exporters=telemetry_exporters)
    return app


__all__ = ["create_app"]
