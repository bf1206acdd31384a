"""Route registration helpers."""

from __future__ import annotations

from fastapi import APIRouter

from analyst_ratings.config import AppSettings
from analyst_ratings.db.database import Database

from .items import FeedFactory, get_items_router


def get_api_router(
    database: Database,
    settings: AppSettings,
    feed_factory: FeedFactory | None = None,
) -> APIRouter:
    api_router = APIRouter(prefix=settings.api_prefix)
    api_router.include_router(get_items_router(database, settings, feed_factory))
    return api_router


__all__ = ["get_api_router"]
