"""Item CRUD and synchronization routes."""

from __future__ import annotations

import logging
from typing import Callable
from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from analyst_ratings.config import AppSettings
from analyst_ratings.db.database import Database
from analyst_ratings.providers.feed import (
    FeedConfigurationError,
    FeedDecodeError,
    FeedRequestError,
    RatingsFeedClient,
)
from analyst_ratings.schemas.items import ItemCreate, ItemSchema, SyncResponse
from analyst_ratings.services.items import ItemNotFoundError, ItemRepository, StorageError
from analyst_ratings.services.sync import ItemSynchronizer

logger = logging.getLogger(__name__)

FeedFactory = Callable[[AppSettings], RatingsFeedClient]


def _default_feed_factory(settings: AppSettings) -> RatingsFeedClient:
    return RatingsFeedClient.from_settings(settings)


def get_items_router(
    database: Database,
    settings: AppSettings,
    feed_factory: FeedFactory | None = None,
) -> APIRouter:
    router = APIRouter(prefix="/items", tags=["items"])
    make_feed = feed_factory or _default_feed_factory
    repository = ItemRepository(database)

    @router.post("", response_model=ItemSchema, status_code=status.HTTP_201_CREATED)
    async def create_item(payload: ItemCreate) -> ItemSchema:
        try:
            item = await repository.insert(payload)
        except StorageError as exc:
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
        logger.info("Created item %s for %s", item.id, item.ticker)
        return ItemSchema.model_validate(item)

    @router.get("", response_model=list[ItemSchema])
    async def list_items() -> list[ItemSchema]:
        try:
            rows = await repository.list_all()
        except StorageError as exc:
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
        return [ItemSchema.model_validate(row) for row in rows]

    @router.get("/{item_id}", response_model=ItemSchema)
    async def get_item(item_id: str) -> ItemSchema:
        try:
            key = UUID(item_id)
        except ValueError as exc:
            # A malformed identifier can never have been issued
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found") from exc
        try:
            item = await repository.get_by_id(key)
        except ItemNotFoundError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found") from exc
        except StorageError as exc:
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
        return ItemSchema.model_validate(item)

    @router.put("/", response_model=SyncResponse)
    async def sync_items() -> SyncResponse:
        """Replace every stored item with the contents of the upstream feed."""

        try:
            feed = make_feed(settings)
        except FeedConfigurationError as exc:
            logger.error("Item sync not attempted: %s", exc)
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc

        async with feed:
            synchronizer = ItemSynchronizer(repository, feed)
            try:
                await synchronizer.run()
            except FeedDecodeError as exc:
                raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
            except (FeedRequestError, StorageError) as exc:
                raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
        return SyncResponse()

    return router


__all__ = ["FeedFactory", "get_items_router"]
