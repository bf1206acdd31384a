"""Item persistence gateway."""

from __future__ import annotations

import logging
from typing import Union
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from analyst_ratings.core.money import MoneyConversionError
from analyst_ratings.db.database import Database
from analyst_ratings.models import Item
from analyst_ratings.schemas.items import FeedItem, ItemCreate

logger = logging.getLogger(__name__)

ItemPayload = Union[ItemCreate, FeedItem]

# Connection refusals surface from the driver as OSError, not SQLAlchemyError.
_STORAGE_FAILURES = (SQLAlchemyError, OSError)
_READ_FAILURES = (*_STORAGE_FAILURES, MoneyConversionError)


class StorageError(RuntimeError):
    """Raised when the item table cannot be read or written."""


class RecordError(StorageError):
    """Raised when a single synchronized record cannot be inserted."""


class ItemNotFoundError(LookupError):
    """Raised when no item exists for the requested identifier."""

    def __init__(self, item_id: UUID | str) -> None:
        super().__init__(f"Item {item_id} not found")
        self.item_id = item_id


class ItemRepository:
    """CRUD operations against the ``items`` table.

    Every call opens its own session, so a failure in one insert never
    poisons the next one.
    """

    def __init__(self, database: Database) -> None:
        self._database = database

    async def insert(self, payload: ItemPayload) -> Item:
        try:
            return await self._insert(payload)
        except _STORAGE_FAILURES as exc:
            logger.error("Failed to insert item %s: %s", payload.ticker, exc)
            raise StorageError(f"Failed to insert item: {exc}") from exc

    async def bulk_insert(self, payload: ItemPayload) -> Item:
        try:
            return await self._insert(payload)
        except _STORAGE_FAILURES as exc:
            raise RecordError(f"Failed to insert item {payload.ticker!r}: {exc}") from exc

    async def list_all(self) -> list[Item]:
        stmt = select(Item).order_by(Item.created_at.desc())
        try:
            async with self._database.session() as session:
                rows = (await session.execute(stmt)).scalars().all()
        except _READ_FAILURES as exc:
            raise StorageError(f"Failed to list items: {exc}") from exc
        return list(rows)

    async def get_by_id(self, item_id: UUID) -> Item:
        try:
            async with self._database.session() as session:
                item = await session.get(Item, item_id)
        except _READ_FAILURES as exc:
            raise StorageError(f"Failed to load item {item_id}: {exc}") from exc
        if item is None:
            raise ItemNotFoundError(item_id)
        return item

    async def delete_all(self) -> int:
        try:
            async with self._database.session() as session:
                result = await session.execute(delete(Item))
                await session.commit()
        except _STORAGE_FAILURES as exc:
            raise StorageError(f"Failed to delete items: {exc}") from exc
        deleted = result.rowcount or 0
        logger.info("Deleted %d items", deleted)
        return deleted

    async def _insert(self, payload: ItemPayload) -> Item:
        item = Item(**payload.model_dump())
        async with self._database.session() as session:
            session.add(item)
            try:
                await session.commit()
            except SQLAlchemyError:
                await session.rollback()
                raise
            await session.refresh(item)
        return item


__all__ = [
    "ItemNotFoundError",
    "ItemPayload",
    "ItemRepository",
    "RecordError",
    "StorageError",
]
