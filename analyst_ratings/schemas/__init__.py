"""Pydantic schema exports."""

from .items import FeedItem, FeedPage, ItemCreate, ItemSchema, SyncResponse

__all__ = [
    "FeedItem",
    "FeedPage",
    "ItemCreate",
    "ItemSchema",
    "SyncResponse",
]
