"""Domain services."""

from .items import ItemNotFoundError, ItemRepository, RecordError, StorageError
from .sync import ItemSynchronizer, SyncResult, SyncState

__all__ = [
    "ItemNotFoundError",
    "ItemRepository",
    "ItemSynchronizer",
    "RecordError",
    "StorageError",
    "SyncResult",
    "SyncState",
]
