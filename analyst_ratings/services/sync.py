"""Replace the local item table with the contents of the upstream feed."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Protocol

from opentelemetry import metrics, trace

from analyst_ratings.schemas.items import FeedPage
from analyst_ratings.services.items import ItemPayload, RecordError

logger = logging.getLogger(__name__)

_tracer = trace.get_tracer(__name__)
_meter = metrics.get_meter(__name__)
_sync_runs = _meter.create_counter(
    "analyst_ratings.sync.runs",
    unit="{run}",
    description="Item sync runs by outcome",
)
_synced_items = _meter.create_counter(
    "analyst_ratings.sync.items",
    unit="{item}",
    description="Feed records handled by item sync",
)


class SyncState(str, enum.Enum):
    IDLE = "idle"
    CLEARING = "clearing"
    FETCHING = "fetching"
    INSERTING = "inserting"
    DONE = "done"
    ABORTED = "aborted"


class ItemStore(Protocol):
    async def delete_all(self) -> int: ...

    async def bulk_insert(self, payload: ItemPayload) -> object: ...


class PageSource(Protocol):
    @property
    def base_url(self) -> str: ...

    def next_page_url(self, next_page: str | None) -> str | None: ...

    async def fetch_page(self, url: str | None = None) -> FeedPage: ...


@dataclass
class SyncResult:
    deleted: int = 0
    pages: int = 0
    inserted: int = 0
    skipped: int = 0


class ItemSynchronizer:
    """Delete every item, then refill the table page by page from the feed.

    Clearing, fetching and decoding failures abort the run and are re-raised
    unchanged; rows inserted before the failure are kept. A record that
    fails to insert is logged and skipped.
    """

    def __init__(self, store: ItemStore, feed: PageSource) -> None:
        self._store = store
        self._feed = feed
        self.state = SyncState.IDLE
        self.error: Exception | None = None

    async def run(self) -> SyncResult:
        result = SyncResult()
        with _tracer.start_as_current_span("items.sync") as span:
            try:
                self.state = SyncState.CLEARING
                result.deleted = await self._store.delete_all()

                url: str | None = self._feed.base_url
                while url is not None:
                    self.state = SyncState.FETCHING
                    page = await self._feed.fetch_page(url)
                    result.pages += 1

                    self.state = SyncState.INSERTING
                    await self._insert_page(page, result)

                    url = self._feed.next_page_url(page.next_page)
            except Exception as exc:
                self.state = SyncState.ABORTED
                self.error = exc
                _record(span, result)
                _sync_runs.add(1, {"outcome": "aborted"})
                logger.error(
                    "Item sync aborted after %d pages (%d inserted, %d skipped): %s",
                    result.pages,
                    result.inserted,
                    result.skipped,
                    exc,
                )
                raise

            self.state = SyncState.DONE
            _record(span, result)
            _sync_runs.add(1, {"outcome": "done"})
        logger.info(
            "Item sync completed: %d deleted, %d pages, %d inserted, %d skipped",
            result.deleted,
            result.pages,
            result.inserted,
            result.skipped,
        )
        return result

    async def _insert_page(self, page: FeedPage, result: SyncResult) -> None:
        for record in page.items:
            try:
                await self._store.bulk_insert(record)
            except RecordError as exc:
                result.skipped += 1
                _synced_items.add(1, {"outcome": "skipped"})
                logger.warning("Skipping item %r: %s", record.ticker, exc)
                continue
            result.inserted += 1
            _synced_items.add(1, {"outcome": "inserted"})


def _record(span: trace.Span, result: SyncResult) -> None:
    span.set_attributes(
        {
            "sync.deleted": result.deleted,
            "sync.pages": result.pages,
            "sync.inserted": result.inserted,
            "sync.skipped": result.skipped,
        }
    )


__all__ = ["ItemSynchronizer", "SyncResult", "SyncState"]
