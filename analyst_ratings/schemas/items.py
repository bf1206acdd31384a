"""Item payload schemas."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Annotated, Any, Optional
from uuid import UUID

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator

from analyst_ratings.core.money import Money

# Upstream timestamps carry nanoseconds; datetime holds microseconds.
_EXTRA_FRACTION = re.compile(r"(\.\d{6})\d+")


def _trim_sub_microseconds(value: Any) -> Any:
    if isinstance(value, str):
        return _EXTRA_FRACTION.sub(r"\1", value, count=1)
    return value


EventTime = Annotated[datetime, BeforeValidator(_trim_sub_microseconds)]


def _null_as_empty(value: Any) -> Any:
    return "" if value is None else value


# JSON null reads as an empty string
LenientText = Annotated[str, BeforeValidator(_null_as_empty)]


class ItemCreate(BaseModel):
    """Body of a direct item creation request."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "ticker": "AAPL",
                "target_from": "$150.00",
                "target_to": 175.0,
                "company": "Apple Inc.",
                "action": "target raised by",
                "brokerage": "Example Securities",
                "rating_from": "Buy",
                "rating_to": "Buy",
                "time": "2025-01-15T00:30:05Z",
            }
        }
    )

    ticker: str = Field(..., min_length=1, max_length=32)
    target_from: Money
    target_to: Money
    company: str = Field(..., min_length=1)
    action: str = Field(..., min_length=1)
    brokerage: LenientText = ""
    rating_from: str = Field(..., min_length=1)
    rating_to: str = Field(..., min_length=1)
    time: EventTime

    @field_validator("ticker", "company", "action", "rating_from", "rating_to")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class ItemSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    ticker: str
    target_from: Money
    target_to: Money
    company: str
    action: str
    brokerage: LenientText = ""
    rating_from: str
    rating_to: str
    time: EventTime
    created_at: datetime


class FeedItem(BaseModel):
    """One record as delivered by the upstream ratings feed.

    The feed is trusted as-is: missing or null strings read as empty, and a
    missing ``time`` is left for the database to reject.
    """

    model_config = ConfigDict(extra="ignore")

    ticker: LenientText = ""
    target_from: Money = 0.0
    target_to: Money = 0.0
    company: LenientText = ""
    action: LenientText = ""
    brokerage: LenientText = ""
    rating_from: LenientText = ""
    rating_to: LenientText = ""
    time: Optional[EventTime] = None


class FeedPage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    items: list[FeedItem] = Field(default_factory=list)
    next_page: Optional[str] = None

    @field_validator("items", mode="before")
    @classmethod
    def null_items_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class SyncResponse(BaseModel):
    message: str = Field(default="Synchronization completed")


__all__ = [
    "FeedItem",
    "FeedPage",
    "ItemCreate",
    "ItemSchema",
    "SyncResponse",
]
