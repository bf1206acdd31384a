"""Upstream data providers."""

from .feed import (
    FeedConfigurationError,
    FeedDecodeError,
    FeedError,
    FeedRequestError,
    RatingsFeedClient,
    next_page_url,
)

__all__ = [
    "FeedConfigurationError",
    "FeedDecodeError",
    "FeedError",
    "FeedRequestError",
    "RatingsFeedClient",
    "next_page_url",
]
