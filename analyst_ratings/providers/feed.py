"""Client for the paginated upstream analyst ratings feed."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlsplit

import httpx
from opentelemetry.propagate import inject
from pydantic import ValidationError

from analyst_ratings.config import AppSettings, get_settings
from analyst_ratings.config.settings import DEFAULT_FEED_URL
from analyst_ratings.schemas.items import FeedPage

logger = logging.getLogger(__name__)


class FeedError(RuntimeError):
    """Base class for upstream feed failures."""


class FeedConfigurationError(FeedError):
    """Raised when the feed credential is not configured."""


class FeedRequestError(FeedError):
    """Raised when a page cannot be fetched from the feed."""


class FeedDecodeError(FeedError):
    """Raised when a page body is not a valid ratings page."""


def next_page_url(base_url: str, next_page: str | None) -> str | None:
    """Resolve the ``next_page`` continuation of a page into a fetch URL.

    Absolute URLs are followed verbatim; anything else is an opaque token
    passed back to the base feed URL as the ``next_page`` query parameter.
    """

    if not next_page:
        return None
    parts = urlsplit(next_page)
    if parts.scheme and parts.netloc:
        return next_page
    return str(httpx.URL(base_url).copy_set_param("next_page", next_page))


class RatingsFeedClient:
    """Authenticated, non-retrying reader for the ratings feed."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = DEFAULT_FEED_URL,
        timeout_seconds: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not api_key:
            raise FeedConfigurationError("Ratings feed API key is not configured (SWE_API_KEY)")
        self._api_key = api_key
        self._base_url = base_url
        self._timeout = timeout_seconds
        self._client = client
        self._owns_client = client is None

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> "RatingsFeedClient":
        settings = settings or get_settings()
        return cls(
            settings.feed_api_key or "",
            base_url=settings.feed_base_url,
            timeout_seconds=settings.feed_timeout_seconds,
            client=client,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    def next_page_url(self, next_page: str | None) -> str | None:
        return next_page_url(self._base_url, next_page)

    async def fetch_page(self, url: str | None = None) -> FeedPage:
        """Fetch and decode one page; ``url`` defaults to the base feed URL."""

        target = url or self._base_url
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Accept": "application/json",
        }
        # Inject current trace context so the upstream call links to the sync span
        try:
            inject(headers)
        except Exception:
            # Best-effort; tracing injection is optional
            pass

        try:
            response = await self._get_client().get(target, headers=headers)
        except httpx.HTTPError as exc:
            raise FeedRequestError(f"Failed to reach ratings feed at {target}: {exc}") from exc

        logger.info("Fetched %s status=%s", target, response.status_code)
        if response.status_code >= 400:
            raise FeedRequestError(
                f"Ratings feed returned {response.status_code} for {target}: {response.text[:200]}"
            )
        return self._decode(response, target)

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "RatingsFeedClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    @staticmethod
    def _decode(response: httpx.Response, target: str) -> FeedPage:
        try:
            payload = response.json()
        except ValueError as exc:
            raise FeedDecodeError(f"Ratings feed returned invalid JSON from {target}") from exc
        if not isinstance(payload, dict):
            raise FeedDecodeError(f"Ratings feed page from {target} is not a JSON object")
        try:
            return FeedPage.model_validate(payload)
        except ValidationError as exc:
            raise FeedDecodeError(f"Error decoding ratings feed page from {target}: {exc}") from exc


__all__ = [
    "FeedConfigurationError",
    "FeedDecodeError",
    "FeedError",
    "FeedRequestError",
    "RatingsFeedClient",
    "next_page_url",
]
