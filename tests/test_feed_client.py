"""Ratings feed client tests."""

from __future__ import annotations

import httpx
import pytest

from analyst_ratings.config import AppSettings
from analyst_ratings.providers.feed import (
    FeedConfigurationError,
    FeedDecodeError,
    FeedRequestError,
    RatingsFeedClient,
    next_page_url,
)

BASE_URL = "https://feed.test/swechallenge/list"

PAGE = {
    "items": [
        {
            "ticker": "BSBR",
            "target_from": "$4.20",
            "target_to": "$4.70",
            "company": "Banco Santander (Brasil)",
            "action": "upgraded by",
            "brokerage": "The Goldman Sachs Group",
            "rating_from": "Sell",
            "rating_to": "Neutral",
            "time": "2025-01-13T00:30:05.813548892Z",
        },
        {
            "ticker": "VYGR",
            "target_from": "$11.00",
            "target_to": "$9.00",
            "company": "Voyager Therapeutics",
            "action": "target lowered by",
            "rating_from": "Outperform",
            "rating_to": "Outperform",
            "time": "2025-01-14T00:30:05Z",
        },
    ],
    "next_page": "VYGR",
}


def _client(handler) -> RatingsFeedClient:
    transport = httpx.MockTransport(handler)
    return RatingsFeedClient(
        "secret",
        base_url=BASE_URL,
        timeout_seconds=5,
        client=httpx.AsyncClient(transport=transport),
    )


def test_opaque_token_is_appended_to_base_url():
    url = next_page_url(BASE_URL, "AAPL 2025/01")
    parsed = httpx.URL(url)
    assert url.startswith(BASE_URL + "?")
    assert parsed.params["next_page"] == "AAPL 2025/01"


def test_absolute_next_page_is_used_verbatim():
    target = "https://other.test/list?cursor=abc"
    assert next_page_url(BASE_URL, target) == target


@pytest.mark.parametrize("value", [None, ""])
def test_missing_next_page_ends_pagination(value):
    assert next_page_url(BASE_URL, value) is None


def test_scheme_without_host_is_a_token():
    url = next_page_url(BASE_URL, "cursor:42")
    assert httpx.URL(url).params["next_page"] == "cursor:42"


@pytest.mark.asyncio
async def test_fetch_page_sends_credentials_and_decodes_items():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=PAGE)

    async with _client(handler) as client:
        page = await client.fetch_page()

    assert str(seen[0].url) == BASE_URL
    assert seen[0].headers["Authorization"] == "Bearer secret"
    assert seen[0].headers["Accept"] == "application/json"
    assert [item.ticker for item in page.items] == ["BSBR", "VYGR"]
    assert page.items[0].target_from == 4.2
    assert page.items[1].brokerage == ""
    assert page.next_page == "VYGR"
    assert client.next_page_url(page.next_page) == f"{BASE_URL}?next_page=VYGR"


@pytest.mark.asyncio
async def test_null_next_page_and_items():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"items": None, "next_page": None})

    async with _client(handler) as client:
        page = await client.fetch_page(BASE_URL)

    assert page.items == []
    assert page.next_page is None


@pytest.mark.asyncio
async def test_transport_failure_is_a_request_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with _client(handler) as client:
        with pytest.raises(FeedRequestError):
            await client.fetch_page()


@pytest.mark.asyncio
async def test_error_status_is_a_request_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"error": "unauthorized"})

    async with _client(handler) as client:
        with pytest.raises(FeedRequestError):
            await client.fetch_page()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        b"<html>not json</html>",
        b"[1, 2, 3]",
        b'{"items": "nope"}',
        b'{"items": [{"ticker": "X", "target_from": "abc"}]}',
        b'{"items": [], "next_page": 5}',
    ],
)
async def test_malformed_page_is_a_decode_error(body):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=body, headers={"content-type": "application/json"})

    async with _client(handler) as client:
        with pytest.raises(FeedDecodeError):
            await client.fetch_page()


def test_missing_credential_is_a_configuration_error():
    settings = AppSettings(feed_api_key=None)
    with pytest.raises(FeedConfigurationError):
        RatingsFeedClient.from_settings(settings)


@pytest.mark.asyncio
async def test_injected_client_is_left_open():
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200, json={})))
    async with RatingsFeedClient("secret", base_url=BASE_URL, client=http_client) as client:
        await client.fetch_page()
    assert not http_client.is_closed
    await http_client.aclose()


@pytest.mark.asyncio
async def test_null_strings_decode_as_empty():
    record = {**PAGE["items"][0], "company": None, "brokerage": None, "rating_from": None}

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"items": [record], "next_page": None})

    async with _client(handler) as client:
        page = await client.fetch_page()

    (item,) = page.items
    assert item.ticker == "BSBR"
    assert (item.company, item.brokerage, item.rating_from) == ("", "", "")


@pytest.mark.asyncio
@pytest.mark.parametrize("amount", [10**400, "1e400", "nan"])
async def test_out_of_range_money_is_a_decode_error(amount):
    record = {**PAGE["items"][0], "target_from": amount}

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"items": [record], "next_page": None})

    async with _client(handler) as client:
        with pytest.raises(FeedDecodeError):
            await client.fetch_page()
