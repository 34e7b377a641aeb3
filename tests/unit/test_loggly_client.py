"""Unit tests for the Loggly API client."""

from __future__ import annotations

import asyncio
import typing as typ

import httpx
import pytest

from logtrawl.loggly import (
    LogglyClient,
    LogglyConfig,
    LogglyConfigError,
    LogglyDecodeError,
    LogglyHTTPError,
    LogglyTransportError,
)
from tests.helpers.loggly_stub import make_event, next_link

if typ.TYPE_CHECKING:
    from logtrawl.common.time import TimeWindow

_Handler = typ.Callable[[httpx.Request], httpx.Response]


def _make_client(handler: _Handler) -> tuple[LogglyClient, httpx.AsyncClient]:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client = LogglyClient(
        LogglyConfig(token="t0k3n", account="acme"),
        http_client=http_client,
    )
    return client, http_client


async def _close(http_client: httpx.AsyncClient) -> None:
    await http_client.aclose()


def test_list_tags_sends_window_and_bearer_token(window: TimeWindow) -> None:
    """Tag listing is scoped to the window and authenticated."""
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "total_events": 3,
                "tag": [{"term": "abc", "count": 2}, {"term": "def", "count": 1}],
                "unique_field_count": 2,
            },
        )

    client, http_client = _make_client(handler)

    async def run() -> list[str]:
        try:
            tags = await client.list_tags(window)
        finally:
            await _close(http_client)
        return [tag.term for tag in tags]

    assert asyncio.run(run()) == ["abc", "def"]

    request = seen[0]
    assert request.url.host == "acme.loggly.com"
    assert request.url.path == "/apiv2/fields/tag"
    assert request.url.params["q"] == "*"
    assert request.url.params["from"] == "2018-01-30T01:00:00Z"
    assert request.url.params["until"] == "2018-01-30T09:00:00Z"
    assert request.headers["Authorization"] == "Bearer t0k3n"


def test_search_decodes_rsid(window: TimeWindow) -> None:
    """The search response exposes the result-set id."""

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/apiv2/search"
        return httpx.Response(
            200,
            json={"rsid": {"id": "728480292", "status": "SCHEDULED", "extra": 1}},
        )

    client, http_client = _make_client(handler)

    async def run() -> str:
        try:
            return (await client.search(window)).rsid.id
        finally:
            await _close(http_client)

    assert asyncio.run(run()) == "728480292"


def test_first_page_queries_tag_with_page_size(window: TimeWindow) -> None:
    """The first page is a query over the tag and window."""
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={"events": [make_event("boot", timestamp="100")], "next": ""},
        )

    client, http_client = _make_client(handler)

    async def run() -> None:
        try:
            page = await client.iterate_events("abc", window, page_size=250)
        finally:
            await _close(http_client)
        assert page.is_last
        assert [event.message for event in page.events] == ["boot"]

    asyncio.run(run())

    params = seen[0].url.params
    assert seen[0].url.path == "/apiv2/events/iterate"
    assert params["q"] == "tag:abc"
    assert params["size"] == "250"
    assert params["from"] == "2018-01-30T01:00:00Z"


def test_cursor_is_requested_verbatim(window: TimeWindow) -> None:
    """Later pages follow the continuation URL without rebuilding the query."""
    seen: list[httpx.Request] = []
    cursor = next_link("abc", 1)

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"events": []})

    client, http_client = _make_client(handler)

    async def run() -> None:
        try:
            await client.iterate_events("abc", window, cursor=cursor)
        finally:
            await _close(http_client)

    asyncio.run(run())

    assert seen[0].url == httpx.URL(cursor)
    assert "q" not in seen[0].url.params, "Expected no re-added query parameters."
    assert seen[0].headers["Authorization"] == "Bearer t0k3n"


@pytest.mark.parametrize("status", [401, 429, 500, 503])
def test_non_success_status_raises_http_error(
    window: TimeWindow, status: int
) -> None:
    """Any non-2xx answer aborts with the status code attached."""
    client, http_client = _make_client(
        lambda _request: httpx.Response(status, text="nope")
    )

    async def run() -> None:
        try:
            await client.list_tags(window)
        finally:
            await _close(http_client)

    with pytest.raises(LogglyHTTPError) as excinfo:
        asyncio.run(run())

    assert excinfo.value.status_code == status
    assert "acme.loggly.com" in excinfo.value.url


def test_malformed_body_raises_decode_error(window: TimeWindow) -> None:
    """A body that is not the expected JSON is a decode error."""
    client, http_client = _make_client(
        lambda _request: httpx.Response(200, text="<html>maintenance</html>")
    )

    async def run() -> None:
        try:
            await client.iterate_events("abc", window)
        finally:
            await _close(http_client)

    with pytest.raises(LogglyDecodeError, match="could not be decoded"):
        asyncio.run(run())


def test_network_failure_raises_transport_error(window: TimeWindow) -> None:
    """Connection failures surface as transport errors."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client, http_client = _make_client(handler)

    async def run() -> None:
        try:
            await client.search(window)
        finally:
            await _close(http_client)

    with pytest.raises(LogglyTransportError, match="connection refused"):
        asyncio.run(run())


@pytest.mark.parametrize(
    ("token", "account", "match"),
    [("", "acme", "token"), ("t0k3n", "  ", "account")],
)
def test_empty_credentials_are_rejected(token: str, account: str, match: str) -> None:
    """The client refuses to start without a token and account."""
    with pytest.raises(LogglyConfigError, match=match):
        LogglyClient(LogglyConfig(token=token, account=account))


def test_aclose_leaves_injected_client_open() -> None:
    """Only clients the LogglyClient created are closed."""
    client, http_client = _make_client(lambda _request: httpx.Response(200))

    async def run() -> bool:
        await client.aclose()
        closed = http_client.is_closed
        await http_client.aclose()
        return closed

    assert asyncio.run(run()) is False
