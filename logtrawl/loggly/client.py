"""Loggly v2 API client used by the harvest pipeline."""

from __future__ import annotations

import dataclasses
import typing as typ

import httpx
import msgspec

from logtrawl.logging import get_logger, log_info

from .errors import (
    LogglyConfigError,
    LogglyDecodeError,
    LogglyHTTPError,
    LogglyTransportError,
)
from .models import EventPage, SearchResult, Tag, TagResult

if typ.TYPE_CHECKING:
    from logtrawl.common.time import TimeWindow

logger = get_logger(__name__)

_T = typ.TypeVar("_T")

DEFAULT_PAGE_SIZE = 1000


class LogglyEventSource(typ.Protocol):
    """Paged event stream consumed by the harvester."""

    async def iterate_events(
        self,
        tag: str,
        window: TimeWindow,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        cursor: str | None = None,
    ) -> EventPage:
        """Return one page of ``tag``'s events within ``window``."""
        ...


@dataclasses.dataclass(frozen=True, slots=True)
class LogglyConfig:
    """Connection settings for a Loggly account.

    ``timeout_s`` of ``None`` disables request timeouts entirely; a stalled
    service then blocks the run.
    """

    token: str
    account: str
    timeout_s: float | None = None
    user_agent: str = "logtrawl/0.1"

    @property
    def base_url(self) -> str:
        """Return the account's API v2 root."""
        return f"https://{self.account}.loggly.com/apiv2"


class LogglyClient:
    """Async Loggly client covering search, tag listing and event iteration."""

    def __init__(
        self,
        config: LogglyConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the client; an injected ``http_client`` is not closed."""
        if not config.token.strip():
            raise LogglyConfigError.empty_token()
        if not config.account.strip():
            raise LogglyConfigError.empty_account()

        self._config = config
        self._headers = {
            "Authorization": f"Bearer {config.token}",
            "User-Agent": config.user_agent,
            "Accept": "application/json",
        }
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(config.timeout_s),
        )

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def search(self, window: TimeWindow) -> SearchResult:
        """Open a search over every event in ``window``."""
        return await self._get(
            f"{self._config.base_url}/search",
            SearchResult,
            params={"q": "*", "from": window.since_param, "until": window.until_param},
        )

    async def list_tags(self, window: TimeWindow) -> list[Tag]:
        """Return the tags active in ``window``, in service order."""
        result = await self._get(
            f"{self._config.base_url}/fields/tag",
            TagResult,
            params={"q": "*", "from": window.since_param, "until": window.until_param},
        )
        return list(result.tag)

    async def iterate_events(
        self,
        tag: str,
        window: TimeWindow,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        cursor: str | None = None,
    ) -> EventPage:
        """Fetch one page of ``tag``'s event stream.

        The first page is requested with the query parameters; later pages
        follow ``cursor``, the continuation URL Loggly returned as ``next``.
        """
        if cursor:
            return await self._get(cursor, EventPage)
        return await self._get(
            f"{self._config.base_url}/events/iterate",
            EventPage,
            params={
                "q": f"tag:{tag}",
                "from": window.since_param,
                "until": window.until_param,
                "size": page_size,
            },
        )

    async def _get(
        self,
        url: str,
        result_type: type[_T],
        *,
        params: dict[str, str | int] | None = None,
    ) -> _T:
        """Issue an authenticated GET and decode the JSON body."""
        request = self._client.build_request(
            "GET", url, params=params, headers=self._headers
        )
        target = str(request.url)
        log_info(logger, "request: %s", target)
        try:
            response = await self._client.send(request)
        except httpx.RequestError as exc:
            raise LogglyTransportError.from_exception(target, exc) from exc

        if not response.is_success:
            raise LogglyHTTPError.for_status(target, response.status_code)

        try:
            return msgspec.json.decode(response.content, type=result_type)
        except msgspec.DecodeError as exc:
            raise LogglyDecodeError.invalid_body(
                target, response.text, str(exc)
            ) from exc
