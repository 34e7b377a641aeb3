"""Per-tag harvester: paginate a tag's event stream into the staging store.

Pages are fetched strictly one after another. Each page is staged under
``(tag, sequence)`` before the next request is made, and the loop ends when
Loggly returns a page without a ``next`` continuation. Request failures are
not caught here; they abort the run.
"""

from __future__ import annotations

import dataclasses
import typing as typ

from logtrawl.loggly.client import DEFAULT_PAGE_SIZE
from logtrawl.logging import get_logger, log_debug

from .errors import HarvestPageLimitError

if typ.TYPE_CHECKING:
    from logtrawl.common.time import TimeWindow
    from logtrawl.loggly.client import LogglyEventSource
    from logtrawl.staging.store import StagingStore

logger = get_logger(__name__)


@dataclasses.dataclass(frozen=True, slots=True)
class HarvestConfig:
    """Runtime knobs for tag harvesting.

    Attributes
    ----------
    page_size
        Events requested per page.
    max_pages_per_tag
        Optional bound on pages fetched for one tag. ``None`` follows the
        stream until Loggly ends it.

    """

    page_size: int = DEFAULT_PAGE_SIZE
    max_pages_per_tag: int | None = None

    def __post_init__(self) -> None:
        """Reject non-positive knobs."""
        if self.page_size < 1:
            msg = f"page_size must be positive, got {self.page_size}"
            raise ValueError(msg)
        if self.max_pages_per_tag is not None and self.max_pages_per_tag < 1:
            msg = f"max_pages_per_tag must be positive, got {self.max_pages_per_tag}"
            raise ValueError(msg)


@dataclasses.dataclass(frozen=True, slots=True)
class HarvestResult:
    """Summary of one tag's harvest."""

    tag: str
    pages: int
    events: int


class TagHarvester:
    """Stage every page of a tag's event stream."""

    def __init__(
        self,
        client: LogglyEventSource,
        staging: StagingStore,
        *,
        config: HarvestConfig | None = None,
    ) -> None:
        """Bind the harvester to an event source and a staging store."""
        self._client = client
        self._staging = staging
        self._config = config or HarvestConfig()

    async def harvest(self, tag: str, window: TimeWindow) -> HarvestResult:
        """Fetch and stage ``tag``'s events within ``window``.

        Raises
        ------
        HarvestPageLimitError
            If ``max_pages_per_tag`` is set and the stream is still going once
            that many pages have been staged.

        """
        limit = self._config.max_pages_per_tag
        cursor: str | None = None
        sequence = 0
        events = 0

        while True:
            sequence += 1
            page = await self._client.iterate_events(
                tag,
                window,
                page_size=self._config.page_size,
                cursor=cursor,
            )
            await self._staging.put(tag, sequence, page)
            events += len(page.events)
            log_debug(
                logger,
                "staged tag=%s sequence=%d events=%d",
                tag,
                sequence,
                len(page.events),
            )

            if page.is_last:
                return HarvestResult(tag=tag, pages=sequence, events=events)
            if limit is not None and sequence >= limit:
                raise HarvestPageLimitError(tag, limit)
            cursor = page.next
