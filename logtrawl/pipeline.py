"""Harvest pipeline: tags -> staged pages -> artifacts -> notification.

:func:`open_pipeline` owns every resource of a run (working directory,
staging database, HTTP clients) and yields a :class:`TrawlPipeline` wired to
them. :meth:`TrawlPipeline.run` is strictly sequential: each tag is fully
harvested, then fully reduced, before the next tag starts.

Fatal errors propagate out of ``run`` unchanged; deciding the process exit
status is left to the caller. Only the completion notification is best
effort.
"""

from __future__ import annotations

import asyncio
import contextlib
import dataclasses
import typing as typ

from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from logtrawl.artifacts import (
    ArtifactReducer,
    ArtifactWriteError,
    FilesystemArtifactSink,
    reset_directory,
)
from logtrawl.common.time import utcnow
from logtrawl.harvest import HarvestPageLimitError, TagHarvester
from logtrawl.logging import get_logger, log_info, log_warning
from logtrawl.loggly import LogglyClient, LogglyRequestError
from logtrawl.notify import NotificationError, SlackNotifier
from logtrawl.observability import TrawlEventLogger, TrawlRunContext
from logtrawl.staging import (
    STAGING_DB_NAME,
    StagingError,
    StagingStore,
    reset_staging_storage,
    staging_database_url,
)

if typ.TYPE_CHECKING:
    import httpx

    from logtrawl.artifacts import ArtifactSink
    from logtrawl.common.time import TimeWindow
    from logtrawl.config import TrawlConfig
    from logtrawl.loggly import SearchResult, Tag
    from logtrawl.notify import Notifier

logger = get_logger(__name__)

FATAL_ERRORS: tuple[type[Exception], ...] = (
    LogglyRequestError,
    HarvestPageLimitError,
    StagingError,
    ArtifactWriteError,
)


@dataclasses.dataclass(frozen=True, slots=True)
class TrawlResult:
    """Totals for a completed run."""

    tags: int = 0
    pages: int = 0
    events: int = 0
    notified: bool = False


class SearchAndTagSource(typ.Protocol):
    """Window-level queries the pipeline issues before harvesting."""

    async def search(self, window: TimeWindow) -> SearchResult:
        """Open a diagnostic search over the window."""
        ...

    async def list_tags(self, window: TimeWindow) -> list[Tag]:
        """Return the tags active in the window."""
        ...


def unique_terms(tags: typ.Iterable[Tag]) -> tuple[list[str], list[str]]:
    """Split tag terms into first occurrences and repeats, keeping order."""
    seen: set[str] = set()
    unique: list[str] = []
    repeated: list[str] = []
    for tag in tags:
        if tag.term in seen:
            repeated.append(tag.term)
            continue
        seen.add(tag.term)
        unique.append(tag.term)
    return unique, repeated


class TrawlPipeline:
    """Run one harvest over the configured window."""

    def __init__(  # noqa: PLR0913 - explicit collaborators
        self,
        config: TrawlConfig,
        *,
        source: SearchAndTagSource,
        harvester: TagHarvester,
        reducer: ArtifactReducer,
        sink: ArtifactSink,
        notifier: Notifier,
        event_logger: TrawlEventLogger | None = None,
    ) -> None:
        """Wire the pipeline to its collaborators."""
        self._config = config
        self._source = source
        self._harvester = harvester
        self._reducer = reducer
        self._sink = sink
        self._notifier = notifier
        self._event_logger = event_logger or TrawlEventLogger()

    async def run(self) -> TrawlResult:
        """Harvest and reduce every tag in the window, then notify."""
        window = self._config.window
        started_at = utcnow()
        context = TrawlRunContext(
            account=self._config.account,
            since=window.since_param,
            until=window.until_param,
            started_at=started_at,
        )
        self._event_logger.log_run_started(context)

        try:
            result = await self._run_inner()
        except BaseException as exc:
            self._event_logger.log_run_failed(context, exc, utcnow() - started_at)
            raise

        self._event_logger.log_run_completed(
            context,
            tags=result.tags,
            pages=result.pages,
            events=result.events,
            duration=utcnow() - started_at,
        )

        notified = await self._notify()
        return dataclasses.replace(result, notified=notified)

    async def _run_inner(self) -> TrawlResult:
        window = self._config.window
        await self._sink.begin_run()

        search = await self._source.search(window)
        log_info(logger, "search result: %r", search)

        tags = await self._source.list_tags(window)
        terms, repeated = unique_terms(tags)
        for term in repeated:
            self._event_logger.log_tag_skipped(term, "duplicate in tag listing")
        log_info(logger, "start loading %d tags", len(terms))

        pages = 0
        events = 0
        for index, term in enumerate(terms, start=1):
            harvested = await self._harvester.harvest(term, window)
            self._event_logger.log_tag_harvested(
                harvested, position=f"{index}/{len(terms)}"
            )
            reduced = await self._reducer.reduce(term)
            self._event_logger.log_tag_reduced(reduced)
            pages += harvested.pages
            events += reduced.lines

        return TrawlResult(tags=len(terms), pages=pages, events=events)

    async def _notify(self) -> bool:
        try:
            await self._notifier.notify()
        except NotificationError as exc:
            self._event_logger.log_notify_failed(exc)
            return False
        return True


@contextlib.asynccontextmanager
async def open_pipeline(
    config: TrawlConfig,
    *,
    http_client: httpx.AsyncClient | None = None,
    event_logger: TrawlEventLogger | None = None,
) -> typ.AsyncIterator[TrawlPipeline]:
    """Prepare a clean working directory and yield a wired pipeline.

    The working directory is wiped and recreated, and the staging schema is
    reset. On exit the HTTP clients are closed, the engine is disposed, and
    the staging database is deleted unless ``config.keep_staging`` is set.
    ``http_client`` is shared by the Loggly client and the notifier when
    given, and is left open.
    """
    work_dir = config.work_dir
    await _reset_work_dir(config)
    log_info(logger, "working directory: %s", work_dir)

    engine = create_async_engine(staging_database_url(work_dir))
    client = LogglyClient(config.loggly(), http_client=http_client)
    notifier = SlackNotifier(config.slack(), http_client=http_client)
    try:
        await reset_staging_storage(engine)
        staging = StagingStore(async_sessionmaker(engine, expire_on_commit=False))
        sink = FilesystemArtifactSink(work_dir)
        yield TrawlPipeline(
            config,
            source=client,
            harvester=TagHarvester(client, staging, config=config.harvest()),
            reducer=ArtifactReducer(staging, sink),
            sink=sink,
            notifier=notifier,
            event_logger=event_logger,
        )
    finally:
        await client.aclose()
        await notifier.aclose()
        await engine.dispose()
        if not config.keep_staging:
            _discard_staging(config)


async def _reset_work_dir(config: TrawlConfig) -> None:
    await asyncio.to_thread(reset_directory, config.work_dir)


def _discard_staging(config: TrawlConfig) -> None:
    path = config.work_dir / STAGING_DB_NAME
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        log_warning(logger, "could not remove staging database %s: %s", path, exc)
