"""Structured run events for the harvest pipeline.

Each event is a single log line prefixed with its event type in brackets and
followed by ``key=value`` pairs, suitable for grepping or log aggregation.
Success is logged at INFO, skipped work and notification failures at
WARNING, and aborted runs at ERROR.
"""

from __future__ import annotations

import dataclasses
import enum
import typing as typ

from logtrawl.artifacts.errors import ArtifactWriteError
from logtrawl.harvest.errors import HarvestPageLimitError
from logtrawl.logging import get_logger, log_error, log_info, log_warning
from logtrawl.loggly.errors import (
    LogglyDecodeError,
    LogglyHTTPError,
    LogglyTransportError,
)
from logtrawl.notify.errors import NotificationError
from logtrawl.staging.errors import StagingError

if typ.TYPE_CHECKING:
    import datetime as dt

    from logtrawl.artifacts.reducer import ReductionResult
    from logtrawl.harvest.harvester import HarvestResult

logger = get_logger(__name__)


class TrawlEventType(enum.StrEnum):
    """Structured log event types."""

    RUN_STARTED = "trawl.run.started"
    RUN_COMPLETED = "trawl.run.completed"
    RUN_FAILED = "trawl.run.failed"
    TAG_HARVESTED = "trawl.tag.harvested"
    TAG_REDUCED = "trawl.tag.reduced"
    TAG_SKIPPED = "trawl.tag.skipped"
    NOTIFY_FAILED = "trawl.notify.failed"


class ErrorCategory(enum.StrEnum):
    """Categories used to tag run failures."""

    TRANSPORT = "transport"
    HTTP_ERROR = "http_error"
    DECODE = "decode"
    PAGE_LIMIT = "page_limit"
    STAGING = "staging"
    ARTIFACT_IO = "artifact_io"
    NOTIFICATION = "notification"
    UNKNOWN = "unknown"


_EXCEPTION_CATEGORY_MAP: tuple[tuple[type[BaseException], ErrorCategory], ...] = (
    (LogglyTransportError, ErrorCategory.TRANSPORT),
    (LogglyHTTPError, ErrorCategory.HTTP_ERROR),
    (LogglyDecodeError, ErrorCategory.DECODE),
    (HarvestPageLimitError, ErrorCategory.PAGE_LIMIT),
    (StagingError, ErrorCategory.STAGING),
    (ArtifactWriteError, ErrorCategory.ARTIFACT_IO),
    (NotificationError, ErrorCategory.NOTIFICATION),
)


def categorize_error(exc: BaseException) -> ErrorCategory:
    """Return the category of ``exc`` for run-failure events."""
    for exc_type, category in _EXCEPTION_CATEGORY_MAP:
        if isinstance(exc, exc_type):
            return category
    return ErrorCategory.UNKNOWN


@dataclasses.dataclass(frozen=True, slots=True)
class TrawlRunContext:
    """Identifies one pipeline run in every event it emits."""

    account: str
    since: str
    until: str
    started_at: dt.datetime


class TrawlEventLogger:
    """Emit structured pipeline events through femtologging."""

    def log_run_started(self, context: TrawlRunContext) -> None:
        """Log the start of a run."""
        log_info(
            logger,
            "[%s] account=%s since=%s until=%s started_at=%s",
            TrawlEventType.RUN_STARTED,
            context.account,
            context.since,
            context.until,
            context.started_at.isoformat(),
        )

    def log_run_completed(
        self,
        context: TrawlRunContext,
        *,
        tags: int,
        pages: int,
        events: int,
        duration: dt.timedelta,
    ) -> None:
        """Log a completed run with its totals."""
        log_info(
            logger,
            "[%s] account=%s tags=%d pages=%d events=%d duration_seconds=%.3f",
            TrawlEventType.RUN_COMPLETED,
            context.account,
            tags,
            pages,
            events,
            duration.total_seconds(),
        )

    def log_run_failed(
        self,
        context: TrawlRunContext,
        exc: BaseException,
        duration: dt.timedelta,
    ) -> None:
        """Log an aborted run with the error category."""
        log_error(
            logger,
            "[%s] account=%s error_category=%s error_type=%s "
            "duration_seconds=%.3f error=%s",
            TrawlEventType.RUN_FAILED,
            context.account,
            categorize_error(exc),
            type(exc).__name__,
            duration.total_seconds(),
            exc,
        )

    def log_tag_harvested(self, result: HarvestResult, *, position: str) -> None:
        """Log that every page of a tag has been staged."""
        log_info(
            logger,
            "[%s] %s tag=%s pages=%d events=%d",
            TrawlEventType.TAG_HARVESTED,
            position,
            result.tag,
            result.pages,
            result.events,
        )

    def log_tag_reduced(self, result: ReductionResult) -> None:
        """Log that a tag's artifacts have been written."""
        log_info(
            logger,
            "[%s] tag=%s pages=%d lines=%d manifest_written=%s",
            TrawlEventType.TAG_REDUCED,
            result.tag,
            result.pages,
            result.lines,
            result.manifest_written,
        )

    def log_tag_skipped(self, tag: str, reason: str) -> None:
        """Log a tag that was not processed again."""
        log_warning(
            logger,
            "[%s] tag=%s reason=%s",
            TrawlEventType.TAG_SKIPPED,
            tag,
            reason,
        )

    def log_notify_failed(self, exc: BaseException) -> None:
        """Log a best-effort notification that could not be delivered."""
        log_warning(
            logger,
            "[%s] error_type=%s error=%s",
            TrawlEventType.NOTIFY_FAILED,
            type(exc).__name__,
            exc,
        )
