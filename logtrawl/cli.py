"""logtrawl command line.

Usage:
    logtrawl --token T --account acme \\
        --from-date 2018-01-30T10:00:00 --to-date 2018-01-30T18:00:00 \\
        --webhook https://hooks.slack.com/services/...

Naive dates are read in ``--zone`` (default ``Asia/Tokyo``). Every required
flag may also be supplied through its ``LOGTRAWL_*`` environment variable.

Exit status is 0 on success (including a failed notification) and 1 when
configuration is invalid or the run aborts.
"""

from __future__ import annotations

import asyncio
import sys
import typing as typ
from pathlib import Path

from cyclopts import App, Parameter

from logtrawl import __version__
from logtrawl.common.time import DEFAULT_REFERENCE_ZONE
from logtrawl.config import DEFAULT_WORK_DIR, ConfigError, TrawlConfig, build_config
from logtrawl.logging import (
    configure_logging,
    get_logger,
    log_exception,
    log_info,
    log_warning,
)
from logtrawl.loggly import DEFAULT_PAGE_SIZE
from logtrawl.pipeline import FATAL_ERRORS, TrawlResult, open_pipeline

logger = get_logger(__name__)

app = App(
    name="logtrawl",
    help="Download Loggly events per tag into flat text files",
    version=__version__,
)


async def run_pipeline(config: TrawlConfig) -> TrawlResult:
    """Open a pipeline for ``config`` and run it once."""
    async with open_pipeline(config) as pipeline:
        return await pipeline.run()


def _report(lines: typ.Iterable[str]) -> None:
    for line in lines:
        print(line, file=sys.stderr)


@app.default
def trawl(  # noqa: PLR0913 - one parameter per CLI flag
    *,
    token: typ.Annotated[str, Parameter(env_var="LOGTRAWL_TOKEN")] = "",
    account: typ.Annotated[str, Parameter(env_var="LOGTRAWL_ACCOUNT")] = "",
    from_date: typ.Annotated[str, Parameter(env_var="LOGTRAWL_FROM_DATE")] = "",
    to_date: typ.Annotated[str, Parameter(env_var="LOGTRAWL_TO_DATE")] = "",
    webhook: typ.Annotated[str, Parameter(env_var="LOGTRAWL_WEBHOOK")] = "",
    work_dir: typ.Annotated[Path, Parameter(env_var="LOGTRAWL_WORK_DIR")] = (
        DEFAULT_WORK_DIR
    ),
    zone: typ.Annotated[str, Parameter(env_var="LOGTRAWL_ZONE")] = (
        DEFAULT_REFERENCE_ZONE
    ),
    page_size: int = DEFAULT_PAGE_SIZE,
    max_pages: int | None = None,
    timeout: float | None = None,
    keep_staging: bool = False,
    log_level: typ.Annotated[str, Parameter(env_var="LOGTRAWL_LOG_LEVEL")] = "INFO",
) -> int:
    """Harvest every tag in the window and write per-tag artifacts.

    Parameters
    ----------
    token
        Loggly API token.
    account
        Loggly account name (``{account}.loggly.com``).
    from_date
        Window start, ISO 8601.
    to_date
        Window end, ISO 8601.
    webhook
        Slack incoming-webhook URL notified on completion.
    work_dir
        Working directory; wiped at start.
    zone
        Time zone applied to dates without an offset.
    page_size
        Events requested per page.
    max_pages
        Abort when a tag needs more pages than this.
    timeout
        Loggly request timeout in seconds; unset waits indefinitely.
    keep_staging
        Keep the staging database after the run.
    log_level
        Log level.

    """
    normalized_level, invalid_level = configure_logging(log_level)
    if invalid_level:
        log_warning(
            logger,
            "Invalid log level %r, falling back to %s",
            log_level,
            normalized_level,
        )

    try:
        config = build_config(
            token=token,
            account=account,
            from_date=from_date,
            to_date=to_date,
            webhook=webhook,
            zone=zone,
            work_dir=work_dir,
            page_size=page_size,
            max_pages=max_pages,
            timeout=timeout,
            keep_staging=keep_staging,
        )
    except ConfigError as exc:
        _report(exc.issues)
        _report(["error: params error."])
        return 1

    log_info(
        logger,
        "account=%s from=%s until=%s work_dir=%s",
        config.account,
        config.window.since_param,
        config.window.until_param,
        config.work_dir,
    )

    try:
        result = asyncio.run(run_pipeline(config))
    except FATAL_ERRORS as exc:
        log_exception(logger, "trawl aborted", exc)
        _report([f"error: {exc}"])
        return 1

    log_info(
        logger,
        "done: tags=%d pages=%d events=%d notified=%s",
        result.tags,
        result.pages,
        result.events,
        result.notified,
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    """Console-script entry point returning the process exit status."""
    result = app(argv)
    return result if isinstance(result, int) else 0


if __name__ == "__main__":
    raise SystemExit(main())
