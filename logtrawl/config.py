"""Run configuration assembled once from command-line input.

:func:`build_config` validates every raw value, collects all problems, and
only then raises, so operators see each missing or malformed flag in one go.
The resulting :class:`TrawlConfig` is passed explicitly to each component;
nothing reads process-wide state.

Usage
-----
>>> config = build_config(
...     token="t0k3n",
...     account="acme",
...     from_date="2018-01-30T10:00:00",
...     to_date="2018-01-30T18:00:00",
...     webhook="https://hooks.slack.com/services/T/B/X",
... )
>>> config.window.since_param
'2018-01-30T01:00:00Z'

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from pathlib import Path

from logtrawl.common.time import (
    DEFAULT_REFERENCE_ZONE,
    TimeWindow,
    load_zone,
    parse_instant,
)
from logtrawl.harvest.harvester import HarvestConfig
from logtrawl.loggly.client import DEFAULT_PAGE_SIZE, LogglyConfig
from logtrawl.notify.slack import SlackConfig

if typ.TYPE_CHECKING:
    import datetime as dt

DEFAULT_WORK_DIR = Path("tmp")


class ConfigError(ValueError):
    """Raised when required input is missing or malformed.

    Attributes
    ----------
    issues
        One human-readable line per offending parameter.

    """

    def __init__(self, issues: list[str]) -> None:
        """Store the issues and summarise them in the message."""
        self.issues = issues
        super().__init__("; ".join(issues))


@dc.dataclass(frozen=True, slots=True)
class TrawlConfig:
    """Validated settings for a single harvest run.

    Attributes
    ----------
    token
        Loggly API token, sent as a bearer credential.
    account
        Loggly account (the ``{account}.loggly.com`` subdomain).
    window
        UTC window to harvest.
    webhook_url
        Slack incoming-webhook URL notified on completion.
    work_dir
        Directory reset at start; holds staging and artifacts.
    page_size
        Events requested per page.
    max_pages_per_tag
        Optional per-tag page bound; ``None`` means unbounded.
    request_timeout_s
        Optional Loggly request timeout; ``None`` waits indefinitely.
    keep_staging
        Keep the staging database once the run finishes.

    """

    token: str
    account: str
    window: TimeWindow
    webhook_url: str
    work_dir: Path = DEFAULT_WORK_DIR
    page_size: int = DEFAULT_PAGE_SIZE
    max_pages_per_tag: int | None = None
    request_timeout_s: float | None = None
    keep_staging: bool = False

    def loggly(self) -> LogglyConfig:
        """Return the Loggly client configuration."""
        return LogglyConfig(
            token=self.token,
            account=self.account,
            timeout_s=self.request_timeout_s,
        )

    def harvest(self) -> HarvestConfig:
        """Return the harvester configuration."""
        return HarvestConfig(
            page_size=self.page_size,
            max_pages_per_tag=self.max_pages_per_tag,
        )

    def slack(self) -> SlackConfig:
        """Return the notifier configuration."""
        return SlackConfig(webhook_url=self.webhook_url)


def _require(value: str | None, flag: str, issues: list[str]) -> str:
    text = (value or "").strip()
    if not text:
        issues.append(f"error: {flag} is empty.")
    return text


def _parse_bound(
    value: str | None,
    flag: str,
    zone: dt.tzinfo | None,
    issues: list[str],
) -> dt.datetime | None:
    text = _require(value, flag, issues)
    if not text or zone is None:
        return None
    try:
        return parse_instant(text, zone=zone)
    except ValueError as exc:
        issues.append(f"error: {flag} parse error: {exc}.")
        return None


def _check_positive(value: float | None, flag: str, issues: list[str]) -> None:
    if value is not None and value <= 0:
        issues.append(f"error: {flag} must be positive, got {value}.")


def build_config(  # noqa: PLR0913 - mirrors the CLI flags one-to-one
    *,
    token: str | None,
    account: str | None,
    from_date: str | None,
    to_date: str | None,
    webhook: str | None,
    zone: str = DEFAULT_REFERENCE_ZONE,
    work_dir: Path = DEFAULT_WORK_DIR,
    page_size: int = DEFAULT_PAGE_SIZE,
    max_pages: int | None = None,
    timeout: float | None = None,
    keep_staging: bool = False,
) -> TrawlConfig:
    """Validate raw inputs and build a :class:`TrawlConfig`.

    Raises
    ------
    ConfigError
        Listing every missing or invalid parameter.

    """
    issues: list[str] = []

    token_value = _require(token, "--token", issues)
    account_value = _require(account, "--account", issues)

    tz: dt.tzinfo | None = None
    try:
        tz = load_zone(zone)
    except ValueError as exc:
        issues.append(f"error: --zone {exc}.")

    since = _parse_bound(from_date, "--from-date", tz, issues)
    until = _parse_bound(to_date, "--to-date", tz, issues)
    webhook_value = _require(webhook, "--webhook", issues)

    _check_positive(page_size, "--page-size", issues)
    _check_positive(max_pages, "--max-pages", issues)
    _check_positive(timeout, "--timeout", issues)

    window: TimeWindow | None = None
    if since is not None and until is not None:
        try:
            window = TimeWindow(since=since, until=until)
        except ValueError as exc:
            issues.append(f"error: {exc}.")

    if issues or window is None:
        raise ConfigError(issues or ["error: window could not be resolved."])

    return TrawlConfig(
        token=token_value,
        account=account_value,
        window=window,
        webhook_url=webhook_value,
        work_dir=work_dir,
        page_size=page_size,
        max_pages_per_tag=max_pages,
        request_timeout_s=timeout,
        keep_staging=keep_staging,
    )
