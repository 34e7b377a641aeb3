"""Time utilities: UTC helpers and the harvest window."""

from __future__ import annotations

import dataclasses
import datetime as dt
import zoneinfo

DEFAULT_REFERENCE_ZONE = "Asia/Tokyo"


def utcnow() -> dt.datetime:
    """Return an aware UTC timestamp."""
    return dt.datetime.now(dt.UTC)


def load_zone(name: str) -> dt.tzinfo:
    """Resolve an IANA zone name, raising ``ValueError`` when unknown."""
    try:
        return zoneinfo.ZoneInfo(name)
    except (zoneinfo.ZoneInfoNotFoundError, ValueError) as exc:
        msg = f"unknown time zone {name!r}"
        raise ValueError(msg) from exc


def parse_instant(value: str, *, zone: dt.tzinfo) -> dt.datetime:
    """Parse an ISO 8601 / RFC 3339 timestamp and normalise it to UTC.

    Values carrying an offset (``Z`` or ``+09:00``) keep it; naive values are
    interpreted in ``zone``.

    >>> import datetime as dt
    >>> parse_instant("2018-01-30T10:00:00", zone=dt.timezone(dt.timedelta(hours=9)))
    datetime.datetime(2018, 1, 30, 1, 0, tzinfo=datetime.timezone.utc)

    """
    text = value.strip()
    if not text:
        msg = "timestamp is empty"
        raise ValueError(msg)
    parsed = dt.datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=zone)
    return parsed.astimezone(dt.UTC)


def format_rfc3339(value: dt.datetime) -> str:
    """Render an aware datetime as RFC 3339 UTC with a ``Z`` suffix."""
    if value.tzinfo is None:
        msg = "datetime must be timezone-aware"
        raise ValueError(msg)
    return value.astimezone(dt.UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclasses.dataclass(frozen=True, slots=True)
class TimeWindow:
    """Closed UTC interval ``[since, until]`` queried against Loggly."""

    since: dt.datetime
    until: dt.datetime

    def __post_init__(self) -> None:
        """Enforce aware, ordered bounds."""
        if self.since.tzinfo is None or self.until.tzinfo is None:
            msg = "window bounds must be timezone-aware"
            raise ValueError(msg)
        if self.since > self.until:
            msg = (
                f"window start {self.since.isoformat()} is after "
                f"window end {self.until.isoformat()}"
            )
            raise ValueError(msg)
        object.__setattr__(self, "since", self.since.astimezone(dt.UTC))
        object.__setattr__(self, "until", self.until.astimezone(dt.UTC))

    @property
    def since_param(self) -> str:
        """Window start as sent in the ``from`` query parameter."""
        return format_rfc3339(self.since)

    @property
    def until_param(self) -> str:
        """Window end as sent in the ``until`` query parameter."""
        return format_rfc3339(self.until)
