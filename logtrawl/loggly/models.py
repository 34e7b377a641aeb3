"""Typed response models for the Loggly v2 API.

Only the fields logtrawl reads are declared; msgspec ignores the rest. Every
field has a default so sparse producer payloads still decode.
"""

from __future__ import annotations

import typing as typ

import msgspec

Timestamp: typ.TypeAlias = str | int | float | None


class SearchRsid(msgspec.Struct, kw_only=True, frozen=True):
    """Result-set descriptor returned by the search endpoint."""

    id: str = ""
    status: str = ""
    date_from: int = 0
    date_to: int = 0
    elapsed_time: float = 0.0


class SearchResult(msgspec.Struct, kw_only=True, frozen=True):
    """Response of ``GET /search``."""

    rsid: SearchRsid = msgspec.field(default_factory=SearchRsid)


class Tag(msgspec.Struct, kw_only=True, frozen=True):
    """A tag term and its event count within the window."""

    term: str
    count: int = 0


class TagResult(msgspec.Struct, kw_only=True, frozen=True):
    """Response of ``GET /fields/tag``."""

    tag: tuple[Tag, ...] = ()
    total_events: int = 0
    unique_field_count: int = 0


class EventJSON(msgspec.Struct, kw_only=True, frozen=True):
    """Structured JSON body sent by the producing app.

    Producers send ``null`` for fields they do not know; those decode as
    ``None`` and read back through :class:`Event` as empty strings.
    """

    message: str | None = None
    level: str | None = None
    tag: str | None = None
    timestamp: Timestamp = None
    app_version: str | None = None
    os_type: str | None = None
    os_version: str | None = None
    model: str | None = None


class EventHTTP(msgspec.Struct, kw_only=True, frozen=True):
    """HTTP metadata Loggly records for the inbound request."""

    clientHost: str | None = None  # noqa: N815 - wire name
    contentType: str | None = None  # noqa: N815 - wire name


class EventBody(msgspec.Struct, kw_only=True, frozen=True):
    """Parsed event content."""

    json: EventJSON = msgspec.field(default_factory=EventJSON)
    http: EventHTTP = msgspec.field(default_factory=EventHTTP)


class Event(msgspec.Struct, kw_only=True, frozen=True):
    """A single Loggly event.

    ``timestamp`` is Loggly's receive time in epoch milliseconds; the
    producer's own timestamp lives in ``event.json.timestamp``.
    """

    id: str | None = None
    timestamp: int = 0
    tags: tuple[str, ...] | None = None
    logtypes: tuple[str, ...] | None = None
    raw: typ.Any = None
    event: EventBody = msgspec.field(default_factory=EventBody)

    @property
    def message(self) -> str:
        """Return the producer message."""
        return self.event.json.message or ""

    @property
    def app_version(self) -> str:
        """Return the producing app version."""
        return self.event.json.app_version or ""

    @property
    def os_type(self) -> str:
        """Return the producing OS type."""
        return self.event.json.os_type or ""

    @property
    def os_version(self) -> str:
        """Return the producing OS version."""
        return self.event.json.os_version or ""

    @property
    def model(self) -> str:
        """Return the producing device model."""
        return self.event.json.model or ""

    @property
    def display_timestamp(self) -> str:
        """Return the timestamp written to tag artifacts.

        The producer timestamp is preferred verbatim; Loggly's receive time is
        the fallback when the producer sent none.
        """
        value = self.event.json.timestamp
        if value is None or value == "":
            return str(self.timestamp)
        return str(value)


class EventPage(msgspec.Struct, kw_only=True, frozen=True):
    """One page of the ``events/iterate`` stream.

    ``next`` is an opaque continuation; empty or missing means the stream is
    exhausted.
    """

    events: tuple[Event, ...] = ()
    next: str | None = None

    @property
    def is_last(self) -> bool:
        """Return True when no further page follows."""
        return not self.next


__all__ = [
    "Event",
    "EventBody",
    "EventHTTP",
    "EventJSON",
    "EventPage",
    "SearchResult",
    "SearchRsid",
    "Tag",
    "TagResult",
    "Timestamp",
]
