"""Loggly API client and response models."""

from __future__ import annotations

from .client import DEFAULT_PAGE_SIZE, LogglyClient, LogglyConfig, LogglyEventSource
from .errors import (
    LogglyConfigError,
    LogglyDecodeError,
    LogglyHTTPError,
    LogglyRequestError,
    LogglyTransportError,
)
from .models import Event, EventPage, SearchResult, Tag, TagResult

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "Event",
    "EventPage",
    "LogglyClient",
    "LogglyConfig",
    "LogglyConfigError",
    "LogglyDecodeError",
    "LogglyEventSource",
    "LogglyHTTPError",
    "LogglyRequestError",
    "LogglyTransportError",
    "SearchResult",
    "Tag",
    "TagResult",
]
