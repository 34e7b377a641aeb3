"""Completion notification."""

from __future__ import annotations

from .errors import NotificationError
from .slack import Notifier, SlackConfig, SlackNotifier, SlackPayload

__all__ = [
    "NotificationError",
    "Notifier",
    "SlackConfig",
    "SlackNotifier",
    "SlackPayload",
]
