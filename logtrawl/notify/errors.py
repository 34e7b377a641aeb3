"""Notification error types."""

from __future__ import annotations


class NotificationError(RuntimeError):
    """Raised when the completion notification cannot be delivered.

    The pipeline treats this as non-fatal: artifacts are already on disk.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise with a message and optional HTTP status code."""
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def network_error(cls, detail: str) -> NotificationError:
        """Return an error for a webhook that could not be reached."""
        return cls(f"Slack webhook unreachable: {detail}")

    @classmethod
    def http_error(cls, status_code: int, body: str) -> NotificationError:
        """Return an error for a non-2xx webhook response."""
        return cls(
            f"Slack webhook HTTP {status_code}: {body[:100]}",
            status_code=status_code,
        )
