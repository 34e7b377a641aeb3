"""Loggly client errors."""

from __future__ import annotations

_BODY_PREVIEW_LIMIT = 100


class LogglyRequestError(RuntimeError):
    """Base class for failed Loggly requests.

    Attributes
    ----------
    url
        The request URL that failed, for diagnostics.

    """

    def __init__(self, message: str, *, url: str) -> None:
        """Record the failing URL alongside the message."""
        self.url = url
        super().__init__(message)


class LogglyTransportError(LogglyRequestError):
    """Raised when the service cannot be reached."""

    @classmethod
    def from_exception(cls, url: str, exc: BaseException) -> LogglyTransportError:
        """Wrap an httpx transport failure."""
        detail = str(exc) or type(exc).__name__
        return cls(f"Loggly request to {url} failed: {detail}", url=url)


class LogglyHTTPError(LogglyRequestError):
    """Raised when Loggly answers with a non-2xx status."""

    def __init__(self, message: str, *, url: str, status_code: int) -> None:
        """Record the HTTP status code."""
        self.status_code = status_code
        super().__init__(message, url=url)

    @classmethod
    def for_status(cls, url: str, status_code: int) -> LogglyHTTPError:
        """Return an error for a non-success status."""
        return cls(
            f"Loggly HTTP {status_code} for {url}",
            url=url,
            status_code=status_code,
        )


class LogglyDecodeError(LogglyRequestError):
    """Raised when a response body is not the expected JSON."""

    @classmethod
    def invalid_body(cls, url: str, body: str, detail: str) -> LogglyDecodeError:
        """Return an error carrying a truncated body preview."""
        if len(body) > _BODY_PREVIEW_LIMIT:
            body = body[:_BODY_PREVIEW_LIMIT] + "..."
        return cls(
            f"Loggly response from {url} could not be decoded ({detail}): {body!r}",
            url=url,
        )


class LogglyConfigError(RuntimeError):
    """Raised when the Loggly client configuration is invalid."""

    @classmethod
    def empty_token(cls) -> LogglyConfigError:
        """Return an error when the API token is empty."""
        return cls("Loggly API token must be non-empty")

    @classmethod
    def empty_account(cls) -> LogglyConfigError:
        """Return an error when the account name is empty."""
        return cls("Loggly account must be non-empty")
