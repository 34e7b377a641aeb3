"""femtologging wiring for logtrawl.

Modules take a logger from :func:`get_logger` and log through the ``log_*``
helpers below, which interpolate the message before handing it to
femtologging.

>>> logger = get_logger(__name__)
>>> log_info(logger, "harvesting tag %s", "abc")

"""

from __future__ import annotations

import typing as typ

from femtologging import basicConfig, get_logger

_DEFAULT_LEVEL = "INFO"
_KNOWN_LEVELS = frozenset(
    {"TRACE", "DEBUG", "INFO", "WARN", "WARNING", "ERROR", "CRITICAL"}
)


def normalize_log_level(level: str | None) -> tuple[str, bool]:
    """Map ``--log-level`` input to a femtologging level.

    Returns the level and whether the input had to be replaced by ``INFO``.
    """
    candidate = (level or "").strip().upper()
    if candidate in _KNOWN_LEVELS:
        return (candidate, False)
    return (_DEFAULT_LEVEL, True)


def configure_logging(level: str) -> tuple[str, bool]:
    """Install the root femtologging handler at ``level``.

    The return value is that of :func:`normalize_log_level`, so the caller
    can warn about a rejected level once logging works.
    """
    resolved, rejected = normalize_log_level(level)
    basicConfig(level=resolved)
    return (resolved, rejected)


class _Logger(typ.Protocol):
    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> str | None: ...


def _emit(
    logger: _Logger,
    level: str,
    template: str,
    args: tuple[object, ...],
    exc_info: object | None,
) -> None:
    # A template without args is logged as-is so literal "%" survives.
    message = template % args if args else template
    logger.log(level, message, exc_info=exc_info, stack_info=False)


def log_debug(logger: _Logger, template: str, *args: object) -> None:
    """Log at DEBUG."""
    _emit(logger, "DEBUG", template, args, None)


def log_info(
    logger: _Logger, template: str, *args: object, exc_info: object | None = None
) -> None:
    """Log at INFO."""
    _emit(logger, "INFO", template, args, exc_info)


def log_warning(
    logger: _Logger, template: str, *args: object, exc_info: object | None = None
) -> None:
    """Log at WARNING."""
    _emit(logger, "WARNING", template, args, exc_info)


def log_error(
    logger: _Logger, template: str, *args: object, exc_info: object | None = None
) -> None:
    """Log at ERROR."""
    _emit(logger, "ERROR", template, args, exc_info)


def log_exception(logger: _Logger, message: str, exc: BaseException) -> None:
    """Log ``message`` at ERROR with ``exc`` attached."""
    _emit(logger, "ERROR", message, (), exc)


__all__ = [
    "configure_logging",
    "get_logger",
    "log_debug",
    "log_error",
    "log_exception",
    "log_info",
    "log_warning",
    "normalize_log_level",
]
