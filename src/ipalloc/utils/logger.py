"""
Logging setup for ipalloc, built on loguru.

Every module grabs its logger with ``get_logger(__name__)`` at import time;
the returned logger is the shared loguru logger bound to the module name.
Entry points call ``configure_logging`` once to replace loguru's default
sink with ipalloc's console (and optional file) sinks.
"""

from __future__ import annotations

import sys
import traceback
from typing import TYPE_CHECKING

from loguru import logger as _logger

from ipalloc.models.enums import LogLevel

if TYPE_CHECKING:
    from loguru import Logger

ROOT_LOGGER_NAME = "ipalloc"

_LEVELS = {
    LogLevel.FULL: "DEBUG",
    LogLevel.DEBUG: "DEBUG",
    LogLevel.INFO: "INFO",
    LogLevel.WARNING: "WARNING",
}

_CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan> - <level>{message}</level>"
)
_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[name]} - {message}"

# Records logged through the bare loguru logger still render {extra[name]}
_logger.configure(extra={"name": ROOT_LOGGER_NAME})


def configure_logging(
    level: LogLevel | str = LogLevel.INFO,
    log_file: str | None = None,
) -> list[int]:
    """
    Configure loguru sinks for ipalloc.

    Removes every existing sink first, so it is safe to call again when the
    level changes.

    Args:
        level: Verbosity level (LogLevel or its string value)
        log_file: Optional path for a plain-text log file

    Returns:
        Handler ids of the sinks that were added.
    """
    level = LogLevel(level)
    full = level == LogLevel.FULL

    _logger.remove()
    handler_ids = [
        _logger.add(
            sys.stderr,
            level=_LEVELS[level],
            format=_CONSOLE_FORMAT,
            backtrace=full,
            diagnose=full,
        )
    ]

    if log_file:
        handler_ids.append(
            _logger.add(
                log_file,
                level=_LEVELS[level],
                format=_FILE_FORMAT,
                encoding="utf-8",
                backtrace=full,
                diagnose=False,
            )
        )

    return handler_ids


def get_logger(name: str) -> Logger:
    """Get the loguru logger bound to a module name under ipalloc."""
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return _logger.bind(name=name)


def format_traceback(exc: BaseException) -> str:
    """Format an exception and its traceback for a debug log line."""
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
