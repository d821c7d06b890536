"""
Leveled logger abstraction with Result-returning methods.

``BaseLogger`` owns message formatting; subclasses only decide where the
formatted line goes. Like the retry executor, every public method returns a
``Result`` instead of raising: a logger that cannot write should never take
the caller down with it.

Line format::

    [19-10-2026 14:03:07][WARN]: disk almost full
    └──── timestamp ────┘└level┘ └── content joined by ' ' ──┘

The timestamp prefix appears only when ``time_enabled`` is set.

Examples:
    >>> logger = ConsoleLogger(LoggerOptions(time_enabled=True))
    >>> result = logger.warn("disk almost full")
    >>> result.is_ok()
    True
"""

from __future__ import annotations

import traceback
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable

from retrykit.core.errors import LoggerError
from retrykit.core.result import Err, Ok, Result
from retrykit.core.settings import DEFAULT_DATE_FORMAT, RetryKitSettings, get_settings

Content = str | BaseException


class LogLevel(str, Enum):
    LOG = "log"
    WARN = "warn"
    ERROR = "error"
    TRACE = "trace"


@dataclass(frozen=True)
class LoggerOptions:
    """Options shared by every logger backend."""

    time_enabled: bool = False
    date_format: str = DEFAULT_DATE_FORMAT

    @classmethod
    def from_settings(cls, settings: RetryKitSettings | None = None) -> LoggerOptions:
        settings = settings or get_settings()
        return cls(time_enabled=settings.time_enabled, date_format=settings.date_format)


@dataclass(frozen=True)
class FileLoggerOptions(LoggerOptions):
    """LoggerOptions plus the target file (None: ``<cwd>/logs/retrykit.log``)."""

    log_file_path: str | Path | None = None

    @classmethod
    def from_settings(cls, settings: RetryKitSettings | None = None) -> FileLoggerOptions:
        settings = settings or get_settings()
        return cls(
            time_enabled=settings.time_enabled,
            date_format=settings.date_format,
            log_file_path=settings.log_file_path,
        )


def render_content(item: Content) -> str:
    """Render one piece of log content; exceptions include their traceback."""
    if isinstance(item, BaseException):
        if item.__traceback__ is not None:
            return "".join(traceback.format_exception(type(item), item, item.__traceback__)).strip()
        return f"{type(item).__name__}: {item}"
    return str(item)


class BaseLogger(ABC):
    """Abstract leveled logger.

    Args:
        options: Formatting options
        clock: Returns the current time; injectable for deterministic output
    """

    def __init__(
        self,
        options: LoggerOptions | None = None,
        *,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._options = options if options is not None else LoggerOptions()
        self._clock = clock

    @property
    def options(self) -> LoggerOptions:
        return self._options

    def log(self, *content: Content) -> Result[None]:
        return self._log_message(LogLevel.LOG, *content)

    def warn(self, *content: Content) -> Result[None]:
        return self._log_message(LogLevel.WARN, *content)

    def error(self, *content: Content) -> Result[None]:
        return self._log_message(LogLevel.ERROR, *content)

    def trace(self, *content: Content) -> Result[None]:
        return self._log_message(LogLevel.TRACE, *content)

    def format_message(self, level: LogLevel, *content: Content) -> Result[str]:
        """Build the full output line, newline included."""
        try:
            body = " ".join(render_content(item) for item in content)
            prefix = ""
            if self._options.time_enabled:
                prefix = f"[{self._clock().strftime(self._options.date_format)}]"
            return Ok(f"{prefix}[{level.value.upper()}]: {body}\n")
        except Exception as e:
            return Err(LoggerError("Failed to format log message", cause=e))

    @abstractmethod
    def _log_message(self, level: LogLevel, *content: Content) -> Result[None]:
        """Format and write one message to the backend's sink."""
        ...


__all__ = [
    "Content",
    "LogLevel",
    "LoggerOptions",
    "FileLoggerOptions",
    "BaseLogger",
    "render_content",
]
