"""Console backend: styled output through rich."""

from __future__ import annotations

from datetime import datetime
from typing import Callable

from rich.console import Console

from retrykit.core.errors import LoggerError
from retrykit.core.result import Err, Ok, Result
from retrykit.logger.base import BaseLogger, Content, LoggerOptions, LogLevel
from retrykit.logger.palette import style_for

_STDERR_LEVELS = frozenset({LogLevel.WARN, LogLevel.ERROR})


class ConsoleLogger(BaseLogger):
    """Writes formatted lines to the terminal in Dracula colors.

    ``log`` and ``trace`` go to stdout, ``warn`` and ``error`` to stderr.
    Pass ``console`` / ``err_console`` to redirect either stream.
    """

    def __init__(
        self,
        options: LoggerOptions | None = None,
        *,
        console: Console | None = None,
        err_console: Console | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        super().__init__(options, clock=clock)
        self._console = console if console is not None else Console(highlight=False)
        self._err_console = err_console if err_console is not None else Console(highlight=False, stderr=True)

    def _log_message(self, level: LogLevel, *content: Content) -> Result[None]:
        match self.format_message(level, *content):
            case Err(error):
                return Err(error)
            case Ok(message):
                pass

        target = self._err_console if level in _STDERR_LEVELS else self._console
        try:
            target.print(
                message,
                style=style_for(level.value),
                markup=False,
                highlight=False,
                soft_wrap=True,
                end="",
            )
        except Exception as e:
            return Err(LoggerError("Failed to write log message to console", cause=e))
        return Ok(None)
