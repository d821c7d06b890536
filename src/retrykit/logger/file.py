"""File backend: appends formatted lines to a UTF-8 log file."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Callable

from retrykit.core.errors import LoggerError
from retrykit.core.result import Err, Ok, Result
from retrykit.logger.base import BaseLogger, Content, FileLoggerOptions, LogLevel


def default_log_file_path() -> Path:
    return Path.cwd() / "logs" / "retrykit.log"


class FileLogger(BaseLogger):
    """Appends every message to ``log_file_path``.

    The parent directory is created at construction. Write failures
    (permissions, disk full, path replaced by a directory) come back as
    ``Err(LoggerError)``.
    """

    def __init__(
        self,
        options: FileLoggerOptions | None = None,
        *,
        clock: Callable[[], datetime] = datetime.now,
    ):
        options = options if options is not None else FileLoggerOptions()
        super().__init__(options, clock=clock)
        self._log_file_path = (
            Path(options.log_file_path).expanduser() if options.log_file_path else default_log_file_path()
        )
        self._log_file_path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def log_file_path(self) -> Path:
        return self._log_file_path

    def _log_message(self, level: LogLevel, *content: Content) -> Result[None]:
        match self.format_message(level, *content):
            case Err(error):
                return Err(error)
            case Ok(message):
                pass

        try:
            with self._log_file_path.open("a", encoding="utf-8") as fh:
                fh.write(message)
        except OSError as e:
            return Err(LoggerError(f"Failed to write log message to {self._log_file_path}", cause=e))
        return Ok(None)
