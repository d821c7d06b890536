"""retrykit logger -- leveled console and file loggers returning Results."""

from retrykit.logger.base import BaseLogger, FileLoggerOptions, LoggerOptions, LogLevel
from retrykit.logger.console import ConsoleLogger
from retrykit.logger.file import FileLogger

__all__ = [
    "BaseLogger",
    "LogLevel",
    "LoggerOptions",
    "FileLoggerOptions",
    "ConsoleLogger",
    "FileLogger",
]
