"""
retrykit - Retry-with-backoff executor and leveled loggers that return Results.

Quick start::

    from retrykit import Retry, ConsoleLogger, Ok, Err

    retry = Retry()
    result = await retry.execute(fetch_quote, max_attempts=3)
    match result:
        case Ok(value):
            ConsoleLogger().log("quote", str(value))
        case Err(error):
            ConsoleLogger().error(error)

The ``default_*`` helpers return process-wide instances built from
``RETRYKIT_*`` settings on first use.
"""

from functools import lru_cache

from retrykit.core.errors import (
    InternalError,
    LoggerError,
    PolicyError,
    RetryKitError,
    UnknownError,
    normalize_error,
)
from retrykit.core.result import Err, Ok, Result
from retrykit.execution.delay import delay
from retrykit.execution.retry import DEFAULT_POLICY, Retry, RetryPolicy, with_retry
from retrykit.logger import (
    ConsoleLogger,
    FileLogger,
    FileLoggerOptions,
    LoggerOptions,
    LogLevel,
)

__version__ = "0.1.0"


@lru_cache(maxsize=1)
def default_retry() -> Retry:
    return Retry(RetryPolicy.from_settings())


@lru_cache(maxsize=1)
def default_console_logger() -> ConsoleLogger:
    return ConsoleLogger(LoggerOptions.from_settings())


@lru_cache(maxsize=1)
def default_file_logger() -> FileLogger:
    return FileLogger(FileLoggerOptions.from_settings())


__all__ = [
    "__version__",
    "Ok",
    "Err",
    "Result",
    "RetryKitError",
    "UnknownError",
    "InternalError",
    "PolicyError",
    "LoggerError",
    "normalize_error",
    "delay",
    "DEFAULT_POLICY",
    "Retry",
    "RetryPolicy",
    "with_retry",
    "LogLevel",
    "LoggerOptions",
    "FileLoggerOptions",
    "ConsoleLogger",
    "FileLogger",
    "default_retry",
    "default_console_logger",
    "default_file_logger",
]
