"""retrykit core -- type system, errors, settings and internal logging.

Architecture::

    errors.py      Structured error hierarchy + normalize_error()
    result.py      Result[T] envelope (Ok / Err / try_result)
    settings.py    RETRYKIT_* environment settings (pydantic-settings)
    logging.py     structlog configuration for internal events
"""

from retrykit.core.errors import (
    ErrorCategory,
    InternalError,
    LoggerError,
    PolicyError,
    RetryKitError,
    UnknownError,
    normalize_error,
)
from retrykit.core.result import Err, Ok, Result, is_result, try_result, try_result_async

__all__ = [
    "ErrorCategory",
    "RetryKitError",
    "UnknownError",
    "InternalError",
    "PolicyError",
    "LoggerError",
    "normalize_error",
    "Ok",
    "Err",
    "Result",
    "is_result",
    "try_result",
    "try_result_async",
]
