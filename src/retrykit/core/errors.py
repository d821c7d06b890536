"""
Structured error types for retrykit.

Every fallible retrykit operation returns a ``Result`` instead of raising, and
the ``Err`` side of that result always carries an ``Exception``. This module
defines the small hierarchy retrykit itself produces: the placeholder used when
an operation fails with something that is not an exception, the invariant
violation the retry loop reports instead of falling into undefined state, and
the policy and logger errors.

Manifesto:
    - **One concrete error type at the boundary:** Downstream code never
      handles untyped failures
    - **Categorized:** Each error knows what kind of failure it is
    - **Error chaining:** The original exception travels as ``cause``

Architecture:
    ::

        ┌────────────────────────────────────────────────────────┐
        │                     RetryKitError                       │
        │           (message, category, cause)                    │
        ├────────────────────────────────────────────────────────┤
        │  UnknownError    InternalError   PolicyError            │
        │  (UNKNOWN)       (INTERNAL)      (CONFIG, ValueError)   │
        │                                                         │
        │  LoggerError                                            │
        │  (LOGGING)                                              │
        └────────────────────────────────────────────────────────┘

Examples:
    >>> error = UnknownError()
    >>> error.message
    'Unknown error'
    >>> error.category
    <ErrorCategory.UNKNOWN: 'UNKNOWN'>

    >>> PolicyError("max_attempts must be >= 1").to_dict()["category"]
    'CONFIG'

Guardrails:
    ❌ DON'T: Raise these from inside ``Retry.execute``
    ✅ DO: Wrap them in ``Err`` and return

Tags:
    error-handling, exception-hierarchy, retrykit
"""

from __future__ import annotations

from enum import Enum
from typing import Any

UNKNOWN_ERROR_MESSAGE = "Unknown error"


class ErrorCategory(str, Enum):
    """Classification used by ``RetryKitError.to_dict`` and log events."""

    CONFIG = "CONFIG"  # Invalid policy or settings values
    LOGGING = "LOGGING"  # Formatting or sink failures in the logger family
    INTERNAL = "INTERNAL"  # Bugs, unexpected state
    UNKNOWN = "UNKNOWN"  # Non-exception failure values


class RetryKitError(Exception):
    """
    Base class for all errors produced by retrykit.

    Attributes:
        message: Human-readable message (also ``str(error)``)
        category: ErrorCategory for routing and serialization
        cause: Underlying exception, chained as ``__cause__``
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


class UnknownError(RetryKitError):
    """
    Placeholder for a failure value that is not an ``Exception``.

    The original value is kept on ``value`` for debugging, but the message is
    always the fixed ``"Unknown error"`` so nothing untyped leaks into
    messages or logs.
    """

    default_category = ErrorCategory.UNKNOWN

    def __init__(self, value: Any = None):
        super().__init__(UNKNOWN_ERROR_MESSAGE)
        self.value = value


class InternalError(RetryKitError):
    """Internal invariant violation (e.g. a retry loop with no outcome)."""

    default_category = ErrorCategory.INTERNAL


class PolicyError(RetryKitError, ValueError):
    """Invalid retry policy or settings value."""

    default_category = ErrorCategory.CONFIG

    def __init__(self, message: str, *, field: str | None = None, value: Any = None):
        super().__init__(message)
        self.field = field
        self.value = value

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.field is not None:
            result["field"] = self.field
            result["value"] = self.value
        return result


class LoggerError(RetryKitError):
    """The logger could not format or write a message."""

    default_category = ErrorCategory.LOGGING


def normalize_error(value: Any) -> Exception:
    """
    Convert an arbitrary failure value into an ``Exception``.

    Exceptions pass through unchanged so their type and message survive;
    anything else becomes an ``UnknownError`` with the fixed placeholder
    message.

    >>> str(normalize_error(ValueError("boom")))
    'boom'
    >>> str(normalize_error("oops"))
    'Unknown error'
    """
    if isinstance(value, Exception):
        return value
    return UnknownError(value)


__all__ = [
    "UNKNOWN_ERROR_MESSAGE",
    "normalize_error",
    "ErrorCategory",
    "RetryKitError",
    "UnknownError",
    "InternalError",
    "PolicyError",
    "LoggerError",
]
