"""
Result envelope for consistent success/failure handling.

Provides a typed ``Result[T]`` pattern that makes success/failure explicit in
the type system. Every fallible retrykit call (``Retry.execute``, every logger
method) returns ``Ok[T]`` for success or ``Err[T]`` for failure instead of
raising, so callers decide for themselves whether to branch, recover, or
re-raise.

Manifesto:
    - **Explicit over Implicit:** No hidden exceptions that callers might miss
    - **Check before access:** ``value`` exists only on ``Ok``, ``error`` only
      on ``Err``; there is no implicit unwrapping
    - **Functional composition:** Chain with map/flat_map without nested
      try/except blocks

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────┐
        │                     Result[T]                                │
        │                    (Type Alias)                              │
        ├─────────────────┬─────────────────┬─────────────────────────┤
        │     Ok[T]       │     Err[T]      │     Utilities           │
        │   (Success)     │   (Failure)     │                         │
        ├─────────────────┼─────────────────┼─────────────────────────┤
        │ • value: T      │ • error: Exc    │ • try_result()          │
        │ • map()         │ • map_err()     │ • try_result_async()    │
        │ • flat_map()    │ • or_else()     │ • is_result()           │
        │ • unwrap()      │ • unwrap_or()   │                         │
        └─────────────────┴─────────────────┴─────────────────────────┘

Examples:
    Pattern matching on the outcome of a retry:

    >>> from retrykit.core.result import Ok, Err
    >>> def describe(result):
    ...     match result:
    ...         case Ok(value):
    ...             return f"ok: {value}"
    ...         case Err(error):
    ...             return f"failed: {error}"
    >>> describe(Ok(5))
    'ok: 5'
    >>> describe(Err(ValueError("boom")))
    'failed: boom'

    Chaining:

    >>> Ok(10).map(lambda x: x * 2).map(lambda x: x + 1).unwrap()
    21
    >>> Err(ValueError("oops")).map(lambda x: x * 2).unwrap_or(0)
    0

Guardrails:
    ❌ DON'T: Use unwrap() without checking is_ok() first
    ✅ DO: Use unwrap_or() or pattern matching for safe extraction

    ❌ DON'T: Store mutable values in Ok and mutate them later
    ✅ DO: Treat results as immutable snapshots of an outcome

Tags:
    result-pattern, error-handling, functional-programming, retrykit
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, TypeVar

from retrykit.core.errors import RetryKitError, normalize_error

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """
    Successful result containing a value.

    Immutable (frozen dataclass with ``__slots__``). Transformations return a
    new result and never modify this one.

    Examples:
        >>> ok = Ok(42)
        >>> ok.is_ok(), ok.is_err()
        (True, False)
        >>> Ok("hello").map(str.upper).unwrap()
        'HELLO'
    """

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Get the value. Safe for Ok."""
        return self.value

    def unwrap_or(self, default: T) -> T:
        """Get value or default (always returns value for Ok)."""
        return self.value

    def unwrap_or_else(self, f: Callable[[Exception], T]) -> T:
        """Get value or call f with error (always returns value for Ok)."""
        return self.value

    def map(self, f: Callable[[T], U]) -> Result[U]:
        """Transform the value if Ok."""
        return Ok(f(self.value))

    def flat_map(self, f: Callable[[T], Result[U]]) -> Result[U]:
        """Chain to another Result-returning function."""
        return f(self.value)

    def map_err(self, f: Callable[[Exception], Exception]) -> Result[T]:
        """Transform error if Err (no-op for Ok)."""
        return self

    def or_else(self, f: Callable[[Exception], Result[T]]) -> Result[T]:
        """Return self if Ok, otherwise call f with error."""
        return self

    def inspect(self, f: Callable[[T], None]) -> Result[T]:
        """Call f with value for side effects, return self."""
        f(self.value)
        return self

    def inspect_err(self, f: Callable[[Exception], None]) -> Result[T]:
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"ok": True, "value": self.value}

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[T]):
    """
    Failed result containing an error.

    The error is always an ``Exception``; values produced by retrykit are
    normalized on the way in (see ``normalize_error``), so downstream code can
    rely on ``str(result.error)`` being a message.

    ``map`` and ``flat_map`` short-circuit and pass the same error through;
    ``or_else`` and ``unwrap_or`` are the recovery points.

    Examples:
        >>> err = Err(ValueError("something went wrong"))
        >>> err.is_err()
        True
        >>> err.unwrap_or("default")
        'default'
        >>> Err(ValueError("x")).or_else(lambda e: Ok("backup")).unwrap()
        'backup'
    """

    error: Exception

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> T:
        """Raise the error. Use only when you're sure it's Ok."""
        raise self.error

    def unwrap_or(self, default: T) -> T:
        """Get default since this is Err."""
        return default

    def unwrap_or_else(self, f: Callable[[Exception], T]) -> T:
        """Call f with error to get value."""
        return f(self.error)

    def map(self, f: Callable[[T], U]) -> Result[U]:
        """No-op for Err."""
        return Err(self.error)

    def flat_map(self, f: Callable[[T], Result[U]]) -> Result[U]:
        """No-op for Err."""
        return Err(self.error)

    def map_err(self, f: Callable[[Exception], Exception]) -> Result[T]:
        """Transform the error."""
        return Err(f(self.error))

    def or_else(self, f: Callable[[Exception], Result[T]]) -> Result[T]:
        """Call f with error to try recovery."""
        return f(self.error)

    def inspect(self, f: Callable[[T], None]) -> Result[T]:
        return self

    def inspect_err(self, f: Callable[[Exception], None]) -> Result[T]:
        """Call f with error for side effects, return self."""
        f(self.error)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        if isinstance(self.error, RetryKitError):
            return {"ok": False, "error": self.error.to_dict()}
        return {
            "ok": False,
            "error": {
                "error_type": type(self.error).__name__,
                "message": str(self.error),
            },
        }

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


# Type alias for Result
Result = Ok[T] | Err[T]


def is_result(value: Any) -> bool:
    """True if value is an Ok or an Err."""
    return isinstance(value, (Ok, Err))


def try_result(f: Callable[[], T]) -> Result[T]:
    """
    Execute a zero-argument function and wrap the outcome in a Result.

    This is the bridge from exception-based code into the Result world.
    Raised exceptions become ``Err``; the return value becomes ``Ok``.

    >>> import json
    >>> try_result(lambda: json.loads('{"a": 1}')).unwrap()
    {'a': 1}
    >>> try_result(lambda: json.loads("invalid")).is_err()
    True
    """
    try:
        return Ok(f())
    except Exception as e:
        return Err(normalize_error(e))


async def try_result_async(f: Callable[[], T | Awaitable[T]]) -> Result[T]:
    """
    Like ``try_result`` but awaits the return value when it is awaitable.

    Covers all four shapes an operation can take: returning a value,
    returning an awaitable that resolves, raising synchronously, and an
    awaitable that raises when awaited. A returned ``Result`` is passed
    through as-is (after normalizing its error) rather than nested.
    """
    try:
        value = f()
        if inspect.isawaitable(value):
            value = await value
    except Exception as e:
        return Err(normalize_error(e))

    if isinstance(value, Err):
        return Err(normalize_error(value.error))
    if isinstance(value, Ok):
        return value
    return Ok(value)


__all__ = [
    "Ok",
    "Err",
    "Result",
    "is_result",
    "try_result",
    "try_result_async",
]
