"""Retry executor with exponential backoff that reports outcomes as Results.

``Retry.execute`` invokes a zero-argument operation until it succeeds or the
attempt budget runs out, waiting between failures, and returns ``Ok(value)``
or ``Err(last_error)``. It never lets the operation's exception escape.

The operation may be a plain function, a function returning an awaitable
(e.g. an ``async def`` called with no arguments), or a function returning a
``Result``. Returned ``Err`` values count as failures, so the Result-returning
logger methods compose with the executor directly.

Example:
    >>> from retrykit.execution.retry import Retry, RetryPolicy
    >>>
    >>> retry = Retry(RetryPolicy(base_delay_ms=10, max_attempts=3))
    >>> result = await retry.execute(fetch_quote)
    >>> match result:
    ...     case Ok(value):
    ...         print("got", value)
    ...     case Err(error):
    ...         print("gave up:", error)

Timeline for ``RetryPolicy(base_delay_ms=100, max_attempts=4)`` when every
attempt fails::

    attempt 1 ─ fail ─ wait 100ms ─ attempt 2 ─ fail ─ wait 200ms ─
    attempt 3 ─ fail ─ wait 400ms ─ attempt 4 ─ fail ─ Err(error from attempt 4)
"""

from __future__ import annotations

import asyncio
import dataclasses
import functools
import math
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, TypeVar

from retrykit.core.errors import InternalError, PolicyError
from retrykit.core.logging import get_logger
from retrykit.core.result import Err, Ok, Result, try_result_async
from retrykit.core.settings import (
    DEFAULT_BASE_DELAY_MS,
    DEFAULT_MAX_ATTEMPTS,
    RetryKitSettings,
    get_settings,
)
from retrykit.execution.delay import Sleeper, delay

T = TypeVar("T")

Operation = Callable[[], Any]
OnRetry = Callable[[int, Exception, float], None]

logger = get_logger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """Immutable retry configuration.

    Attributes:
        base_delay_ms: Wait before the second attempt, in milliseconds (>= 0)
        max_attempts: Total invocations allowed per execute() call (>= 1)
        exponential: Double the wait after each failed attempt

    Invalid values raise ``PolicyError`` at construction, and ``merge`` goes
    through the same check.
    """

    base_delay_ms: float = DEFAULT_BASE_DELAY_MS
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    exponential: bool = True

    def __post_init__(self) -> None:
        if isinstance(self.max_attempts, bool) or not isinstance(self.max_attempts, int):
            raise PolicyError(
                "max_attempts must be an integer",
                field="max_attempts",
                value=self.max_attempts,
            )
        if self.max_attempts < 1:
            raise PolicyError(
                "max_attempts must be >= 1",
                field="max_attempts",
                value=self.max_attempts,
            )
        if isinstance(self.base_delay_ms, bool) or not isinstance(self.base_delay_ms, int | float):
            raise PolicyError(
                "base_delay_ms must be a number",
                field="base_delay_ms",
                value=self.base_delay_ms,
            )
        if not math.isfinite(self.base_delay_ms) or self.base_delay_ms < 0:
            raise PolicyError(
                "base_delay_ms must be a finite number >= 0",
                field="base_delay_ms",
                value=self.base_delay_ms,
            )
        if not isinstance(self.exponential, bool):
            raise PolicyError(
                "exponential must be a bool",
                field="exponential",
                value=self.exponential,
            )

    def merge(
        self,
        *,
        base_delay_ms: float | None = None,
        max_attempts: int | None = None,
        exponential: bool | None = None,
    ) -> RetryPolicy:
        """Return a new policy with the given fields replaced; None inherits."""
        overrides = {
            key: value
            for key, value in (
                ("base_delay_ms", base_delay_ms),
                ("max_attempts", max_attempts),
                ("exponential", exponential),
            )
            if value is not None
        }
        if not overrides:
            return self
        return dataclasses.replace(self, **overrides)

    def delay_after(self, failed_attempts: int) -> float:
        """Wait scheduled after ``failed_attempts`` consecutive failures (>= 1)."""
        if not self.exponential:
            return self.base_delay_ms
        return self.base_delay_ms * 2 ** (failed_attempts - 1)

    @classmethod
    def from_settings(cls, settings: RetryKitSettings | None = None) -> RetryPolicy:
        """Build a policy from ``RETRYKIT_*`` settings."""
        settings = settings or get_settings()
        return cls(
            base_delay_ms=settings.base_delay_ms,
            max_attempts=settings.max_attempts,
            exponential=settings.exponential,
        )


DEFAULT_POLICY = RetryPolicy()


def _operation_name(operation: Operation) -> str:
    return getattr(operation, "__qualname__", None) or type(operation).__name__


class Retry:
    """Retry executor.

    Holds a frozen policy, a sleeper and an optional hook and nothing else,
    so one instance can serve any number of concurrent ``execute`` calls.

    Args:
        policy: Instance policy (default: ``DEFAULT_POLICY``)
        sleep: Async callable taking milliseconds (default: ``delay``)
        on_retry: Called as ``on_retry(attempt, error, delay_ms)`` before each wait
    """

    def __init__(
        self,
        policy: RetryPolicy | None = None,
        *,
        sleep: Sleeper | None = None,
        on_retry: OnRetry | None = None,
    ):
        self._policy = policy if policy is not None else DEFAULT_POLICY
        self._sleep = sleep if sleep is not None else delay
        self._on_retry = on_retry

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    def __repr__(self) -> str:
        return f"Retry({self._policy!r})"

    async def execute(
        self,
        operation: Callable[[], T | Awaitable[T]],
        *,
        base_delay_ms: float | None = None,
        max_attempts: int | None = None,
        exponential: bool | None = None,
    ) -> Result[T]:
        """Run ``operation`` until it succeeds or the attempt budget is spent.

        Keyword overrides apply to this call only. Invalid overrides are
        reported as ``Err(PolicyError)`` and the operation is not invoked.

        Returns:
            Ok with the first successful value, or Err with the normalized
            error from the final attempt.
        """
        try:
            policy = self._policy.merge(
                base_delay_ms=base_delay_ms,
                max_attempts=max_attempts,
                exponential=exponential,
            )
        except PolicyError as e:
            return Err(e)

        log = logger.bind(operation=_operation_name(operation), max_attempts=policy.max_attempts)
        last_error: Exception | None = None

        for attempt in range(1, policy.max_attempts + 1):
            match await try_result_async(operation):
                case Ok() as outcome:
                    if attempt > 1:
                        log.debug("retry.succeeded_after_retry", attempt=attempt)
                    return outcome
                case Err(error):
                    last_error = error

            if attempt == policy.max_attempts:
                break

            wait_ms = policy.delay_after(attempt)
            log.debug(
                "retry.attempt_failed",
                attempt=attempt,
                delay_ms=wait_ms,
                error=str(last_error),
            )
            if self._on_retry is not None:
                try:
                    self._on_retry(attempt, last_error, wait_ms)
                except Exception as e:
                    return Err(InternalError("on_retry callback raised", cause=e))

            try:
                await self._sleep(wait_ms)
            except Exception as e:
                return Err(InternalError("sleep port raised", cause=e))

        if last_error is None:
            return Err(InternalError("Retry loop finished with neither a value nor an error"))

        log.warning("retry.exhausted", attempts=policy.max_attempts, error=str(last_error))
        return Err(last_error)

    def run_sync(
        self,
        operation: Callable[[], T | Awaitable[T]],
        *,
        base_delay_ms: float | None = None,
        max_attempts: int | None = None,
        exponential: bool | None = None,
    ) -> Result[T]:
        """Blocking wrapper around ``execute`` for scripts without an event loop.

        Must not be called from inside a running loop; that case is reported
        as ``Err(InternalError)`` and the operation is not invoked.
        """
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return asyncio.run(
                self.execute(
                    operation,
                    base_delay_ms=base_delay_ms,
                    max_attempts=max_attempts,
                    exponential=exponential,
                )
            )
        return Err(InternalError("run_sync() called from a running event loop; await execute() instead"))


def with_retry(
    retry: Retry | None = None,
    *,
    base_delay_ms: float | None = None,
    max_attempts: int | None = None,
    exponential: bool | None = None,
) -> Callable[[Callable[..., Any]], Callable[..., Awaitable[Result[Any]]]]:
    """Decorator factory: run the decorated function through ``Retry.execute``.

    Works for sync and async functions alike; the wrapped function is always
    a coroutine function returning a ``Result``.

    Example:
        >>> @with_retry(max_attempts=3, base_delay_ms=50)
        ... async def fetch_quote(symbol: str) -> float:
        ...     return await client.quote(symbol)
        >>> result = await fetch_quote("ACME")
    """
    executor = retry if retry is not None else Retry()

    def decorator(func: Callable[..., Any]) -> Callable[..., Awaitable[Result[Any]]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Result[Any]:
            return await executor.execute(
                lambda: func(*args, **kwargs),
                base_delay_ms=base_delay_ms,
                max_attempts=max_attempts,
                exponential=exponential,
            )

        return wrapper

    return decorator


__all__ = [
    "DEFAULT_POLICY",
    "RetryPolicy",
    "Retry",
    "with_retry",
]
