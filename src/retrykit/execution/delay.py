"""Delay primitive and the timer port the retry executor sleeps through.

``delay(ms)`` suspends the calling task with ``asyncio.sleep`` so other tasks
on the loop keep running. The executor never calls it directly; it receives a
``Sleeper`` at construction, which lets tests substitute ``RecordingSleeper``
and observe requested durations without waiting.
"""

from __future__ import annotations

import asyncio
from typing import Protocol


class Sleeper(Protocol):
    """Anything awaitable-callable with a duration in milliseconds."""

    async def __call__(self, ms: float) -> None: ...


async def delay(ms: float) -> None:
    """Suspend the current task for at least ``ms`` milliseconds.

    Non-positive durations still yield to the event loop once.
    """
    await asyncio.sleep(max(ms, 0) / 1000)


class RecordingSleeper:
    """Sleeper test double: records each requested duration, returns at once.

    Example:
        >>> sleeper = RecordingSleeper()
        >>> retry = Retry(sleep=sleeper)
        >>> await retry.execute(flaky)
        >>> sleeper.calls
        [125, 250]
    """

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, ms: float) -> None:
        self.calls.append(ms)
        await asyncio.sleep(0)

    @property
    def total_ms(self) -> float:
        return sum(self.calls)


__all__ = ["Sleeper", "delay", "RecordingSleeper"]
