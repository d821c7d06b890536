"""retrykit execution -- the retry executor and the delay it waits through.

MODULE MAP
──────────
  1. delay.py   ─ delay(ms), Sleeper port, RecordingSleeper test double
  2. retry.py   ─ RetryPolicy, Retry.execute / run_sync, with_retry
"""

from retrykit.execution.delay import RecordingSleeper, Sleeper, delay
from retrykit.execution.retry import DEFAULT_POLICY, Retry, RetryPolicy, with_retry

__all__ = [
    "delay",
    "Sleeper",
    "RecordingSleeper",
    "DEFAULT_POLICY",
    "RetryPolicy",
    "Retry",
    "with_retry",
]
