"""Tests for the retry executor."""

import asyncio
import dataclasses
import time

import pytest

from retrykit.core.errors import InternalError, PolicyError, UnknownError
from retrykit.core.result import Err, Ok
from retrykit.core.settings import RetryKitSettings
from retrykit.execution.delay import RecordingSleeper
from retrykit.execution.retry import DEFAULT_POLICY, Retry, RetryPolicy, with_retry


class TestRetryPolicy:
    """Tests for RetryPolicy configuration."""

    def test_default_configuration(self):
        policy = RetryPolicy()
        assert policy.base_delay_ms == 125
        assert policy.max_attempts == 4
        assert policy.exponential is True
        assert DEFAULT_POLICY == policy

    def test_policy_is_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_POLICY.max_attempts = 10

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_attempts": 0},
            {"max_attempts": -3},
            {"max_attempts": 2.5},
            {"max_attempts": True},
            {"base_delay_ms": -1},
            {"base_delay_ms": float("inf")},
            {"base_delay_ms": "10"},
            {"exponential": "yes"},
        ],
    )
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(PolicyError) as exc_info:
            RetryPolicy(**kwargs)
        assert exc_info.value.field == next(iter(kwargs))

    def test_zero_delay_allowed(self):
        assert RetryPolicy(base_delay_ms=0).base_delay_ms == 0

    def test_merge_returns_new_policy(self):
        base = RetryPolicy(base_delay_ms=10, max_attempts=3)
        merged = base.merge(max_attempts=5)
        assert merged == RetryPolicy(base_delay_ms=10, max_attempts=5, exponential=True)
        assert base.max_attempts == 3

    def test_merge_without_overrides_is_identity(self):
        assert DEFAULT_POLICY.merge() is DEFAULT_POLICY

    def test_merge_keeps_explicit_false(self):
        assert DEFAULT_POLICY.merge(exponential=False).exponential is False

    def test_merge_validates(self):
        with pytest.raises(PolicyError):
            DEFAULT_POLICY.merge(max_attempts=0)

    def test_delay_after_exponential(self):
        policy = RetryPolicy(base_delay_ms=10)
        assert [policy.delay_after(k) for k in (1, 2, 3, 4)] == [10, 20, 40, 80]

    def test_delay_after_linear(self):
        policy = RetryPolicy(base_delay_ms=10, exponential=False)
        assert [policy.delay_after(k) for k in (1, 2, 3)] == [10, 10, 10]

    def test_from_settings(self):
        settings = RetryKitSettings(base_delay_ms=5, max_attempts=2, exponential=False)
        assert RetryPolicy.from_settings(settings) == RetryPolicy(
            base_delay_ms=5, max_attempts=2, exponential=False
        )


class TestExecuteScenarios:
    """Behaviour of Retry.execute for the documented scenarios."""

    @pytest.mark.asyncio
    async def test_succeeds_after_two_failures(self, sleeper, flaky):
        operation = flaky(2)
        retry = Retry(RetryPolicy(base_delay_ms=10, max_attempts=3, exponential=True), sleep=sleeper)

        result = await retry.execute(operation)

        assert result == Ok("ok")
        assert operation.calls == 3
        assert sleeper.calls == [10, 20]

    @pytest.mark.asyncio
    async def test_always_failing_reports_last_error(self, sleeper, flaky):
        operation = flaky(100, error=ValueError("boom"))
        retry = Retry(RetryPolicy(max_attempts=2), sleep=sleeper)

        result = await retry.execute(operation)

        assert result.is_err()
        assert str(result.error) == "boom"
        assert operation.calls == 2
        assert sleeper.calls == [125]

    @pytest.mark.asyncio
    async def test_non_exception_failure_normalized(self, sleeper):
        calls = 0

        def operation():
            nonlocal calls
            calls += 1
            return Err("oops")

        retry = Retry(RetryPolicy(max_attempts=1), sleep=sleeper)
        result = await retry.execute(operation)

        assert isinstance(result.error, UnknownError)
        assert str(result.error) == "Unknown error"
        assert calls == 1
        assert sleeper.calls == []

    @pytest.mark.asyncio
    async def test_default_policy_immediate_success(self, sleeper, flaky):
        operation = flaky(0, value={"id": 1})
        result = await Retry(sleep=sleeper).execute(operation)

        assert result == Ok({"id": 1})
        assert operation.calls == 1
        assert sleeper.calls == []

    @pytest.mark.asyncio
    async def test_concurrent_calls_are_independent(self, sleeper):
        retry = Retry(RetryPolicy(base_delay_ms=1), sleep=sleeper)
        counts = {"a": 0, "b": 0}

        def make(name: str, failures: int):
            async def operation():
                counts[name] += 1
                await asyncio.sleep(0)
                if counts[name] <= failures:
                    raise RuntimeError(f"{name} failed #{counts[name]}")
                return name

            return operation

        result_a, result_b = await asyncio.gather(
            retry.execute(make("a", 3), max_attempts=5, base_delay_ms=10),
            retry.execute(make("b", 10), max_attempts=2, exponential=False),
        )

        assert result_a == Ok("a")
        assert counts["a"] == 4
        assert str(result_b.error) == "b failed #2"
        assert counts["b"] == 2
        assert sorted(sleeper.calls) == sorted([10, 20, 40, 1])
        assert retry.policy == RetryPolicy(base_delay_ms=1)


class TestExecuteProperties:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("succeed", [False, True])
    async def test_single_attempt_never_waits(self, sleeper, flaky, succeed):
        operation = flaky(0 if succeed else 1)
        result = await Retry(RetryPolicy(max_attempts=1), sleep=sleeper).execute(operation)

        assert result.is_ok() is succeed
        assert operation.calls == 1
        assert sleeper.calls == []

    @pytest.mark.asyncio
    async def test_linear_delays_are_constant(self, sleeper, flaky):
        operation = flaky(100)
        retry = Retry(RetryPolicy(base_delay_ms=7, max_attempts=5, exponential=False), sleep=sleeper)

        await retry.execute(operation)

        assert sleeper.calls == [7, 7, 7, 7]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("base", [0, 1, 25, 125])
    async def test_exponential_delays_double(self, sleeper, flaky, base):
        operation = flaky(100)
        policy = RetryPolicy(base_delay_ms=base, max_attempts=5)

        await Retry(policy, sleep=sleeper).execute(operation)

        assert sleeper.calls == [base * 2 ** (k - 1) for k in range(1, 5)]
        assert sleeper.calls == [policy.delay_after(k) for k in range(1, 5)]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("k", [1, 2, 3, 4])
    async def test_success_on_attempt_k(self, sleeper, flaky, k):
        operation = flaky(k - 1, value=f"attempt {k}")
        result = await Retry(sleep=sleeper).execute(operation)

        assert result == Ok(f"attempt {k}")
        assert operation.calls == k
        assert len(sleeper.calls) == k - 1

    @pytest.mark.asyncio
    async def test_error_is_from_final_attempt(self, sleeper, flaky):
        operation = flaky(100)
        result = await Retry(RetryPolicy(max_attempts=3), sleep=sleeper).execute(operation)

        assert str(result.error) == "failure 3"

    @pytest.mark.asyncio
    async def test_exception_identity_preserved(self, sleeper):
        error = KeyError("missing")

        def operation():
            raise error

        result = await Retry(RetryPolicy(max_attempts=2), sleep=sleeper).execute(operation)
        assert result.error is error


class TestExecuteAsyncOperations:
    @pytest.mark.asyncio
    async def test_coroutine_function(self, sleeper):
        attempts = 0

        async def fetch():
            nonlocal attempts
            attempts += 1
            await asyncio.sleep(0)
            if attempts < 2:
                raise ConnectionError("reset")
            return 99

        result = await Retry(sleep=sleeper).execute(fetch)
        assert result == Ok(99)
        assert attempts == 2

    @pytest.mark.asyncio
    async def test_future_returning_operation(self, sleeper):
        loop = asyncio.get_running_loop()

        def operation():
            future = loop.create_future()
            future.set_result("from future")
            return future

        assert await Retry(sleep=sleeper).execute(operation) == Ok("from future")

    @pytest.mark.asyncio
    async def test_result_returning_operation(self, sleeper):
        outcomes = iter([Err(ValueError("not yet")), Ok("done")])

        result = await Retry(sleep=sleeper).execute(lambda: next(outcomes))
        assert result == Ok("done")
        assert sleeper.calls == [125]

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self, sleeper):
        async def operation():
            raise asyncio.CancelledError

        with pytest.raises(asyncio.CancelledError):
            await Retry(sleep=sleeper).execute(operation)

    @pytest.mark.asyncio
    async def test_task_cancel_during_delay(self):
        started = asyncio.Event()

        def operation():
            started.set()
            raise RuntimeError("fail")

        task = asyncio.create_task(Retry(RetryPolicy(base_delay_ms=10_000)).execute(operation))
        await started.wait()
        await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task


class TestExecuteOverrides:
    @pytest.mark.asyncio
    async def test_override_does_not_mutate_instance(self, sleeper, flaky):
        retry = Retry(RetryPolicy(base_delay_ms=10, max_attempts=4), sleep=sleeper)

        await retry.execute(flaky(100), max_attempts=2, base_delay_ms=3)

        assert sleeper.calls == [3]
        assert retry.policy == RetryPolicy(base_delay_ms=10, max_attempts=4)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides",
        [{"max_attempts": 0}, {"max_attempts": -1}, {"base_delay_ms": -5}],
    )
    async def test_invalid_override_is_reported_not_raised(self, sleeper, flaky, overrides):
        operation = flaky(0)
        result = await Retry(sleep=sleeper).execute(operation, **overrides)

        assert isinstance(result.error, PolicyError)
        assert operation.calls == 0
        assert sleeper.calls == []


class TestOnRetry:
    @pytest.mark.asyncio
    async def test_hook_called_before_each_wait(self, sleeper, flaky):
        seen = []
        retry = Retry(
            RetryPolicy(base_delay_ms=5, max_attempts=3),
            sleep=sleeper,
            on_retry=lambda attempt, error, delay_ms: seen.append((attempt, str(error), delay_ms)),
        )

        await retry.execute(flaky(100))

        assert seen == [(1, "failure 1", 5), (2, "failure 2", 10)]

    @pytest.mark.asyncio
    async def test_hook_failure_becomes_internal_error(self, sleeper, flaky):
        def hook(attempt, error, delay_ms):
            raise RuntimeError("hook broke")

        result = await Retry(sleep=sleeper, on_retry=hook).execute(flaky(1))

        assert isinstance(result.error, InternalError)
        assert str(result.error.cause) == "hook broke"


class TestSleepFailure:
    @pytest.mark.asyncio
    async def test_sleeper_error_becomes_internal_error(self, flaky):
        async def broken_sleep(ms: float) -> None:
            raise RuntimeError("timer broke")

        operation = flaky(1)
        result = await Retry(sleep=broken_sleep).execute(operation)

        assert isinstance(result.error, InternalError)
        assert isinstance(result.error.cause, RuntimeError)
        assert str(result.error.cause) == "timer broke"
        assert operation.calls == 1

    @pytest.mark.asyncio
    async def test_cancellation_during_wait_propagates(self, flaky):
        async def cancelled_sleep(ms: float) -> None:
            raise asyncio.CancelledError

        with pytest.raises(asyncio.CancelledError):
            await Retry(sleep=cancelled_sleep).execute(flaky(1))


class TestRunSync:
    def test_run_sync_outside_loop(self, flaky):
        operation = flaky(1)
        result = Retry(RetryPolicy(base_delay_ms=0)).run_sync(operation)
        assert result == Ok("ok")
        assert operation.calls == 2

    def test_run_sync_with_async_operation(self):
        async def fetch():
            return "async ok"

        assert Retry().run_sync(fetch) == Ok("async ok")

    @pytest.mark.asyncio
    async def test_run_sync_inside_loop_is_reported(self, flaky):
        operation = flaky(0)
        result = Retry().run_sync(operation)
        assert isinstance(result.error, InternalError)
        assert operation.calls == 0


class TestWithRetryDecorator:
    @pytest.mark.asyncio
    async def test_sync_function(self, sleeper):
        calls = []

        @with_retry(Retry(sleep=sleeper), max_attempts=3)
        def divide(a, b):
            calls.append((a, b))
            return a / b

        result = await divide(1, 0)
        assert isinstance(result.error, ZeroDivisionError)
        assert len(calls) == 3
        assert divide.__name__ == "divide"

    @pytest.mark.asyncio
    async def test_async_function(self, sleeper):
        attempts = 0

        @with_retry(Retry(sleep=sleeper))
        async def fetch(symbol: str) -> str:
            nonlocal attempts
            attempts += 1
            if attempts == 1:
                raise TimeoutError("slow")
            return symbol.lower()

        assert await fetch("ACME") == Ok("acme")
        assert attempts == 2


class TestRealDelay:
    @pytest.mark.slow
    @pytest.mark.asyncio
    async def test_elapsed_time_covers_delays(self, flaky):
        operation = flaky(2)
        retry = Retry(RetryPolicy(base_delay_ms=20, max_attempts=3))

        start = time.monotonic()
        result = await retry.execute(operation)
        elapsed_ms = (time.monotonic() - start) * 1000

        assert result == Ok("ok")
        assert elapsed_ms >= 55  # 20 + 40, minus timer slack
