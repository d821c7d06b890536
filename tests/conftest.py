"""
Shared pytest fixtures and configuration for retrykit tests.

This module provides:
- Settings/environment isolation (no RETRYKIT_* leakage between tests)
- structlog reset after each test
- A recording sleeper and a flaky-operation factory for retry tests
"""

from collections.abc import Callable, Generator
from pathlib import Path

import pytest
import structlog

from retrykit.core.settings import get_settings
from retrykit.execution.delay import RecordingSleeper


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "slow"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Generator[None, None, None]:
    """Strip RETRYKIT_* variables, run from an empty cwd, drop cached settings."""
    import os

    for key in list(os.environ):
        if key.startswith("RETRYKIT_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    structlog.reset_defaults()


# =============================================================================
# Retry Fixtures
# =============================================================================


@pytest.fixture
def sleeper() -> RecordingSleeper:
    """Sleeper that records requested delays and never waits."""
    return RecordingSleeper()


class FlakyOperation:
    """Callable that raises ``error`` for the first ``failures`` calls."""

    def __init__(self, failures: int, value: object = "ok", error: BaseException | None = None):
        self.failures = failures
        self.value = value
        self.error = error
        self.calls = 0

    def __call__(self) -> object:
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error if self.error is not None else RuntimeError(f"failure {self.calls}")
        return self.value


@pytest.fixture
def flaky() -> Callable[..., FlakyOperation]:
    """Factory: ``flaky(2)`` fails twice then returns "ok"."""
    return FlakyOperation
