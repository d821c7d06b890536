"""Environment-driven settings for retrykit.

Defaults for the retry policy and the logger family can be set once per
process through ``RETRYKIT_*`` environment variables or a ``.env`` file, so a
deployment can tune backoff without touching code.

Examples:
    >>> import os
    >>> os.environ["RETRYKIT_MAX_ATTEMPTS"] = "6"
    >>> RetryKitSettings().max_attempts
    6

Fields
──────
base_delay_ms   : Delay before the second attempt, in milliseconds
max_attempts    : Total attempts per execute() call (>= 1)
exponential     : Double the delay after each failed attempt
log_level       : Level for retrykit's internal structlog events
log_json        : Force JSON (True) / console (False) rendering, None = auto
log_file_path   : Default target for FileLogger
time_enabled    : Prefix logger lines with a timestamp
date_format     : strftime format for that timestamp
"""

from __future__ import annotations

import math
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_DELAY_MS = 125
DEFAULT_MAX_ATTEMPTS = 4
DEFAULT_DATE_FORMAT = "%d-%m-%Y %H:%M:%S"


class RetryKitSettings(BaseSettings):
    """Process-wide defaults, read from ``RETRYKIT_`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="RETRYKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Retry ────────────────────────────────────────────────────
    base_delay_ms: float = DEFAULT_BASE_DELAY_MS
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    exponential: bool = True

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    log_json: bool | None = None

    # ── Logger family ────────────────────────────────────────────
    log_file_path: Path = Field(
        default_factory=lambda: Path.cwd() / "logs" / "retrykit.log",
        description="Default FileLogger target",
    )
    time_enabled: bool = False
    date_format: str = DEFAULT_DATE_FORMAT

    @field_validator("base_delay_ms")
    @classmethod
    def _non_negative_delay(cls, v: float) -> float:
        if not math.isfinite(v) or v < 0:
            raise ValueError("base_delay_ms must be a finite number >= 0")
        return v

    @field_validator("max_attempts")
    @classmethod
    def _positive_attempts(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_attempts must be >= 1")
        return v


@lru_cache(maxsize=1)
def get_settings() -> RetryKitSettings:
    """Cached settings instance; call ``get_settings.cache_clear()`` to reload."""
    return RetryKitSettings()


__all__ = [
    "DEFAULT_BASE_DELAY_MS",
    "DEFAULT_MAX_ATTEMPTS",
    "DEFAULT_DATE_FORMAT",
    "RetryKitSettings",
    "get_settings",
]
