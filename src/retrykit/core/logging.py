"""
Internal structured logging for retrykit.

retrykit reports its own diagnostics (failed attempts, scheduled waits,
exhaustion) through structlog, separately from the user-facing
``retrykit.logger`` family. Applications that already configure structlog get
retrykit events in their own pipeline; scripts can call
``configure_logging()`` once at startup.

Architecture:
    ::

        configure_logging(level="INFO", json_format=None, service="retrykit")
            ↓
        structlog processor chain:
          1. merge_contextvars
          2. add_log_level
          3. TimeStamper (iso)
          4. add_service_metadata
          5. JSONRenderer (or ConsoleRenderer when stderr is a tty)

Examples:
    >>> from retrykit.core.logging import configure_logging, get_logger
    >>> configure_logging(level="DEBUG", json_format=True)
    >>> logger = get_logger(__name__)
    >>> logger.debug("retry.attempt_failed", attempt=1, max_attempts=4)

Guardrails:
    - Output goes to stderr so CLI stdout stays clean
    - Loggers are not cached, so the current ``sys.stderr`` is always used
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

# Store service name for metadata
_SERVICE_NAME = "retrykit"


def _add_service_metadata(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add service-level metadata to all logs."""
    event_dict.setdefault("service", _SERVICE_NAME)
    return event_dict


def _stderr_logger_factory(*args: Any) -> structlog.PrintLogger:
    return structlog.PrintLogger(sys.stderr)


def resolve_level(level: str) -> int:
    """Map a level name (``WARN`` accepted) to a stdlib level, defaulting to INFO."""
    normalized = level.upper()
    if normalized == "WARN":
        normalized = "WARNING"
    resolved = logging.getLevelName(normalized)
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(
    level: str = "INFO",
    json_format: bool | None = None,
    service: str = "retrykit",
    add_timestamp: bool = True,
) -> None:
    """Configure structured logging for retrykit's internal events.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: True for JSON, False for console, None for auto (JSON if not tty)
        service: Service name to include in logs
        add_timestamp: Include ISO timestamp in logs
    """
    global _SERVICE_NAME
    _SERVICE_NAME = service

    if json_format is None:
        json_format = not sys.stderr.isatty()

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        _add_service_metadata,
    ]

    if add_timestamp:
        processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(resolve_level(level)),
        context_class=dict,
        logger_factory=_stderr_logger_factory,
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> Any:
    """Get a structlog logger (usually ``get_logger(__name__)``)."""
    return structlog.get_logger(name)


__all__ = [
    "configure_logging",
    "get_logger",
    "resolve_level",
]
