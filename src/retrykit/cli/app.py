"""
Root Typer application for the retrykit CLI.

Manual-testing commands for the logger family and the retry executor::

    retrykit log warn "disk almost full" --time
    retrykit demo 2 --base-delay-ms 50
    retrykit config --json
"""

from __future__ import annotations

import json
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.table import Table

from retrykit.cli.utils import console, err_console, output_result, print_dict
from retrykit.core.logging import configure_logging
from retrykit.core.result import Err
from retrykit.core.settings import get_settings
from retrykit.execution.retry import Retry, RetryPolicy
from retrykit.logger import ConsoleLogger, FileLogger, FileLoggerOptions, LoggerOptions, LogLevel

app = typer.Typer(
    name="retrykit",
    help="retrykit — retry-with-backoff executor and Result-returning loggers.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from retrykit import __version__

        typer.echo(f"retrykit {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Emit retry events at DEBUG level."),
) -> None:
    """retrykit CLI — exercise the loggers and the retry executor by hand."""
    try:
        settings = get_settings()
    except ValidationError as e:
        err_console.print("[bold red]Error[/bold red] (CONFIG): invalid RETRYKIT_* settings")
        err_console.print(str(e), markup=False, highlight=False)
        raise typer.Exit(code=1) from e
    configure_logging(
        level="DEBUG" if verbose else settings.log_level,
        json_format=settings.log_json,
    )


# ── Commands ─────────────────────────────────────────────────────────────


@app.command("log")
def log_message(
    level: LogLevel = typer.Argument(..., help="log, warn, error or trace"),
    message: list[str] = typer.Argument(..., help="Message parts, joined by spaces"),
    file: Path | None = typer.Option(None, "--file", "-f", help="Append to this file instead of the console"),
    time: bool | None = typer.Option(None, "--time/--no-time", help="Prefix a timestamp"),
) -> None:
    """Write one message through ConsoleLogger or FileLogger."""
    settings = get_settings()
    time_enabled = settings.time_enabled if time is None else time

    if file is not None:
        logger = FileLogger(
            FileLoggerOptions(
                time_enabled=time_enabled,
                date_format=settings.date_format,
                log_file_path=file,
            )
        )
    else:
        logger = ConsoleLogger(LoggerOptions(time_enabled=time_enabled, date_format=settings.date_format))

    result = getattr(logger, level.value)(*message)
    if isinstance(result, Err):
        err_console.print(f"[bold red]Error[/bold red]: {result.error}")
        raise typer.Exit(code=1)


@app.command("demo")
def demo(
    failures: int = typer.Argument(..., min=0, help="How many times the operation fails before succeeding"),
    base_delay_ms: float | None = typer.Option(None, "--base-delay-ms", help="Override base delay"),
    max_attempts: int | None = typer.Option(None, "--max-attempts", help="Override attempt budget"),
    linear: bool = typer.Option(False, "--linear", help="Keep the delay constant"),
    as_json: bool = typer.Option(False, "--json", help="Print the Result as JSON"),
) -> None:
    """Run an operation that fails FAILURES times and report the outcome."""
    calls = 0
    waits: list[tuple[int, float]] = []

    def flaky() -> str:
        nonlocal calls
        calls += 1
        if calls <= failures:
            raise RuntimeError(f"attempt {calls} failed")
        return f"succeeded on attempt {calls}"

    retry = Retry(
        RetryPolicy.from_settings(),
        on_retry=lambda attempt, error, delay_ms: waits.append((attempt, delay_ms)),
    )
    result = retry.run_sync(
        flaky,
        base_delay_ms=base_delay_ms,
        max_attempts=max_attempts,
        exponential=False if linear else None,
    )

    if not as_json:
        table = Table(title=f"{calls} invocation(s)")
        table.add_column("After attempt")
        table.add_column("Waited (ms)")
        for attempt, delay_ms in waits:
            table.add_row(str(attempt), f"{delay_ms:g}")
        console.print(table)

    output_result(result, as_json=as_json)


@app.command("config")
def show_config(
    as_json: bool = typer.Option(False, "--json", help="Print settings as JSON"),
) -> None:
    """Show effective RETRYKIT_* settings."""
    settings = get_settings()
    if as_json:
        console.print_json(json.dumps(settings.model_dump(mode="json")))
        return
    print_dict(settings.model_dump(), title="retrykit settings")
