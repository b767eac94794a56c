from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import replace
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from trip_calendar.config import load_settings
from trip_calendar.errors import TripCalendarError
from trip_calendar.observability.logger import LogContext, get_logger, log_event, setup_logging
from trip_calendar.observability.metrics import RunMetrics
from trip_calendar.pipeline import convert_file
from trip_calendar.providers import default_registry


app = typer.Typer(add_completion=False)
console = Console()
logger = get_logger(__name__)


def _summary_table(record: dict[str, Any]) -> Table:
    t = Table(title="Run summary", show_header=False)
    for key in (
        "status",
        "calendar_name",
        "trip_name",
        "flights",
        "stays",
        "skipped_entries",
        "stay_override",
        "output_path",
        "total_latency_ms",
    ):
        t.add_row(key, str(record.get(key, "")))
    return t


@app.command()
def convert(
    input_path: Path = typer.Argument(None, help="Provider ICS export to read"),
    output: Path = typer.Option(None, "--output", "-o", help="Where to write the trip calendar"),
    provider: str = typer.Option(None, "--provider", help="Export layout: travelperk or legacy"),
    timezone_name: str = typer.Option(None, "--timezone", help="IANA zone used for all-day and floating times"),
    log_level: str = typer.Option(None, "--log-level", help="INFO or DEBUG"),
    runtime_dir: Path = typer.Option(None, "--runtime-dir", help="Runtime folder for logs/metrics"),
):
    settings = load_settings()
    overrides: dict[str, Any] = {
        "input_path": input_path,
        "output_path": output,
        "provider": provider,
        "timezone": timezone_name,
        "log_level": log_level,
        "runtime_dir": runtime_dir,
    }
    settings = replace(settings, **{k: v for k, v in overrides.items() if v})

    setup_logging(runtime_dir=settings.runtime_dir, level=settings.log_level)

    run_id = str(uuid.uuid4())
    ctx = LogContext(run_id=run_id, provider=settings.provider, stage="run")
    metrics = RunMetrics(
        runtime_dir=settings.runtime_dir,
        run_id=run_id,
        provider=settings.provider,
        input_path=settings.input_path,
    )
    log_event(
        logger,
        level=logging.INFO,
        message="Run started",
        event="run_start",
        context=ctx,
        data={"input_path": str(settings.input_path), "timezone": settings.timezone},
    )

    try:
        trip_provider = default_registry().create(settings.provider, tz=settings.tzinfo())
        trip, path = asyncio.run(
            convert_file(settings.input_path, settings.output_path, provider=trip_provider, run_id=run_id)
        )
    except TripCalendarError as exc:
        log_event(
            logger,
            level=logging.ERROR,
            message="Run failed",
            event="run_failed",
            context=ctx,
            data={"error_type": type(exc).__name__, "error": str(exc)},
        )
        metrics.write(metrics.finalize_record(status="failed", error=str(exc)))
        console.print(f"[red]Conversion failed:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1)

    metrics.record_trip(trip, path)
    record = metrics.finalize_record(status="ok")
    metrics_path = metrics.write(record)

    console.print(_summary_table(record))
    console.print(f"Metrics appended to: {metrics_path}")
    log_event(logger, level=logging.INFO, message="Run ended", event="run_end", context=ctx)


@app.command()
def providers():
    """List the export layouts that can be converted."""
    for name in default_registry().names():
        console.print(name)


if __name__ == "__main__":
    app()
