from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from trip_calendar.pipeline import TripCalendar


@dataclass
class RunMetrics:
    """
    Outcome of one conversion run.

    Only a finished run fills in the trip fields; a failed run is written
    with zero counts and the error.
    """

    runtime_dir: Path
    run_id: str
    provider: str | None = None
    input_path: Path | None = None
    started_at: float = field(default_factory=time.perf_counter)
    flights: int = 0
    stays: int = 0
    skipped_entries: int = 0
    calendar_name: str | None = None
    trip_name: str | None = None
    stay_override: bool | None = None
    output_path: Path | None = None

    def record_trip(self, trip: TripCalendar, output_path: Path) -> None:
        self.flights = trip.flight_count
        self.stays = trip.stay_count
        self.skipped_entries = trip.skipped_count
        self.calendar_name = trip.name
        self.trip_name = trip.summary.display_name
        self.stay_override = trip.summary.stay_override
        self.output_path = output_path

    def finalize_record(self, *, status: str, error: str | None = None) -> dict[str, Any]:
        elapsed_ms = (time.perf_counter() - self.started_at) * 1000.0
        return {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "run_id": self.run_id,
            "status": status,
            "error": error,
            "provider": self.provider,
            "input_path": str(self.input_path) if self.input_path else None,
            "total_latency_ms": round(elapsed_ms, 2),
            "flights": self.flights,
            "stays": self.stays,
            "skipped_entries": self.skipped_entries,
            "calendar_name": self.calendar_name,
            "trip_name": self.trip_name,
            "stay_override": self.stay_override,
            "output_path": str(self.output_path) if self.output_path else None,
        }

    def write(self, record: dict[str, Any]) -> Path:
        path = (self.runtime_dir / "metrics").resolve() / "metrics.jsonl"
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(record, ensure_ascii=False) + "\n")
        return path
