from __future__ import annotations

import json
from datetime import date, datetime, timezone
from pathlib import Path

from trip_calendar.models import TripSummary
from trip_calendar.observability.metrics import RunMetrics
from trip_calendar.pipeline import TripCalendar


def _trip() -> TripCalendar:
    summary = TripSummary(
        start=datetime(2024, 4, 10, tzinfo=timezone.utc),
        end=datetime(2024, 4, 13, 23, 59, tzinfo=timezone.utc),
        last_day=date(2024, 4, 13),
        display_name="Budapest 🇭🇺 (10.04.2024 – 13.04.2024)",
        calendar_name="Budapest 🇭🇺",
        stay_override=True,
    )
    return TripCalendar(name=summary.calendar_name, summary=summary, flight_count=2, stay_count=1, skipped_count=3)


def test_finished_run_record(tmp_path: Path):
    m = RunMetrics(runtime_dir=tmp_path, run_id="r1", provider="travelperk", input_path=Path("in.ics"))
    m.record_trip(_trip(), tmp_path / "out.ics")
    path = m.write(m.finalize_record(status="ok"))

    assert path == (tmp_path / "metrics" / "metrics.jsonl").resolve()
    payload = json.loads(path.read_text(encoding="utf-8").strip().splitlines()[-1])
    assert payload["run_id"] == "r1"
    assert payload["status"] == "ok"
    assert payload["error"] is None
    assert payload["provider"] == "travelperk"
    assert payload["input_path"] == "in.ics"
    assert (payload["flights"], payload["stays"], payload["skipped_entries"]) == (2, 1, 3)
    assert payload["calendar_name"] == "Budapest 🇭🇺"
    assert payload["trip_name"] == "Budapest 🇭🇺 (10.04.2024 – 13.04.2024)"
    assert payload["stay_override"] is True
    assert payload["output_path"] == str(tmp_path / "out.ics")
    assert payload["total_latency_ms"] >= 0


def test_failed_run_record_has_no_trip(tmp_path: Path):
    m = RunMetrics(runtime_dir=tmp_path, run_id="r2")
    m.write(m.finalize_record(status="ok"))
    path = m.write(m.finalize_record(status="failed", error="Missing required field 'address'"))

    lines = path.read_text(encoding="utf-8").strip().splitlines()
    assert len(lines) == 2
    payload = json.loads(lines[-1])
    assert payload["status"] == "failed"
    assert payload["error"] == "Missing required field 'address'"
    assert payload["flights"] == 0
    assert payload["calendar_name"] is None
    assert payload["stay_override"] is None
