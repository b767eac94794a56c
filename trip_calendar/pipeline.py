from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from trip_calendar.address import AddressResolver, parse_address
from trip_calendar.aggregate import build_whole_trip_event, summarize_trip
from trip_calendar.errors import ConfigurationError
from trip_calendar.ics_io import build_calendar, read_calendar_entries, write_ics_bytes
from trip_calendar.models import CalendarEntry, EntryKind, OutputEvent, StayRecord, TripSummary
from trip_calendar.observability.logger import LogContext, get_logger, log_event
from trip_calendar.providers import TripProvider
from trip_calendar.segments import flight_event, stay_event


logger = get_logger(__name__)


@dataclass(frozen=True)
class TripCalendar:
    name: str
    summary: TripSummary
    events: tuple[OutputEvent, ...] = ()
    flight_count: int = 0
    stay_count: int = 0
    skipped_count: int = 0

    def to_ics(self) -> bytes:
        return build_calendar(name=self.name, events=self.events)


async def build_trip_calendar(
    entries: Sequence[CalendarEntry],
    *,
    provider: TripProvider,
    resolver: AddressResolver = parse_address,
    run_id: str | None = None,
) -> TripCalendar:
    """
    Turn provider entries into the output calendar.

    Output order is flights, then the whole-trip event, then stays. Stays are
    left out when they all share one location, since the whole-trip event
    already carries it. Any extraction failure aborts the run.
    """
    flight_events: list[OutputEvent] = []
    stay_events: list[OutputEvent] = []
    stays: list[StayRecord] = []
    skipped = 0

    for entry in entries:
        kind = provider.classify(entry)
        ctx = LogContext(run_id=run_id, provider=provider.name, stage="extract", entry_uid=entry.uid)

        if kind == EntryKind.FLIGHT:
            flight = provider.parse_flight(entry)
            flight_events.append(flight_event(entry, flight))
            log_event(
                logger,
                level=logging.DEBUG,
                message="Flight extracted",
                event="flight_extracted",
                context=ctx,
                data={"flight_number": flight.flight_number, "reservation_number": flight.reservation_number},
            )
        elif kind == EntryKind.STAY:
            stay = provider.parse_stay(entry)
            stays.append(stay)
            stay_events.append(stay_event(entry, stay, end_offset_days=provider.stay_end_offset_days))
            log_event(
                logger,
                level=logging.DEBUG,
                message="Stay extracted",
                event="stay_extracted",
                context=ctx,
                data={"hotel_name": stay.hotel_name, "booking_reference": stay.booking_reference},
            )
        else:
            skipped += 1
            log_event(
                logger,
                level=logging.DEBUG,
                message="Entry skipped",
                event="entry_skipped",
                context=ctx,
                data={"kind": str(kind), "summary": entry.summary},
            )

    summary = await summarize_trip(flight_events, stay_events, stays, resolver=resolver)
    whole_trip = build_whole_trip_event(summary, stays, stay_events)

    events = (*flight_events, whole_trip)
    if not summary.stay_override:
        events += tuple(stay_events)

    return TripCalendar(
        name=summary.calendar_name,
        summary=summary,
        events=events,
        flight_count=len(flight_events),
        stay_count=len(stay_events),
        skipped_count=skipped,
    )


async def convert_file(
    input_path: Path,
    output_path: Path,
    *,
    provider: TripProvider,
    resolver: AddressResolver = parse_address,
    run_id: str | None = None,
) -> tuple[TripCalendar, Path]:
    try:
        ics_bytes = input_path.read_bytes()
    except OSError as exc:
        raise ConfigurationError(f"Cannot read input calendar {input_path}: {exc.strerror or exc}") from exc
    entries = read_calendar_entries(ics_bytes, tz=provider.tz)
    log_event(
        logger,
        level=logging.INFO,
        message="Calendar read",
        event="calendar_read",
        context=LogContext(run_id=run_id, provider=provider.name, stage="read"),
        data={"path": str(input_path), "entries": len(entries)},
    )

    trip = await build_trip_calendar(entries, provider=provider, resolver=resolver, run_id=run_id)
    try:
        path = write_ics_bytes(ics_bytes=trip.to_ics(), path=output_path)
    except OSError as exc:
        raise ConfigurationError(f"Cannot write output calendar {output_path}: {exc.strerror or exc}") from exc
    log_event(
        logger,
        level=logging.INFO,
        message="Calendar written",
        event="calendar_written",
        context=LogContext(run_id=run_id, provider=provider.name, stage="write"),
        data={"path": str(path), "events": len(trip.events), "calendar_name": trip.name},
    )
    return trip, path
