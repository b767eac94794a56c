from __future__ import annotations

from datetime import datetime, timedelta
from typing import Mapping

from trip_calendar.lookups import AIRPORT_FLAGS, KNOWN_AIRPORTS
from trip_calendar.models import CalendarEntry, FlightRecord, Location, OutputEvent, StayRecord


TRAVEL_CATEGORY = "TRAVEL"


def flight_summary(flight: FlightRecord, *, airport_flags: Mapping[str, str] = AIRPORT_FLAGS) -> str:
    start = flight.origin.code
    end = flight.destination.code
    start_flag = airport_flags.get(start)
    end_flag = airport_flags.get(end)
    start_label = f"{start_flag} {start}" if start_flag else start
    end_label = f"{end} {end_flag}" if end_flag else end
    return f"[{flight.flight_number}] {start_label} → {end_label}"


def flight_description(flight: FlightRecord) -> str:
    return "\n".join(
        [
            f"Flight number: {flight.flight_number}",
            f"Duration: {flight.duration}",
            f"Seat: {flight.seat or 'N/A'}",
            f"Reservation number: {flight.reservation_number}",
        ]
    )


def airport_location(
    entry: CalendarEntry,
    *,
    known_airports: Mapping[str, Location] = KNOWN_AIRPORTS,
) -> Location | None:
    if entry.location is None:
        return None
    known = known_airports.get(entry.location)
    if known is not None:
        return known
    return Location(title=entry.location, geo=entry.geo)


def _format_check_time(dt: datetime) -> str:
    # DD.MM.YYYY H:mm:ss
    return f"{dt:%d.%m.%Y} {dt.hour}:{dt:%M:%S}"


def stay_description(stay: StayRecord) -> str:
    lines: list[str] = []
    if stay.check_in is not None:
        lines.append(f"Check In: {_format_check_time(stay.check_in)}")
    if stay.check_out is not None:
        lines.append(f"Check Out: {_format_check_time(stay.check_out)}")
    lines.append(f"Booking Reference: {stay.booking_reference or 'N/A'}")
    return "\n".join(lines)


def flight_event(
    entry: CalendarEntry,
    flight: FlightRecord,
    *,
    airport_flags: Mapping[str, str] = AIRPORT_FLAGS,
    known_airports: Mapping[str, Location] = KNOWN_AIRPORTS,
) -> OutputEvent:
    return OutputEvent(
        start=entry.start,
        end=entry.end,
        summary=flight_summary(flight, airport_flags=airport_flags),
        description=flight_description(flight),
        location=airport_location(entry, known_airports=known_airports),
        categories=(TRAVEL_CATEGORY,),
        url=flight.url,
    )


def stay_event(entry: CalendarEntry, stay: StayRecord, *, end_offset_days: int = 0) -> OutputEvent:
    return OutputEvent(
        start=entry.start,
        end=entry.end + timedelta(days=end_offset_days),
        summary=f"Stay at {stay.hotel_name}",
        description=stay_description(stay),
        location=stay.location,
        all_day=True,
    )
