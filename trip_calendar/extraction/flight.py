from __future__ import annotations

import re
from collections.abc import Sequence

from trip_calendar.errors import MissingFieldError
from trip_calendar.extraction.scanner import require_first, split_lines, value_after
from trip_calendar.models import Airport, CalendarEntry, FlightRecord


REFERENCE_LABELS = ("booking reference", "reservation number")
BOOKING_LINK_MARKER = "manage your booking"
HREF_RE = re.compile(r'href="([^"]+)"')


def _description_lines(entry: CalendarEntry) -> list[str]:
    lines = split_lines(entry.description)
    if not any(lines):
        raise MissingFieldError("description", entry_uid=entry.uid)
    return lines


def _airport_from_city_code(text: str) -> Airport | None:
    # "Warsaw (WAW)" -> city "Warsaw", code "WAW"
    cut = text.rfind(" (")
    if cut < 0:
        return None
    city = text[:cut].strip()
    code = text[cut + 2 :].strip().rstrip(")").strip()
    if not city or not code:
        return None
    return Airport(city=city, code=code)


def get_flight_number(line: str, _index: int, _lines: Sequence[str]) -> str | None:
    if "flight number" not in line.lower():
        return None
    return value_after(line, ":")


def get_duration(line: str, _index: int, _lines: Sequence[str]) -> str | None:
    if not line.lower().startswith("duration"):
        return None
    return value_after(line, ":")


def get_reservation_number(line: str, _index: int, _lines: Sequence[str]) -> str | None:
    lowered = line.lower()
    if not any(label in lowered for label in REFERENCE_LABELS):
        return None
    return value_after(line, ":")


def _airport_after_label(label: str):
    def extract(line: str, index: int, lines: Sequence[str]) -> Airport | None:
        if not line.startswith(label):
            return None
        if index + 1 >= len(lines):
            return None
        return _airport_from_city_code(lines[index + 1])

    return extract


get_origin = _airport_after_label("Departure")
get_destination = _airport_after_label("Arrival")


def get_booking_url(line: str, _index: int, _lines: Sequence[str]) -> str | None:
    if BOOKING_LINK_MARKER not in line.lower():
        return None
    m = HREF_RE.search(line)
    return m.group(1) if m else None


def parse_flight(entry: CalendarEntry) -> FlightRecord:
    """
    Extract a flight from a TravelPerk-style description.

    The description is label/value lines, with the departure and arrival
    airports on the line after their "Departure"/"Arrival" labels::

        Departure
        Warsaw (WAW)
        Arrival
        Budapest (BUD)
        Flight number: LO 535
        Duration: 1h 35m
        Booking reference: ABC123
        Manage your booking: <a href="https://...">Open</a>
    """
    lines = _description_lines(entry)
    uid = entry.uid
    return FlightRecord(
        flight_number=require_first(lines, get_flight_number, field="flight_number", entry_uid=uid),
        duration=require_first(lines, get_duration, field="duration", entry_uid=uid),
        reservation_number=require_first(lines, get_reservation_number, field="reservation_number", entry_uid=uid),
        origin=require_first(lines, get_origin, field="origin", entry_uid=uid),
        destination=require_first(lines, get_destination, field="destination", entry_uid=uid),
        url=require_first(lines, get_booking_url, field="url", entry_uid=uid),
        seat=None,
    )


# Legacy itinerary layout:
#   Warsaw WAW - Budapest BUD
#   LOT Polish Airlines operated by LOT - LO535
#   DURATION: 1h 35m
#   Seat: 12A
#   Reservation number: XYZ789


def _legacy_airport(part: str) -> Airport | None:
    part = part.strip()
    cut = part.rfind(" ")
    if cut < 0:
        return None
    return Airport(city=part[:cut], code=part[cut + 1 :])


def _legacy_route_part(position: int):
    def extract(line: str, index: int, _lines: Sequence[str]) -> Airport | None:
        if index > 0:
            return None
        parts = line.split(" - ")
        if len(parts) < 2:
            return None
        return _legacy_airport(parts[position])

    return extract


get_legacy_origin = _legacy_route_part(0)
get_legacy_destination = _legacy_route_part(1)


def get_legacy_flight_number(line: str, _index: int, _lines: Sequence[str]) -> str | None:
    if "operated by" not in line:
        return None
    return line.split("-")[-1].strip()


def get_legacy_duration(line: str, _index: int, _lines: Sequence[str]) -> str | None:
    if not line.startswith("DURATION"):
        return None
    return line[len("DURATION: ") :]


def _after_label(label: str):
    def extract(line: str, _index: int, _lines: Sequence[str]) -> str | None:
        pos = line.find(label)
        if pos < 0:
            return None
        return line[pos + len(label) :]

    return extract


get_legacy_seat = _after_label("Seat: ")
get_legacy_reservation_number = _after_label("Reservation number: ")


def parse_legacy_flight(entry: CalendarEntry) -> FlightRecord:
    lines = _description_lines(entry)
    uid = entry.uid
    return FlightRecord(
        flight_number=require_first(lines, get_legacy_flight_number, field="flight_number", entry_uid=uid),
        duration=require_first(lines, get_legacy_duration, field="duration", entry_uid=uid),
        seat=require_first(lines, get_legacy_seat, field="seat", entry_uid=uid),
        reservation_number=require_first(
            lines, get_legacy_reservation_number, field="reservation_number", entry_uid=uid
        ),
        origin=require_first(lines, get_legacy_origin, field="origin", entry_uid=uid),
        destination=require_first(lines, get_legacy_destination, field="destination", entry_uid=uid),
    )
