from __future__ import annotations

import re
from collections.abc import Sequence
from datetime import datetime, tzinfo

from dateutil import parser as dateutil_parser

from trip_calendar.errors import MissingFieldError
from trip_calendar.extraction.scanner import find_first, require_first, split_lines, value_after
from trip_calendar.models import CalendarEntry, Location, StayRecord


# A year glued to the month: "25 December2024"
GLUED_YEAR_RE = re.compile(r"(?<=[^\s\d])(\d{4})$")
NUMBER_RE = re.compile(r"\d+")


def fix_date(text: str) -> str:
    return GLUED_YEAR_RE.sub(r" \1", text.strip())


def parse_time(text: str) -> tuple[int, int]:
    """
    Parse "h:mm am|pm" into (hour, minute).

    Times without an am/pm marker are read as 24-hour clock values.
    """
    numbers = NUMBER_RE.findall(text)
    hour = int(numbers[0]) if numbers else 0
    minute = int(numbers[1]) if len(numbers) > 1 else 0
    lowered = text.lower()
    if "pm" in lowered and hour < 12:
        hour += 12
    elif "am" in lowered and hour == 12:
        hour = 0
    return hour, minute


def parse_check_datetime(value: str, marker: str, tz: tzinfo) -> datetime:
    """
    Parse "Wednesday 10 April2024 from 3:00 pm" style values.

    The date half goes through dateutil, so weekday names, ordinals and
    "April 13, 2024" all read. Raises ValueError when no date can be read.
    """
    date_part, _, time_part = value.partition(marker)
    date_part = fix_date(date_part)
    if not date_part:
        raise ValueError(f"No date in {value!r}")
    default = datetime.now(tz).replace(month=1, day=1, hour=0, minute=0, second=0, microsecond=0)
    day = dateutil_parser.parse(date_part, default=default, dayfirst=True)
    hour, minute = parse_time(time_part) if time_part.strip() else (0, 0)
    return day.replace(hour=hour, minute=minute)


def get_address(line: str, _index: int, _lines: Sequence[str]) -> str | None:
    if not line.startswith("Address"):
        return None
    return value_after(line, ": ") or None


def get_booking_reference(line: str, _index: int, _lines: Sequence[str]) -> str | None:
    if not line.startswith("Booking Reference"):
        return None
    value = value_after(line, ": ")
    if value == "None":
        return None
    return value


def _check_line(prefix: str, marker: str, tz: tzinfo, *, field: str, entry_uid: str | None):
    # Present but unreadable fails the entry.
    def extract(line: str, _index: int, _lines: Sequence[str]) -> datetime | None:
        if not line.lower().startswith(prefix):
            return None
        try:
            return parse_check_datetime(value_after(line, ": "), marker, tz)
        except (ValueError, OverflowError) as exc:
            raise MissingFieldError(field, entry_uid=entry_uid) from exc

    return extract


def parse_stay(entry: CalendarEntry, *, tz: tzinfo) -> StayRecord:
    """
    Extract a hotel stay. The hotel name is the second description line::

        Hotel information
        Hotel Moments Budapest
        Address: Andrássy út 8, 1061 Budapest, Hungary
        Check in: Wednesday 10 April2024 from 3:00 pm
        Check out: Saturday 13 April 2024 until 12:00 pm
        Booking Reference: 123456789
    """
    uid = entry.uid
    if not entry.summary:
        raise MissingFieldError("summary", entry_uid=uid)
    lines = split_lines(entry.description)
    if not any(lines):
        raise MissingFieldError("description", entry_uid=uid)
    if len(lines) < 2 or not lines[1]:
        raise MissingFieldError("hotel_name", entry_uid=uid)

    hotel_name = lines[1]
    address = require_first(lines, get_address, field="address", entry_uid=uid)
    check_in = find_first(lines, _check_line("check in", "from", tz, field="check_in", entry_uid=uid))
    check_out = find_first(lines, _check_line("check out", "until", tz, field="check_out", entry_uid=uid))
    booking_reference = find_first(lines, get_booking_reference)

    return StayRecord(
        hotel_name=hotel_name,
        location=Location(title=hotel_name, address=address, geo=entry.geo),
        booking_reference=booking_reference.value if booking_reference else None,
        check_in=check_in.value if check_in else None,
        check_out=check_out.value if check_out else None,
    )
