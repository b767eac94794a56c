from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date, datetime, time, timedelta
from typing import Mapping

from trip_calendar.address import AddressResolver, parse_address
from trip_calendar.errors import InvalidRangeError, ResolverFailure
from trip_calendar.lookups import CITY_FLAGS
from trip_calendar.models import OutputEvent, StayRecord, TripSummary
from trip_calendar.observability.logger import get_logger, log_event


logger = get_logger(__name__)

FALLBACK_TRIP_NAME = "Trip"


def trip_span(events: Sequence[OutputEvent]) -> tuple[datetime, datetime]:
    """Earliest start floored to midnight, latest end ceiled to the last instant of its day."""
    if not events:
        raise InvalidRangeError("Invalid whole trip event range: no flight or stay events")
    first = min(events, key=lambda e: e.start)
    last = max(events, key=lambda e: e.end)
    start = datetime.combine(first.start.date(), time.min, tzinfo=first.start.tzinfo)
    end = datetime.combine(last.end.date(), time.max, tzinfo=last.end.tzinfo)
    if end < start:
        raise InvalidRangeError(f"Invalid whole trip event range: {start.isoformat()} > {end.isoformat()}")
    return start, end


def last_trip_day(events: Sequence[OutputEvent]) -> date:
    """
    Last calendar day the trip occupies.

    An all-day event ends on the exclusive day after checkout, so the day
    before its end is the last one. A timed event, such as the flight home,
    ends on the day it lands.
    """
    if not events:
        raise InvalidRangeError("Invalid whole trip event range: no flight or stay events")
    last = max(events, key=lambda e: (e.end, e.all_day))
    if last.all_day:
        return (last.end - timedelta(days=1)).date()
    return last.end.date()


def stays_share_location(stays: Sequence[StayRecord]) -> bool:
    if len(stays) <= 1:
        return True
    first = stays[0].location
    return all(s.location == first for s in stays)


async def resolve_trip_city(
    stays: Sequence[StayRecord],
    *,
    resolver: AddressResolver = parse_address,
    city_flags: Mapping[str, str] = CITY_FLAGS,
) -> str:
    if not stays:
        return FALLBACK_TRIP_NAME
    address = stays[0].location.address
    if not address:
        return FALLBACK_TRIP_NAME

    try:
        resolved = await resolver(address)
    except Exception as exc:
        raise ResolverFailure(f"Address resolution failed for {address!r}: {exc}") from exc

    if resolved.city:
        return resolved.city
    for city in city_flags:
        if city in address:
            return city
    return FALLBACK_TRIP_NAME


def format_trip_name(
    city: str,
    first_day: date,
    last_day: date,
    *,
    city_flags: Mapping[str, str] = CITY_FLAGS,
) -> tuple[str, str]:
    """Return (display name, calendar name)."""
    flag = city_flags.get(city)
    location_part = f"{city} {flag}" if flag else city
    date_part = f"({first_day:%d.%m.%Y} – {last_day:%d.%m.%Y})"
    return f"{location_part} {date_part}", location_part


async def summarize_trip(
    flight_events: Sequence[OutputEvent],
    stay_events: Sequence[OutputEvent],
    stays: Sequence[StayRecord],
    *,
    resolver: AddressResolver = parse_address,
    city_flags: Mapping[str, str] = CITY_FLAGS,
) -> TripSummary:
    events = [*stay_events, *flight_events]
    start, end = trip_span(events)
    last_day = last_trip_day(events)
    city = await resolve_trip_city(stays, resolver=resolver, city_flags=city_flags)
    display_name, calendar_name = format_trip_name(city, start.date(), last_day, city_flags=city_flags)
    summary = TripSummary(
        start=start,
        end=end,
        last_day=last_day,
        display_name=display_name,
        calendar_name=calendar_name,
        stay_override=stays_share_location(stays),
    )
    log_event(
        logger,
        level=logging.INFO,
        message="Trip summarized",
        event="trip_summarized",
        data={
            "start": start.isoformat(),
            "end": end.isoformat(),
            "last_day": last_day.isoformat(),
            "name": display_name,
            "stay_override": summary.stay_override,
            "flights": len(flight_events),
            "stays": len(stay_events),
        },
    )
    return summary


def build_whole_trip_event(
    summary: TripSummary,
    stays: Sequence[StayRecord],
    stay_events: Sequence[OutputEvent],
) -> OutputEvent:
    # Exclusive end: midnight after the last trip day.
    end = datetime.combine(summary.last_day + timedelta(days=1), time.min, tzinfo=summary.end.tzinfo)
    if summary.stay_override and stays and stay_events:
        first_event = stay_events[0]
        description = "\n".join(p for p in (first_event.summary, first_event.description) if p)
        return OutputEvent(
            start=summary.start,
            end=end,
            summary=summary.display_name,
            all_day=True,
            location=stays[0].location,
            description=description or None,
        )
    return OutputEvent(
        start=summary.start,
        end=end,
        summary=summary.display_name,
        all_day=True,
    )
