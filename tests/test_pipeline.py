from __future__ import annotations

import asyncio
from datetime import date, datetime, timezone

import pytest
from icalendar import Calendar

from conftest import FLIGHT_OUT, build_ics, stay_description
from trip_calendar.address import ResolvedAddress
from trip_calendar.errors import ConfigurationError, MissingFieldError
from trip_calendar.ics_io import read_calendar_entries
from trip_calendar.pipeline import build_trip_calendar, convert_file
from trip_calendar.providers import LegacyItineraryProvider, TravelPerkProvider


async def _budapest(_: str) -> ResolvedAddress:
    return ResolvedAddress(city="Budapest")


def test_single_hotel_collapses_into_trip_event(travelperk_ics: bytes):
    entries = read_calendar_entries(travelperk_ics)
    trip = asyncio.run(build_trip_calendar(entries, provider=TravelPerkProvider()))

    assert trip.name == "Budapest 🇭🇺"
    assert trip.summary.stay_override is True
    assert trip.flight_count == 2
    assert trip.stay_count == 1
    assert trip.skipped_count == 1

    summaries = [e.summary for e in trip.events]
    assert summaries == [
        "[LO 535] 🇵🇱 WAW → BUD 🇭🇺",
        "[LO 536] 🇭🇺 BUD → WAW 🇵🇱",
        "Budapest 🇭🇺 (10.04.2024 – 13.04.2024)",
    ]

    outbound = trip.events[0]
    assert outbound.location.title == "Warsaw Chopin Airport"
    assert outbound.categories == ("TRAVEL",)
    assert outbound.url == "https://app.travelperk.com/trips/42"
    assert "Seat: N/A" in outbound.description

    whole = trip.events[2]
    assert whole.all_day is True
    assert whole.location.title == "Hotel Moments Budapest"
    assert whole.description.startswith("Stay at Hotel Moments Budapest\nCheck In: 10.04.2024 15:00:00")


def test_different_hotels_keep_stay_events():
    ics = build_ics(
        [
            {
                "summary": "Hotel A",
                "dtstart": date(2024, 4, 10),
                "dtend": date(2024, 4, 12),
                "description": stay_description(address="Street 1, 1061 Budapest, Hungary", hotel="Hotel A"),
            },
            {
                "summary": "Hotel B",
                "dtstart": date(2024, 4, 12),
                "dtend": date(2024, 4, 14),
                "description": stay_description(address="Street 2, 1185 Budapest, Hungary", hotel="Hotel B"),
            },
        ]
    )
    trip = asyncio.run(
        build_trip_calendar(read_calendar_entries(ics), provider=TravelPerkProvider(), resolver=_budapest)
    )
    assert trip.summary.stay_override is False
    assert [e.summary for e in trip.events] == [
        "Budapest 🇭🇺 (10.04.2024 – 13.04.2024)",
        "Stay at Hotel A",
        "Stay at Hotel B",
    ]
    assert trip.events[0].location is None


def test_broken_flight_aborts_run():
    broken = FLIGHT_OUT.replace("Duration: 1h 35m\n", "")
    ics = build_ics(
        [
            {
                "summary": "Flight",
                "dtstart": datetime(2024, 4, 10, 8, 0, tzinfo=timezone.utc),
                "dtend": datetime(2024, 4, 10, 9, 35, tzinfo=timezone.utc),
                "description": broken,
            }
        ]
    )
    with pytest.raises(MissingFieldError) as exc:
        asyncio.run(build_trip_calendar(read_calendar_entries(ics), provider=TravelPerkProvider()))
    assert exc.value.field == "duration"
    assert exc.value.entry_uid == "event-0@example.com"


def test_legacy_stays_end_a_day_later():
    ics = build_ics(
        [
            {"summary": "Trip to Budapest", "dtstart": date(2024, 4, 10), "dtend": date(2024, 4, 14)},
            {
                "summary": "Hotel Moments Budapest",
                "dtstart": date(2024, 4, 10),
                "dtend": date(2024, 4, 12),
                "description": stay_description(),
            },
            {
                "summary": "Flight",
                "dtstart": datetime(2024, 4, 10, 8, 0, tzinfo=timezone.utc),
                "dtend": datetime(2024, 4, 10, 9, 35, tzinfo=timezone.utc),
                "description": "Warsaw WAW - Budapest BUD\nLOT operated by LOT - LO535\nDURATION: 1h 35m\n"
                "Seat: 12A\nReservation number: XYZ789",
            },
        ]
    )
    trip = asyncio.run(
        build_trip_calendar(read_calendar_entries(ics), provider=LegacyItineraryProvider(), resolver=_budapest)
    )
    assert trip.skipped_count == 1
    assert trip.summary.end.date() == date(2024, 4, 13)
    assert trip.summary.display_name == "Budapest 🇭🇺 (10.04.2024 – 12.04.2024)"
    assert trip.events[0].summary == "[LO535] 🇵🇱 WAW → BUD 🇭🇺"
    assert "Seat: 12A" in trip.events[0].description


def test_convert_file_writes_calendar(tmp_path, travelperk_ics: bytes):
    source = tmp_path / "in.ics"
    source.write_bytes(travelperk_ics)
    trip, path = asyncio.run(convert_file(source, tmp_path / "out" / "trip.ics", provider=TravelPerkProvider()))

    assert path.exists()
    cal = Calendar.from_ical(path.read_bytes())
    assert str(cal.get("x-wr-calname")) == trip.name
    assert len([c for c in cal.walk() if c.name == "VEVENT"]) == len(trip.events)
    assert isinstance(trip.events, tuple)
    assert (trip.flight_count, trip.stay_count, trip.skipped_count) == (2, 1, 1)


def test_convert_file_without_input_is_a_configuration_error(tmp_path):
    with pytest.raises(ConfigurationError) as exc:
        asyncio.run(convert_file(tmp_path / "missing.ics", tmp_path / "out.ics", provider=TravelPerkProvider()))
    assert "missing.ics" in str(exc.value)
    assert isinstance(exc.value.__cause__, FileNotFoundError)
    assert not (tmp_path / "out.ics").exists()
