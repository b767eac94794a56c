from __future__ import annotations

from datetime import date, datetime, timezone

import pytest
from icalendar import Calendar, Event


FLIGHT_OUT = "\n".join(
    [
        "Departure",
        "Warsaw (WAW)",
        "Arrival",
        "Budapest (BUD)",
        "Flight number: LO 535",
        "Duration: 1h 35m",
        "Booking reference: ABC123",
        'Manage your booking: <a href="https://app.travelperk.com/trips/42">Open trip</a>',
    ]
)

FLIGHT_BACK = "\n".join(
    [
        "Departure",
        "Budapest (BUD)",
        "Arrival",
        "Warsaw (WAW)",
        "Flight number: LO 536",
        "Duration: 1h 30m",
        "Booking reference: ABC124",
        'Manage your booking: <a href="https://app.travelperk.com/trips/42">Open trip</a>',
    ]
)


def stay_description(address: str = "Andrássy út 8, 1061 Budapest, Hungary", hotel: str = "Hotel Moments Budapest") -> str:
    return "\n".join(
        [
            "Hotel information",
            hotel,
            f"Address: {address}",
            "Check in: Wednesday 10 April2024 from 3:00 pm",
            "Check out: Saturday 13 April 2024 until 12:00 pm",
            "Booking Reference: None",
        ]
    )


def build_ics(events: list[dict]) -> bytes:
    cal = Calendar()
    cal.add("prodid", "-//TravelPerk//Trip export//EN")
    cal.add("version", "2.0")
    for i, props in enumerate(events):
        ev = Event()
        ev.add("uid", f"event-{i}@example.com")
        for key, value in props.items():
            ev.add(key, value)
        cal.add_component(ev)
    return cal.to_ical()


@pytest.fixture
def travelperk_ics() -> bytes:
    return build_ics(
        [
            {
                "summary": "Flight WAW → BUD",
                "dtstart": datetime(2024, 4, 10, 8, 0, tzinfo=timezone.utc),
                "dtend": datetime(2024, 4, 10, 9, 35, tzinfo=timezone.utc),
                "description": FLIGHT_OUT,
                "location": "Warsaw Chopin",
            },
            {
                "summary": "Hotel Moments Budapest",
                "dtstart": date(2024, 4, 10),
                "dtend": date(2024, 4, 13),
                "description": stay_description(),
                "geo": (47.5009, 19.0578),
            },
            {
                "summary": "Flight BUD → WAW",
                "dtstart": datetime(2024, 4, 13, 17, 0, tzinfo=timezone.utc),
                "dtend": datetime(2024, 4, 13, 18, 30, tzinfo=timezone.utc),
                "description": FLIGHT_BACK,
                "location": "Budapest Ferenc Liszt International Airport",
            },
            {
                "summary": "Dinner",
                "dtstart": datetime(2024, 4, 11, 19, 0, tzinfo=timezone.utc),
                "dtend": datetime(2024, 4, 11, 21, 0, tzinfo=timezone.utc),
            },
        ]
    )
