from __future__ import annotations

import asyncio

import pytest

from trip_calendar.address import ResolvedAddress, parse_address, parse_address_parts


def test_postcode_before_city():
    out = parse_address_parts("Andrássy út 8, 1061 Budapest, Hungary")
    assert out == ResolvedAddress(
        street_address="Andrássy út 8",
        city="Budapest",
        state=None,
        postal_code="1061",
        country="Hungary",
    )


def test_dashed_postcode():
    out = parse_address_parts("Żwirki i Wigury 1, 00-906 Warsaw, Poland")
    assert out.city == "Warsaw"
    assert out.postal_code == "00-906"
    assert out.country == "Poland"


def test_us_state_and_zip():
    out = parse_address_parts("1 Main St, Springfield, IL 62701, USA")
    assert out.street_address == "1 Main St"
    assert out.city == "Springfield"
    assert out.state == "IL"
    assert out.postal_code == "62701"
    assert out.country == "USA"


def test_unplaceable_city_is_none():
    out = parse_address_parts("Somewhere near the river")
    assert out.city is None


def test_blank_address_raises():
    with pytest.raises(ValueError):
        asyncio.run(parse_address("   "))


def test_parse_address_is_awaitable():
    out = asyncio.run(parse_address("Andrássy út 8, 1061 Budapest, Hungary"))
    assert out.city == "Budapest"
