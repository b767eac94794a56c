from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from trip_calendar.models import Geo, Location


CITY_FLAGS: Mapping[str, str] = MappingProxyType(
    {
        "Budapest": "🇭🇺",
        "Warsaw": "🇵🇱",
    }
)

AIRPORT_FLAGS: Mapping[str, str] = MappingProxyType(
    {
        "BUD": "🇭🇺",
        "WAW": "🇵🇱",
    }
)

# Keyed by the LOCATION text the provider puts on flight events.
KNOWN_AIRPORTS: Mapping[str, Location] = MappingProxyType(
    {
        "Warsaw Chopin": Location(
            title="Warsaw Chopin Airport",
            address="Żwirki i Wigury 1, 00-906 Warsaw, Poland",
            geo=Geo(lat=52.16972321995726, lon=20.972963854494708),
            radius=1400,
        ),
        "Budapest Ferenc Liszt International Airport": Location(
            title="Budapest Ferenc Liszt International Airport",
            address="BUD Nemzetközi Repülőtér, 1185 Budapest, Hungary",
            geo=Geo(lat=47.43856025466121, lon=19.25223143093324),
            radius=1400,
        ),
    }
)
