from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import timezone, tzinfo

from trip_calendar.errors import UnknownProviderError
from trip_calendar.extraction.flight import parse_flight, parse_legacy_flight
from trip_calendar.extraction.stay import parse_stay
from trip_calendar.models import CalendarEntry, EntryKind, FlightRecord, StayRecord


class TripProvider(ABC):
    """Description layout and classification rules of one booking service's export."""

    name: str
    stay_end_offset_days: int = 0

    def __init__(self, *, tz: tzinfo = timezone.utc) -> None:
        self.tz = tz

    @abstractmethod
    def classify(self, entry: CalendarEntry) -> EntryKind: ...

    @abstractmethod
    def parse_flight(self, entry: CalendarEntry) -> FlightRecord: ...

    def parse_stay(self, entry: CalendarEntry) -> StayRecord:
        return parse_stay(entry, tz=self.tz)


class TravelPerkProvider(TripProvider):
    name = "travelperk"
    flight_marker = "Departure"
    stay_marker = "Hotel information"

    def classify(self, entry: CalendarEntry) -> EntryKind:
        description = entry.description or ""
        if self.flight_marker in description:
            return EntryKind.FLIGHT
        if self.stay_marker in description:
            return EntryKind.STAY
        return EntryKind.OTHER

    def parse_flight(self, entry: CalendarEntry) -> FlightRecord:
        return parse_flight(entry)


class LegacyItineraryProvider(TripProvider):
    """
    Older itinerary export: one-line "WAW - BUD" route headers, "operated by"
    flight lines and all-day stays whose DTEND is the last night (inclusive),
    hence the extra day on stay ends. The export also carries an overall
    "Trip to ..." event which is rebuilt from the segments instead.
    """

    name = "legacy"
    stay_end_offset_days = 1
    flight_marker = "operated by"
    stay_marker = "check in"
    trip_prefix = "Trip to"

    def classify(self, entry: CalendarEntry) -> EntryKind:
        if (entry.summary or "").startswith(self.trip_prefix):
            return EntryKind.TRIP_BOUNDARY
        description = entry.description or ""
        if self.flight_marker in description:
            return EntryKind.FLIGHT
        if self.stay_marker in description.lower():
            return EntryKind.STAY
        return EntryKind.OTHER

    def parse_flight(self, entry: CalendarEntry) -> FlightRecord:
        return parse_legacy_flight(entry)


@dataclass
class ProviderRegistry:
    providers: dict[str, type[TripProvider]] = field(default_factory=dict)

    def register(self, provider: type[TripProvider]) -> None:
        self.providers[provider.name] = provider

    def create(self, name: str, *, tz: tzinfo = timezone.utc) -> TripProvider:
        key = (name or "").strip().lower()
        if key not in self.providers:
            raise UnknownProviderError(name)
        return self.providers[key](tz=tz)

    def names(self) -> list[str]:
        return sorted(self.providers)


def default_registry() -> ProviderRegistry:
    registry = ProviderRegistry()
    registry.register(TravelPerkProvider)
    registry.register(LegacyItineraryProvider)
    return registry


def get_provider(name: str, *, tz: tzinfo = timezone.utc) -> TripProvider:
    return default_registry().create(name, tz=tz)
