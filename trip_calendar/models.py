from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class EntryKind(StrEnum):
    FLIGHT = "FLIGHT"
    STAY = "STAY"
    TRIP_BOUNDARY = "TRIP_BOUNDARY"
    OTHER = "OTHER"


class Geo(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float
    lon: float


@dataclass(frozen=True)
class CalendarEntry:
    """One VEVENT as read from the provider export."""

    uid: str
    start: datetime
    end: datetime
    summary: str | None = None
    description: str | None = None
    location: str | None = None
    geo: Geo | None = None
    all_day: bool = False


class Location(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    address: str | None = None
    geo: Geo | None = None
    radius: float | None = None


class Airport(BaseModel):
    model_config = ConfigDict(frozen=True)

    city: str
    code: str


class FlightRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    flight_number: str
    duration: str
    reservation_number: str
    origin: Airport
    destination: Airport
    seat: str | None = None
    url: str | None = None


class StayRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    hotel_name: str
    location: Location
    booking_reference: str | None = None
    check_in: datetime | None = None
    check_out: datetime | None = None


class OutputEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime
    summary: str
    all_day: bool = False
    description: str | None = None
    location: Location | None = None
    categories: tuple[str, ...] = Field(default_factory=tuple)
    url: str | None = None


class TripSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime
    last_day: date
    display_name: str
    calendar_name: str
    stay_override: bool
