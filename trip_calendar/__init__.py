from .errors import (
    CalendarFormatError,
    ConfigurationError,
    InvalidRangeError,
    MissingFieldError,
    ResolverFailure,
    TripCalendarError,
    UnknownProviderError,
)
from .pipeline import TripCalendar, build_trip_calendar, convert_file
from .providers import LegacyItineraryProvider, TravelPerkProvider, TripProvider, get_provider

__all__ = [
    "CalendarFormatError",
    "ConfigurationError",
    "InvalidRangeError",
    "MissingFieldError",
    "ResolverFailure",
    "TripCalendarError",
    "UnknownProviderError",
    "TripCalendar",
    "build_trip_calendar",
    "convert_file",
    "LegacyItineraryProvider",
    "TravelPerkProvider",
    "TripProvider",
    "get_provider",
]
