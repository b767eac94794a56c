from __future__ import annotations


class TripCalendarError(Exception):
    """Base class for every failure that aborts a conversion run."""


class MissingFieldError(TripCalendarError):
    def __init__(self, field: str, *, entry_uid: str | None = None) -> None:
        self.field = field
        self.entry_uid = entry_uid
        where = f" (entry {entry_uid})" if entry_uid else ""
        super().__init__(f"Missing required field '{field}'{where}")


class InvalidRangeError(TripCalendarError):
    pass


class ResolverFailure(TripCalendarError):
    pass


class UnknownProviderError(TripCalendarError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown trip provider: {name}")


class ConfigurationError(TripCalendarError):
    """A setting (time zone, input path) cannot be used as given."""


class CalendarFormatError(TripCalendarError):
    pass
