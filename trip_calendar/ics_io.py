from __future__ import annotations

import hashlib
from collections.abc import Sequence
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from pathlib import Path

from icalendar import Calendar, Event

from trip_calendar.errors import CalendarFormatError
from trip_calendar.models import CalendarEntry, Geo, OutputEvent


PRODID = "-//trip-calendar//EN"


def _to_datetime(value: date | datetime, tz: tzinfo) -> datetime:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=tz)
        return value.astimezone(tz)
    return datetime.combine(value, time.min, tzinfo=tz)


def _text(component: Event, key: str) -> str | None:
    value = component.get(key)
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


def _geo(component: Event) -> Geo | None:
    value = component.get("geo")
    if value is None:
        return None
    return Geo(lat=float(value.latitude), lon=float(value.longitude))


def read_calendar_entries(ics_bytes: bytes | str, *, tz: tzinfo = timezone.utc) -> list[CalendarEntry]:
    try:
        cal = Calendar.from_ical(ics_bytes)
    except ValueError as exc:
        raise CalendarFormatError(f"Input is not a readable iCalendar file: {exc}") from exc
    entries: list[CalendarEntry] = []
    for index, component in enumerate(cal.walk("VEVENT")):
        dtstart = component.get("dtstart")
        if dtstart is None:
            continue
        raw_start = dtstart.dt
        all_day = not isinstance(raw_start, datetime)
        start = _to_datetime(raw_start, tz)

        if component.get("dtend") is not None:
            end = _to_datetime(component.get("dtend").dt, tz)
        elif component.get("duration") is not None:
            end = start + component.get("duration").dt
        else:
            end = start + timedelta(days=1) if all_day else start

        entries.append(
            CalendarEntry(
                uid=_text(component, "uid") or f"entry-{index}",
                start=start,
                end=end,
                summary=_text(component, "summary"),
                description=_text(component, "description"),
                location=_text(component, "location"),
                geo=_geo(component),
                all_day=all_day,
            )
        )
    return entries


def _uid(event: OutputEvent, position: int) -> str:
    # Position keeps same-start, same-summary events apart.
    seed = f"{position}|{event.start.isoformat()}|{event.summary}"
    return hashlib.sha1(seed.encode("utf-8")).hexdigest() + "@trip-calendar"


def _to_event(event: OutputEvent, position: int) -> Event:
    ev = Event()
    ev.add("uid", _uid(event, position))
    ev.add("dtstamp", datetime.now(timezone.utc))
    ev.add("summary", event.summary)
    if event.all_day:
        start_day = event.start.date()
        end_day = event.end.date()
        if end_day <= start_day:
            end_day = start_day + timedelta(days=1)
        ev.add("dtstart", start_day)
        ev.add("dtend", end_day)
    else:
        ev.add("dtstart", event.start)
        ev.add("dtend", event.end)
    if event.description:
        ev.add("description", event.description)
    if event.location is not None:
        loc = event.location
        ev.add("location", "\n".join(p for p in (loc.title, loc.address) if p))
        if loc.geo is not None:
            ev.add("geo", (loc.geo.lat, loc.geo.lon))
    if event.categories:
        ev.add("categories", list(event.categories))
    if event.url:
        ev.add("url", event.url)
    return ev


def build_calendar(*, name: str, events: Sequence[OutputEvent]) -> bytes:
    cal = Calendar()
    cal.add("prodid", PRODID)
    cal.add("version", "2.0")
    cal.add("x-wr-calname", name)
    for position, event in enumerate(events):
        cal.add_component(_to_event(event, position))
    return cal.to_ical()


def write_ics_bytes(*, ics_bytes: bytes, path: Path) -> Path:
    path = path.resolve()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(ics_bytes)
    return path
