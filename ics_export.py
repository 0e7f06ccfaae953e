"""Export available (non-blocked) dates as an iCalendar (.ics) file.

Each date becomes one all-day TENTATIVE event, so recipients can import
the file into Google, Apple or Outlook calendars (RFC 5545).
"""

import re
from datetime import date
from typing import Iterable

from ics import Calendar, Event
from ics.attendee import Organizer

from calendar_logic import date_range, day_of_week

_CONTROL = re.compile(r"[\x00-\x1f\x7f]+")
_EMAIL = re.compile(r"[^@\s]+@[^@\s]+")


def available_dates(blocked, start, end, weekdays_only: bool = False) -> list[date]:
    """Dates in the inclusive range that are not in *blocked*."""
    return [
        d for d in date_range(start, end)
        if d not in blocked and not (weekdays_only and day_of_week(d) in (0, 6))
    ]


def _clean(text: str) -> str:
    # Line breaks and other control characters collapse to one space
    return _CONTROL.sub(" ", text).strip()


def generate_ics(dates: Iterable[date], name: str, email: str | None = None) -> str:
    """Return calendar text with one all-day event per available date."""
    name = _clean(name)
    organizer = None
    if email:
        if not _EMAIL.fullmatch(email):
            raise ValueError(f"invalid organizer email: {email!r}")
        organizer = Organizer(email=email, common_name=name or None)

    events = []
    for d in sorted(set(dates)):
        event = Event(
            name=f"Available - {name}",
            begin=d,
            uid=f"{d:%Y%m%d}-availability@availability-calendar",
            description="Available for booking",
            categories={"Availability"},
        )
        event.make_all_day()
        event.status = "TENTATIVE"
        event.transparent = True
        if organizer is not None:
            event.organizer = organizer
        events.append(event)

    return Calendar(events=events).serialize()


def write_ics(content: str, path: str) -> None:
    """Write calendar text to *path*."""
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(content)
