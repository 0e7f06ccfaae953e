"""Pure calendar calculations — no UI dependencies."""

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta

DAY_ABBR = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

GRID_DAYS = 42


class InvalidDateError(ValueError):
    """Raised when a value cannot be used as a calendar date."""


@dataclass(frozen=True)
class CalendarDay:
    date: date
    is_current_month: bool
    is_today: bool
    day_of_week: int  # 0 = Sunday


def to_calendar_date(value) -> date:
    """Return the wall-clock calendar date of a date or datetime.

    Time of day and tzinfo are dropped without any conversion, so
    2026-01-15T23:30-08:00 stays 2026-01-15.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise InvalidDateError(f"not a calendar date: {value!r}")


def day_of_week(d: date) -> int:
    """Weekday index with 0 = Sunday … 6 = Saturday."""
    return d.isoweekday() % 7


def build_grid(reference, today: date | None = None) -> list[CalendarDay]:
    """Return the 42-day (6×7) grid for the month containing *reference*.

    The grid starts on the Sunday on or before the 1st and is padded with
    the following days until it holds exactly 42 entries.
    """
    ref = to_calendar_date(reference)
    today = to_calendar_date(today) if today is not None else date.today()

    month_start = ref.replace(day=1)
    month_end = ref.replace(day=calendar.monthrange(ref.year, ref.month)[1])
    try:
        grid_start = month_start - timedelta(days=day_of_week(month_start))
        grid_end = month_end + timedelta(days=6 - day_of_week(month_end))

        days = [grid_start + timedelta(days=i)
                for i in range((grid_end - grid_start).days + 1)]
        while len(days) < GRID_DAYS:
            days.append(days[-1] + timedelta(days=1))
    except OverflowError:
        raise InvalidDateError(
            f"grid for {ref:%Y-%m} falls outside the supported date range") from None

    return [
        CalendarDay(
            date=d,
            is_current_month=d.month == ref.month,
            is_today=d == today,
            day_of_week=day_of_week(d),
        )
        for d in days[:GRID_DAYS]
    ]


def month_grid(year: int, month: int, today: date | None = None) -> list[CalendarDay]:
    """Integer entry point for build_grid; validates year and month."""
    try:
        first = date(year, month, 1)
    except (TypeError, ValueError) as exc:
        raise InvalidDateError(f"invalid month {year!r}-{month!r}: {exc}") from exc
    return build_grid(first, today=today)


def group_into_weeks(days: list[CalendarDay]) -> list[list[CalendarDay]]:
    """Split a flat grid into rows of 7."""
    return [days[i:i + 7] for i in range(0, len(days), 7)]


def prev_month(year: int, month: int) -> tuple[int, int]:
    """Return (year, month) for one month earlier."""
    if month == 1:
        return year - 1, 12
    return year, month - 1


def next_month(year: int, month: int) -> tuple[int, int]:
    """Return (year, month) for one month later."""
    if month == 12:
        return year + 1, 1
    return year, month + 1


def date_range(start, end) -> list[date]:
    """Inclusive ascending run of dates; reversed ends are swapped."""
    a, b = to_calendar_date(start), to_calendar_date(end)
    if b < a:
        a, b = b, a
    return [a + timedelta(days=i) for i in range((b - a).days + 1)]


def dates_in_month(reference) -> list[date]:
    ref = to_calendar_date(reference)
    last = calendar.monthrange(ref.year, ref.month)[1]
    return [ref.replace(day=n) for n in range(1, last + 1)]


def date_key(d) -> str:
    """ISO storage key (YYYY-MM-DD)."""
    return to_calendar_date(d).isoformat()


def parse_date_key(key: str) -> date:
    """Inverse of date_key."""
    try:
        return date.fromisoformat(key)
    except (TypeError, ValueError) as exc:
        raise InvalidDateError(f"malformed date key: {key!r}") from exc
