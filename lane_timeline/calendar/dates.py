"""Calendar arithmetic helpers shared by the layout engine."""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from typing import Final

ISO_FORMAT: Final[str] = "%Y-%m-%d"
WEEK_LENGTH: Final[int] = 7


def parse_date(value: str | date) -> date:
    """Return the calendar date for an ISO ``YYYY-MM-DD`` string.

    ``date`` instances pass through unchanged and ``datetime`` values are
    truncated to their date component. Anything else raises :class:`ValueError`.
    """

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Expected an ISO date string, got {type(value).__name__}")
    try:
        return datetime.strptime(value.strip(), ISO_FORMAT).date()
    except ValueError as exc:
        raise ValueError(f"Invalid date format: {value!r}") from exc


def format_date(value: date) -> str:
    return value.strftime(ISO_FORMAT)


def add_days(value: date, days: int) -> date:
    return value + timedelta(days=days)


def add_weeks(value: date, weeks: int) -> date:
    return value + timedelta(weeks=weeks)


def add_months(value: date, months: int) -> date:
    """Shift ``value`` by whole calendar months, clamping the day of month."""

    month_index = value.year * 12 + (value.month - 1) + months
    year, month = divmod(month_index, 12)
    day = min(value.day, calendar.monthrange(year, month + 1)[1])
    return date(year, month + 1, day)


def start_of_week(value: date) -> date:
    """Return the Monday of the week containing ``value``."""

    return value - timedelta(days=value.weekday())


def end_of_week(value: date) -> date:
    """Return the Sunday of the week containing ``value``."""

    return start_of_week(value) + timedelta(days=WEEK_LENGTH - 1)


def start_of_month(value: date) -> date:
    return value.replace(day=1)


def end_of_month(value: date) -> date:
    return value.replace(day=days_in_month(value))


def days_in_month(value: date) -> int:
    return calendar.monthrange(value.year, value.month)[1]


def days_between(start: date, end: date) -> int:
    """Signed number of calendar days from ``start`` to ``end``."""

    return (end - start).days


def inclusive_days(start: date, end: date) -> int:
    """Number of calendar days covered by ``start..end`` counting both ends."""

    return days_between(start, end) + 1


def months_between(start: date, end: date) -> int:
    """Signed calendar month difference, ignoring the day of month."""

    return (end.year - start.year) * 12 + (end.month - start.month)


def is_weekend(value: date) -> bool:
    return value.weekday() >= 5


def is_month_start(value: date) -> bool:
    return value.day == 1


__all__ = [
    "ISO_FORMAT",
    "WEEK_LENGTH",
    "add_days",
    "add_months",
    "add_weeks",
    "days_between",
    "days_in_month",
    "end_of_month",
    "end_of_week",
    "format_date",
    "inclusive_days",
    "is_month_start",
    "is_weekend",
    "months_between",
    "parse_date",
    "start_of_month",
    "start_of_week",
]
