"""Calendar helpers built on local calendar days.

All values are plain :class:`datetime.date` objects. Canonical strings use the
``YYYY-MM-DD`` format and always describe the local calendar day; nothing in
this module converts through UTC.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta, tzinfo
from typing import Optional, Union

DATE_FORMAT = "%Y-%m-%d"

DateLike = Union[date, datetime, str]


def format_date(value: Union[date, datetime]) -> str:
    """Return the zero-padded ``YYYY-MM-DD`` string for ``value``'s local day."""

    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def parse_date(value: DateLike) -> date:
    """Parse a canonical date string into a local calendar date.

    ``date`` and ``datetime`` inputs are passed through (a ``datetime`` keeps
    its own wall-clock day). Malformed strings raise ``ValueError``.
    """

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(value.strip(), DATE_FORMAT).date()


as_date = parse_date


def local_day(value: DateLike, zone: Optional[tzinfo] = None) -> date:
    """Calendar day of ``value`` on the wall clock of ``zone``.

    Only timezone-aware datetimes are shifted; naive values and plain dates
    are taken as already local.
    """

    if zone is not None and isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone(zone).date()
    return as_date(value)


def today() -> date:
    """Return the current local calendar date."""

    return date.today()


def today_string() -> str:
    return format_date(today())


def weekday_number(day: DateLike) -> int:
    """Return the weekday with Sunday as 0 and Saturday as 6."""

    return (as_date(day).weekday() + 1) % 7


def days_between(start: DateLike, end: DateLike) -> int:
    """Whole days from ``start`` to ``end`` (negative when ``end`` is earlier)."""

    return (as_date(end) - as_date(start)).days


def date_range(start: DateLike, end: DateLike) -> list[date]:
    """Every calendar day from ``start`` through ``end`` inclusive.

    Returns an empty list when ``start`` falls after ``end``.
    """

    first = as_date(start)
    last = as_date(end)
    span = (last - first).days
    return [first + timedelta(days=offset) for offset in range(span + 1)]


def week_range(day: Optional[DateLike] = None) -> tuple[date, date]:
    """Return the Monday..Sunday week containing ``day`` (default today)."""

    anchor = as_date(day) if day is not None else today()
    monday = anchor - timedelta(days=anchor.weekday())
    return monday, monday + timedelta(days=6)


def previous_week_range(day: Optional[DateLike] = None) -> tuple[date, date]:
    monday, sunday = week_range(day)
    return monday - timedelta(days=7), sunday - timedelta(days=7)


def current_month_range(day: Optional[DateLike] = None) -> tuple[date, date]:
    """Return the first and last day of the month containing ``day``."""

    anchor = as_date(day) if day is not None else today()
    _, last_day = calendar.monthrange(anchor.year, anchor.month)
    return anchor.replace(day=1), anchor.replace(day=last_day)


__all__ = [
    "DATE_FORMAT",
    "DateLike",
    "as_date",
    "current_month_range",
    "date_range",
    "days_between",
    "format_date",
    "local_day",
    "parse_date",
    "previous_week_range",
    "today",
    "today_string",
    "week_range",
    "weekday_number",
]
