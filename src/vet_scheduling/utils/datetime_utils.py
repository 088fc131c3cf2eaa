"""
DateTime utilities for clinic scheduling.

This module provides parsing and formatting of calendar dates and
time-of-day values, slot arithmetic on a fixed daily grid, and UTC
timestamp helpers.
"""

from datetime import date, datetime, time, timedelta
from typing import Iterator, Union
from zoneinfo import ZoneInfo

TimeLike = Union[time, str]
DateLike = Union[date, datetime, str]

_TIME_FORMATS = ("%H:%M", "%H:%M:%S")


def get_current_utc() -> datetime:
    """Get the current UTC datetime."""
    return datetime.now(ZoneInfo("UTC"))


def get_today(timezone: str = "UTC") -> date:
    """Get the current calendar date in a specific timezone."""
    return datetime.now(ZoneInfo(timezone)).date()


def parse_time_of_day(value: TimeLike) -> time:
    """
    Parse a time-of-day from a ``time`` or an ``HH:MM`` / ``HH:MM:SS`` string.

    Args:
        value: The value to parse

    Returns:
        A naive ``time`` without microseconds

    Raises:
        ValueError: If the value is not a valid time of day
    """
    if isinstance(value, datetime):
        raise ValueError("Expected a time of day, got a datetime")
    if isinstance(value, time):
        return value.replace(microsecond=0, tzinfo=None)
    if not isinstance(value, str):
        raise ValueError(f"Expected a time of day, got {type(value).__name__}")

    text = value.strip()
    for fmt in _TIME_FORMATS:
        try:
            return datetime.strptime(text, fmt).time()
        except ValueError:
            continue
    raise ValueError(f"Invalid time of day '{value}', expected HH:MM")


def format_time_of_day(value: time) -> str:
    """Format a time of day as ``HH:MM``."""
    return value.strftime("%H:%M")


def parse_date(value: DateLike) -> date:
    """
    Parse a calendar date from a ``date``, ``datetime`` or ISO string.

    Raises:
        ValueError: If the value is not a valid date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Expected a date, got {type(value).__name__}")
    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    # A full ISO datetime is accepted; anything else after the date is not
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        raise ValueError(f"Invalid date '{value}', expected YYYY-MM-DD")


def iter_day_slots(start: time, end: time, interval: timedelta) -> Iterator[time]:
    """
    Yield times from ``start`` to ``end`` inclusive, ``interval`` apart.

    The walk stays inside one calendar day; it stops instead of wrapping
    past midnight.
    """
    anchor = date(2000, 1, 1)
    current = datetime.combine(anchor, start)
    last = datetime.combine(anchor, end)

    while current <= last and current.date() == anchor:
        yield current.time()
        current += interval
