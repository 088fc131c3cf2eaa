"""
Bookable time slots of a clinic day.

The catalog is a fixed grid, 08:00 through 19:30 every 30 minutes by
default. It is derived on demand and never persisted.
"""

import logging
from datetime import time, timedelta
from typing import Any, Iterable, List, Optional, Union

from ..exceptions import ConfigurationException, ValidationException
from ..utils.datetime_utils import format_time_of_day, iter_day_slots, parse_time_of_day

logger = logging.getLogger(__name__)

DEFAULT_SLOT_START = time(8, 0)
DEFAULT_SLOT_END = time(19, 30)
DEFAULT_SLOT_INTERVAL = timedelta(minutes=30)


def generate_slots(
    start: Union[time, str] = DEFAULT_SLOT_START,
    end: Union[time, str] = DEFAULT_SLOT_END,
    interval: Union[timedelta, int] = DEFAULT_SLOT_INTERVAL,
) -> List[time]:
    """
    Generate the ordered slot catalog of one clinic day.

    Both ends are inclusive. With the defaults the result has 24 entries,
    ``08:00`` first and ``19:30`` last.

    Args:
        start: First slot of the day
        end: Last possible slot of the day
        interval: Step between slots, a timedelta or whole minutes

    Returns:
        Strictly ascending list of times of day

    Raises:
        ConfigurationException: If the bounds or the interval are invalid
    """
    if isinstance(interval, int) and not isinstance(interval, bool):
        interval = timedelta(minutes=interval)
    if not isinstance(interval, timedelta) or interval <= timedelta(0):
        raise ConfigurationException(
            "Slot interval must be a positive duration",
            config_key="slot_interval_minutes",
            config_value=str(interval),
        )

    try:
        start = parse_time_of_day(start)
        end = parse_time_of_day(end)
    except ValueError as e:
        raise ConfigurationException(f"Invalid slot boundary: {e}")

    if end < start:
        raise ConfigurationException(
            f"Slot end {format_time_of_day(end)} is before slot start "
            f"{format_time_of_day(start)}",
            config_key="slot_end",
            config_value=format_time_of_day(end),
        )

    slots = list(iter_day_slots(start, end, interval))
    logger.debug(f"Generated {len(slots)} slots from {start} to {end} every {interval}")
    return slots


def slots_from_settings(settings: Any) -> List[time]:
    """Generate the slot catalog described by a ``SchedulingSettings``."""
    return generate_slots(
        settings.slot_start, settings.slot_end, settings.slot_interval_minutes
    )


def format_slot(slot: time) -> str:
    """Format a slot as ``HH:MM``."""
    return format_time_of_day(slot)


def parse_slot(value: Union[time, str], field: str = "time") -> time:
    """
    Parse a candidate slot value.

    Raises:
        ValidationException: If the value is not a time of day
    """
    try:
        return parse_time_of_day(value)
    except ValueError as e:
        raise ValidationException(str(e), field=field, value=value)


def is_valid_slot(
    value: Union[time, str], slots: Optional[Iterable[time]] = None
) -> bool:
    """Check whether ``value`` is one of the bookable slots."""
    try:
        candidate = parse_time_of_day(value)
    except ValueError:
        return False
    catalog = generate_slots() if slots is None else slots
    return candidate in catalog
