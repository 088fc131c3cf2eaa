"""
Availability resolution.

Answers which veterinarians can take an appointment at a candidate date
and time: active ones owning a shift on that weekday whose window includes
the time, boundaries inclusive.
"""

import datetime as dt
import logging
from typing import Dict, Iterable, List, Optional, Union

from ..exceptions import ValidationException
from ..models import Veterinarian, Weekday
from ..store import RecordId, RecordStore, coerce_id
from ..utils.datetime_utils import parse_date
from .shifts import ShiftRegistry
from .slots import generate_slots, parse_slot

logger = logging.getLogger(__name__)


def coerce_date(value: Union[dt.date, str], field: str = "date") -> dt.date:
    """
    Parse a candidate date.

    Raises:
        ValidationException: If the value is not a calendar date
    """
    try:
        return parse_date(value)
    except ValueError as e:
        raise ValidationException(str(e), field=field, value=value)


def is_missing_time(at: Optional[Union[dt.time, str]]) -> bool:
    """A candidate time that is absent or blank counts as not supplied."""
    return at is None or (isinstance(at, str) and not at.strip())


def resolve_for_registry(
    registry: ShiftRegistry,
    on_date: dt.date,
    at: Optional[Union[dt.time, str]],
) -> List[Veterinarian]:
    """
    Resolve eligible veterinarians from an already loaded registry.

    Returns an empty list when no time is given. The result is ordered by
    last name, first name, then id.
    """
    if is_missing_time(at):
        return []
    return registry.eligible(Weekday.from_date(on_date), parse_slot(at))


class AvailabilityResolver:
    """Resolve eligible veterinarians against the record store."""

    def __init__(self, store: RecordStore):
        self.store = store

    async def resolve(
        self,
        on_date: Union[dt.date, str],
        at: Optional[Union[dt.time, str]],
    ) -> List[Veterinarian]:
        """
        Return the veterinarians able to serve ``at`` on ``on_date``.

        No candidate time yields an empty list without reading the store;
        zero eligible veterinarians is a valid result, not an error.
        """
        if is_missing_time(at):
            return []

        day = coerce_date(on_date)
        slot = parse_slot(at)
        weekday = Weekday.from_date(day)

        registry = await ShiftRegistry.load(self.store, weekday=weekday, active_only=True)
        eligible = resolve_for_registry(registry, day, slot)

        logger.debug(
            f"Resolved {len(eligible)} veterinarians for {day} ({weekday.value}) at {slot}"
        )
        return eligible

    async def is_available(
        self,
        veterinarian_id: RecordId,
        on_date: Union[dt.date, str],
        at: Union[dt.time, str],
    ) -> bool:
        """Check whether one veterinarian is eligible at a date and time."""
        vet_id = coerce_id("veterinarians", veterinarian_id)
        eligible = await self.resolve(on_date, at)
        return any(vet.id == vet_id for vet in eligible)

    async def availability_grid(
        self,
        on_date: Union[dt.date, str],
        slots: Optional[Iterable[dt.time]] = None,
    ) -> Dict[dt.time, List[Veterinarian]]:
        """
        Map every slot of a day to its eligible veterinarians.

        Reads the store once for the whole day.
        """
        day = coerce_date(on_date)
        weekday = Weekday.from_date(day)
        catalog = list(slots) if slots is not None else generate_slots()

        registry = await ShiftRegistry.load(self.store, weekday=weekday, active_only=True)
        return {slot: resolve_for_registry(registry, day, slot) for slot in catalog}

