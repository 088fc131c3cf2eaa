"""
Shift registry and shift administration.

``ShiftRegistry`` is an immutable snapshot of veterinarians and their
recurring weekly shifts, built per request from the record store.
``ShiftService`` performs the staff-facing writes on shifts and on the
veterinarian active flag.
"""

import logging
import uuid
from collections import defaultdict
from datetime import time
from typing import Any, Dict, Iterable, List, Optional

from ..exceptions import ValidationException
from ..models import Shift, Veterinarian, Weekday
from ..schemas.validation import validate_payload
from ..schemas.veterinarian import (
    ShiftCreate,
    ShiftUpdate,
    VeterinarianCreate,
    VeterinarianUpdate,
)
from ..store import RecordId, RecordStore, coerce_id

logger = logging.getLogger(__name__)


class ShiftRegistry:
    """Lookup of veterinarians and the shifts they own."""

    def __init__(
        self, veterinarians: Iterable[Veterinarian], shifts: Iterable[Shift]
    ) -> None:
        self._veterinarians: Dict[uuid.UUID, Veterinarian] = {
            vet.id: vet for vet in veterinarians
        }
        self._shifts: Dict[uuid.UUID, List[Shift]] = defaultdict(list)

        orphans = 0
        for shift in shifts:
            if shift.veterinarian_id not in self._veterinarians:
                orphans += 1
                continue
            self._shifts[shift.veterinarian_id].append(shift)

        for owned in self._shifts.values():
            owned.sort(key=lambda s: (s.weekday.index, s.start_time, s.end_time))

        if orphans:
            logger.debug(f"Ignored {orphans} shifts with no known veterinarian")

    @classmethod
    def from_records(
        cls, veterinarians: Iterable[Veterinarian], shifts: Iterable[Shift]
    ) -> "ShiftRegistry":
        return cls(veterinarians, shifts)

    @classmethod
    async def load(
        cls,
        store: RecordStore,
        weekday: Optional[Weekday] = None,
        active_only: bool = False,
    ) -> "ShiftRegistry":
        """
        Build a registry from the record store.

        Args:
            store: Record store to read from
            weekday: Only load shifts repeating on this weekday
            active_only: Only load active veterinarians
        """
        vet_filters: Dict[str, Any] = {"is_active": True} if active_only else {}
        shift_filters: Dict[str, Any] = {"weekday": weekday} if weekday else {}

        veterinarians = await store.list("veterinarians", **vet_filters)
        shifts = await store.list("shifts", **shift_filters)
        return cls(veterinarians, shifts)

    @property
    def veterinarians(self) -> List[Veterinarian]:
        """All known veterinarians in display order."""
        return sorted(self._veterinarians.values(), key=lambda v: v.sort_key)

    def veterinarian(self, veterinarian_id: uuid.UUID) -> Optional[Veterinarian]:
        return self._veterinarians.get(veterinarian_id)

    def shifts_for(self, veterinarian_id: uuid.UUID) -> List[Shift]:
        """Shifts of one veterinarian, ordered by weekday and start time."""
        return list(self._shifts.get(veterinarian_id, ()))

    def shifts_on(self, weekday: Weekday) -> List[Shift]:
        return [
            shift
            for owned in self._shifts.values()
            for shift in owned
            if shift.weekday == weekday
        ]

    def is_active(self, veterinarian_id: uuid.UUID) -> bool:
        """Unknown veterinarians are reported as inactive."""
        vet = self._veterinarians.get(veterinarian_id)
        return bool(vet and vet.is_active)

    def covers(self, veterinarian_id: uuid.UUID, weekday: Weekday, at: time) -> bool:
        """Check if any shift of the veterinarian includes ``at`` on ``weekday``."""
        return any(
            shift.covers(weekday, at) for shift in self._shifts.get(veterinarian_id, ())
        )

    def eligible(self, weekday: Weekday, at: time) -> List[Veterinarian]:
        """Active veterinarians with a shift covering ``at`` on ``weekday``."""
        return [
            vet
            for vet in self.veterinarians
            if vet.is_active and self.covers(vet.id, weekday, at)
        ]

    def __len__(self) -> int:
        return len(self._veterinarians)


class ShiftService:
    """Store-backed administration of veterinarians and their shifts."""

    def __init__(self, store: RecordStore):
        self.store = store

    async def add_veterinarian(self, payload: Any) -> Veterinarian:
        data = validate_payload(VeterinarianCreate, payload)
        vet = await self.store.create("veterinarians", data.model_dump())
        logger.info(f"Added veterinarian {vet.id} ({vet.full_name})")
        return vet

    async def update_veterinarian(
        self, veterinarian_id: RecordId, payload: Any
    ) -> Veterinarian:
        data = validate_payload(VeterinarianUpdate, payload)
        vet = await self.store.update("veterinarians", veterinarian_id, data.changes())
        logger.info(f"Updated veterinarian {vet.id}")
        return vet

    async def deactivate_veterinarian(self, veterinarian_id: RecordId) -> Veterinarian:
        """
        Stop offering a veterinarian for new appointments.

        Shifts and existing appointments are left untouched.
        """
        vet = await self.store.update(
            "veterinarians", veterinarian_id, {"is_active": False}
        )
        logger.info(f"Deactivated veterinarian {vet.id}")
        return vet

    async def activate_veterinarian(self, veterinarian_id: RecordId) -> Veterinarian:
        vet = await self.store.update(
            "veterinarians", veterinarian_id, {"is_active": True}
        )
        logger.info(f"Activated veterinarian {vet.id}")
        return vet

    async def list_shifts(
        self, veterinarian_id: Optional[RecordId] = None
    ) -> List[Shift]:
        filters: Dict[str, Any] = {}
        if veterinarian_id is not None:
            filters["veterinarian_id"] = coerce_id("veterinarians", veterinarian_id)
        shifts = await self.store.list("shifts", **filters)
        # Enum columns sort by name in SQL, so order by weekday position here
        return sorted(shifts, key=lambda s: (s.weekday.index, s.start_time))

    async def add_shift(self, payload: Any) -> Shift:
        """
        Add a recurring shift to an existing veterinarian.

        Raises:
            SchemaValidationException: If the payload is invalid
            RecordNotFoundException: If the veterinarian does not exist
        """
        data = validate_payload(ShiftCreate, payload)
        await self.store.get("veterinarians", data.veterinarian_id)

        shift = await self.store.create("shifts", data.model_dump())
        logger.info(
            f"Added shift {shift.id} for veterinarian {shift.veterinarian_id} on "
            f"{shift.weekday.value} {shift.start_time}-{shift.end_time}"
        )
        return shift

    async def update_shift(self, shift_id: RecordId, payload: Any) -> Shift:
        """
        Change the weekday or the window of a shift.

        Raises:
            SchemaValidationException: If the payload is invalid
            ValidationException: If the resulting window is empty
            RecordNotFoundException: If the shift does not exist
        """
        changes = validate_payload(ShiftUpdate, payload).changes()
        current = await self.store.get("shifts", shift_id)

        start = changes.get("start_time", current.start_time)
        end = changes.get("end_time", current.end_time)
        if end <= start:
            raise ValidationException(
                "End time must be after start time",
                field="end_time",
                value=end,
            )

        shift = await self.store.update("shifts", current.id, changes)
        logger.info(f"Updated shift {shift.id}: {sorted(changes)}")
        return shift

    async def remove_shift(self, shift_id: RecordId) -> uuid.UUID:
        removed = await self.store.delete("shifts", shift_id)
        logger.info(f"Removed shift {removed}")
        return removed
