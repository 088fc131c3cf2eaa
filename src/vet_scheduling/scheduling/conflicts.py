"""
Double-booking detection.

Only appointments that still hold their slot (pending or confirmed) take
part; completed and cancelled ones never conflict.
"""

import datetime as dt
import logging
import uuid
from typing import Iterable, List, Optional

from ..models import Appointment
from ..utils.config import ConflictScope

logger = logging.getLogger(__name__)


class ConflictDetector:
    """
    Decide whether a candidate slot collides with existing appointments.

    In CLINIC scope the key is (date, time). In VETERINARIAN scope the key
    is (date, time, veterinarian); an appointment without a veterinarian
    holds the slot for everyone.
    """

    def __init__(self, scope: ConflictScope = ConflictScope.CLINIC):
        self.scope = ConflictScope(scope)

    def find_conflicts(
        self,
        on_date: dt.date,
        at: dt.time,
        appointments: Iterable[Appointment],
        exclude_id: Optional[uuid.UUID] = None,
        veterinarian_id: Optional[uuid.UUID] = None,
    ) -> List[Appointment]:
        """Return the appointments colliding with the candidate slot."""
        conflicts = [
            appointment
            for appointment in appointments
            if appointment.id != exclude_id
            and appointment.is_active
            and appointment.date == on_date
            and appointment.time == at
            and self._same_resource(appointment.veterinarian_id, veterinarian_id)
        ]
        if conflicts:
            logger.debug(
                f"Slot {on_date} {at} collides with "
                f"{[str(a.id) for a in conflicts]} ({self.scope.value} scope)"
            )
        return conflicts

    def has_conflict(
        self,
        on_date: dt.date,
        at: dt.time,
        appointments: Iterable[Appointment],
        exclude_id: Optional[uuid.UUID] = None,
        veterinarian_id: Optional[uuid.UUID] = None,
    ) -> bool:
        return bool(
            self.find_conflicts(on_date, at, appointments, exclude_id, veterinarian_id)
        )

    def _same_resource(
        self, existing: Optional[uuid.UUID], candidate: Optional[uuid.UUID]
    ) -> bool:
        if self.scope is ConflictScope.CLINIC:
            return True
        if existing is None or candidate is None:
            return True
        return existing == candidate
