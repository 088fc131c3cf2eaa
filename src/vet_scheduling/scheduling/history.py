"""
Per-pet clinical history.

Joins a pet's appointments with their treatments and medications into an
ordered sequence of visit records. The join is a pure function; the
aggregator only reads its inputs from the record store.
"""

import enum
import logging
import uuid
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Union

from ..exceptions import ValidationException
from ..models import Appointment, Medication, Treatment, Veterinarian
from ..schemas.history import MedicationEntry, TreatmentSummary, VisitRecord
from ..store import RecordId, RecordStore

logger = logging.getLogger(__name__)


class HistoryOrder(enum.Enum):
    """Ordering of visits in a clinical history."""

    CHRONOLOGICAL = "chronological"
    MOST_RECENT_FIRST = "most_recent_first"

    @classmethod
    def parse(cls, value: Union["HistoryOrder", str]) -> "HistoryOrder":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            allowed = ", ".join(member.value for member in cls)
            raise ValidationException(
                f"History order must be one of: {allowed}",
                field="order",
                value=value,
            )


def _summarize_treatment(
    treatment: Treatment, medications: List[Medication]
) -> TreatmentSummary:
    return TreatmentSummary(
        id=treatment.id,
        diagnosis=treatment.diagnosis,
        indicated_treatment=treatment.indicated_treatment,
        recommendations=treatment.recommendations,
        medications=[
            MedicationEntry(name=m.name, dosage=m.dosage, duration=m.duration)
            for m in sorted(medications, key=lambda m: m.position)
        ],
    )


def build_history(
    pet_id: uuid.UUID,
    appointments: Iterable[Appointment],
    treatments: Iterable[Treatment],
    medications: Iterable[Medication],
    order: Union[HistoryOrder, str] = HistoryOrder.CHRONOLOGICAL,
    veterinarians: Optional[Iterable[Veterinarian]] = None,
) -> List[VisitRecord]:
    """
    Build the visit records of one pet.

    Appointments of other pets are ignored. Visits are sorted by date then
    time; a visit without a treatment is kept with ``treatment=None``.

    Args:
        pet_id: Pet whose history is built
        appointments: Appointment set, may include other pets
        treatments: Treatment set, at most one per appointment
        medications: Medication set, grouped by treatment
        order: Ascending or most recent first
        veterinarians: Optional veterinarians used to fill display names

    Returns:
        Ordered list of visit records
    """
    order = HistoryOrder.parse(order)

    treatment_by_appointment: Dict[uuid.UUID, Treatment] = {
        t.appointment_id: t for t in treatments
    }
    medications_by_treatment: Dict[uuid.UUID, List[Medication]] = defaultdict(list)
    for medication in medications:
        medications_by_treatment[medication.treatment_id].append(medication)
    vet_names: Dict[uuid.UUID, str] = {
        vet.id: vet.display_name for vet in (veterinarians or ())
    }

    visits = sorted(
        (a for a in appointments if a.pet_id == pet_id),
        key=lambda a: (a.date, a.time, str(a.id)),
        reverse=order is HistoryOrder.MOST_RECENT_FIRST,
    )

    records = []
    for appointment in visits:
        treatment = treatment_by_appointment.get(appointment.id)
        records.append(
            VisitRecord(
                appointment_id=appointment.id,
                date=appointment.date,
                time=appointment.time,
                reason=appointment.reason,
                status=appointment.status,
                observations=appointment.observations,
                veterinarian_id=appointment.veterinarian_id,
                veterinarian_name=vet_names.get(appointment.veterinarian_id),
                treatment=(
                    _summarize_treatment(
                        treatment, medications_by_treatment.get(treatment.id, [])
                    )
                    if treatment is not None
                    else None
                ),
            )
        )
    return records


class HistoryAggregator:
    """Read a pet's history from the record store."""

    def __init__(self, store: RecordStore):
        self.store = store

    async def get_pet_history(
        self,
        pet_id: RecordId,
        order: Union[HistoryOrder, str] = HistoryOrder.CHRONOLOGICAL,
        limit: Optional[int] = None,
    ) -> List[VisitRecord]:
        """
        Return the visit records of a pet.

        Args:
            pet_id: Pet identifier
            order: Ascending or most recent first
            limit: Keep only the first ``limit`` records after ordering

        Raises:
            RecordNotFoundException: If the pet is unknown
            ValidationException: If ``order`` or ``limit`` is invalid
        """
        order = HistoryOrder.parse(order)
        if limit is not None and limit < 0:
            raise ValidationException(
                "History limit must not be negative", field="limit", value=limit
            )

        pet = await self.store.get("pets", pet_id)
        appointments = await self.store.list("appointments", pet_id=pet.id)
        if not appointments:
            return []

        treatments = await self.store.list(
            "treatments", appointment_id=[a.id for a in appointments]
        )
        medications = (
            await self.store.list(
                "medications", treatment_id=[t.id for t in treatments]
            )
            if treatments
            else []
        )
        vet_ids = {a.veterinarian_id for a in appointments if a.veterinarian_id}
        veterinarians = (
            await self.store.list("veterinarians", id=list(vet_ids)) if vet_ids else []
        )

        records = build_history(
            pet.id, appointments, treatments, medications, order, veterinarians
        )
        logger.debug(f"Built {len(records)} visit records for pet {pet.id}")
        return records[:limit] if limit is not None else records
