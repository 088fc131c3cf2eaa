"""
Appointment lifecycle management.

The lifecycle manager validates and persists bookings, reschedules and
status changes. Every write goes through the same order of checks: payload
validation, slot grid, referenced records, veterinarian availability, then
the conflict check, and only then a single store write.
"""

import datetime as dt
import logging
import uuid
from collections import Counter
from typing import Any, Dict, List, Optional, Union

from ..exceptions import (
    BusinessRuleException,
    InvalidStatusTransitionException,
    SlotConflictException,
    ValidationException,
    VeterinarianUnavailableException,
)
from ..models import (
    ACTIVE_STATUSES,
    Appointment,
    AppointmentStatus,
    can_transition,
)
from ..models.base import utc_now
from ..schemas.appointment import (
    AppointmentCreate,
    AppointmentStatusUpdate,
    AppointmentUpdate,
)
from ..schemas.validation import validate_payload
from ..store import RecordId, RecordStore, coerce_id
from ..utils.config import ConflictScope, SchedulingSettings
from ..utils.datetime_utils import format_time_of_day, get_today
from .availability import AvailabilityResolver, coerce_date
from .conflicts import ConflictDetector
from .slots import slots_from_settings

logger = logging.getLogger(__name__)

# Fields whose change moves the appointment on the calendar
SCHEDULE_FIELDS = ("date", "time", "veterinarian_id")


class AppointmentLifecycleManager:
    """
    Create, reschedule and progress appointments through their statuses.

    Transitions follow ``ALLOWED_TRANSITIONS``: pending to confirmed or
    cancelled, confirmed to completed or cancelled. Completed and cancelled
    appointments are terminal.
    """

    def __init__(
        self,
        store: RecordStore,
        settings: Optional[SchedulingSettings] = None,
        resolver: Optional[AvailabilityResolver] = None,
        detector: Optional[ConflictDetector] = None,
    ):
        self.store = store
        self.settings = settings or SchedulingSettings()
        self.resolver = resolver or AvailabilityResolver(store)
        self.detector = detector or ConflictDetector(self.settings.conflict_scope)
        self.slots = slots_from_settings(self.settings)

    async def create(self, draft: Any) -> Appointment:
        """
        Book a new appointment with status PENDING.

        Args:
            draft: ``AppointmentCreate`` or a mapping with its fields

        Raises:
            SchemaValidationException: If a required field is missing or malformed
            ValidationException: If the time is off the slot grid or a
                required veterinarian is missing
            RecordNotFoundException: If the pet, client or veterinarian is unknown
            BusinessRuleException: If the pet does not belong to the client
            VeterinarianUnavailableException: If the veterinarian cannot take the slot
            SlotConflictException: If the slot is already held
            StoreException: If the record store fails
        """
        data = validate_payload(AppointmentCreate, draft)
        self._check_veterinarian_required(data.veterinarian_id)
        self._check_on_grid(data.time)

        pet = await self.store.get("pets", data.pet_id)
        client = await self.store.get("clients", data.client_id)
        if pet.client_id is not None and pet.client_id != client.id:
            raise BusinessRuleException(
                "The pet does not belong to the selected client",
                rule_name="pet_owner",
                context={"pet_id": str(pet.id), "client_id": str(client.id)},
            )

        if data.veterinarian_id is not None:
            await self._check_veterinarian(data.veterinarian_id, data.date, data.time)

        await self._check_conflicts(data.date, data.time, data.veterinarian_id)

        fields = data.model_dump()
        fields["status"] = AppointmentStatus.PENDING
        appointment = await self.store.create("appointments", fields)

        logger.info(
            f"Created appointment {appointment.id} for pet {appointment.pet_id} on "
            f"{appointment.date} at {format_time_of_day(appointment.time)}"
        )
        return appointment

    async def update(self, appointment_id: RecordId, changes: Any) -> Appointment:
        """
        Apply a partial update to an appointment.

        Changing the date, the time or the veterinarian re-runs the
        availability and conflict checks, with the appointment itself
        excluded from the comparison set. Nothing is written unless every
        check passes.

        Raises:
            SchemaValidationException: If the changes are malformed
            RecordNotFoundException: If the appointment is unknown
            BusinessRuleException: If a terminal appointment would move
            VeterinarianUnavailableException: If the veterinarian cannot take the slot
            SlotConflictException: If the new slot is already held
        """
        fields = validate_payload(AppointmentUpdate, changes).changes()
        current = await self.store.get("appointments", appointment_id)

        moved = {
            name
            for name in SCHEDULE_FIELDS
            if name in fields and fields[name] != getattr(current, name)
        }

        if moved:
            if not current.can_be_rescheduled():
                logger.warning(
                    f"Rejected reschedule of {current.status.value} appointment {current.id}"
                )
                raise BusinessRuleException(
                    f"A {current.status.value} appointment cannot be rescheduled",
                    rule_name="terminal_reschedule",
                    context={
                        "appointment_id": str(current.id),
                        "status": current.status.value,
                        "fields": sorted(moved),
                    },
                )

            new_date = fields.get("date", current.date)
            new_time = fields.get("time", current.time)
            new_vet = fields.get("veterinarian_id", current.veterinarian_id)

            if "time" in moved:
                self._check_on_grid(new_time)
            self._check_veterinarian_required(new_vet)

            if new_vet is not None:
                await self._check_veterinarian(new_vet, new_date, new_time)

            slot_moved = bool(moved & {"date", "time"})
            vet_scoped = self.detector.scope is ConflictScope.VETERINARIAN
            if slot_moved or vet_scoped:
                await self._check_conflicts(
                    new_date, new_time, new_vet, exclude_id=current.id
                )

        appointment = await self.store.update("appointments", current.id, fields)
        logger.info(f"Updated appointment {appointment.id}: {sorted(fields)}")
        return appointment

    async def change_status(
        self,
        appointment_id: RecordId,
        status: Union[AppointmentStatus, str],
    ) -> Appointment:
        """
        Move an appointment to another status.

        No conflict check runs, since a status change cannot create a
        collision. Completing or cancelling stamps the matching timestamp.

        Raises:
            SchemaValidationException: If the status is not recognized
            RecordNotFoundException: If the appointment is unknown
            InvalidStatusTransitionException: If the transition is not allowed
        """
        requested = validate_payload(AppointmentStatusUpdate, {"status": status}).status
        current = await self.store.get("appointments", appointment_id)

        if not can_transition(current.status, requested):
            logger.warning(
                f"Rejected status change of appointment {current.id} from "
                f"{current.status.value} to {requested.value}"
            )
            raise InvalidStatusTransitionException(current.status, requested)

        fields: Dict[str, Any] = {"status": requested}
        if requested is AppointmentStatus.COMPLETED:
            fields["completed_at"] = utc_now()
        elif requested is AppointmentStatus.CANCELLED:
            fields["cancelled_at"] = utc_now()

        appointment = await self.store.update("appointments", current.id, fields)
        logger.info(
            f"Appointment {appointment.id} status {current.status.value} -> "
            f"{requested.value}"
        )
        return appointment

    async def confirm(self, appointment_id: RecordId) -> Appointment:
        return await self.change_status(appointment_id, AppointmentStatus.CONFIRMED)

    async def complete(self, appointment_id: RecordId) -> Appointment:
        return await self.change_status(appointment_id, AppointmentStatus.COMPLETED)

    async def cancel(self, appointment_id: RecordId) -> Appointment:
        """Cancel an appointment, releasing its slot. The record is kept."""
        return await self.change_status(appointment_id, AppointmentStatus.CANCELLED)

    async def purge(self, appointment_id: RecordId) -> uuid.UUID:
        """
        Physically delete an appointment with its treatment and medications.

        Administrative cleanup only; cancellation is a status change.

        Raises:
            RecordNotFoundException: If the appointment is unknown
        """
        current = await self.store.get("appointments", appointment_id)
        treatments = await self.store.list("treatments", appointment_id=current.id)

        # Treatment and medications cascade from this single delete
        removed = await self.store.delete("appointments", current.id)
        logger.warning(
            f"Purged appointment {removed} with {len(treatments)} linked treatment(s)"
        )
        return removed

    async def get(self, appointment_id: RecordId) -> Appointment:
        return await self.store.get("appointments", appointment_id)

    async def list_appointments(
        self,
        date: Optional[Union[dt.date, str]] = None,
        status: Optional[AppointmentStatus] = None,
        pet_id: Optional[RecordId] = None,
        client_id: Optional[RecordId] = None,
        veterinarian_id: Optional[RecordId] = None,
    ) -> List[Appointment]:
        """List appointments matching every given filter, by date then time."""
        filters: Dict[str, Any] = {"order_by": ["date", "time"]}
        if date is not None:
            filters["date"] = coerce_date(date)
        if status is not None:
            filters["status"] = validate_payload(
                AppointmentStatusUpdate, {"status": status}
            ).status
        if pet_id is not None:
            filters["pet_id"] = coerce_id("pets", pet_id)
        if client_id is not None:
            filters["client_id"] = coerce_id("clients", client_id)
        if veterinarian_id is not None:
            filters["veterinarian_id"] = coerce_id("veterinarians", veterinarian_id)
        return await self.store.list("appointments", **filters)

    async def upcoming(
        self,
        pet_id: Optional[RecordId] = None,
        client_id: Optional[RecordId] = None,
        from_date: Optional[dt.date] = None,
    ) -> List[Appointment]:
        """Pending and confirmed appointments from ``from_date`` (today) on."""
        start = from_date or get_today()
        filters: Dict[str, Any] = {
            "status": ACTIVE_STATUSES,
            "order_by": ["date", "time"],
        }
        if pet_id is not None:
            filters["pet_id"] = coerce_id("pets", pet_id)
        if client_id is not None:
            filters["client_id"] = coerce_id("clients", client_id)

        appointments = await self.store.list("appointments", **filters)
        return [a for a in appointments if a.date >= start]

    async def appointments_on(self, on_date: Union[dt.date, str]) -> List[Appointment]:
        """Calendar view of one day, ordered by time."""
        return await self.store.list(
            "appointments", date=coerce_date(on_date), order_by="time"
        )

    async def status_counts(self) -> Dict[AppointmentStatus, int]:
        """Number of appointments per status, every status present."""
        counts = Counter(a.status for a in await self.store.list("appointments"))
        return {status: counts.get(status, 0) for status in AppointmentStatus}

    async def find_conflicts(
        self,
        on_date: dt.date,
        at: dt.time,
        veterinarian_id: Optional[uuid.UUID] = None,
        exclude_id: Optional[uuid.UUID] = None,
    ) -> List[Appointment]:
        """Read the day's held appointments and return those colliding."""
        held = await self.store.list(
            "appointments", date=on_date, status=ACTIVE_STATUSES
        )
        return self.detector.find_conflicts(
            on_date, at, held, exclude_id=exclude_id, veterinarian_id=veterinarian_id
        )

    def _check_on_grid(self, at: dt.time) -> None:
        if at not in self.slots:
            raise ValidationException(
                f"{format_time_of_day(at)} is not a bookable slot",
                field="time",
                value=at,
            )

    def _check_veterinarian_required(self, veterinarian_id: Optional[uuid.UUID]) -> None:
        if self.settings.require_veterinarian and veterinarian_id is None:
            raise ValidationException(
                "A veterinarian must be assigned to the appointment",
                field="veterinarian_id",
            )

    async def _check_veterinarian(
        self, veterinarian_id: uuid.UUID, on_date: dt.date, at: dt.time
    ) -> None:
        vet = await self.store.get("veterinarians", veterinarian_id)

        if not vet.is_active:
            available = False
        elif self.settings.enforce_shift_availability:
            available = await self.resolver.is_available(vet.id, on_date, at)
        else:
            available = True

        if not available:
            logger.warning(
                f"Veterinarian {vet.id} unavailable on {on_date} at {format_time_of_day(at)}"
            )
            raise VeterinarianUnavailableException(vet.id, on_date, at)

    async def _check_conflicts(
        self,
        on_date: dt.date,
        at: dt.time,
        veterinarian_id: Optional[uuid.UUID],
        exclude_id: Optional[uuid.UUID] = None,
    ) -> None:
        conflicts = await self.find_conflicts(
            on_date, at, veterinarian_id=veterinarian_id, exclude_id=exclude_id
        )
        if conflicts:
            logger.warning(
                f"Slot {on_date} {format_time_of_day(at)} already held by "
                f"{[str(a.id) for a in conflicts]}"
            )
            raise SlotConflictException(
                on_date, format_time_of_day(at), [a.id for a in conflicts]
            )
