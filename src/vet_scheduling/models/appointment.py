"""
Appointment model for the vet-scheduling package.

This module contains the Appointment SQLAlchemy model, the appointment status
enumeration and the status transition table that drives the lifecycle.
"""

import datetime as dt
import enum
import uuid
from typing import TYPE_CHECKING, Dict, FrozenSet, Optional, Tuple

from sqlalchemy import Date, DateTime, Enum, ForeignKey, Index, String, Text, Time, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel

if TYPE_CHECKING:
    from .treatment import Treatment


class AppointmentStatus(enum.Enum):
    """Enumeration of appointment statuses."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Statuses that hold a slot on the calendar
ACTIVE_STATUSES: FrozenSet[AppointmentStatus] = frozenset(
    {AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED}
)

TERMINAL_STATUSES: FrozenSet[AppointmentStatus] = frozenset(
    {AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED}
)

ALLOWED_TRANSITIONS: Dict[AppointmentStatus, FrozenSet[AppointmentStatus]] = {
    AppointmentStatus.PENDING: frozenset(
        {AppointmentStatus.CONFIRMED, AppointmentStatus.CANCELLED}
    ),
    AppointmentStatus.CONFIRMED: frozenset(
        {AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED}
    ),
    AppointmentStatus.COMPLETED: frozenset(),
    AppointmentStatus.CANCELLED: frozenset(),
}


def can_transition(
    current: AppointmentStatus, requested: AppointmentStatus
) -> bool:
    """Check whether ``requested`` is reachable from ``current`` in one step."""
    return requested in ALLOWED_TRANSITIONS.get(current, frozenset())


class Appointment(BaseModel):
    """
    Appointment model for a scheduled clinic visit.

    Binds a pet and its client to a calendar day and a time-of-day slot. The
    veterinarian may be assigned later. Status and time fields are owned by
    the appointment; pet, client and veterinarian are plain references.
    """

    __tablename__ = "appointments"

    def __init__(self, **kwargs):
        """Initialize Appointment with default values."""
        if "status" not in kwargs:
            kwargs["status"] = AppointmentStatus.PENDING

        super().__init__(**kwargs)

    pet_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("pets.id"),
        nullable=False,
        index=True,
        comment="UUID of the pet for this appointment",
    )

    client_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("clients.id"),
        nullable=False,
        index=True,
        comment="UUID of the client who owns the pet",
    )

    # Not a foreign key: deactivated veterinarians keep their history
    veterinarian_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        nullable=True,
        index=True,
        comment="UUID of the assigned veterinarian",
    )

    # Scheduling information
    date: Mapped[dt.date] = mapped_column(
        Date,
        nullable=False,
        index=True,
        comment="Calendar day of the appointment",
    )

    time: Mapped[dt.time] = mapped_column(
        Time,
        nullable=False,
        comment="Time-of-day slot of the appointment",
    )

    reason: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
        comment="Reason for the appointment or chief complaint",
    )

    status: Mapped[AppointmentStatus] = mapped_column(
        Enum(AppointmentStatus),
        nullable=False,
        default=AppointmentStatus.PENDING,
        index=True,
        comment="Current status of the appointment",
    )

    observations: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="Free text observations",
    )

    completed_at: Mapped[Optional[dt.datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="When the appointment was completed",
    )

    cancelled_at: Mapped[Optional[dt.datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="When the appointment was cancelled",
    )

    # Removed together with the appointment
    treatment: Mapped[Optional["Treatment"]] = relationship(
        "Treatment", cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("idx_appointments_date_time", "date", "time"),
        Index("idx_appointments_pet_date", "pet_id", "date"),
        Index("idx_appointments_vet_date", "veterinarian_id", "date"),
        Index("idx_appointments_status_date", "status", "date"),
    )

    def __repr__(self) -> str:
        """String representation of the Appointment model."""
        return (
            f"<Appointment(id={self.id}, pet_id={self.pet_id}, "
            f"date='{self.date}', time='{self.time}', status='{self.status.value}')>"
        )

    @property
    def is_active(self) -> bool:
        """Check if the appointment still holds its slot."""
        return self.status in ACTIVE_STATUSES

    @property
    def is_terminal(self) -> bool:
        """Check if the appointment reached a status with no further transitions."""
        return self.status in TERMINAL_STATUSES

    @property
    def slot_key(self) -> Tuple[dt.date, dt.time]:
        """The (date, time) pair that identifies the calendar slot."""
        return (self.date, self.time)

    def can_transition_to(self, status: AppointmentStatus) -> bool:
        """Check if the appointment can move to ``status``."""
        return can_transition(self.status, status)

    def can_be_rescheduled(self) -> bool:
        """Check if the date, time or veterinarian can still be changed."""
        return not self.is_terminal

    def get_status_display(self) -> str:
        """Get a human-readable status display."""
        status_display = {
            AppointmentStatus.PENDING: "Pending",
            AppointmentStatus.CONFIRMED: "Confirmed",
            AppointmentStatus.COMPLETED: "Completed",
            AppointmentStatus.CANCELLED: "Cancelled",
        }
        return status_display.get(self.status, self.status.value.title())
