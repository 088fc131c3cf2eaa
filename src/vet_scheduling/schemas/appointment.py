"""
Appointment Pydantic schemas for API validation and serialization.

This module contains Pydantic schemas for Appointment model validation,
including create, update, status change and response schemas. Time-of-day
fields accept ``datetime.time`` values or ``HH:MM`` strings.
"""

import datetime as dt
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..models.appointment import AppointmentStatus
from ..utils.datetime_utils import format_time_of_day, parse_time_of_day


def parse_status(value: Any) -> Any:
    """
    Parse an appointment status from a member, its value or its name.

    Matching is case-insensitive, so ``"Cancelled"``, ``"cancelled"`` and
    ``"CANCELLED"`` are all accepted. Unrecognized values are returned as
    given so pydantic reports them.
    """
    if isinstance(value, str):
        normalized = value.strip().lower()
        for status in AppointmentStatus:
            if normalized in (status.value, status.name.lower()):
                return status
    return value


def coerce_time_field(value: Any) -> Any:
    """Parse strings and normalize ``time`` values for time-of-day fields."""
    if isinstance(value, (str, dt.time)):
        return parse_time_of_day(value)
    return value


class AppointmentBase(BaseModel):
    """Base Appointment schema with common fields."""

    model_config = ConfigDict(
        from_attributes=True,
        validate_assignment=True,
        str_strip_whitespace=True,
    )

    date: dt.date = Field(..., description="Calendar day of the appointment")
    time: dt.time = Field(..., description="Time-of-day slot, HH:MM")
    reason: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Reason for the appointment or chief complaint",
    )
    observations: Optional[str] = Field(
        None, description="Free text observations", max_length=2000
    )

    @field_validator("time", mode="before")
    @classmethod
    def validate_time(cls, v: Any) -> Any:
        """Accept ``HH:MM`` and ``HH:MM:SS`` strings."""
        return coerce_time_field(v)

    @field_validator("observations")
    @classmethod
    def validate_observations(cls, v: Optional[str]) -> Optional[str]:
        """Treat blank observations as missing."""
        if v is not None and not v.strip():
            return None
        return v


class AppointmentCreate(AppointmentBase):
    """Schema for creating a new appointment."""

    pet_id: UUID = Field(..., description="UUID of the pet for this appointment")
    client_id: UUID = Field(..., description="UUID of the client who owns the pet")
    veterinarian_id: Optional[UUID] = Field(
        None, description="UUID of the assigned veterinarian"
    )


class AppointmentUpdate(BaseModel):
    """
    Schema for updating an existing appointment.

    Only fields explicitly present in the payload are applied, so passing
    ``veterinarian_id=None`` unassigns the veterinarian. Status is changed
    through ``AppointmentStatusUpdate`` instead.
    """

    model_config = ConfigDict(
        from_attributes=True,
        validate_assignment=True,
        str_strip_whitespace=True,
        extra="forbid",
    )

    date: Optional[dt.date] = Field(None, description="New calendar day")
    time: Optional[dt.time] = Field(None, description="New time-of-day slot, HH:MM")
    reason: Optional[str] = Field(
        None, min_length=1, max_length=500, description="Reason for the appointment"
    )
    observations: Optional[str] = Field(
        None, description="Free text observations", max_length=2000
    )
    veterinarian_id: Optional[UUID] = Field(
        None, description="UUID of the assigned veterinarian (for reassignment)"
    )

    @field_validator("time", mode="before")
    @classmethod
    def validate_time(cls, v: Any) -> Any:
        """Accept ``HH:MM`` and ``HH:MM:SS`` strings."""
        return coerce_time_field(v)

    @model_validator(mode="after")
    def validate_at_least_one_field(self) -> "AppointmentUpdate":
        """Ensure at least one field is provided for update."""
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided for update")
        return self

    @model_validator(mode="after")
    def validate_required_not_cleared(self) -> "AppointmentUpdate":
        """Date, time and reason may change but never be cleared."""
        for name in ("date", "time", "reason"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"'{name}' cannot be cleared")
        return self

    def changes(self) -> dict:
        """Return only the fields present in the payload."""
        return self.model_dump(exclude_unset=True)


class AppointmentStatusUpdate(BaseModel):
    """Schema for updating appointment status."""

    status: AppointmentStatus = Field(..., description="New appointment status")

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, v: Any) -> Any:
        """Accept status values and names in any case."""
        return parse_status(v)


class AppointmentResponse(BaseModel):
    """Schema for appointment response data."""

    model_config = ConfigDict(
        from_attributes=True,
        use_enum_values=True,
    )

    id: UUID = Field(..., description="Appointment's unique identifier")
    pet_id: UUID = Field(..., description="Pet's unique identifier")
    client_id: UUID = Field(..., description="Client's unique identifier")
    veterinarian_id: Optional[UUID] = Field(
        None, description="Veterinarian's unique identifier"
    )
    date: dt.date = Field(..., description="Calendar day")
    time: dt.time = Field(..., description="Time-of-day slot")
    reason: str = Field(..., description="Reason for the appointment")
    status: AppointmentStatus = Field(..., description="Current appointment status")
    observations: Optional[str] = Field(None, description="Free text observations")
    completed_at: Optional[dt.datetime] = Field(
        None, description="Completion timestamp"
    )
    cancelled_at: Optional[dt.datetime] = Field(
        None, description="Cancellation timestamp"
    )
    created_at: dt.datetime = Field(..., description="Creation timestamp")
    updated_at: dt.datetime = Field(..., description="Last update timestamp")

    @property
    def slot_label(self) -> str:
        """The time slot formatted as ``HH:MM``."""
        return format_time_of_day(self.time)
