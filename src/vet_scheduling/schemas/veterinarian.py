"""
Veterinarian and shift Pydantic schemas for API validation and serialization.

This module contains create, update and response schemas for veterinarians
and for the recurring weekly shifts that drive availability.
"""

import datetime as dt
import re
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from ..models.shift import Weekday
from .appointment import coerce_time_field


def normalize_phone(v: Optional[str]) -> Optional[str]:
    """Validate a phone number and strip formatting characters."""
    if v is None:
        return v

    digits_only = re.sub(r"\D", "", v)
    if not digits_only:
        return None

    if len(digits_only) < 7 or len(digits_only) > 15:
        raise ValueError("Phone number must be between 7 and 15 digits")

    if v.strip().startswith("+"):
        return f"+{digits_only}"
    return digits_only


class VeterinarianBase(BaseModel):
    """Base Veterinarian schema with common fields."""

    model_config = ConfigDict(
        from_attributes=True,
        validate_assignment=True,
        str_strip_whitespace=True,
    )

    first_name: str = Field(
        ..., min_length=1, max_length=100, description="Veterinarian's first name(s)"
    )
    last_name: str = Field(
        ..., min_length=1, max_length=100, description="Veterinarian's last name(s)"
    )
    specialty: Optional[str] = Field(
        None, max_length=150, description="Medical specialty"
    )
    phone: Optional[str] = Field(None, max_length=30, description="Contact phone")
    email: Optional[EmailStr] = Field(None, description="Contact email address")

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        """Validate phone number."""
        return normalize_phone(v)

    @field_validator("specialty")
    @classmethod
    def validate_specialty(cls, v: Optional[str]) -> Optional[str]:
        """Treat a blank specialty as missing."""
        if v is not None and not v.strip():
            return None
        return v


class VeterinarianCreate(VeterinarianBase):
    """Schema for creating a new veterinarian."""

    is_active: bool = Field(True, description="Whether new appointments are offered")


class VeterinarianUpdate(BaseModel):
    """Schema for updating an existing veterinarian."""

    model_config = ConfigDict(
        from_attributes=True,
        validate_assignment=True,
        str_strip_whitespace=True,
        extra="forbid",
    )

    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    specialty: Optional[str] = Field(None, max_length=150)
    phone: Optional[str] = Field(None, max_length=30)
    email: Optional[EmailStr] = None
    is_active: Optional[bool] = None

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        """Validate phone number."""
        return normalize_phone(v)

    @model_validator(mode="after")
    def validate_at_least_one_field(self) -> "VeterinarianUpdate":
        """Ensure at least one field is provided for update."""
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided for update")
        return self

    def changes(self) -> dict:
        """Return only the fields present in the payload."""
        return self.model_dump(exclude_unset=True)


class VeterinarianResponse(BaseModel):
    """Schema for veterinarian response data."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(..., description="Veterinarian's unique identifier")
    first_name: str
    last_name: str
    specialty: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    is_active: bool
    display_name: str = Field(..., description="Name with title and specialty")
    created_at: dt.datetime
    updated_at: dt.datetime


class ShiftBase(BaseModel):
    """Base Shift schema with time window validation."""

    model_config = ConfigDict(
        from_attributes=True,
        validate_assignment=True,
        str_strip_whitespace=True,
    )

    weekday: Weekday = Field(..., description="Day of the week the shift repeats on")
    start_time: dt.time = Field(..., description="Start of the window, HH:MM")
    end_time: dt.time = Field(..., description="End of the window, HH:MM")

    @field_validator("weekday", mode="before")
    @classmethod
    def validate_weekday(cls, v: Any) -> Weekday:
        """Accept weekday members, names, values or 0-6 indexes."""
        return Weekday.parse(v)

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def validate_time_format(cls, v: Any) -> Any:
        """Accept ``HH:MM`` and ``HH:MM:SS`` strings."""
        return coerce_time_field(v)

    @model_validator(mode="after")
    def validate_time_order(self) -> "ShiftBase":
        """Validate end time is after start time."""
        if self.end_time <= self.start_time:
            raise ValueError("End time must be after start time")
        return self


class ShiftCreate(ShiftBase):
    """Schema for creating a new shift."""

    veterinarian_id: UUID = Field(..., description="UUID of the owning veterinarian")


class ShiftUpdate(BaseModel):
    """
    Schema for updating an existing shift.

    The start/end order is checked against the stored shift by the service,
    since a partial update may carry only one of the two bounds.
    """

    model_config = ConfigDict(from_attributes=True, extra="forbid")

    weekday: Optional[Weekday] = None
    start_time: Optional[dt.time] = None
    end_time: Optional[dt.time] = None

    @field_validator("weekday", mode="before")
    @classmethod
    def validate_weekday(cls, v: Any) -> Optional[Weekday]:
        """Accept weekday members, names, values or 0-6 indexes."""
        if v is None:
            return v
        return Weekday.parse(v)

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def validate_time_format(cls, v: Any) -> Any:
        """Accept ``HH:MM`` and ``HH:MM:SS`` strings."""
        return coerce_time_field(v)

    @model_validator(mode="after")
    def validate_fields(self) -> "ShiftUpdate":
        """Require at least one non-null field."""
        changes = self.changes()
        if not changes:
            raise ValueError("At least one field must be provided for update")
        if any(value is None for value in changes.values()):
            raise ValueError("Shift fields cannot be cleared")
        if (
            self.start_time is not None
            and self.end_time is not None
            and self.end_time <= self.start_time
        ):
            raise ValueError("End time must be after start time")
        return self

    def changes(self) -> dict:
        """Return only the fields present in the payload."""
        return self.model_dump(exclude_unset=True)


class ShiftResponse(BaseModel):
    """Schema for shift response data."""

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    id: UUID
    veterinarian_id: UUID
    weekday: Weekday
    start_time: dt.time
    end_time: dt.time
