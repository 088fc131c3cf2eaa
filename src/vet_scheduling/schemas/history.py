"""
Clinical history Pydantic schemas.

A pet's history is a sequence of ``VisitRecord`` entries, one per
appointment, each carrying the linked treatment when there is one.
"""

import datetime as dt
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ..models.appointment import AppointmentStatus
from ..utils.datetime_utils import format_time_of_day


class MedicationEntry(BaseModel):
    """One prescribed medication of a treatment."""

    model_config = ConfigDict(from_attributes=True, str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=150, description="Drug name")
    dosage: Optional[str] = Field(None, max_length=150, description="Dose")
    duration: Optional[str] = Field(None, max_length=100, description="Duration")


class TreatmentSummary(BaseModel):
    """Diagnosis and indicated treatment attached to a visit."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    diagnosis: str
    indicated_treatment: Optional[str] = None
    recommendations: Optional[str] = None
    medications: List[MedicationEntry] = Field(default_factory=list)


class VisitRecord(BaseModel):
    """One appointment of a pet's clinical history."""

    model_config = ConfigDict(from_attributes=True)

    appointment_id: UUID
    date: dt.date
    time: dt.time
    reason: str
    status: AppointmentStatus
    observations: Optional[str] = None
    veterinarian_id: Optional[UUID] = None
    veterinarian_name: Optional[str] = Field(
        None, description="Display name of the veterinarian, when known"
    )
    treatment: Optional[TreatmentSummary] = None

    @property
    def has_treatment(self) -> bool:
        return self.treatment is not None

    @property
    def slot_label(self) -> str:
        """The time slot formatted as ``HH:MM``."""
        return format_time_of_day(self.time)
