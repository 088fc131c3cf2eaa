"""
Pydantic schemas for data validation and serialization.

This module contains Pydantic schemas for validating inbound scheduling
payloads and serializing appointments, veterinarians, shifts and clinical
history.
"""

from .appointment import (
    AppointmentCreate,
    AppointmentResponse,
    AppointmentStatusUpdate,
    AppointmentUpdate,
    parse_status,
)
from .history import MedicationEntry, TreatmentSummary, VisitRecord
from .veterinarian import (
    ShiftCreate,
    ShiftResponse,
    ShiftUpdate,
    VeterinarianCreate,
    VeterinarianResponse,
    VeterinarianUpdate,
)

__all__ = [
    # Appointment schemas
    "AppointmentCreate",
    "AppointmentUpdate",
    "AppointmentStatusUpdate",
    "AppointmentResponse",
    "parse_status",
    # Veterinarian and shift schemas
    "VeterinarianCreate",
    "VeterinarianUpdate",
    "VeterinarianResponse",
    "ShiftCreate",
    "ShiftUpdate",
    "ShiftResponse",
    # History schemas
    "MedicationEntry",
    "TreatmentSummary",
    "VisitRecord",
]
