"""
Database models for the vet-scheduling package.

This module contains SQLAlchemy models for the entities the scheduling
engine reads and writes.
"""

from .appointment import (
    ACTIVE_STATUSES,
    ALLOWED_TRANSITIONS,
    TERMINAL_STATUSES,
    Appointment,
    AppointmentStatus,
    can_transition,
)

# Base model will be imported by all other models
from .base import Base, BaseModel
from .client import Client
from .pet import Pet, PetSex, PetSpecies
from .shift import Shift, Weekday
from .treatment import Medication, Treatment
from .veterinarian import Veterinarian

__all__ = [
    "Base",
    "BaseModel",
    "Appointment",
    "AppointmentStatus",
    "ACTIVE_STATUSES",
    "TERMINAL_STATUSES",
    "ALLOWED_TRANSITIONS",
    "can_transition",
    "Client",
    "Pet",
    "PetSex",
    "PetSpecies",
    "Shift",
    "Weekday",
    "Treatment",
    "Medication",
    "Veterinarian",
]
