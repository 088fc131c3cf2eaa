"""
Vet Scheduling Package

Appointment scheduling and availability resolution engine for a veterinary
clinic.

The package generates the bookable slots of a clinic day, resolves which
veterinarians can take a candidate date and time from their recurring weekly
shifts, prevents double booking, drives the appointment status lifecycle and
builds each pet's chronological clinical history. It includes:

- SQLAlchemy models for appointments, veterinarians, shifts, pets, clients,
  treatments and medications
- Pydantic schemas for request validation and response serialization
- A record store abstraction with an async SQLAlchemy implementation
- Environment-driven settings and logging configuration helpers
- An exception hierarchy with machine-readable error codes

Quick Start:
    >>> from vet_scheduling import SchedulingSettings, create_scheduling_engine

    >>> engine = await create_scheduling_engine(
    ...     SchedulingSettings(database_url="sqlite+aiosqlite:///:memory:")
    ... )
    >>> engine.generate_slots()[:2]
    [datetime.time(8, 0), datetime.time(8, 30)]

    >>> vets = await engine.resolve_available_veterinarians("2025-03-04", "10:00")
    >>> appointment = await engine.create_appointment({
    ...     "date": "2025-03-04",
    ...     "time": "10:00",
    ...     "reason": "Annual vaccination",
    ...     "pet_id": pet.id,
    ...     "client_id": client.id,
    ...     "veterinarian_id": vets[0].id,
    ... })
    >>> await engine.change_status(appointment.id, "confirmed")

Requirements:
    - Python 3.11+
    - PostgreSQL 13+ (asyncpg) or SQLite (aiosqlite)
    - SQLAlchemy 2.0+
    - Pydantic 2.5+
"""

__version__ = "0.1.0"
__author__ = "Vet Clinic Platform Team"
__email__ = "dev@vetclinic.com"
__license__ = "MIT"

from . import database
from . import exceptions
from . import models
from . import scheduling
from . import schemas
from . import store
from . import utils

# Convenience imports for common usage patterns
from .exceptions import (
    RecordNotFoundException,
    SlotConflictException,
    ValidationException,
    VetSchedulingException,
)
from .models import Appointment, AppointmentStatus, Shift, Veterinarian, Weekday
from .scheduling import HistoryOrder, SchedulingEngine, create_scheduling_engine
from .utils import ConflictScope, SchedulingSettings

__all__ = [
    # Version and metadata
    "__version__",
    "__author__",
    "__email__",
    "__license__",
    # Core modules
    "database",
    "exceptions",
    "models",
    "scheduling",
    "schemas",
    "store",
    "utils",
    # Convenience imports
    "SchedulingEngine",
    "create_scheduling_engine",
    "SchedulingSettings",
    "ConflictScope",
    "HistoryOrder",
    "Appointment",
    "AppointmentStatus",
    "Shift",
    "Veterinarian",
    "Weekday",
    "VetSchedulingException",
    "ValidationException",
    "SlotConflictException",
    "RecordNotFoundException",
]
