"""
Pytest configuration and fixtures for vet-scheduling tests.

This module provides the in-memory database, the record store, the
scheduling engine and factory classes used to seed test data.
"""

import uuid
from datetime import date, time
from typing import Any, AsyncGenerator, Dict, Optional

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine

from vet_scheduling.database.connection import create_engine
from vet_scheduling.database.session import SessionManager
from vet_scheduling.models import (
    Appointment,
    AppointmentStatus,
    Client,
    Medication,
    Pet,
    PetSpecies,
    Shift,
    Treatment,
    Veterinarian,
    Weekday,
)
from vet_scheduling.scheduling import SchedulingEngine
from vet_scheduling.store import RecordStore, SQLAlchemyRecordStore
from vet_scheduling.utils.config import SchedulingSettings

MEMORY_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory SQLite engine, one per test."""
    engine = create_engine(MEMORY_DATABASE_URL)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_manager(engine: AsyncEngine) -> AsyncGenerator[SessionManager, None]:
    """Session manager with every table created."""
    manager = SessionManager(engine)
    await manager.create_schema()
    yield manager
    await manager.close()


@pytest.fixture
def store(session_manager: SessionManager) -> SQLAlchemyRecordStore:
    return SQLAlchemyRecordStore(session_manager)


@pytest.fixture
def settings() -> SchedulingSettings:
    return SchedulingSettings(database_url=MEMORY_DATABASE_URL)


@pytest.fixture
def scheduling_engine(
    store: SQLAlchemyRecordStore, settings: SchedulingSettings
) -> SchedulingEngine:
    return SchedulingEngine(store, settings)


class ClientFactory:
    """Factory for creating test Client instances."""

    @staticmethod
    def fields(**kwargs) -> Dict[str, Any]:
        defaults = {
            "first_name": "Laura",
            "last_name": "Gomez",
            "document_number": uuid.uuid4().hex[:12],
            "phone": "5551234567",
            "email": f"client_{uuid.uuid4().hex[:8]}@example.com",
        }
        defaults.update(kwargs)
        return defaults

    @staticmethod
    def build(**kwargs) -> Client:
        """Build a Client instance without saving it."""
        kwargs.setdefault("id", uuid.uuid4())
        return Client(**ClientFactory.fields(**kwargs))

    @staticmethod
    async def create(store: RecordStore, **kwargs) -> Client:
        """Create and save a Client through the record store."""
        return await store.create("clients", ClientFactory.fields(**kwargs))


class PetFactory:
    """Factory for creating test Pet instances."""

    @staticmethod
    def fields(client_id: Optional[uuid.UUID] = None, **kwargs) -> Dict[str, Any]:
        defaults = {
            "client_id": client_id or uuid.uuid4(),
            "name": "Firulais",
            "species": PetSpecies.DOG,
            "breed": "Mixed",
            "age": 4,
        }
        defaults.update(kwargs)
        return defaults

    @staticmethod
    def build(**kwargs) -> Pet:
        """Build a Pet instance without saving it."""
        kwargs.setdefault("id", uuid.uuid4())
        return Pet(**PetFactory.fields(**kwargs))

    @staticmethod
    async def create(
        store: RecordStore, client: Optional[Client] = None, **kwargs
    ) -> Pet:
        """Create and save a Pet, creating its owner when none is given."""
        if client is None and "client_id" not in kwargs:
            client = await ClientFactory.create(store)
        if client is not None:
            kwargs["client_id"] = client.id
        return await store.create("pets", PetFactory.fields(**kwargs))


class VeterinarianFactory:
    """Factory for creating test Veterinarian instances."""

    @staticmethod
    def fields(**kwargs) -> Dict[str, Any]:
        defaults = {
            "first_name": "Ana",
            "last_name": "Perez",
            "specialty": "General Practice",
            "phone": "5559876543",
            "email": f"vet_{uuid.uuid4().hex[:8]}@example.com",
            "is_active": True,
        }
        defaults.update(kwargs)
        return defaults

    @staticmethod
    def build(**kwargs) -> Veterinarian:
        """Build a Veterinarian instance without saving it."""
        kwargs.setdefault("id", uuid.uuid4())
        return Veterinarian(**VeterinarianFactory.fields(**kwargs))

    @staticmethod
    async def create(store: RecordStore, **kwargs) -> Veterinarian:
        """Create and save a Veterinarian through the record store."""
        return await store.create("veterinarians", VeterinarianFactory.fields(**kwargs))


class ShiftFactory:
    """Factory for creating test Shift instances."""

    @staticmethod
    def fields(veterinarian_id: Optional[uuid.UUID] = None, **kwargs) -> Dict[str, Any]:
        defaults = {
            "veterinarian_id": veterinarian_id or uuid.uuid4(),
            "weekday": Weekday.TUESDAY,
            "start_time": time(8, 0),
            "end_time": time(14, 0),
        }
        defaults.update(kwargs)
        return defaults

    @staticmethod
    def build(**kwargs) -> Shift:
        """Build a Shift instance without saving it."""
        kwargs.setdefault("id", uuid.uuid4())
        return Shift(**ShiftFactory.fields(**kwargs))

    @staticmethod
    async def create(
        store: RecordStore, veterinarian: Optional[Veterinarian] = None, **kwargs
    ) -> Shift:
        """Create and save a Shift, creating its veterinarian when none is given."""
        if veterinarian is None and "veterinarian_id" not in kwargs:
            veterinarian = await VeterinarianFactory.create(store)
        if veterinarian is not None:
            kwargs["veterinarian_id"] = veterinarian.id
        return await store.create("shifts", ShiftFactory.fields(**kwargs))


class AppointmentFactory:
    """Factory for creating test Appointment instances."""

    @staticmethod
    def fields(**kwargs) -> Dict[str, Any]:
        defaults = {
            "pet_id": uuid.uuid4(),
            "client_id": uuid.uuid4(),
            "veterinarian_id": None,
            "date": date(2025, 3, 4),
            "time": time(10, 0),
            "reason": "Annual checkup",
            "status": AppointmentStatus.PENDING,
        }
        defaults.update(kwargs)
        return defaults

    @staticmethod
    def build(**kwargs) -> Appointment:
        """Build an Appointment instance without saving it."""
        kwargs.setdefault("id", uuid.uuid4())
        return Appointment(**AppointmentFactory.fields(**kwargs))

    @staticmethod
    async def create(
        store: RecordStore, pet: Optional[Pet] = None, **kwargs
    ) -> Appointment:
        """
        Save an Appointment directly through the store.

        Skips the lifecycle checks, which makes it suitable for seeding
        existing bookings in any status.
        """
        if pet is None and "pet_id" not in kwargs:
            pet = await PetFactory.create(store)
        if pet is not None:
            kwargs.setdefault("pet_id", pet.id)
            kwargs.setdefault("client_id", pet.client_id)
        return await store.create("appointments", AppointmentFactory.fields(**kwargs))


class TreatmentFactory:
    """Factory for creating test Treatment and Medication instances."""

    @staticmethod
    def build(**kwargs) -> Treatment:
        defaults = {
            "id": uuid.uuid4(),
            "appointment_id": uuid.uuid4(),
            "diagnosis": "Otitis externa",
            "indicated_treatment": "Ear cleaning twice a day",
            "recommendations": "Keep ears dry",
        }
        defaults.update(kwargs)
        return Treatment(**defaults)

    @staticmethod
    def build_medication(**kwargs) -> Medication:
        defaults = {
            "id": uuid.uuid4(),
            "treatment_id": uuid.uuid4(),
            "name": "Otomax",
            "dosage": "5 drops",
            "duration": "7 days",
            "position": 0,
        }
        defaults.update(kwargs)
        return Medication(**defaults)

    @staticmethod
    async def create(
        store: RecordStore, appointment: Appointment, medications: int = 0, **kwargs
    ) -> Treatment:
        """Create a Treatment for ``appointment`` with ``medications`` entries."""
        fields = {
            "appointment_id": appointment.id,
            "diagnosis": "Otitis externa",
            "indicated_treatment": "Ear cleaning twice a day",
            "recommendations": "Keep ears dry",
        }
        fields.update(kwargs)
        treatment = await store.create("treatments", fields)
        for position in range(medications):
            await store.create(
                "medications",
                {
                    "treatment_id": treatment.id,
                    "name": f"Medication {position + 1}",
                    "dosage": "1 tablet",
                    "duration": "5 days",
                    "position": position,
                },
            )
        return treatment


@pytest.fixture
def client_factory() -> ClientFactory:
    """Provide ClientFactory for tests."""
    return ClientFactory()


@pytest.fixture
def pet_factory() -> PetFactory:
    """Provide PetFactory for tests."""
    return PetFactory()


@pytest.fixture
def veterinarian_factory() -> VeterinarianFactory:
    """Provide VeterinarianFactory for tests."""
    return VeterinarianFactory()


@pytest.fixture
def shift_factory() -> ShiftFactory:
    """Provide ShiftFactory for tests."""
    return ShiftFactory()


@pytest.fixture
def appointment_factory() -> AppointmentFactory:
    """Provide AppointmentFactory for tests."""
    return AppointmentFactory()


@pytest.fixture
def treatment_factory() -> TreatmentFactory:
    """Provide TreatmentFactory for tests."""
    return TreatmentFactory()


@pytest_asyncio.fixture
async def pet(store: SQLAlchemyRecordStore) -> Pet:
    """A stored pet together with its stored owner."""
    return await PetFactory.create(store)


@pytest_asyncio.fixture
async def dr_ana(store: SQLAlchemyRecordStore) -> Veterinarian:
    """Active veterinarian working Tuesdays 08:00 to 14:00."""
    vet = await VeterinarianFactory.create(store, first_name="Ana", last_name="Perez")
    await ShiftFactory.create(
        store,
        veterinarian=vet,
        weekday=Weekday.TUESDAY,
        start_time=time(8, 0),
        end_time=time(14, 0),
    )
    return vet
