"""
Tests for the scheduling engine facade.
"""

import logging
from datetime import date, time
from unittest.mock import AsyncMock

import pytest

from vet_scheduling import create_scheduling_engine
from vet_scheduling.exceptions import SlotConflictException
from vet_scheduling.models import AppointmentStatus
from vet_scheduling.scheduling import HistoryOrder, SchedulingEngine
from vet_scheduling.utils.config import ConflictScope, SchedulingSettings

from conftest import MEMORY_DATABASE_URL, PetFactory, TreatmentFactory

TUESDAY = date(2025, 3, 4)


class TestSchedulingEngine:
    """Test cases for the SchedulingEngine facade."""

    def test_generate_slots(self, scheduling_engine):
        """Test the engine exposes the default slot catalog."""
        slots = scheduling_engine.generate_slots()

        assert len(slots) == 24
        assert slots[0] == time(8, 0)
        assert slots[-1] == time(19, 30)

    def test_generate_slots_returns_copy(self, scheduling_engine):
        slots = scheduling_engine.generate_slots()
        slots.clear()

        assert len(scheduling_engine.generate_slots()) == 24

    def test_components_share_settings(self, store):
        """Test the detector follows the configured scope."""
        engine = SchedulingEngine(
            store, SchedulingSettings(conflict_scope="veterinarian")
        )

        assert engine.detector.scope is ConflictScope.VETERINARIAN
        assert engine.lifecycle.detector is engine.detector
        assert engine.lifecycle.resolver is engine.resolver

    @pytest.mark.asyncio
    async def test_booking_scenario(self, scheduling_engine, store, dr_ana):
        """
        Test the reception workflow for one Tuesday slot.

        Dr. Ana works Tuesdays 08:00 to 14:00. A 10:00 booking holds the
        slot until it is cancelled, after which it can be booked again.
        """
        pet = await PetFactory.create(store)
        other_pet = await PetFactory.create(store)

        vets = await scheduling_engine.resolve_available_veterinarians(
            "2025-03-04", "10:00"
        )
        assert [v.id for v in vets] == [dr_ana.id]

        appointment = await scheduling_engine.create_appointment(
            {
                "pet_id": pet.id,
                "client_id": pet.client_id,
                "veterinarian_id": vets[0].id,
                "date": "2025-03-04",
                "time": "10:00",
                "reason": "Vaccination",
            }
        )
        assert appointment.status == AppointmentStatus.PENDING
        assert await scheduling_engine.has_conflict(TUESDAY, "10:00") is True
        assert (
            await scheduling_engine.has_conflict(
                TUESDAY, "10:00", exclude_id=str(appointment.id)
            )
            is False
        )

        with pytest.raises(SlotConflictException):
            await scheduling_engine.create_appointment(
                {
                    "pet_id": other_pet.id,
                    "client_id": other_pet.client_id,
                    "date": "2025-03-04",
                    "time": "10:00",
                    "reason": "Skin rash",
                }
            )

        cancelled = await scheduling_engine.change_status(appointment.id, "Cancelled")
        assert cancelled.status == AppointmentStatus.CANCELLED
        assert await scheduling_engine.has_conflict(TUESDAY, "10:00") is False

        rebooked = await scheduling_engine.create_appointment(
            {
                "pet_id": other_pet.id,
                "client_id": other_pet.client_id,
                "date": "2025-03-04",
                "time": "10:00",
                "reason": "Skin rash",
            }
        )
        assert rebooked.status == AppointmentStatus.PENDING

    @pytest.mark.asyncio
    async def test_no_time_resolves_nobody(self, scheduling_engine, dr_ana):
        assert await scheduling_engine.resolve_available_veterinarians(TUESDAY, None) == []

    @pytest.mark.asyncio
    async def test_update_and_cancel(self, scheduling_engine, store, pet, dr_ana):
        appointment = await scheduling_engine.create_appointment(
            {
                "pet_id": pet.id,
                "client_id": pet.client_id,
                "veterinarian_id": dr_ana.id,
                "date": TUESDAY,
                "time": time(9, 0),
                "reason": "Checkup",
            }
        )

        moved = await scheduling_engine.update_appointment(
            appointment.id, {"time": "13:30"}
        )
        cancelled = await scheduling_engine.cancel_appointment(appointment.id)

        assert moved.time == time(13, 30)
        assert cancelled.status == AppointmentStatus.CANCELLED

    @pytest.mark.asyncio
    async def test_history_and_purge(self, scheduling_engine, store, pet):
        appointment = await scheduling_engine.create_appointment(
            {
                "pet_id": pet.id,
                "client_id": pet.client_id,
                "date": TUESDAY,
                "time": "11:00",
                "reason": "Ear infection",
            }
        )
        await TreatmentFactory.create(store, appointment, medications=1)

        history = await scheduling_engine.get_pet_history(
            pet.id, HistoryOrder.MOST_RECENT_FIRST
        )
        assert len(history) == 1
        assert history[0].has_treatment

        removed = await scheduling_engine.purge_appointment(appointment.id)

        assert removed == appointment.id
        assert await scheduling_engine.get_pet_history(pet.id) == []

    @pytest.mark.asyncio
    async def test_close_without_session_manager(self, store):
        engine = SchedulingEngine(store)

        await engine.close()

    @pytest.mark.asyncio
    async def test_close_disposes_session_manager(self, store):
        session_manager = AsyncMock()
        engine = SchedulingEngine(store, session_manager=session_manager)

        await engine.close()

        session_manager.close.assert_awaited_once()


class TestCreateSchedulingEngine:
    """Test cases for the engine factory."""

    @pytest.fixture(autouse=True)
    def restore_package_level(self):
        package_logger = logging.getLogger("vet_scheduling")
        level = package_logger.level
        yield
        package_logger.setLevel(level)

    @pytest.mark.asyncio
    async def test_create_from_settings(self):
        """Test a ready engine is built on an in-memory database."""
        engine = await create_scheduling_engine(
            SchedulingSettings(database_url=MEMORY_DATABASE_URL)
        )
        try:
            assert engine.session_manager is not None
            assert engine.session_manager.schema_ready is True

            vet = await engine.shifts.add_veterinarian(
                {"first_name": "Ana", "last_name": "Perez"}
            )
            await engine.shifts.add_shift(
                {
                    "veterinarian_id": vet.id,
                    "weekday": "tuesday",
                    "start_time": "08:00",
                    "end_time": "14:00",
                }
            )

            vets = await engine.resolve_available_veterinarians(TUESDAY, "12:00")
            assert [v.id for v in vets] == [vet.id]
        finally:
            await engine.close()

    @pytest.mark.asyncio
    async def test_create_from_environment(self, monkeypatch):
        """Test settings are read from the environment when omitted."""
        monkeypatch.setenv("VET_SCHEDULING_DATABASE_URL", MEMORY_DATABASE_URL)
        monkeypatch.setenv("VET_SCHEDULING_SLOT_INTERVAL_MINUTES", "60")

        engine = await create_scheduling_engine()
        try:
            assert engine.settings.slot_interval_minutes == 60
            assert len(engine.generate_slots()) == 12
        finally:
            await engine.close()

    @pytest.mark.asyncio
    async def test_log_level_applied(self):
        """Test the configured level reaches the package loggers."""
        engine = await create_scheduling_engine(
            SchedulingSettings(database_url=MEMORY_DATABASE_URL, log_level="warning")
        )
        try:
            lifecycle_logger = logging.getLogger("vet_scheduling.scheduling.lifecycle")

            assert logging.getLogger("vet_scheduling").level == logging.WARNING
            assert lifecycle_logger.getEffectiveLevel() == logging.WARNING
        finally:
            await engine.close()
