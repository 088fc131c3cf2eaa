"""
Tests for the shift registry and shift administration.
"""

from datetime import time

import pytest

from vet_scheduling.exceptions import (
    RecordNotFoundException,
    SchemaValidationException,
    ValidationException,
)
from vet_scheduling.models import Weekday
from vet_scheduling.scheduling.shifts import ShiftRegistry, ShiftService

from conftest import ShiftFactory, VeterinarianFactory


class TestShiftRegistry:
    """Test cases for the in-memory ShiftRegistry."""

    def test_shifts_grouped_by_veterinarian(self):
        """Test each veterinarian sees only their own shifts."""
        ana = VeterinarianFactory.build(first_name="Ana")
        luis = VeterinarianFactory.build(first_name="Luis")
        ana_shift = ShiftFactory.build(veterinarian_id=ana.id)
        luis_shift = ShiftFactory.build(veterinarian_id=luis.id, weekday=Weekday.FRIDAY)

        registry = ShiftRegistry([ana, luis], [ana_shift, luis_shift])

        assert registry.shifts_for(ana.id) == [ana_shift]
        assert registry.shifts_for(luis.id) == [luis_shift]
        assert len(registry) == 2

    def test_shifts_sorted_by_weekday_then_start(self):
        """Test shifts come back in weekday order, not name order."""
        vet = VeterinarianFactory.build()
        friday = ShiftFactory.build(veterinarian_id=vet.id, weekday=Weekday.FRIDAY)
        monday_late = ShiftFactory.build(
            veterinarian_id=vet.id,
            weekday=Weekday.MONDAY,
            start_time=time(15, 0),
            end_time=time(18, 0),
        )
        monday_early = ShiftFactory.build(
            veterinarian_id=vet.id,
            weekday=Weekday.MONDAY,
            start_time=time(8, 0),
            end_time=time(12, 0),
        )

        registry = ShiftRegistry.from_records([vet], [friday, monday_late, monday_early])

        assert registry.shifts_for(vet.id) == [monday_early, monday_late, friday]

    def test_orphan_shifts_ignored(self):
        """Test shifts without a known veterinarian are dropped."""
        vet = VeterinarianFactory.build()
        orphan = ShiftFactory.build()

        registry = ShiftRegistry([vet], [orphan])

        assert registry.shifts_on(Weekday.TUESDAY) == []
        assert registry.shifts_for(orphan.veterinarian_id) == []

    def test_unknown_veterinarian(self):
        """Test lookups for an unknown veterinarian."""
        registry = ShiftRegistry([], [])
        unknown = VeterinarianFactory.build().id

        assert registry.veterinarian(unknown) is None
        assert registry.is_active(unknown) is False
        assert registry.shifts_for(unknown) == []
        assert registry.covers(unknown, Weekday.MONDAY, time(9, 0)) is False

    def test_covers_inclusive_bounds(self):
        """Test both shift boundaries are inside the window."""
        vet = VeterinarianFactory.build()
        registry = ShiftRegistry([vet], [ShiftFactory.build(veterinarian_id=vet.id)])

        assert registry.covers(vet.id, Weekday.TUESDAY, time(8, 0))
        assert registry.covers(vet.id, Weekday.TUESDAY, time(14, 0))
        assert not registry.covers(vet.id, Weekday.TUESDAY, time(14, 30))
        assert not registry.covers(vet.id, Weekday.WEDNESDAY, time(10, 0))

    def test_overlapping_shifts(self):
        """Test overlapping shifts of one veterinarian are allowed."""
        vet = VeterinarianFactory.build()
        shifts = [
            ShiftFactory.build(
                veterinarian_id=vet.id, start_time=time(8, 0), end_time=time(12, 0)
            ),
            ShiftFactory.build(
                veterinarian_id=vet.id, start_time=time(11, 0), end_time=time(16, 0)
            ),
        ]

        registry = ShiftRegistry([vet], shifts)

        assert len(registry.shifts_for(vet.id)) == 2
        assert registry.covers(vet.id, Weekday.TUESDAY, time(15, 30))

    def test_eligible_skips_inactive(self):
        """Test inactive veterinarians are never eligible."""
        active = VeterinarianFactory.build(last_name="Alvarez")
        inactive = VeterinarianFactory.build(last_name="Benitez", is_active=False)
        shifts = [
            ShiftFactory.build(veterinarian_id=active.id),
            ShiftFactory.build(veterinarian_id=inactive.id),
        ]

        registry = ShiftRegistry([active, inactive], shifts)

        assert registry.eligible(Weekday.TUESDAY, time(10, 0)) == [active]

    def test_veterinarians_ordered_by_name(self):
        """Test veterinarians are listed by last name then first name."""
        zed = VeterinarianFactory.build(first_name="Ana", last_name="Zapata")
        abe = VeterinarianFactory.build(first_name="Luis", last_name="Acosta")
        ana = VeterinarianFactory.build(first_name="Ana", last_name="Acosta")

        registry = ShiftRegistry([zed, abe, ana], [])

        assert registry.veterinarians == [ana, abe, zed]

    @pytest.mark.asyncio
    async def test_load_filters_weekday_and_active(self, store):
        """Test loading from the store with weekday and active filters."""
        active = await VeterinarianFactory.create(store)
        inactive = await VeterinarianFactory.create(store, is_active=False)
        await ShiftFactory.create(store, veterinarian=active)
        await ShiftFactory.create(store, veterinarian=active, weekday=Weekday.MONDAY)
        await ShiftFactory.create(store, veterinarian=inactive)

        registry = await ShiftRegistry.load(
            store, weekday=Weekday.TUESDAY, active_only=True
        )

        assert [v.id for v in registry.veterinarians] == [active.id]
        assert [s.weekday for s in registry.shifts_for(active.id)] == [Weekday.TUESDAY]
        assert registry.shifts_for(inactive.id) == []


class TestShiftService:
    """Test cases for store-backed shift administration."""

    @pytest.mark.asyncio
    async def test_add_veterinarian(self, store):
        """Test adding a veterinarian from a payload."""
        service = ShiftService(store)

        vet = await service.add_veterinarian(
            {
                "first_name": "Ana",
                "last_name": "Perez",
                "specialty": "Surgery",
                "phone": "(555) 123-4567",
                "email": "ana@example.com",
            }
        )

        assert vet.id is not None
        assert vet.is_active is True
        assert vet.phone == "5551234567"
        assert vet.display_name == "Dr. Ana Perez - Surgery"

    @pytest.mark.asyncio
    async def test_add_veterinarian_invalid(self, store):
        """Test a payload without a last name is rejected."""
        service = ShiftService(store)

        with pytest.raises(SchemaValidationException) as exc_info:
            await service.add_veterinarian({"first_name": "Ana"})

        assert "last_name" in exc_info.value.details["validation_errors"]
        assert await store.list("veterinarians") == []

    @pytest.mark.asyncio
    async def test_update_veterinarian(self, store):
        """Test a partial update of a veterinarian."""
        service = ShiftService(store)
        vet = await VeterinarianFactory.create(store)

        updated = await service.update_veterinarian(vet.id, {"specialty": "Dermatology"})

        assert updated.specialty == "Dermatology"
        assert updated.first_name == vet.first_name

    @pytest.mark.asyncio
    async def test_deactivate_keeps_shifts(self, store):
        """Test deactivation leaves the veterinarian's shifts in place."""
        service = ShiftService(store)
        vet = await VeterinarianFactory.create(store)
        await ShiftFactory.create(store, veterinarian=vet)

        deactivated = await service.deactivate_veterinarian(vet.id)

        assert deactivated.is_active is False
        assert len(await service.list_shifts(vet.id)) == 1

        reactivated = await service.activate_veterinarian(vet.id)
        assert reactivated.is_active is True

    @pytest.mark.asyncio
    async def test_add_shift(self, store):
        """Test adding a shift with string values."""
        service = ShiftService(store)
        vet = await VeterinarianFactory.create(store)

        shift = await service.add_shift(
            {
                "veterinarian_id": str(vet.id),
                "weekday": "Wednesday",
                "start_time": "09:00",
                "end_time": "13:30",
            }
        )

        assert shift.veterinarian_id == vet.id
        assert shift.weekday == Weekday.WEDNESDAY
        assert shift.start_time == time(9, 0)
        assert shift.end_time == time(13, 30)

    @pytest.mark.asyncio
    async def test_add_shift_unknown_veterinarian(self, store):
        """Test a shift cannot reference a missing veterinarian."""
        service = ShiftService(store)

        with pytest.raises(RecordNotFoundException):
            await service.add_shift(
                {
                    "veterinarian_id": str(VeterinarianFactory.build().id),
                    "weekday": 1,
                    "start_time": "09:00",
                    "end_time": "12:00",
                }
            )

        assert await store.list("shifts") == []

    @pytest.mark.asyncio
    async def test_add_shift_empty_window(self, store):
        """Test a shift ending before it starts is rejected."""
        service = ShiftService(store)
        vet = await VeterinarianFactory.create(store)

        with pytest.raises(SchemaValidationException):
            await service.add_shift(
                {
                    "veterinarian_id": vet.id,
                    "weekday": "monday",
                    "start_time": "12:00",
                    "end_time": "09:00",
                }
            )

    @pytest.mark.asyncio
    async def test_list_shifts_in_weekday_order(self, store):
        """Test listing follows the week, Monday first."""
        service = ShiftService(store)
        vet = await VeterinarianFactory.create(store)
        for weekday in (Weekday.WEDNESDAY, Weekday.MONDAY, Weekday.FRIDAY):
            await ShiftFactory.create(store, veterinarian=vet, weekday=weekday)

        shifts = await service.list_shifts()

        assert [s.weekday for s in shifts] == [
            Weekday.MONDAY,
            Weekday.WEDNESDAY,
            Weekday.FRIDAY,
        ]

    @pytest.mark.asyncio
    async def test_update_shift(self, store):
        """Test moving the end of a shift."""
        service = ShiftService(store)
        shift = await ShiftFactory.create(store)

        updated = await service.update_shift(shift.id, {"end_time": "16:00"})

        assert updated.end_time == time(16, 0)
        assert updated.start_time == shift.start_time

    @pytest.mark.asyncio
    async def test_update_shift_against_stored_start(self, store):
        """Test a new end before the stored start is rejected."""
        service = ShiftService(store)
        shift = await ShiftFactory.create(store)

        with pytest.raises(ValidationException) as exc_info:
            await service.update_shift(shift.id, {"end_time": "07:00"})

        assert exc_info.value.field == "end_time"
        stored = await store.get("shifts", shift.id)
        assert stored.end_time == time(14, 0)

    @pytest.mark.asyncio
    async def test_remove_shift(self, store):
        """Test removing a shift."""
        service = ShiftService(store)
        shift = await ShiftFactory.create(store)

        removed = await service.remove_shift(shift.id)

        assert removed == shift.id
        with pytest.raises(RecordNotFoundException):
            await store.get("shifts", shift.id)
