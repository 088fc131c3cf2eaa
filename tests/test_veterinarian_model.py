"""
Tests for the Veterinarian and Shift models.
"""

import uuid
from datetime import date, time

import pytest

from vet_scheduling.models import Shift, Veterinarian, Weekday


class TestVeterinarianModel:
    """Test cases for Veterinarian model."""

    def test_default_active(self):
        vet = Veterinarian(first_name="Ana", last_name="Perez")

        assert vet.is_active is True

    def test_names(self):
        vet = Veterinarian(first_name="Ana", last_name="Perez", specialty="Surgery")

        assert vet.full_name == "Ana Perez"
        assert vet.display_name == "Dr. Ana Perez - Surgery"

    def test_display_name_without_specialty(self):
        vet = Veterinarian(first_name="Ana", last_name="Perez")

        assert vet.display_name == "Dr. Ana Perez"

    def test_sort_key(self):
        """Test listing order is last name, then first name, case-insensitive."""
        vets = [
            Veterinarian(id=uuid.uuid4(), first_name="luis", last_name="Torres"),
            Veterinarian(id=uuid.uuid4(), first_name="Ana", last_name="Perez"),
            Veterinarian(id=uuid.uuid4(), first_name="Beto", last_name="perez"),
        ]

        ordered = sorted(vets, key=lambda vet: vet.sort_key)

        assert [vet.first_name for vet in ordered] == ["Ana", "Beto", "luis"]

    def test_activate_deactivate(self):
        vet = Veterinarian(first_name="Ana", last_name="Perez")

        vet.deactivate()
        assert vet.is_active is False
        assert "is_active=False" in repr(vet)

        vet.activate()
        assert vet.is_active is True


class TestWeekday:
    """Test cases for the Weekday enumeration."""

    def test_from_date(self):
        assert Weekday.from_date(date(2025, 3, 3)) is Weekday.MONDAY
        assert Weekday.from_date(date(2025, 3, 4)) is Weekday.TUESDAY
        assert Weekday.from_date(date(2025, 3, 9)) is Weekday.SUNDAY

    @pytest.mark.parametrize(
        "value,expected",
        [
            (Weekday.FRIDAY, Weekday.FRIDAY),
            ("tuesday", Weekday.TUESDAY),
            (" SATURDAY ", Weekday.SATURDAY),
            (0, Weekday.MONDAY),
            (6, Weekday.SUNDAY),
        ],
    )
    def test_parse(self, value, expected):
        assert Weekday.parse(value) is expected

    @pytest.mark.parametrize("value", ["funday", 7, -1, True, None])
    def test_parse_invalid(self, value):
        with pytest.raises(ValueError):
            Weekday.parse(value)

    def test_index(self):
        assert Weekday.MONDAY.index == 0
        assert Weekday.SUNDAY.index == 6


class TestShiftModel:
    """Test cases for Shift model."""

    @pytest.fixture
    def shift(self):
        return Shift(
            id=uuid.uuid4(),
            veterinarian_id=uuid.uuid4(),
            weekday=Weekday.TUESDAY,
            start_time=time(8, 0),
            end_time=time(14, 0),
        )

    def test_covers_inclusive_bounds(self, shift):
        assert shift.covers(Weekday.TUESDAY, time(8, 0))
        assert shift.covers(Weekday.TUESDAY, time(11, 30))
        assert shift.covers(Weekday.TUESDAY, time(14, 0))

    def test_covers_outside(self, shift):
        assert not shift.covers(Weekday.TUESDAY, time(7, 30))
        assert not shift.covers(Weekday.TUESDAY, time(14, 30))
        assert not shift.covers(Weekday.WEDNESDAY, time(10, 0))

    def test_repr(self, shift):
        assert "weekday='tuesday'" in repr(shift)
