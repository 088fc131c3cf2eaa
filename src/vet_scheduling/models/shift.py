"""
Shift model for the vet-scheduling package.

A shift is one recurring weekly working window of a veterinarian. A
veterinarian may own several shifts, overlapping ones included.
"""

import datetime as dt
import enum
import uuid
from typing import Any

from sqlalchemy import Enum, Index, Time, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel


class Weekday(enum.Enum):
    """Enumeration of the days of the week, in ``date.weekday()`` order."""

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @classmethod
    def from_date(cls, value: dt.date) -> "Weekday":
        """Return the weekday of a calendar date."""
        return list(cls)[value.weekday()]

    @classmethod
    def parse(cls, value: Any) -> "Weekday":
        """
        Parse a weekday from an enum member, a name/value string or an index.

        Integers follow ``date.weekday()`` (0 is Monday).

        Raises:
            ValueError: If the value does not name a weekday
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            if 0 <= value <= 6:
                return list(cls)[value]
            raise ValueError(f"Weekday index must be between 0 and 6, got {value}")
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if normalized in (member.value, member.name.lower()):
                    return member
        raise ValueError(f"Invalid weekday: {value!r}")

    @property
    def index(self) -> int:
        """Position of the weekday, 0 for Monday."""
        return list(Weekday).index(self)


class Shift(BaseModel):
    """
    Recurring weekly working window of a veterinarian.

    Shifts are not removed when their veterinarian is deactivated; an
    inactive owner simply makes them ineligible.
    """

    __tablename__ = "shifts"

    veterinarian_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        nullable=False,
        index=True,
        comment="UUID of the veterinarian owning this shift",
    )

    weekday: Mapped[Weekday] = mapped_column(
        Enum(Weekday),
        nullable=False,
        index=True,
        comment="Day of the week the shift repeats on",
    )

    start_time: Mapped[dt.time] = mapped_column(
        Time, nullable=False, comment="Start of the working window (inclusive)"
    )

    end_time: Mapped[dt.time] = mapped_column(
        Time, nullable=False, comment="End of the working window (inclusive)"
    )

    __table_args__ = (Index("idx_shifts_vet_weekday", "veterinarian_id", "weekday"),)

    def __repr__(self) -> str:
        """Return string representation of the Shift model."""
        return (
            f"<Shift(id={self.id}, veterinarian_id={self.veterinarian_id}, "
            f"weekday='{self.weekday.value}', {self.start_time}-{self.end_time})>"
        )

    def covers(self, weekday: Weekday, at: dt.time) -> bool:
        """Check if the shift repeats on ``weekday`` and includes ``at``."""
        return self.weekday == weekday and self.start_time <= at <= self.end_time
