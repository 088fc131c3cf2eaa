"""
Veterinarian model for the vet-scheduling package.

This module contains the Veterinarian SQLAlchemy model. Deactivation is a
soft flag so historical appointments keep a valid reference; recurring
working windows live in the Shift model.
"""

from typing import Any, Optional

from sqlalchemy import Boolean, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel


class Veterinarian(BaseModel):
    """
    Veterinarian model with identity, specialty and contact information.

    Only active veterinarians are offered for new appointments.
    """

    __tablename__ = "veterinarians"

    def __init__(self, **kwargs: Any) -> None:
        """Initialize Veterinarian with default values."""
        if "is_active" not in kwargs:
            kwargs["is_active"] = True

        super().__init__(**kwargs)

    first_name: Mapped[str] = mapped_column(
        String(100), nullable=False, comment="Veterinarian's first name(s)"
    )

    last_name: Mapped[str] = mapped_column(
        String(100), nullable=False, comment="Veterinarian's last name(s)"
    )

    specialty: Mapped[Optional[str]] = mapped_column(
        String(150), nullable=True, comment="Medical specialty"
    )

    phone: Mapped[Optional[str]] = mapped_column(
        String(30), nullable=True, comment="Contact phone number"
    )

    email: Mapped[Optional[str]] = mapped_column(
        String(255), nullable=True, comment="Contact email address"
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        index=True,
        comment="Whether the veterinarian takes new appointments",
    )

    __table_args__ = (Index("idx_veterinarians_name", "last_name", "first_name"),)

    def __repr__(self) -> str:
        """Return string representation of the Veterinarian model."""
        return (
            f"<Veterinarian(id={self.id}, name='{self.full_name}', "
            f"is_active={self.is_active})>"
        )

    @property
    def full_name(self) -> str:
        """First and last name joined."""
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def display_name(self) -> str:
        """Get a display-friendly name including the specialty."""
        name = f"Dr. {self.full_name}"
        if self.specialty:
            return f"{name} - {self.specialty}"
        return name

    @property
    def sort_key(self) -> tuple:
        """Ordering used when listing eligible veterinarians."""
        return (self.last_name.lower(), self.first_name.lower(), str(self.id))

    def deactivate(self) -> None:
        """Stop offering the veterinarian for new appointments."""
        self.is_active = False

    def activate(self) -> None:
        """Offer the veterinarian for new appointments again."""
        self.is_active = True
