"""
Pet model for the vet-scheduling package.

Pets are read by reference from the scheduling engine; this model carries
the identifying and physical data shown alongside appointments.
"""

import enum
import uuid
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import CheckConstraint, Enum, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel


class PetSpecies(enum.Enum):
    """Enumeration of pet species supported by the clinic."""

    DOG = "dog"
    CAT = "cat"
    BIRD = "bird"
    RABBIT = "rabbit"
    RODENT = "rodent"
    REPTILE = "reptile"
    OTHER = "other"


class PetSex(enum.Enum):
    """Enumeration of pet sexes."""

    MALE = "male"
    FEMALE = "female"
    UNKNOWN = "unknown"


class Pet(BaseModel):
    """Pet model linked to its owning client."""

    __tablename__ = "pets"

    def __init__(self, **kwargs: Any) -> None:
        """Initialize Pet with default values."""
        if "sex" not in kwargs:
            kwargs["sex"] = PetSex.UNKNOWN

        super().__init__(**kwargs)

    client_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("clients.id"),
        nullable=False,
        index=True,
        comment="UUID of the pet's owner",
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False, comment="Pet's name")

    species: Mapped[PetSpecies] = mapped_column(
        Enum(PetSpecies), nullable=False, index=True, comment="Pet's species"
    )

    breed: Mapped[Optional[str]] = mapped_column(
        String(100), nullable=True, comment="Pet's breed"
    )

    age: Mapped[Optional[int]] = mapped_column(
        Integer, nullable=True, comment="Age in years"
    )

    sex: Mapped[PetSex] = mapped_column(
        Enum(PetSex), nullable=False, default=PetSex.UNKNOWN, comment="Pet's sex"
    )

    weight_kg: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(6, 2), nullable=True, comment="Weight in kilograms"
    )

    __table_args__ = (
        CheckConstraint("age IS NULL OR age >= 0", name="ck_pets_age_non_negative"),
        CheckConstraint(
            "weight_kg IS NULL OR weight_kg > 0", name="ck_pets_weight_positive"
        ),
    )

    def __repr__(self) -> str:
        return f"<Pet(id={self.id}, name='{self.name}', species='{self.species.value}')>"

    @property
    def weight_display(self) -> str:
        """Get formatted weight display."""
        if self.weight_kg is None:
            return "Unknown"
        return f"{self.weight_kg} kg"
