"""
Treatment and medication models for the vet-scheduling package.

A treatment records the clinical outcome of one appointment. Medications
are stored as ordered rows of their treatment.
"""

import uuid
from typing import List, Optional

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel


class Treatment(BaseModel):
    """Diagnosis and indicated treatment linked to an appointment."""

    __tablename__ = "treatments"

    appointment_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("appointments.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
        comment="UUID of the appointment this treatment belongs to",
    )

    diagnosis: Mapped[str] = mapped_column(Text, nullable=False)

    indicated_treatment: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    recommendations: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    medications: Mapped[List["Medication"]] = relationship(
        "Medication", cascade="all, delete-orphan", order_by="Medication.position"
    )

    def __repr__(self) -> str:
        return f"<Treatment(id={self.id}, appointment_id={self.appointment_id})>"


class Medication(BaseModel):
    """One prescribed medication entry of a treatment."""

    __tablename__ = "medications"

    treatment_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("treatments.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="UUID of the owning treatment",
    )

    name: Mapped[str] = mapped_column(String(150), nullable=False)

    dosage: Mapped[Optional[str]] = mapped_column(String(150), nullable=True)

    duration: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    position: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, comment="Order within the treatment"
    )

    def __repr__(self) -> str:
        return f"<Medication(id={self.id}, name='{self.name}')>"
