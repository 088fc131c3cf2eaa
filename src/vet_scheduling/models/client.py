"""
Client model for the vet-scheduling package.
"""

from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel


class Client(BaseModel):
    """Pet owner contact and identity record."""

    __tablename__ = "clients"

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)

    last_name: Mapped[str] = mapped_column(String(100), nullable=False)

    document_number: Mapped[Optional[str]] = mapped_column(
        String(30), nullable=True, unique=True, comment="National identity document"
    )

    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)

    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    address: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<Client(id={self.id}, name='{self.full_name}')>"

    @property
    def full_name(self) -> str:
        """First and last name joined."""
        return f"{self.first_name} {self.last_name}".strip()
