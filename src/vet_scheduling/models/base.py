"""
Base model class for all SQLAlchemy models in the vet-scheduling package.

This module provides the foundational base model class that all other models
inherit from, including the UUID primary key, audit timestamps and common
utility methods.

The BaseModel class follows modern SQLAlchemy 2.0 patterns with:
- UUID primary keys generated client side
- Automatic timestamp management for audit trails
- Common utility methods for data conversion and updates

Example:
    >>> from vet_scheduling.models.base import BaseModel
    >>> from sqlalchemy.orm import Mapped, mapped_column
    >>> from sqlalchemy import String

    >>> class MyModel(BaseModel):
    ...     __tablename__ = "my_table"
    ...     name: Mapped[str] = mapped_column(String(100))

    >>> instance = MyModel(name="Test")
    >>> data = instance.to_dict()
    >>> print(data['name'])  # "Test"
"""

import enum
import uuid
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Any, Dict, TypeVar

from sqlalchemy import DateTime, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Type variable for model classes
T = TypeVar("T", bound="BaseModel")


def utc_now() -> datetime:
    """Return the current timezone-aware UTC timestamp."""
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """
    Base declarative class for all SQLAlchemy models.

    Uses the generic ``Uuid`` type so the same models run on PostgreSQL
    (native UUID) and SQLite (CHAR(32)).

    Attributes:
        type_annotation_map: Maps Python types to SQLAlchemy column types
    """

    type_annotation_map = {
        uuid.UUID: Uuid(as_uuid=True),
    }


class BaseModel(Base):
    """
    Abstract base model class providing common functionality for all entities.

    Attributes:
        id (UUID): Primary key, automatically generated UUID4
        created_at (datetime): Timestamp when record was created (UTC)
        updated_at (datetime): Timestamp when record was last updated (UTC)

    Note:
        This is an abstract base class and cannot be instantiated directly.
        All concrete models must define a __tablename__ attribute.
    """

    __abstract__ = True

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    # Audit fields
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
    )

    def __repr__(self) -> str:
        """
        Return string representation of the model instance.

        Returns:
            String in format: <ModelName(id=uuid)>
        """
        return f"<{self.__class__.__name__}(id={self.id})>"

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert model instance to dictionary representation.

        Converts all column values to JSON-serializable types:
        - datetime, date and time objects to ISO format strings
        - UUID objects to string representation
        - Enum members to their value
        - Decimal to string
        - Other types remain unchanged

        Returns:
            Dictionary with column names as keys and serialized values.
        """
        result: Dict[str, Any] = {}
        for column in self.__table__.columns:
            value = getattr(self, column.key)
            if isinstance(value, (datetime, date, time)):
                result[column.key] = value.isoformat()
            elif isinstance(value, uuid.UUID):
                result[column.key] = str(value)
            elif isinstance(value, enum.Enum):
                result[column.key] = value.value
            elif isinstance(value, Decimal):
                result[column.key] = str(value)
            else:
                result[column.key] = value
        return result

    @classmethod
    def get_table_name(cls) -> str:
        """
        Get the database table name for this model.

        Returns:
            The table name as defined in __tablename__.
        """
        return cls.__tablename__

    @classmethod
    def column_names(cls) -> set:
        """Return the mapped column attribute names for this model."""
        return {column.key for column in cls.__table__.columns}

    def update_fields(self, **kwargs: Any) -> None:
        """
        Update multiple fields on the model instance in a single operation.

        Args:
            **kwargs: Field names as keys and new values as values.
                     Only mapped columns can be updated.

        Raises:
            AttributeError: If any field name is not a column of the model.

        Note:
            All field names are checked before any attribute is assigned, so
            a bad field leaves the instance untouched.
        """
        unknown = [field for field in kwargs if field not in self.column_names()]
        if unknown:
            raise AttributeError(
                f"'{self.__class__.__name__}' has no attribute '{unknown[0]}'"
            )

        for field, value in kwargs.items():
            setattr(self, field, value)
