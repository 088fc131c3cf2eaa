"""
Record store abstraction and its SQLAlchemy implementation.
"""

from .base import RESOURCES, RecordId, RecordStore, resolve_resource
from .sqlalchemy_store import SQLAlchemyRecordStore, coerce_id

__all__ = [
    "RESOURCES",
    "RecordId",
    "RecordStore",
    "SQLAlchemyRecordStore",
    "coerce_id",
    "resolve_resource",
]
