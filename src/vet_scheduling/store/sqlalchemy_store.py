"""
SQLAlchemy implementation of the record store.

Each store call runs in its own transaction obtained from a
``SessionManager``. Returned objects are detached model instances whose
attributes stay loaded after the session closes.
"""

import logging
import uuid
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Type, Union

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..database.session import SessionManager
from ..exceptions import RecordNotFoundException, StoreException, ValidationException
from ..models import BaseModel
from .base import RecordId, RecordStore, resolve_resource

logger = logging.getLogger(__name__)

# Managed by the store, never taken from caller supplied fields
READ_ONLY_FIELDS = frozenset({"id", "created_at", "updated_at"})


def coerce_id(resource: str, record_id: RecordId) -> uuid.UUID:
    """
    Convert a record id to ``uuid.UUID``.

    A malformed id cannot name an existing record, so it is reported as not
    found rather than as a validation error.
    """
    if isinstance(record_id, uuid.UUID):
        return record_id
    try:
        return uuid.UUID(str(record_id))
    except (TypeError, ValueError):
        raise RecordNotFoundException(resource, record_id)


class SQLAlchemyRecordStore(RecordStore):
    """Record store backed by an async SQLAlchemy session manager."""

    def __init__(self, session_manager: SessionManager):
        self.session_manager = session_manager

    async def list(self, resource: str, **filters: Any) -> List[Any]:
        model = resolve_resource(resource)
        order_by = filters.pop("order_by", None)
        stmt = select(model)

        for name, value in filters.items():
            column = self._column(model, name)
            if isinstance(value, (list, tuple, set, frozenset)):
                stmt = stmt.where(column.in_(list(value)))
            elif value is None:
                stmt = stmt.where(column.is_(None))
            else:
                stmt = stmt.where(column == value)

        for key in self._order_keys(order_by):
            descending = key.startswith("-")
            column = self._column(model, key.lstrip("-"))
            stmt = stmt.order_by(column.desc() if descending else column.asc())

        try:
            async with self.session_manager.get_transaction() as session:
                result = await session.execute(stmt)
                records = list(result.scalars().all())
        except SQLAlchemyError as e:
            raise self._store_error("list", resource, e)

        logger.debug(f"Listed {len(records)} {resource} with filters {filters}")
        return records

    async def get(self, resource: str, record_id: RecordId) -> Any:
        model = resolve_resource(resource)
        key = coerce_id(resource, record_id)
        try:
            async with self.session_manager.get_transaction() as session:
                return await self._load(session, model, resource, key)
        except SQLAlchemyError as e:
            raise self._store_error("get", resource, e)

    async def create(self, resource: str, fields: Mapping[str, Any]) -> Any:
        model = resolve_resource(resource)
        values = self._writable(model, fields)
        try:
            async with self.session_manager.get_transaction() as session:
                instance = model(**values)
                session.add(instance)
                await session.flush()
        except SQLAlchemyError as e:
            raise self._store_error("create", resource, e)

        logger.debug(f"Created {resource} record {instance.id}")
        return instance

    async def update(
        self, resource: str, record_id: RecordId, fields: Mapping[str, Any]
    ) -> Any:
        model = resolve_resource(resource)
        key = coerce_id(resource, record_id)
        values = self._writable(model, fields)
        try:
            async with self.session_manager.get_transaction() as session:
                instance = await self._load(session, model, resource, key)
                instance.update_fields(**values)
                await session.flush()
        except SQLAlchemyError as e:
            raise self._store_error("update", resource, e)

        logger.debug(f"Updated {resource} record {key}: {sorted(values)}")
        return instance

    async def delete(self, resource: str, record_id: RecordId) -> uuid.UUID:
        model = resolve_resource(resource)
        key = coerce_id(resource, record_id)
        try:
            async with self.session_manager.get_transaction() as session:
                instance = await self._load(session, model, resource, key)
                await session.delete(instance)
        except SQLAlchemyError as e:
            raise self._store_error("delete", resource, e)

        logger.debug(f"Deleted {resource} record {key}")
        return key

    @staticmethod
    async def _load(
        session: AsyncSession, model: Type[BaseModel], resource: str, key: uuid.UUID
    ) -> Any:
        instance = await session.get(model, key)
        if instance is None:
            raise RecordNotFoundException(resource, key)
        return instance

    @staticmethod
    def _column(model: Type[BaseModel], name: str) -> Any:
        if name not in model.column_names():
            raise ValidationException(
                f"'{model.get_table_name()}' has no column '{name}'",
                field=name,
            )
        return getattr(model, name)

    @staticmethod
    def _order_keys(order_by: Optional[Union[str, Sequence[str]]]) -> Iterable[str]:
        if not order_by:
            return ()
        if isinstance(order_by, str):
            return (order_by,)
        return tuple(order_by)

    @staticmethod
    def _writable(model: Type[BaseModel], fields: Mapping[str, Any]) -> dict:
        values = {k: v for k, v in fields.items() if k not in READ_ONLY_FIELDS}
        unknown = sorted(set(values) - model.column_names())
        if unknown:
            raise ValidationException(
                f"'{model.get_table_name()}' has no column '{unknown[0]}'",
                field=unknown[0],
                validation_errors={"unknown_fields": unknown},
            )
        return values

    @staticmethod
    def _store_error(
        operation: str, resource: str, error: SQLAlchemyError
    ) -> StoreException:
        logger.error(f"Record store {operation} on {resource} failed: {error}")
        return StoreException(
            f"Record store {operation} on '{resource}' failed",
            operation=operation,
            resource=resource,
            original_error=error,
        )
