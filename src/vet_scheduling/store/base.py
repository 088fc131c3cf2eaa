"""
Record store contract for the scheduling engine.

The engine performs all I/O through a ``RecordStore``: logical list, get,
create, update and delete operations addressed by resource name.
"""

import uuid
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Type, Union

from ..exceptions import ConfigurationException
from ..models import (
    Appointment,
    BaseModel,
    Client,
    Medication,
    Pet,
    Shift,
    Treatment,
    Veterinarian,
)

RecordId = Union[uuid.UUID, str]

# Resource name -> model class
RESOURCES: Dict[str, Type[BaseModel]] = {
    "appointments": Appointment,
    "veterinarians": Veterinarian,
    "shifts": Shift,
    "pets": Pet,
    "clients": Client,
    "treatments": Treatment,
    "medications": Medication,
}


def resolve_resource(resource: str) -> Type[BaseModel]:
    """
    Map a resource name to its model class.

    Raises:
        ConfigurationException: If the resource name is unknown
    """
    try:
        return RESOURCES[resource]
    except KeyError:
        raise ConfigurationException(
            f"Unknown resource '{resource}'. Known: {', '.join(sorted(RESOURCES))}",
            config_key="resource",
            config_value=resource,
        )


class RecordStore(ABC):
    """
    Abstract record store.

    Implementations must make every call atomic: a call that raises has
    written nothing.
    """

    @abstractmethod
    async def list(self, resource: str, **filters: Any) -> List[Any]:
        """
        List records of a resource.

        Keyword filters are equality matches on columns; a list, tuple, set
        or frozenset value matches any of its members. The reserved
        ``order_by`` keyword takes a column name, or a sequence of them,
        prefixed with ``-`` for descending order.
        """

    @abstractmethod
    async def get(self, resource: str, record_id: RecordId) -> Any:
        """Fetch one record, raising ``RecordNotFoundException`` if missing."""

    @abstractmethod
    async def create(self, resource: str, fields: Mapping[str, Any]) -> Any:
        """Create a record. The store assigns ``id`` and ``created_at``."""

    @abstractmethod
    async def update(
        self, resource: str, record_id: RecordId, fields: Mapping[str, Any]
    ) -> Any:
        """Merge ``fields`` into an existing record and return it."""

    @abstractmethod
    async def delete(self, resource: str, record_id: RecordId) -> uuid.UUID:
        """Physically delete a record and return its id."""
