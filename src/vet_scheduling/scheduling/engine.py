"""
Scheduling engine facade.

``SchedulingEngine`` is the single entry point an API or UI layer calls.
It wires the slot catalog, availability resolver, conflict detector,
lifecycle manager and history aggregator around one record store.
"""

import datetime as dt
import logging
import uuid
from typing import Any, List, Optional, Union

from ..database.connection import create_engine
from ..database.session import SessionManager
from ..models import Appointment, AppointmentStatus, Veterinarian
from ..schemas.history import VisitRecord
from ..store import RecordId, RecordStore, SQLAlchemyRecordStore, coerce_id
from ..utils.config import LoggingConfigurator, SchedulingSettings
from .availability import AvailabilityResolver, coerce_date
from .conflicts import ConflictDetector
from .history import HistoryAggregator, HistoryOrder
from .lifecycle import AppointmentLifecycleManager
from .shifts import ShiftService
from .slots import parse_slot, slots_from_settings

logger = logging.getLogger(__name__)


class SchedulingEngine:
    """Appointment scheduling and availability resolution engine."""

    def __init__(
        self,
        store: RecordStore,
        settings: Optional[SchedulingSettings] = None,
        session_manager: Optional[SessionManager] = None,
    ):
        """
        Initialize the engine.

        Args:
            store: Record store used for every read and write
            settings: Engine settings, defaults to ``SchedulingSettings()``
            session_manager: Owning session manager, closed by ``close()``
        """
        self.store = store
        self.settings = settings or SchedulingSettings()
        self.session_manager = session_manager

        self.resolver = AvailabilityResolver(store)
        self.detector = ConflictDetector(self.settings.conflict_scope)
        self.lifecycle = AppointmentLifecycleManager(
            store, self.settings, resolver=self.resolver, detector=self.detector
        )
        self.history = HistoryAggregator(store)
        self.shifts = ShiftService(store)
        self._slots = slots_from_settings(self.settings)

        logger.debug(
            f"Scheduling engine ready: {len(self._slots)} slots, "
            f"{self.settings.conflict_scope.value} conflict scope"
        )

    def generate_slots(self) -> List[dt.time]:
        """Return the bookable slots of a clinic day."""
        return list(self._slots)

    async def resolve_available_veterinarians(
        self,
        on_date: Union[dt.date, str],
        at: Optional[Union[dt.time, str]],
    ) -> List[Veterinarian]:
        return await self.resolver.resolve(on_date, at)

    async def has_conflict(
        self,
        on_date: Union[dt.date, str],
        at: Union[dt.time, str],
        exclude_id: Optional[RecordId] = None,
        veterinarian_id: Optional[RecordId] = None,
    ) -> bool:
        """Check whether the slot is held by another pending or confirmed appointment."""
        excluded = coerce_id("appointments", exclude_id) if exclude_id else None
        vet_id = coerce_id("veterinarians", veterinarian_id) if veterinarian_id else None
        conflicts = await self.lifecycle.find_conflicts(
            coerce_date(on_date), parse_slot(at), veterinarian_id=vet_id, exclude_id=excluded
        )
        return bool(conflicts)

    async def create_appointment(self, draft: Any) -> Appointment:
        return await self.lifecycle.create(draft)

    async def update_appointment(self, appointment_id: RecordId, fields: Any) -> Appointment:
        return await self.lifecycle.update(appointment_id, fields)

    async def change_status(
        self, appointment_id: RecordId, status: Union[AppointmentStatus, str]
    ) -> Appointment:
        return await self.lifecycle.change_status(appointment_id, status)

    async def cancel_appointment(self, appointment_id: RecordId) -> Appointment:
        return await self.lifecycle.cancel(appointment_id)

    async def purge_appointment(self, appointment_id: RecordId) -> uuid.UUID:
        return await self.lifecycle.purge(appointment_id)

    async def get_pet_history(
        self,
        pet_id: RecordId,
        order: Union[HistoryOrder, str] = HistoryOrder.CHRONOLOGICAL,
        limit: Optional[int] = None,
    ) -> List[VisitRecord]:
        return await self.history.get_pet_history(pet_id, order, limit)

    async def close(self) -> None:
        """Release the database connections owned by this engine, if any."""
        if self.session_manager is not None:
            await self.session_manager.close()


async def create_scheduling_engine(
    settings: Optional[SchedulingSettings] = None,
    create_schema: bool = True,
) -> SchedulingEngine:
    """
    Build an engine backed by SQLAlchemy from settings.

    Args:
        settings: Engine settings, read from the environment when omitted
        create_schema: Create missing tables before returning

    Returns:
        Ready to use scheduling engine
    """
    settings = settings or SchedulingSettings.from_environment()
    LoggingConfigurator.set_package_level(settings.log_level)

    engine = create_engine(settings.database_url)
    session_manager = SessionManager(engine)
    if create_schema:
        await session_manager.create_schema()

    store = SQLAlchemyRecordStore(session_manager)
    logger.info(f"Created scheduling engine ({settings.conflict_scope.value} scope)")
    return SchedulingEngine(store, settings, session_manager=session_manager)
