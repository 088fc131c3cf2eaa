"""
Appointment scheduling and availability resolution.

This package contains the slot catalog, the shift registry, availability
resolution, conflict detection, the appointment lifecycle, the per-pet
clinical history and the engine facade that ties them together.
"""

from .availability import AvailabilityResolver, resolve_for_registry
from .conflicts import ConflictDetector
from .engine import SchedulingEngine, create_scheduling_engine
from .history import HistoryAggregator, HistoryOrder, build_history
from .lifecycle import AppointmentLifecycleManager
from .shifts import ShiftRegistry, ShiftService
from .slots import (
    DEFAULT_SLOT_END,
    DEFAULT_SLOT_INTERVAL,
    DEFAULT_SLOT_START,
    format_slot,
    generate_slots,
    is_valid_slot,
    parse_slot,
)

__all__ = [
    # Slots
    "DEFAULT_SLOT_START",
    "DEFAULT_SLOT_END",
    "DEFAULT_SLOT_INTERVAL",
    "generate_slots",
    "format_slot",
    "parse_slot",
    "is_valid_slot",
    # Shifts and availability
    "ShiftRegistry",
    "ShiftService",
    "AvailabilityResolver",
    "resolve_for_registry",
    # Conflicts and lifecycle
    "ConflictDetector",
    "AppointmentLifecycleManager",
    # History
    "HistoryOrder",
    "HistoryAggregator",
    "build_history",
    # Facade
    "SchedulingEngine",
    "create_scheduling_engine",
]
