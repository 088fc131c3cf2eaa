"""
Utility functions and helper modules.

This module provides common utility functions for date and time handling
and configuration management.
"""

from .datetime_utils import (
    format_time_of_day,
    get_current_utc,
    get_today,
    iter_day_slots,
    parse_date,
    parse_time_of_day,
)

from .config import (
    ConfigError,
    ConflictScope,
    DatabaseURLValidator,
    EnvironmentConfig,
    LoggingConfigurator,
    LogLevel,
    SchedulingSettings,
)

__all__ = [
    # DateTime utilities
    "format_time_of_day",
    "get_current_utc",
    "get_today",
    "iter_day_slots",
    "parse_date",
    "parse_time_of_day",
    # Configuration utilities
    "ConfigError",
    "ConflictScope",
    "DatabaseURLValidator",
    "EnvironmentConfig",
    "LoggingConfigurator",
    "LogLevel",
    "SchedulingSettings",
]
