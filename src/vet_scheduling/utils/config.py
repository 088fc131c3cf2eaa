"""
Configuration management utilities.

This module provides environment variable handling with type conversion,
database URL validation, logging configuration utilities and the settings
object that parameterizes the scheduling engine.
"""

import logging
import logging.config
import os
from dataclasses import dataclass, field
from datetime import time
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union
from urllib.parse import parse_qs, urlparse

from .datetime_utils import parse_time_of_day

ENV_PREFIX = "VET_SCHEDULING_"

PACKAGE_LOGGER = "vet_scheduling"

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./vet_scheduling.db"


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""

    pass


class LogLevel(Enum):
    """Enumeration for log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ConflictScope(Enum):
    """
    Key used to decide whether two appointments collide.

    CLINIC locks a (date, time) slot for the whole clinic, a single shared
    calendar. VETERINARIAN locks (date, time, veterinarian) so different
    veterinarians can be booked into the same slot.
    """

    CLINIC = "clinic"
    VETERINARIAN = "veterinarian"


class EnvironmentConfig:
    """Utility class for handling environment variables with type conversion."""

    @staticmethod
    def get_str(
        key: str, default: Optional[str] = None, required: bool = False
    ) -> Optional[str]:
        """
        Get a string environment variable.

        Args:
            key: Environment variable key
            default: Default value if not found
            required: Whether the variable is required

        Returns:
            String value or default

        Raises:
            ConfigError: If required variable is missing
        """
        value = os.getenv(key, default)

        if required and value is None:
            raise ConfigError(f"Required environment variable '{key}' is not set")

        return value

    @staticmethod
    def get_int(
        key: str, default: Optional[int] = None, required: bool = False
    ) -> Optional[int]:
        """
        Get an integer environment variable.

        Args:
            key: Environment variable key
            default: Default value if not found
            required: Whether the variable is required

        Returns:
            Integer value or default

        Raises:
            ConfigError: If required variable is missing or invalid
        """
        value = os.getenv(key)

        if value is None:
            if required:
                raise ConfigError(f"Required environment variable '{key}' is not set")
            return default

        try:
            return int(value)
        except ValueError:
            raise ConfigError(
                f"Environment variable '{key}' must be an integer, got: {value}"
            )

    @staticmethod
    def get_bool(
        key: str, default: Optional[bool] = None, required: bool = False
    ) -> Optional[bool]:
        """
        Get a boolean environment variable.

        Args:
            key: Environment variable key
            default: Default value if not found
            required: Whether the variable is required

        Returns:
            Boolean value or default

        Raises:
            ConfigError: If required variable is missing
        """
        value = os.getenv(key)

        if value is None:
            if required:
                raise ConfigError(f"Required environment variable '{key}' is not set")
            return default

        return value.lower() in ("true", "1", "yes", "on", "enabled")


class DatabaseURLValidator:
    """Utility class for validating database URLs."""

    SUPPORTED_DRIVERS = {
        "postgresql": ["postgresql", "postgresql+asyncpg"],
        "sqlite": ["sqlite", "sqlite+aiosqlite"],
    }

    @classmethod
    def validate_url(cls, url: str) -> Dict[str, Any]:
        """
        Validate a database URL and return parsed components.

        Args:
            url: Database URL to validate

        Returns:
            Dictionary with validation results and parsed components

        Raises:
            ConfigError: If URL is invalid
        """
        if not url:
            raise ConfigError("Database URL cannot be empty")

        try:
            parsed = urlparse(url)
        except ValueError as e:
            raise ConfigError(f"Invalid URL format: {e}")

        if not parsed.scheme:
            raise ConfigError(
                "Database URL must include a scheme (e.g., postgresql://)"
            )

        backend = None
        for db_type, drivers in cls.SUPPORTED_DRIVERS.items():
            if parsed.scheme in drivers:
                backend = db_type
                break

        if backend is None:
            supported_list = []
            for drivers in cls.SUPPORTED_DRIVERS.values():
                supported_list.extend(drivers)
            raise ConfigError(
                f"Unsupported database driver '{parsed.scheme}'. Supported: {', '.join(supported_list)}"
            )

        if backend != "sqlite":
            if not parsed.hostname:
                raise ConfigError("Database URL must include a hostname")
            if not parsed.path.lstrip("/"):
                raise ConfigError("Database URL must include a database name")

        return {
            "valid": True,
            "backend": backend,
            "scheme": parsed.scheme,
            "hostname": parsed.hostname,
            "port": parsed.port,
            "database": parsed.path.lstrip("/") if parsed.path else "",
            "username": parsed.username,
            "password": parsed.password,
            "query": dict(parse_qs(parsed.query)),
        }


class LoggingConfigurator:
    """Utility class for configuring logging."""

    DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @staticmethod
    def configure_basic_logging(
        level: Union[str, LogLevel] = LogLevel.INFO,
        format_string: Optional[str] = None,
        log_file: Optional[str] = None,
    ) -> None:
        """
        Configure basic logging for the application.

        Args:
            level: Logging level
            format_string: Custom format string
            log_file: Optional log file path
        """
        if isinstance(level, LogLevel):
            level = level.value

        basic_config_args: Dict[str, Any] = {
            "level": level,
            "format": format_string or LoggingConfigurator.DEFAULT_FORMAT,
            "datefmt": "%Y-%m-%d %H:%M:%S",
        }

        if log_file:
            basic_config_args["filename"] = log_file
            basic_config_args["filemode"] = "a"

        logging.basicConfig(**basic_config_args)

    @staticmethod
    def set_package_level(level: Union[str, LogLevel]) -> None:
        """Set the level of the ``vet_scheduling`` logger and its module loggers."""
        if isinstance(level, LogLevel):
            level = level.value
        logging.getLogger(PACKAGE_LOGGER).setLevel(level)

    @staticmethod
    def configure_structured_logging(
        config_dict: Optional[Dict[str, Any]] = None,
        config_file: Optional[str] = None,
        level: Union[str, LogLevel] = LogLevel.INFO,
    ) -> None:
        """
        Configure structured logging using a dictionary or file.

        Args:
            config_dict: Logging configuration dictionary
            config_file: Path to logging configuration file
            level: Level of the package logger when the default config is used
        """
        if isinstance(level, LogLevel):
            level = level.value

        if config_file and Path(config_file).exists():
            logging.config.fileConfig(config_file)
        elif config_dict:
            logging.config.dictConfig(config_dict)
        else:
            default_config = {
                "version": 1,
                "disable_existing_loggers": False,
                "formatters": {
                    "standard": {"format": LoggingConfigurator.DEFAULT_FORMAT},
                    "detailed": {
                        "format": "%(asctime)s - %(name)s - %(levelname)s - %(module)s - %(funcName)s - %(message)s"
                    },
                },
                "handlers": {
                    "console": {
                        "class": "logging.StreamHandler",
                        "level": level,
                        "formatter": "standard",
                        "stream": "ext://sys.stdout",
                    }
                },
                "loggers": {
                    PACKAGE_LOGGER: {
                        "level": level,
                        "handlers": ["console"],
                        "propagate": False,
                    }
                },
                "root": {"level": "WARNING", "handlers": ["console"]},
            }
            logging.config.dictConfig(default_config)


@dataclass
class SchedulingSettings:
    """
    Settings for the scheduling engine.

    Every value has a default matching the clinic's observed behaviour, so
    ``SchedulingSettings()`` is a valid configuration.
    """

    database_url: str = DEFAULT_DATABASE_URL
    conflict_scope: ConflictScope = ConflictScope.CLINIC
    require_veterinarian: bool = False
    enforce_shift_availability: bool = True
    slot_start: time = field(default_factory=lambda: time(8, 0))
    slot_end: time = field(default_factory=lambda: time(19, 30))
    slot_interval_minutes: int = 30
    log_level: LogLevel = LogLevel.INFO

    def __post_init__(self) -> None:
        """Normalize loosely typed values and validate the slot grid."""
        if isinstance(self.conflict_scope, str):
            self.conflict_scope = self._parse_enum(
                ConflictScope, self.conflict_scope, "CONFLICT_SCOPE"
            )
        if isinstance(self.log_level, str):
            self.log_level = self._parse_enum(
                LogLevel, self.log_level.upper(), "LOG_LEVEL"
            )
        try:
            self.slot_start = parse_time_of_day(self.slot_start)
            self.slot_end = parse_time_of_day(self.slot_end)
        except ValueError as e:
            raise ConfigError(f"Invalid slot boundary: {e}")

        if self.slot_interval_minutes <= 0:
            raise ConfigError("SLOT_INTERVAL_MINUTES must be a positive integer")
        if self.slot_end < self.slot_start:
            raise ConfigError("SLOT_END must not be earlier than SLOT_START")

    @staticmethod
    def _parse_enum(enum_cls: type, value: str, key: str) -> Any:
        try:
            return enum_cls(value.strip().lower() if enum_cls is ConflictScope else value)
        except ValueError:
            allowed = ", ".join(member.value for member in enum_cls)
            raise ConfigError(f"{key} must be one of: {allowed}, got: {value}")

    @classmethod
    def from_environment(cls, prefix: str = ENV_PREFIX) -> "SchedulingSettings":
        """
        Build settings from ``<prefix>*`` environment variables.

        Missing variables fall back to the dataclass defaults.

        Raises:
            ConfigError: If a variable is present but invalid
        """
        defaults = cls()
        database_url = EnvironmentConfig.get_str(
            f"{prefix}DATABASE_URL", defaults.database_url
        )
        DatabaseURLValidator.validate_url(database_url)

        return cls(
            database_url=database_url,
            conflict_scope=EnvironmentConfig.get_str(
                f"{prefix}CONFLICT_SCOPE", defaults.conflict_scope.value
            ),
            require_veterinarian=EnvironmentConfig.get_bool(
                f"{prefix}REQUIRE_VETERINARIAN", defaults.require_veterinarian
            ),
            enforce_shift_availability=EnvironmentConfig.get_bool(
                f"{prefix}ENFORCE_SHIFT_AVAILABILITY",
                defaults.enforce_shift_availability,
            ),
            slot_start=EnvironmentConfig.get_str(
                f"{prefix}SLOT_START", defaults.slot_start.strftime("%H:%M")
            ),
            slot_end=EnvironmentConfig.get_str(
                f"{prefix}SLOT_END", defaults.slot_end.strftime("%H:%M")
            ),
            slot_interval_minutes=EnvironmentConfig.get_int(
                f"{prefix}SLOT_INTERVAL_MINUTES", defaults.slot_interval_minutes
            ),
            log_level=EnvironmentConfig.get_str(
                f"{prefix}LOG_LEVEL", defaults.log_level.value
            ),
        )
