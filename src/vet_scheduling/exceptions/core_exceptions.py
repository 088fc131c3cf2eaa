"""
Core exceptions for the vet-scheduling package.

This module defines the exception hierarchy used by the scheduling engine.
Every rejection is scoped to the operation that raised it and reported back
to the immediate caller; nothing here is retried automatically.
"""

import logging
import time
import traceback
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse, urlunparse


class VetSchedulingException(Exception):
    """
    Base exception class for all vet-scheduling exceptions.

    Provides a consistent interface for error handling across the package.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary format.

        Returns:
            Dictionary representation of the exception
        """
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "timestamp": time.time(),
        }

    def get_debug_info(self) -> Dict[str, Any]:
        """
        Get detailed debug information for the exception.

        Returns:
            Dictionary with debug information including traceback
        """
        debug_info = self.to_dict()
        formatted = traceback.format_exc()
        debug_info.update(
            {
                "traceback": (
                    formatted if formatted.strip() != "NoneType: None" else None
                ),
                "module": self.__class__.__module__,
                "class_name": self.__class__.__name__,
            }
        )
        return debug_info

    def log_error(
        self, logger: Optional[logging.Logger] = None, level: int = logging.ERROR
    ) -> None:
        """
        Log the exception with appropriate level and context.

        Args:
            logger: Logger instance to use (creates default if None)
            level: Logging level to use
        """
        if logger is None:
            logger = logging.getLogger(__name__)

        log_data = {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }

        logger.log(
            level,
            f"Exception occurred: {self.message}",
            extra={"exception_data": log_data},
        )

    def __str__(self) -> str:
        """String representation of the exception."""
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message


class DatabaseException(VetSchedulingException):
    """Base exception for database-related errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None,
    ):
        """
        Initialize database exception.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
            details: Additional error details
            original_error: Original exception that caused this error
        """
        super().__init__(message, error_code, details)
        self.original_error = original_error

        if original_error and "original_error" not in self.details:
            self.details["original_error"] = str(original_error)


class ConnectionException(DatabaseException):
    """Exception raised when database connection fails."""

    def __init__(
        self,
        message: str = "Database connection failed",
        database_url: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        """
        Initialize connection exception.

        Args:
            message: Error message
            database_url: Database URL (will be sanitized)
            original_error: Original exception
        """
        details = {}
        if database_url:
            details["database_url"] = self._sanitize_url(database_url)

        super().__init__(
            message=message,
            error_code="DATABASE_CONNECTION_ERROR",
            details=details,
            original_error=original_error,
        )

    @staticmethod
    def _sanitize_url(url: str) -> str:
        """Remove credentials from database URL for logging."""
        try:
            parsed = urlparse(url)
            if not parsed.hostname:
                return url
            netloc = parsed.hostname
            if parsed.port:
                netloc = f"{netloc}:{parsed.port}"
            return urlunparse(parsed._replace(netloc=netloc))
        except (ValueError, AttributeError) as e:
            return f"[URL_PARSE_ERROR: {e}]"


class StoreException(DatabaseException):
    """Exception raised when a record store operation fails."""

    def __init__(
        self,
        message: str = "Record store operation failed",
        operation: Optional[str] = None,
        resource: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        """
        Initialize store exception.

        Args:
            message: Error message
            operation: Store operation that failed (list, get, create, ...)
            resource: Resource name the operation targeted
            original_error: Original exception
        """
        details = {}
        if operation:
            details["operation"] = operation
        if resource:
            details["resource"] = resource

        super().__init__(
            message=message,
            error_code="STORE_ERROR",
            details=details,
            original_error=original_error,
        )


class RecordNotFoundException(VetSchedulingException):
    """Exception raised when a referenced record does not exist."""

    def __init__(
        self,
        resource: str,
        record_id: Any,
        message: Optional[str] = None,
    ):
        """
        Initialize not-found exception.

        Args:
            resource: Resource name (appointments, pets, ...)
            record_id: Identifier that could not be resolved
            message: Optional custom message
        """
        super().__init__(
            message=message or f"{resource} record '{record_id}' not found",
            error_code="RECORD_NOT_FOUND",
            details={"resource": resource, "record_id": str(record_id)},
        )
        self.resource = resource
        self.record_id = record_id


class ValidationException(VetSchedulingException):
    """Base exception for data validation errors."""

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        value: Optional[Any] = None,
        validation_errors: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize validation exception.

        Args:
            message: Error message
            field: Field that failed validation
            value: Value that failed validation
            validation_errors: Detailed validation errors
        """
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)
        if validation_errors:
            details["validation_errors"] = validation_errors

        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            details=details,
        )
        self.field = field


class SchemaValidationException(ValidationException):
    """Exception raised when Pydantic schema validation fails."""

    def __init__(
        self,
        message: str = "Schema validation failed",
        schema_name: Optional[str] = None,
        validation_errors: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize schema validation exception.

        Args:
            message: Error message
            schema_name: Name of the schema that failed validation
            validation_errors: Formatted pydantic validation errors
        """
        super().__init__(
            message=message,
            field=None,
            value=None,
            validation_errors=validation_errors,
        )
        self.error_code = "SCHEMA_VALIDATION_ERROR"
        if schema_name:
            self.details["schema_name"] = schema_name


class BusinessRuleException(ValidationException):
    """Exception raised when business rule validation fails."""

    def __init__(
        self,
        message: str = "Business rule validation failed",
        rule_name: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize business rule exception.

        Args:
            message: Error message
            rule_name: Name of the business rule that failed
            context: Additional context about the failure
        """
        super().__init__(
            message=message,
            field=None,
            value=None,
            validation_errors=None,
        )
        self.error_code = "BUSINESS_RULE_ERROR"
        self.rule_name = rule_name
        if rule_name:
            self.details["rule_name"] = rule_name
        if context:
            self.details["context"] = context


class SlotConflictException(BusinessRuleException):
    """Exception raised when the requested slot is held by another appointment."""

    def __init__(
        self,
        appointment_date: Any,
        appointment_time: Any,
        conflicting_ids: Optional[List[Any]] = None,
        message: str = "The selected slot is already taken, please choose another time",
    ):
        context = {
            "date": str(appointment_date),
            "time": str(appointment_time),
        }
        if conflicting_ids:
            context["conflicting_ids"] = [str(i) for i in conflicting_ids]

        super().__init__(message=message, rule_name="slot_available", context=context)
        self.error_code = "SLOT_UNAVAILABLE"


class InvalidStatusTransitionException(BusinessRuleException):
    """Exception raised when a status change is not allowed from the current state."""

    def __init__(self, current_status: Any, requested_status: Any):
        current = getattr(current_status, "value", current_status)
        requested = getattr(requested_status, "value", requested_status)
        super().__init__(
            message=f"Cannot change appointment status from '{current}' to '{requested}'",
            rule_name="status_transition",
            context={"current_status": current, "requested_status": requested},
        )
        self.error_code = "INVALID_STATUS_TRANSITION"


class VeterinarianUnavailableException(BusinessRuleException):
    """Exception raised when a veterinarian has no active shift covering a slot."""

    def __init__(self, veterinarian_id: Any, appointment_date: Any, appointment_time: Any):
        super().__init__(
            message="The selected veterinarian is not available at this time",
            rule_name="veterinarian_available",
            context={
                "veterinarian_id": str(veterinarian_id),
                "date": str(appointment_date),
                "time": str(appointment_time),
            },
        )
        self.error_code = "VETERINARIAN_UNAVAILABLE"


class ConfigurationException(VetSchedulingException):
    """Base exception for configuration-related errors."""

    def __init__(
        self,
        message: str = "Configuration error",
        config_key: Optional[str] = None,
        config_value: Optional[str] = None,
    ):
        """
        Initialize configuration exception.

        Args:
            message: Error message
            config_key: Configuration key that caused the error
            config_value: Configuration value (will be sanitized)
        """
        details = {}
        if config_key:
            details["config_key"] = config_key
        if config_value:
            details["config_value"] = self._sanitize_config_value(
                config_key, config_value
            )

        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            details=details,
        )

    @staticmethod
    def _sanitize_config_value(key: Optional[str], value: str) -> str:
        """Sanitize configuration values to avoid exposing secrets."""
        if not key:
            return "[REDACTED]"

        sensitive_keys = ["password", "secret", "key", "token", "credential", "url"]
        if any(sensitive in key.lower() for sensitive in sensitive_keys):
            return "[REDACTED]"

        return value


# Utility functions for exception handling and error formatting


def format_validation_errors(errors: List[Dict[str, Any]]) -> Dict[str, List[str]]:
    """
    Format Pydantic validation errors into a user-friendly structure.

    Args:
        errors: List of Pydantic validation errors

    Returns:
        Dictionary mapping field names to lists of error messages
    """
    formatted_errors: Dict[str, List[str]] = {}

    for error in errors:
        field_path = ".".join(str(loc) for loc in error.get("loc", []))
        if not field_path:
            field_path = "root"

        message = error.get("msg", "Validation error")
        error_type = error.get("type", "unknown")

        if error_type == "value_error":
            formatted_message = message
        elif error_type == "missing":
            formatted_message = "This field is required"
        else:
            formatted_message = f"{message} (type: {error_type})"

        formatted_errors.setdefault(field_path, []).append(formatted_message)

    return formatted_errors


def create_error_response(
    exception: VetSchedulingException,
    include_debug: bool = False,
    include_traceback: bool = False,
) -> Dict[str, Any]:
    """
    Create a standardized error response from an exception.

    Args:
        exception: The exception to format
        include_debug: Whether to include debug information
        include_traceback: Whether to include traceback information

    Returns:
        Standardized error response dictionary
    """
    response: Dict[str, Any] = {
        "success": False,
        "error": {
            "type": exception.__class__.__name__,
            "code": exception.error_code,
            "message": exception.message,
        },
    }

    if exception.details:
        response["error"]["details"] = exception.details

    if include_debug:
        debug_info = exception.get_debug_info()
        response["debug"] = {
            "timestamp": debug_info["timestamp"],
            "module": debug_info["module"],
            "class_name": debug_info["class_name"],
        }

        if include_traceback and debug_info.get("traceback"):
            response["debug"]["traceback"] = debug_info["traceback"]

    return response


def log_exception_context(
    exception: Exception,
    context: Dict[str, Any],
    logger: Optional[logging.Logger] = None,
    level: int = logging.ERROR,
) -> None:
    """
    Log an exception with additional context information.

    Args:
        exception: The exception to log
        context: Additional context information
        logger: Logger instance to use
        level: Logging level
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    if isinstance(exception, VetSchedulingException):
        log_data = exception.to_dict()
        log_data["context"] = context
        logger.log(
            level,
            f"Exception with context: {exception.message}",
            extra={"exception_data": log_data},
        )
    else:
        logger.log(
            level,
            f"Unexpected exception: {str(exception)}",
            extra={
                "exception_type": exception.__class__.__name__,
                "exception_message": str(exception),
                "context": context,
            },
        )
