"""
Custom exceptions for the vet-scheduling package.

This module defines the exception hierarchy raised by the scheduling engine
and its record store.
"""

from .core_exceptions import (
    BusinessRuleException,
    ConfigurationException,
    ConnectionException,
    DatabaseException,
    InvalidStatusTransitionException,
    RecordNotFoundException,
    SchemaValidationException,
    SlotConflictException,
    StoreException,
    ValidationException,
    VeterinarianUnavailableException,
    VetSchedulingException,
    create_error_response,
    format_validation_errors,
    log_exception_context,
)

__all__ = [
    # Exception classes
    "VetSchedulingException",
    "DatabaseException",
    "ConnectionException",
    "StoreException",
    "RecordNotFoundException",
    "ValidationException",
    "SchemaValidationException",
    "BusinessRuleException",
    "SlotConflictException",
    "InvalidStatusTransitionException",
    "VeterinarianUnavailableException",
    "ConfigurationException",
    # Utility functions
    "format_validation_errors",
    "create_error_response",
    "log_exception_context",
]
