"""
Database connection and session management.

This module provides async SQLAlchemy engine configuration and session
management for the scheduling record store.
"""

from .connection import (
    DatabaseConfig,
    check_connection,
    close_engine,
    create_engine,
)
from .session import (
    SessionManager,
    get_session,
    get_session_manager,
    get_transaction,
    initialize_session_manager,
)

__all__ = [
    # Connection utilities
    "DatabaseConfig",
    "create_engine",
    "check_connection",
    "close_engine",
    # Session management
    "SessionManager",
    "initialize_session_manager",
    "get_session_manager",
    "get_session",
    "get_transaction",
]
