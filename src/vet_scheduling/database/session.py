"""
Database session management utilities for the vet-scheduling package.

This module provides the async session factory, session and transaction
context managers, and schema setup helpers used by the record store.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from sqlalchemy import MetaData
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from ..models.base import Base

logger = logging.getLogger(__name__)


class SessionManager:
    """Manages database sessions and provides transaction utilities."""

    def __init__(
        self, engine: AsyncEngine, session_config: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize session manager with database engine.

        Args:
            engine: SQLAlchemy async engine
            session_config: Optional session configuration overrides
        """
        self.engine = engine
        self._schema_ready = False

        # Objects handed back by the store must stay readable after commit
        default_config = {
            "expire_on_commit": False,
            "autoflush": True,
        }

        if session_config:
            default_config.update(session_config)

        self.session_factory = async_sessionmaker(
            bind=engine,
            class_=AsyncSession,
            autoflush=default_config["autoflush"],
            expire_on_commit=default_config["expire_on_commit"],
        )

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Context manager for database sessions with automatic cleanup.

        Yields:
            Database session

        Example:
            async with session_manager.get_session() as session:
                result = await session.execute(select(Appointment))
        """
        session = self.session_factory()
        try:
            yield session
        except Exception as e:
            await session.rollback()
            logger.error(f"Session error, rolling back: {e}")
            raise
        finally:
            await session.close()

    @asynccontextmanager
    async def get_transaction(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Context manager for database transactions with automatic commit/rollback.

        Yields:
            Database session within a transaction

        Example:
            async with session_manager.get_transaction() as session:
                session.add(appointment)
                # Committed when the block exits without an error
        """
        async with self.get_session() as session:
            async with session.begin():
                yield session

    async def create_schema(self, metadata: Optional[MetaData] = None) -> None:
        """
        Create all tables that do not exist yet.

        Args:
            metadata: Table definitions, defaults to the package models
        """
        metadata = metadata if metadata is not None else Base.metadata
        async with self.engine.begin() as conn:
            await conn.run_sync(metadata.create_all)
        self._schema_ready = True
        logger.info("Database schema created")

    async def drop_schema(self, metadata: Optional[MetaData] = None) -> None:
        """
        Drop all tables. Intended for tests and local resets.

        Args:
            metadata: Table definitions, defaults to the package models
        """
        metadata = metadata if metadata is not None else Base.metadata
        async with self.engine.begin() as conn:
            await conn.run_sync(metadata.drop_all)
        self._schema_ready = False
        logger.warning("All database tables dropped")

    async def close(self) -> None:
        """Dispose of the engine and all pooled connections."""
        await self.engine.dispose()
        logger.info("All database sessions and connections closed")

    @property
    def schema_ready(self) -> bool:
        """Check if ``create_schema`` has run on this manager."""
        return self._schema_ready


# Global session manager instance (will be initialized by application)
_session_manager: Optional[SessionManager] = None


def initialize_session_manager(engine: AsyncEngine) -> SessionManager:
    """
    Initialize the global session manager.

    Args:
        engine: SQLAlchemy async engine

    Returns:
        Initialized session manager
    """
    global _session_manager
    _session_manager = SessionManager(engine)
    logger.info("Session manager initialized")
    return _session_manager


def get_session_manager() -> SessionManager:
    """
    Get the global session manager instance.

    Raises:
        RuntimeError: If session manager is not initialized
    """
    if _session_manager is None:
        raise RuntimeError(
            "Session manager not initialized. Call initialize_session_manager() first."
        )
    return _session_manager


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Get a database session from the global session manager."""
    manager = get_session_manager()
    async with manager.get_session() as session:
        yield session


@asynccontextmanager
async def get_transaction() -> AsyncGenerator[AsyncSession, None]:
    """Get a database transaction from the global session manager."""
    manager = get_session_manager()
    async with manager.get_transaction() as session:
        yield session
