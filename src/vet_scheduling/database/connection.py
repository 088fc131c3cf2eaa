"""
Database connection utilities for the vet-scheduling package.

This module provides async SQLAlchemy engine configuration and connection
checks for the PostgreSQL and SQLite backends the record store runs on.
"""

import logging
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import AsyncAdaptedQueuePool, NullPool, StaticPool

from ..exceptions import ConnectionException
from ..utils.config import ConfigError, DatabaseURLValidator

logger = logging.getLogger(__name__)

_ASYNC_DRIVERS = {
    "postgresql": "postgresql+asyncpg",
    "sqlite": "sqlite+aiosqlite",
}


class DatabaseConfig:
    """Configuration class for database connections."""

    def __init__(
        self,
        database_url: str,
        pool_size: int = 10,
        max_overflow: int = 20,
        pool_timeout: int = 30,
        pool_recycle: int = 3600,
        echo: bool = False,
    ):
        """
        Initialize database configuration.

        Args:
            database_url: PostgreSQL or SQLite connection URL
            pool_size: Number of connections to maintain in the pool
            max_overflow: Maximum number of connections that can overflow the pool
            pool_timeout: Timeout for getting connection from pool
            pool_recycle: Time in seconds to recycle connections
            echo: Whether to echo SQL statements

        Raises:
            ValueError: If the database URL is invalid
        """
        self.database_url = database_url
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.pool_timeout = pool_timeout
        self.pool_recycle = pool_recycle
        self.echo = echo

        try:
            self._parsed = DatabaseURLValidator.validate_url(database_url)
        except ConfigError as e:
            raise ValueError(f"Invalid database URL: {e}")

    @property
    def backend(self) -> str:
        """Database backend name, ``postgresql`` or ``sqlite``."""
        return self._parsed["backend"]

    @property
    def is_sqlite(self) -> bool:
        return self.backend == "sqlite"

    @property
    def is_memory(self) -> bool:
        """Whether the URL points at an in-memory SQLite database."""
        return self.is_sqlite and self._parsed["database"] in ("", ":memory:")

    def get_async_url(self) -> str:
        """Convert database URL to async driver format if needed."""
        scheme = self._parsed["scheme"]
        async_scheme = _ASYNC_DRIVERS[self.backend]
        if scheme == async_scheme:
            return self.database_url
        return self.database_url.replace(f"{scheme}://", f"{async_scheme}://", 1)


def create_engine(
    database_url: str,
    pool_size: int = 10,
    max_overflow: int = 20,
    pool_timeout: int = 30,
    pool_recycle: int = 3600,
    pool_pre_ping: bool = True,
    echo: bool = False,
    use_null_pool: bool = False,
    connect_args: Optional[dict] = None,
) -> AsyncEngine:
    """
    Create an async SQLAlchemy engine with proper configuration.

    SQLite engines never use a queue pool: in-memory databases get a
    ``StaticPool`` so every session shares the one connection holding the
    data, file databases get a ``NullPool``.

    Args:
        database_url: PostgreSQL or SQLite connection URL
        pool_size: Number of connections to maintain in the pool
        max_overflow: Maximum number of connections that can overflow the pool
        pool_timeout: Timeout for getting connection from pool
        pool_recycle: Time in seconds to recycle connections
        pool_pre_ping: Whether to validate connections before use
        echo: Whether to echo SQL statements
        use_null_pool: Whether to use NullPool (useful for testing)
        connect_args: Additional connection arguments

    Returns:
        Configured async SQLAlchemy engine

    Raises:
        ValueError: If database URL is invalid
    """
    config = DatabaseConfig(
        database_url=database_url,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_timeout=pool_timeout,
        pool_recycle=pool_recycle,
        echo=echo,
    )

    async_url = config.get_async_url()

    engine_kwargs: Dict[str, Any] = {"echo": config.echo}

    if connect_args:
        engine_kwargs["connect_args"] = connect_args

    if config.is_memory:
        engine_kwargs["poolclass"] = StaticPool
    elif config.is_sqlite or use_null_pool:
        engine_kwargs["poolclass"] = NullPool
    else:
        engine_kwargs.update(
            {
                "poolclass": AsyncAdaptedQueuePool,
                "pool_size": config.pool_size,
                "max_overflow": config.max_overflow,
                "pool_timeout": config.pool_timeout,
                "pool_recycle": config.pool_recycle,
                "pool_pre_ping": pool_pre_ping,
            }
        )

    engine = create_async_engine(async_url, **engine_kwargs)
    logger.info(
        f"Created async {config.backend} engine for "
        f"{urlparse(async_url).hostname or config._parsed['database'] or 'memory'}"
    )
    return engine


async def check_connection(engine: AsyncEngine) -> None:
    """
    Run a trivial query to verify the database is reachable.

    Args:
        engine: SQLAlchemy async engine

    Raises:
        ConnectionException: If the query fails
    """
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Database connection check failed: {e}")
        raise ConnectionException(
            "Database connection check failed",
            database_url=str(engine.url),
            original_error=e,
        )
    logger.debug("Database connection check successful")


async def close_engine(engine: AsyncEngine) -> None:
    """
    Properly close the database engine and all connections.

    Args:
        engine: SQLAlchemy async engine to close
    """
    await engine.dispose()
    logger.info("Database engine closed successfully")
