"""
Database session and engine management.

Provides async database connections with connection pooling, transaction
management, and context managers.

Responsibility: Manage database connections and sessions
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional
import logging

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from ..config import DatabaseConfig

logger = logging.getLogger(__name__)


class Database:
    """
    Database connection manager.

    Handles engine creation, connection pooling, and session management
    for PostgreSQL (production) and SQLite (local runs and tests).

    Example:
        db = Database(settings.db)
        await db.initialize()

        async with db.session() as session:
            result = await session.execute(query)

        await db.close()
    """

    def __init__(self, config: DatabaseConfig):
        """
        Initialize database manager.

        Args:
            config: Database configuration group
        """
        self.config = config
        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[async_sessionmaker[AsyncSession]] = None
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> None:
        """
        Create the async engine and session factory.

        In-memory SQLite uses a single shared connection so every session
        sees the same database.
        """
        if self._initialized:
            logger.warning("Database already initialized")
            return

        connection_string = self.config.connection_string
        logger.info(f"Initializing database: {connection_string.split('://')[0]}")

        if self.config.is_sqlite:
            engine_kwargs = {"connect_args": {"check_same_thread": False}}
            if ":memory:" in connection_string or connection_string.endswith(":///"):
                engine_kwargs["poolclass"] = StaticPool
            logger.info("Using SQLite backend")
        else:
            engine_kwargs = {
                "pool_size": self.config.pool_size,
                "max_overflow": self.config.max_overflow,
                "pool_timeout": self.config.pool_timeout,
                "pool_recycle": self.config.pool_recycle,
                "pool_pre_ping": True,
            }
            logger.info(
                f"Using PostgreSQL with connection pool "
                f"(size={self.config.pool_size}, "
                f"max_overflow={self.config.max_overflow})"
            )

        self.engine = create_async_engine(
            connection_string,
            echo=self.config.echo,
            **engine_kwargs
        )

        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

        self._initialized = True
        logger.info("Database initialized successfully")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Open a session that commits on success and rolls back on error.

        Yields:
            AsyncSession for database operations
        """
        if not self._initialized or not self.session_factory:
            raise RuntimeError("Database not initialized. Call initialize() first.")

        session = self.session_factory()

        try:
            yield session
            if session.in_transaction():
                await session.commit()
        except Exception as e:
            logger.error(f"Session error, rolling back: {e}")
            await session.rollback()
            raise
        finally:
            await session.close()

    async def create_tables(self) -> None:
        """
        Create all tables if they don't exist.

        Used for local runs and tests; deployed databases use Alembic.
        """
        if not self._initialized or not self.engine:
            raise RuntimeError("Database not initialized")

        from .models import Base

        logger.info("Creating database tables...")

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        logger.info("Database tables created successfully")

    async def close(self) -> None:
        """Dispose the engine. Called during application shutdown."""
        if not self._initialized:
            return

        if self.engine:
            logger.info("Closing database connections...")
            await self.engine.dispose()
            self.engine = None

        self.session_factory = None
        self._initialized = False

        logger.info("Database closed")
