"""
Database session management with async SQLAlchemy 2.0.

Provides:
- Async engine with connection pooling
- Session factory with proper lifecycle
- Dependency injection for route handlers
"""

import logging
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import AsyncAdaptedQueuePool, NullPool

from app.config import settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base shared by every ORM model (single metadata)."""
    pass


class DatabaseManager:
    """
    Owns the engine and session factory of the tenant directory store.

    One instance per process; initialized and disposed by the app lifespan.
    """

    def __init__(self) -> None:
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    def init(self) -> None:
        """Create the engine and session factory."""
        logger.info("Initializing database connection...")

        if settings.is_development:
            engine_options = {"poolclass": NullPool, "echo": settings.db_echo}
        else:
            engine_options = {
                "poolclass": AsyncAdaptedQueuePool,
                "pool_size": settings.db_pool_size,
                "max_overflow": settings.db_max_overflow,
            }

        self._engine = create_async_engine(
            str(settings.database_url),
            pool_pre_ping=True,
            **engine_options,
        )

        self._session_factory = async_sessionmaker(
            bind=self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

        logger.info("Database connection initialized successfully")

    async def close(self) -> None:
        """Dispose of pooled connections (lifespan shutdown)."""
        if self._engine:
            logger.info("Closing database connections...")
            await self._engine.dispose()
            logger.info("Database connections closed")

    @property
    def engine(self) -> AsyncEngine:
        """Get the database engine."""
        if not self._engine:
            raise RuntimeError("Database not initialized. Call init() first.")
        return self._engine

    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Yield a session that commits on success and rolls back on error.

        Yields:
            AsyncSession: Database session with automatic cleanup
        """
        if not self._session_factory:
            raise RuntimeError("Database not initialized. Call init() first.")

        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise


# Global instance
db_manager = DatabaseManager()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency for database sessions.

    Usage:
        @router.get("/organizations")
        async def list_organizations(db: AsyncSession = Depends(get_db)):
            ...
    """
    async for session in db_manager.get_session():
        yield session
