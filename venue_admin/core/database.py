"""
Database configuration and session management
"""

from typing import AsyncGenerator, Optional
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    AsyncEngine,
    async_sessionmaker,
    create_async_engine
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool, AsyncAdaptedQueuePool
from sqlalchemy import text
from fastapi import Request
import logging
from contextlib import asynccontextmanager

from venue_admin.config import settings

logger = logging.getLogger(__name__)

# Create declarative base
Base = declarative_base()


def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    """
    Create the async engine for the given URL with pool settings from config
    """
    if url.startswith("sqlite"):
        # In-memory SQLite must share one connection across the process
        return create_async_engine(
            url,
            echo=echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )

    return create_async_engine(
        url,
        echo=echo,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        poolclass=AsyncAdaptedQueuePool,
    )


class Database:
    """
    Owns the engine and session factory for the lifetime of the application.
    Constructed by the application lifespan and stored on ``app.state``.
    """

    def __init__(self, url: Optional[str] = None, echo: Optional[bool] = None):
        self.url = url or settings.DATABASE_URL
        self.engine: AsyncEngine = build_engine(
            self.url,
            echo=settings.DB_ECHO if echo is None else echo
        )
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autocommit=False,
            autoflush=False,
        )

    async def connect(self):
        """
        Verify connectivity and create missing tables
        """
        # Register every model on the metadata before create_all
        import venue_admin.models  # noqa: F401

        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            logger.info("Database initialized successfully")
        except Exception as e:
            logger.error(f"Failed to initialize database: {e}")
            raise

    async def ping(self) -> bool:
        async with self.engine.connect() as conn:
            result = await conn.execute(text("SELECT 1"))
            return result.scalar() == 1

    async def dispose(self):
        """
        Close database connections
        """
        await self.engine.dispose()
        logger.info("Database connections closed")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        async with self.session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency to get a database session from the application's Database.
    Endpoints and services commit explicitly.
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
