"""
Async SQLAlchemy database engine and session management.
Uses asyncpg driver for PostgreSQL async connections.

The engine and session factory are created once per process on first use
and reused for the process lifetime.
CRITICAL: expire_on_commit=False prevents lazy-loading issues in async contexts.
"""
import logging
from functools import lru_cache
from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


@lru_cache(maxsize=1)
def get_engine() -> AsyncEngine:
    """Process-wide engine, created lazily on first access."""
    from clientdesk.config import get_settings
    settings = get_settings()
    logger.info("Creating database engine (env=%s)", settings.app_env)
    return create_async_engine(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_pre_ping=True,
        echo=settings.app_env == "development",
    )


@lru_cache(maxsize=1)
def get_session_factory() -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(get_engine(), class_=AsyncSession, expire_on_commit=False)


def async_session_factory() -> AsyncSession:
    """Open a session outside the request cycle (background tasks, scripts)."""
    return get_session_factory()()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that yields an async database session."""
    session_factory = get_session_factory()
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception as e:
            logger.debug("Database session error, rolling back: %s", str(e))
            await session.rollback()
            raise
        finally:
            await session.close()


async def dispose_engine() -> None:
    """Close pooled connections at shutdown, if an engine was ever created."""
    if get_engine.cache_info().currsize:
        await get_engine().dispose()
        get_session_factory.cache_clear()
        get_engine.cache_clear()
