"""
Database engine, session factory and declarative base.

The privacy components never commit: they execute statements inside the
session they are given and leave the transaction boundary to the caller.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from loguru import logger
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from forum_privacy.core.config import settings


class Base(DeclarativeBase):
    """Declarative base for all models."""


_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_engine() -> AsyncEngine:
    """Create the async engine on first use."""
    global _engine
    if _engine is None:
        kwargs: dict = {"echo": settings.database_echo}
        if not settings.database_url.startswith("sqlite"):
            kwargs["pool_size"] = settings.database_pool_size
            kwargs["max_overflow"] = settings.database_max_overflow
        _engine = create_async_engine(settings.database_url, **kwargs)
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get the session factory bound to the engine."""
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(
            get_engine(), expire_on_commit=False, class_=AsyncSession
        )
    return _session_factory


@asynccontextmanager
async def get_session() -> AsyncIterator[AsyncSession]:
    """
    Open a session wrapped in a single transaction.

    The transaction commits when the block exits normally and rolls back
    if an exception propagates out of it.
    """
    async with get_session_factory()() as session:
        async with session.begin():
            yield session


async def init_db() -> None:
    """Create all tables."""
    # Register every model on the metadata
    import forum_privacy.models  # noqa: F401

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ready")


async def close_db() -> None:
    """Dispose the engine and its connection pool."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
        logger.info("Database connections closed")
    _engine = None
    _session_factory = None
