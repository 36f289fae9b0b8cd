"""
Async engine and session lifecycle.

One engine per process, one AsyncSession per request. Sessions never
autoflush and keep attribute values after commit, so services decide
when SQL is emitted and can keep using entities they just committed.

Dependencies: sqlalchemy, copilot.configs
System role: Database connection lifecycle management
"""

from functools import lru_cache
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from copilot.boundary.db.base import Base
from copilot.configs import get_settings


@lru_cache
def get_async_engine() -> AsyncEngine:
    """
    Engine for the configured document store, created on first use.

    PostgreSQL engines get a bounded pool with pre-ping; SQLite engines
    use the dialect's default pool.

    Returns:
        AsyncEngine: Shared async engine
    """
    db_config = get_settings().database

    if db_config.is_sqlite:
        return create_async_engine(db_config.async_database_url, echo=db_config.echo_sql)

    return create_async_engine(
        db_config.async_database_url,
        echo=db_config.echo_sql,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_pre_ping=True,
    )


@lru_cache
def get_async_session_factory() -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the shared engine."""
    return async_sessionmaker(
        bind=get_async_engine(),
        autoflush=False,
        expire_on_commit=False,
    )


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding a request-scoped session.

    Services commit or roll back their own writes; the session is closed
    when the request ends.

    Yields:
        AsyncSession: Database session for one request
    """
    SessionFactory = get_async_session_factory()
    async with SessionFactory() as session:
        yield session


async def create_tables(engine: AsyncEngine | None = None) -> None:
    """
    Create the sessions, messages, cache_items and products tables.

    Existing tables are left unchanged.

    Args:
        engine: Engine to use (defaults to the configured engine)
    """
    from copilot.boundary.db import models  # noqa: F401

    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
