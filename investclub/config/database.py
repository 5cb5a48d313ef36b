"""
Database configuration.

Async engine and session factory shared by services, tasks and scripts.
"""

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from investclub.config.settings import settings

_engine_kwargs: dict = {"echo": settings.database_echo}
if not settings.async_database_url.startswith("sqlite"):
    _engine_kwargs.update(pool_size=10, max_overflow=20, pool_pre_ping=True)

async_engine = create_async_engine(settings.async_database_url, **_engine_kwargs)

async_session_maker = async_sessionmaker(
    async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)
