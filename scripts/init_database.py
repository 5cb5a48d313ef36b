#!/usr/bin/env python3
"""Initialize database tables."""

import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from loguru import logger
from sqlalchemy.ext.asyncio import create_async_engine

from investclub.config.settings import settings
from investclub.models import Base

logger.remove()
logger.add(sys.stderr, level="INFO")


async def init_database() -> None:
    """Create all database tables."""
    logger.info("Connecting to database...")
    engine = create_async_engine(settings.async_database_url, echo=False)

    async with engine.begin() as conn:
        logger.info("Creating tables (checkfirst=True)...")
        await conn.run_sync(Base.metadata.create_all, checkfirst=True)

    await engine.dispose()
    logger.success("Database tables created successfully!")


if __name__ == "__main__":
    asyncio.run(init_database())
