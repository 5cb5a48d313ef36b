"""Redis connection utilities.

Provides helper functions for creating Redis connections with configuration
from settings to avoid code duplication.
"""

import redis.asyncio as redis

from investclub.config.settings import settings


def get_redis_client() -> redis.Redis:
    """
    Create a Redis client with settings from config.

    Returns:
        redis.Redis: Configured Redis client with decode_responses=True
    """
    return redis.Redis(
        host=settings.redis_host,
        port=settings.redis_port,
        password=settings.redis_password,
        db=settings.redis_db,
        decode_responses=True,
    )


def get_redis_url_masked() -> str:
    """
    Build Redis URL with masked password for safe logging.

    Returns:
        str: Redis connection URL with the password replaced by asterisks
    """
    auth = ":***@" if settings.redis_password else ""
    return f"redis://{auth}{settings.redis_host}:{settings.redis_port}/{settings.redis_db}"
