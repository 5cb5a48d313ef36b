"""
Dramatiq broker configuration.

Redis-based message broker for background jobs.
"""

import dramatiq
from dramatiq.brokers.redis import RedisBroker
from dramatiq.middleware import CurrentMessage, Retries, ShutdownNotifications
from loguru import logger

from investclub.config.settings import settings
from investclub.utils.redis_utils import get_redis_url_masked

redis_broker = RedisBroker(
    host=settings.redis_host,
    port=settings.redis_port,
    password=settings.redis_password if settings.redis_password else None,
    db=settings.redis_db,
)

# ShutdownNotifications lets workers stop between messages,
# Retries backs off from 1 second up to 1 minute
redis_broker.add_middleware(ShutdownNotifications())
redis_broker.add_middleware(CurrentMessage())
redis_broker.add_middleware(
    Retries(
        max_retries=3,
        min_backoff=1000,
        max_backoff=60000,
    )
)

dramatiq.set_broker(redis_broker)

broker = redis_broker

logger.info(f"Dramatiq broker initialized: {get_redis_url_masked()}")
