"""
Distributed lock.

Serializes batch jobs across workers with a Redis lock. When no Redis
client is available the lock degrades to an in-process asyncio.Lock,
which still serializes jobs inside one scheduler process.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import redis.asyncio as redis
from loguru import logger
from redis.exceptions import LockError, RedisError

_local_locks: dict[str, asyncio.Lock] = {}


class DistributedLock:
    """Named lock backed by Redis with a local fallback."""

    def __init__(self, redis_client: redis.Redis | None = None) -> None:
        """
        Initialize lock helper.

        Args:
            redis_client: Redis client, or None to use local locks only
        """
        self.redis_client = redis_client

    @asynccontextmanager
    async def lock(
        self,
        key: str,
        timeout: int = 60,
        blocking: bool = True,
    ) -> AsyncIterator[bool]:
        """
        Hold the named lock for the duration of the block.

        Args:
            key: Lock name
            timeout: Lock lifetime in seconds (Redis only)
            blocking: Wait for the lock instead of giving up immediately

        Yields:
            True if the lock is held, False if it was busy and blocking=False
        """
        if self.redis_client is None:
            async with self._local_lock(key, blocking) as acquired:
                yield acquired
            return

        redis_lock = self.redis_client.lock(f"lock:{key}", timeout=timeout)
        try:
            acquired = await redis_lock.acquire(blocking=blocking)
        except RedisError as e:
            logger.warning(f"Redis unavailable for lock {key}, using local lock: {e}")
            redis_lock = None

        if redis_lock is None:
            async with self._local_lock(key, blocking) as local_acquired:
                yield local_acquired
            return

        try:
            yield bool(acquired)
        finally:
            if acquired:
                try:
                    await redis_lock.release()
                except LockError as e:
                    logger.warning(f"Lock {key} expired before release: {e}")

    @asynccontextmanager
    async def _local_lock(self, key: str, blocking: bool) -> AsyncIterator[bool]:
        local = _local_locks.setdefault(key, asyncio.Lock())
        if not blocking and local.locked():
            yield False
            return
        async with local:
            yield True
