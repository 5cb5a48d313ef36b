"""
Daily accrual task.

Runs the daily return batch under a distributed lock so that only one
worker credits a given day.
"""

from __future__ import annotations

from datetime import date

from loguru import logger
from redis.exceptions import RedisError

from investclub.config.database import async_session_maker
from investclub.config.settings import settings
from investclub.services.accrual import AccrualSummary, DailyAccrualEngine
from investclub.services.referral.config import CommissionRates
from investclub.utils.distributed_lock import DistributedLock
from investclub.utils.redis_utils import get_redis_client

LOCK_KEY = "daily_accrual_processing"


async def run_daily_accrual(
    accrual_date: date | None = None,
    use_lock: bool = True,
) -> AccrualSummary | None:
    """
    Credit one day of returns to every active investment.

    Args:
        accrual_date: Calendar date to credit, defaults to today (UTC)
        use_lock: Serialize with other workers through Redis

    Returns:
        AccrualSummary, or None if the run was stopped or another worker
        holds the lock
    """
    if settings.emergency_stop_accrual:
        logger.warning("Daily accrual skipped: emergency stop is active")
        return None

    redis_client = None
    if use_lock:
        try:
            redis_client = get_redis_client()
        except RedisError as e:
            logger.warning(f"Failed to create Redis client for lock: {e}")

    lock = DistributedLock(redis_client=redis_client)
    try:
        async with lock.lock(
            LOCK_KEY, timeout=settings.accrual_lock_timeout, blocking=False
        ) as acquired:
            if not acquired:
                logger.warning("Daily accrual already running, skipping")
                return None

            async with async_session_maker() as session:
                engine = DailyAccrualEngine(
                    session,
                    rates=CommissionRates.from_settings(settings),
                    once_per_day=settings.accrual_once_per_day,
                )
                return await engine.run(accrual_date)
    finally:
        if redis_client is not None:
            await redis_client.aclose()
