"""
Daily returns task.

Dramatiq actor that credits one day of returns to every active
investment.
"""

from datetime import date

import dramatiq
from loguru import logger

from investclub.config.settings import settings
from investclub.tasks.daily_accrual_task import run_daily_accrual
from jobs.async_runner import run_async
from jobs.broker import broker  # noqa: F401  registers the Redis broker

MAX_RETRIES = 3


def should_retry(retries_so_far: int, exception: Exception) -> bool:
    """
    Retry only while the once-per-day guard is on.

    Without the guard a retry pays again every investment the failed
    attempt already committed.
    """
    return settings.accrual_once_per_day and retries_so_far < MAX_RETRIES


@dramatiq.actor(retry_when=should_retry, time_limit=900_000)  # 15 min, longer than the lock
def credit_daily_returns(accrual_date: str | None = None) -> dict | None:
    """
    Credit daily returns.

    Failed runs are retried only when `accrual_once_per_day` is on, since
    the guard makes investments already paid for the date skip.

    Args:
        accrual_date: ISO date to credit, defaults to today (UTC)

    Returns:
        Run summary, or None if the run did not take place
    """
    day = date.fromisoformat(accrual_date) if accrual_date else None
    logger.info(f"Starting daily returns task for {day or 'today'}")

    summary = run_async(run_daily_accrual(day))
    if summary is None:
        return None

    logger.info(
        f"Daily returns task complete: {summary.total_credit_events} payout(s), "
        f"{summary.failed} failure(s)"
    )
    return summary.to_dict()
