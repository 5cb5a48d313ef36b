"""
Accrual scheduler.

Runs the daily return batch once a day and serves health checks.

Usage:
    python -m jobs.scheduler
"""

import asyncio
import signal

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from loguru import logger

from investclub.config.settings import settings
from investclub.tasks.daily_accrual_task import run_daily_accrual
from investclub.utils.logging import setup_logging
from jobs.health import (
    record_accrual_run,
    set_scheduler,
    start_health_server,
    stop_health_server,
)

DAILY_ACCRUAL_JOB_ID = "daily_accrual"


async def daily_accrual_job() -> None:
    """Scheduled accrual run."""
    try:
        summary = await run_daily_accrual()
    except Exception as e:
        logger.exception(f"Scheduled daily accrual failed: {e}")
        return
    record_accrual_run(summary)


def create_scheduler() -> AsyncIOScheduler:
    """
    Build the scheduler with the daily accrual job.

    Returns:
        Configured, not yet started scheduler
    """
    scheduler = AsyncIOScheduler(timezone="UTC")
    scheduler.add_job(
        daily_accrual_job,
        CronTrigger(
            hour=settings.accrual_hour_utc,
            minute=settings.accrual_minute_utc,
            timezone="UTC",
        ),
        id=DAILY_ACCRUAL_JOB_ID,
        name="Daily return accrual",
        max_instances=1,
        coalesce=True,
        misfire_grace_time=3600,
        replace_existing=True,
    )
    return scheduler


async def main() -> None:
    """Start scheduler and health server, run until a stop signal arrives."""
    setup_logging()

    scheduler = create_scheduler()
    scheduler.start()
    set_scheduler(scheduler)
    logger.info(
        f"Scheduler started, daily accrual at "
        f"{settings.accrual_hour_utc:02d}:{settings.accrual_minute_utc:02d} UTC"
    )

    runner = await start_health_server(port=settings.health_check_port)

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop_event.set)

    try:
        await stop_event.wait()
    finally:
        logger.info("Shutting down scheduler...")
        scheduler.shutdown(wait=False)
        await stop_health_server(runner)


if __name__ == "__main__":
    asyncio.run(main())
