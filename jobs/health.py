"""
Health check server for the accrual scheduler.

Exposes scheduler state and the outcome of the latest accrual run over
HTTP.
"""

import asyncio
from datetime import datetime

from aiohttp import web
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from loguru import logger

from investclub.services.accrual import AccrualSummary
from investclub.utils.datetime_utils import utc_now

_scheduler: AsyncIOScheduler | None = None
_last_run: dict | None = None


def set_scheduler(scheduler: AsyncIOScheduler) -> None:
    """
    Register the scheduler to report on.

    Args:
        scheduler: AsyncIOScheduler instance to monitor
    """
    global _scheduler
    _scheduler = scheduler
    logger.info("Scheduler registered for health checks")


def record_accrual_run(summary: AccrualSummary | None, finished_at: datetime | None = None) -> None:
    """
    Remember the latest accrual run for the health endpoint.

    Args:
        summary: Run summary, None when the run was skipped
        finished_at: Completion time, defaults to now
    """
    global _last_run
    finished_at = finished_at or utc_now()
    if summary is None:
        _last_run = {"finished_at": finished_at.isoformat(), "skipped": True}
        return
    _last_run = {
        "finished_at": finished_at.isoformat(),
        "accrual_date": summary.accrual_date.isoformat() if summary.accrual_date else None,
        "credit_events": summary.total_credit_events,
        "users_credited": summary.total_users_credited,
        "failed": summary.failed,
    }


async def health_handler(request: web.Request) -> web.Response:
    """Scheduler status, jobs and last accrual run."""
    if _scheduler is None:
        return web.json_response(
            {"status": "unhealthy", "error": "Scheduler not initialized"},
            status=503,
        )

    jobs = _scheduler.get_jobs()
    return web.json_response(
        {
            "status": "healthy" if _scheduler.running else "stopped",
            "scheduler_running": _scheduler.running,
            "jobs": [
                {
                    "id": job.id,
                    "next_run_time": job.next_run_time.isoformat() if job.next_run_time else None,
                }
                for job in jobs
            ],
            "last_accrual": _last_run,
        }
    )


async def readiness_handler(request: web.Request) -> web.Response:
    """Ready once the scheduler is running."""
    if _scheduler is None or not _scheduler.running:
        return web.json_response({"status": "not_ready", "ready": False}, status=503)
    return web.json_response({"status": "ready", "ready": True})


async def liveness_handler(request: web.Request) -> web.Response:
    """Process is alive."""
    return web.json_response({"status": "alive", "alive": True})


def create_health_app() -> web.Application:
    """Build the aiohttp application with all health routes."""
    app = web.Application()
    app.router.add_get("/health", health_handler)
    app.router.add_get("/readiness", readiness_handler)
    app.router.add_get("/liveness", liveness_handler)
    return app


async def start_health_server(
    host: str = "0.0.0.0",
    port: int = 8081,
) -> web.AppRunner:
    """
    Start the health check server.

    Args:
        host: Host to bind to
        port: Port to bind to

    Returns:
        AppRunner for cleanup
    """
    runner = web.AppRunner(create_health_app())
    await runner.setup()
    site = web.TCPSite(runner, host, port)
    await site.start()

    logger.info(f"Health check server started on http://{host}:{port}/health")
    return runner


async def stop_health_server(runner: web.AppRunner, timeout: int = 5) -> None:
    """
    Stop the health check server.

    Args:
        runner: AppRunner to clean up
        timeout: Maximum time to wait in seconds
    """
    try:
        await asyncio.wait_for(runner.cleanup(), timeout=timeout)
        logger.info("Health check server stopped")
    except TimeoutError:
        logger.warning(f"Health check server cleanup timed out after {timeout}s")
