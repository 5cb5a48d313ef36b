"""
Unit tests for the health check handlers.
"""

import json
from datetime import UTC, date, datetime
from unittest.mock import MagicMock

import pytest

from investclub.services.accrual import AccrualSummary
from jobs import health


@pytest.fixture(autouse=True)
def reset_health_state():
    """Clear module state between tests."""
    health._scheduler = None
    health._last_run = None
    yield
    health._scheduler = None
    health._last_run = None


class TestHealthHandlers:
    """Test health endpoints."""

    @pytest.mark.asyncio
    async def test_unhealthy_without_scheduler(self):
        """Health is 503 before a scheduler is registered."""
        response = await health.health_handler(MagicMock())
        assert response.status == 503

    @pytest.mark.asyncio
    async def test_reports_jobs_and_last_run(self):
        """Health lists jobs and the latest accrual outcome."""
        job = MagicMock()
        job.id = "daily_accrual"
        job.next_run_time = datetime(2026, 10, 20, 0, 5, tzinfo=UTC)
        scheduler = MagicMock()
        scheduler.running = True
        scheduler.get_jobs.return_value = [job]
        health.set_scheduler(scheduler)
        health.record_accrual_run(
            AccrualSummary(accrual_date=date(2026, 10, 19), total_users_credited=2),
            finished_at=datetime(2026, 10, 19, 0, 6, tzinfo=UTC),
        )

        response = await health.health_handler(MagicMock())
        body = json.loads(response.body)

        assert response.status == 200
        assert body["status"] == "healthy"
        assert body["jobs"][0]["id"] == "daily_accrual"
        assert body["last_accrual"]["accrual_date"] == "2026-10-19"
        assert body["last_accrual"]["users_credited"] == 2

    @pytest.mark.asyncio
    async def test_readiness(self):
        """Readiness follows the scheduler state."""
        assert (await health.readiness_handler(MagicMock())).status == 503

        scheduler = MagicMock()
        scheduler.running = True
        health.set_scheduler(scheduler)
        assert (await health.readiness_handler(MagicMock())).status == 200

    @pytest.mark.asyncio
    async def test_liveness(self):
        """Liveness always answers."""
        assert (await health.liveness_handler(MagicMock())).status == 200
