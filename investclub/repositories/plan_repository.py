"""
Plan repository.

Data access layer for the plan catalog.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from investclub.models.plan import Plan
from investclub.repositories.base import BaseRepository


class PlanRepository(BaseRepository[Plan]):
    """Plan repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize plan repository."""
        super().__init__(Plan, session)

    async def get_current(self, plan_id: int) -> Plan | None:
        """
        Read a plan from the database, bypassing cached instances.

        Args:
            plan_id: Plan ID

        Returns:
            Plan or None if it was deleted
        """
        stmt = (
            select(Plan)
            .where(Plan.id == plan_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_active(self, plan_id: int) -> Plan | None:
        """
        Get a plan that is open for purchase.

        Args:
            plan_id: Plan ID

        Returns:
            Plan or None if missing or inactive
        """
        plan = await self.get_by_id(plan_id)
        if plan is None or not plan.is_active:
            return None
        return plan

    async def list_active(self) -> list[Plan]:
        """Get all purchasable plans ordered by id."""
        return await self.find_by(is_active=True)
