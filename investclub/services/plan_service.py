"""
Plan catalog service.

Administration of purchasable plans.
"""

from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from investclub.models.plan import Plan
from investclub.repositories.plan_repository import PlanRepository
from investclub.services.base_service import BaseService, transaction
from investclub.utils.exceptions import InvalidAmount, PlanNotFound


class PlanCatalogService(BaseService):
    """Creates, closes and removes plans."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize plan catalog service.

        Args:
            session: Async database session
        """
        super().__init__(session)
        self.plan_repo = PlanRepository(session)

    @transaction
    async def create_plan(
        self,
        name: str,
        invest: Decimal,
        daily: Decimal,
        days: int,
        total: Decimal | None = None,
        roi: Decimal | None = None,
        badge: str | None = None,
        benefits: list[str] | None = None,
    ) -> Plan:
        """
        Add a plan to the catalog.

        Args:
            name: Display name
            invest: Purchase price, positive
            daily: Daily payout, non-negative
            days: Number of payout days, positive
            total: Lifetime payout, defaults to daily * days
            roi: Profit percent, defaults to (total - invest) / invest * 100
            badge: Optional marketing label
            benefits: Optional benefit list

        Returns:
            Created plan

        Raises:
            InvalidAmount: If invest, daily or days are out of range
        """
        invest = Decimal(invest)
        daily = Decimal(daily)
        if invest <= 0 or daily < 0 or days <= 0:
            raise InvalidAmount(
                f"Invalid plan terms: invest={invest}, daily={daily}, days={days}"
            )

        if total is None:
            total = daily * days
        if roi is None:
            roi = ((Decimal(total) - invest) / invest * 100).quantize(
                Decimal("0.01"), rounding=ROUND_HALF_UP
            )

        plan = await self.plan_repo.create(
            name=name,
            invest=invest,
            daily=daily,
            total=Decimal(total),
            days=days,
            roi=Decimal(roi),
            badge=badge,
            benefits=benefits,
            is_active=True,
        )
        self.logger.info("Plan created: {}", name, extra={"plan_id": plan.id})
        return plan

    @transaction
    async def deactivate_plan(self, plan_id: int) -> Plan:
        """
        Close a plan for new purchases. Running investments keep paying.

        Raises:
            PlanNotFound: If the plan does not exist
        """
        plan = await self.plan_repo.update(plan_id, is_active=False)
        if plan is None:
            raise PlanNotFound(plan_id)
        self.logger.info(f"Plan {plan_id} deactivated")
        return plan

    @transaction
    async def delete_plan(self, plan_id: int) -> None:
        """
        Remove a plan from the catalog.

        Investments in the plan stay in place and are no longer paid.

        Raises:
            PlanNotFound: If the plan does not exist
        """
        plan = await self.plan_repo.get_by_id(plan_id)
        if plan is None:
            raise PlanNotFound(plan_id)
        await self.session.delete(plan)
        await self.session.flush()
        self.logger.warning(f"Plan {plan_id} deleted from catalog")

    async def list_active_plans(self) -> list[Plan]:
        """Get purchasable plans."""
        return await self.plan_repo.list_active()
