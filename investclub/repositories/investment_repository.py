"""
Investment repository.

Data access layer for Investment model.
"""

from datetime import date, datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from investclub.models.investment import Investment
from investclub.repositories.base import BaseRepository


class InvestmentRepository(BaseRepository[Investment]):
    """Investment repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize investment repository."""
        super().__init__(Investment, session)

    async def get_by_user(self, user_id: int) -> list[Investment]:
        """
        Get a user's investments in stored order, freshly loaded.

        Args:
            user_id: Owner ID

        Returns:
            Investments ordered by id
        """
        stmt = (
            select(Investment)
            .where(Investment.user_id == user_id)
            .order_by(Investment.id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def advance_day(
        self,
        investment_id: int,
        expected_days_completed: int,
        accrual_date: date,
        completes: bool,
        completed_at: datetime | None = None,
    ) -> bool:
        """
        Record one payout day if nobody else did since it was read.

        Compare-and-set on `days_completed`: the row only changes while it
        is still active and still at the expected day count.

        Args:
            investment_id: Investment ID
            expected_days_completed: Day count observed before the payout
            accrual_date: Date the payout belongs to
            completes: Whether this payout is the last one
            completed_at: Completion time, stored when `completes`

        Returns:
            True if the row was advanced
        """
        values: dict = {
            "days_completed": Investment.days_completed + 1,
            "last_accrued_on": accrual_date,
        }
        if completes:
            values["is_active"] = False
            values["completed_at"] = completed_at

        stmt = (
            update(Investment)
            .where(
                Investment.id == investment_id,
                Investment.days_completed == expected_days_completed,
                Investment.is_active == True,  # noqa: E712
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0

    async def deactivate(
        self, investment_id: int, completed_at: datetime | None = None
    ) -> bool:
        """
        Mark an investment finished without crediting anything.

        Args:
            investment_id: Investment ID
            completed_at: Completion time

        Returns:
            True if an active row was deactivated
        """
        stmt = (
            update(Investment)
            .where(
                Investment.id == investment_id,
                Investment.is_active == True,  # noqa: E712
            )
            .values(is_active=False, completed_at=completed_at)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0
