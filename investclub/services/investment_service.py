"""
Investment service.

Purchase of plans from the available balance.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from investclub.config.business_constants import TX_PREFIX_INVEST
from investclub.models.enums import TransactionStatus, TransactionType
from investclub.models.investment import Investment
from investclub.repositories.investment_repository import InvestmentRepository
from investclub.repositories.plan_repository import PlanRepository
from investclub.repositories.transaction_repository import TransactionRepository
from investclub.repositories.user_repository import UserRepository
from investclub.services.base_service import BaseService, transaction
from investclub.utils.datetime_utils import utc_now
from investclub.utils.exceptions import InsufficientBalance, PlanNotFound, UserNotFound
from investclub.utils.transaction_ids import make_transaction_id


class InvestmentService(BaseService):
    """Buys plans for members."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize investment service.

        Args:
            session: Async database session
        """
        super().__init__(session)
        self.user_repo = UserRepository(session)
        self.plan_repo = PlanRepository(session)
        self.investment_repo = InvestmentRepository(session)
        self.transaction_repo = TransactionRepository(session)

    @transaction
    async def invest_in_plan(self, user_id: int, plan_id: int) -> Investment:
        """
        Buy a plan with the member's available balance.

        Args:
            user_id: Buyer
            plan_id: Plan to buy, must be active

        Returns:
            New active investment

        Raises:
            UserNotFound: If the user does not exist
            PlanNotFound: If the plan is missing or inactive
            InsufficientBalance: If the balance does not cover the price
        """
        if await self.user_repo.get_by_id(user_id) is None:
            raise UserNotFound(user_id)

        plan = await self.plan_repo.get_active(plan_id)
        if plan is None:
            raise PlanNotFound(plan_id)

        if not await self.user_repo.debit_balance(user_id, plan.invest):
            raise InsufficientBalance(user_id, plan.invest)
        await self.user_repo.add_invested(user_id, plan.invest)

        investment = await self.investment_repo.create(
            user_id=user_id,
            plan_id=plan.id,
            amount=plan.invest,
            started_at=utc_now(),
            days_completed=0,
            is_active=True,
        )
        await self.transaction_repo.append_entry(
            user_id=user_id,
            type=TransactionType.INVESTMENT,
            transaction_id=make_transaction_id(TX_PREFIX_INVEST, user_id, plan.id),
            amount=plan.invest,
            status=TransactionStatus.COMPLETED,
            plan_id=plan.id,
        )

        self.logger.info(
            "User {} invested {} in plan {}",
            user_id,
            plan.invest,
            plan.name,
            extra={"investment_id": investment.id, "plan_id": plan.id},
        )
        return investment
