"""
Daily accrual engine.

Credits one day of payout to every active investment, advances its day
counter, records the payout in the ledger and fans commissions out to
the investor's upline.

Each investment is its own unit of work: the counter advance, the
balance credit, the ledger entry and the commissions are committed
together, and a failure rolls back only that investment before the run
moves on.
"""

from dataclasses import dataclass
from datetime import date

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from investclub.config.business_constants import TX_PREFIX_DAILY
from investclub.models.enums import TransactionStatus, TransactionType
from investclub.models.investment import Investment
from investclub.repositories.investment_repository import InvestmentRepository
from investclub.repositories.plan_repository import PlanRepository
from investclub.repositories.transaction_repository import TransactionRepository
from investclub.repositories.user_repository import UserRepository
from investclub.services.accrual.summary import AccrualSummary, CreditedInvestment
from investclub.services.base_service import BaseService, log_operation
from investclub.services.referral.commission_fanout import CommissionFanout
from investclub.services.referral.config import CommissionRates
from investclub.utils.datetime_utils import utc_now, utc_today
from investclub.utils.exceptions import PlanNotFound, StoreWriteFailure
from investclub.utils.transaction_ids import make_transaction_id


@dataclass(frozen=True)
class InvestmentSnapshot:
    """Investment state read before its unit of work starts."""

    id: int
    plan_id: int
    days_completed: int
    is_active: bool
    last_accrued_on: date | None

    @classmethod
    def from_model(cls, investment: Investment) -> "InvestmentSnapshot":
        """Copy the fields the engine needs off an ORM row."""
        return cls(
            id=investment.id,
            plan_id=investment.plan_id,
            days_completed=investment.days_completed,
            is_active=investment.is_active,
            last_accrued_on=investment.last_accrued_on,
        )


class _SkipInvestment(Exception):
    """Investment needs no payout this run."""


class DailyAccrualEngine(BaseService):
    """Runs the daily payout batch."""

    def __init__(
        self,
        session: AsyncSession,
        rates: CommissionRates,
        once_per_day: bool = True,
    ) -> None:
        """
        Initialize accrual engine.

        Args:
            session: Async database session, committed per investment
            rates: Commission percent per referral level
            once_per_day: Skip investments already paid for the accrual date
        """
        super().__init__(session)
        self.once_per_day = once_per_day
        self.user_repo = UserRepository(session)
        self.plan_repo = PlanRepository(session)
        self.investment_repo = InvestmentRepository(session)
        self.transaction_repo = TransactionRepository(session)
        self.fanout = CommissionFanout(session, rates)

    @log_operation
    async def run(self, accrual_date: date | None = None) -> AccrualSummary:
        """
        Credit one payout day to every active investment.

        Args:
            accrual_date: Calendar date being paid, defaults to today (UTC)

        Returns:
            AccrualSummary of the run
        """
        accrual_date = accrual_date or utc_today()
        summary = AccrualSummary(accrual_date=accrual_date)

        investors = await self.user_repo.find_investors()
        self.logger.info(
            f"Accruing daily returns for {accrual_date}",
            extra={"investors": len(investors)},
        )

        for user_id, email in investors:
            try:
                snapshots = [
                    InvestmentSnapshot.from_model(investment)
                    for investment in await self.investment_repo.get_by_user(user_id)
                ]
            except SQLAlchemyError as e:
                await self.rollback()
                summary.failed += 1
                self.logger.error(
                    "Could not load investments of user {}: {}",
                    user_id,
                    e,
                    extra={"user_id": user_id},
                )
                continue

            credited_for_user = 0
            for snapshot in snapshots:
                if not snapshot.is_active:
                    continue
                credited = await self._accrue_one(user_id, email, snapshot, accrual_date, summary)
                if credited is not None:
                    summary.add(credited)
                    credited_for_user += 1

            if credited_for_user:
                summary.total_users_credited += 1

        self.logger.info(
            f"Daily accrual for {accrual_date} finished: "
            f"{summary.total_credit_events} payout(s) to "
            f"{summary.total_users_credited} user(s)",
            extra={
                "total_amount": str(summary.total_amount),
                "skipped": summary.skipped,
                "failed": summary.failed,
            },
        )
        return summary

    async def _accrue_one(
        self,
        user_id: int,
        email: str,
        snapshot: InvestmentSnapshot,
        accrual_date: date,
        summary: AccrualSummary,
    ) -> CreditedInvestment | None:
        """Run and commit the unit of work of one investment."""
        try:
            credited = await self._credit_investment(user_id, email, snapshot, accrual_date)
            await self.commit()
            return credited
        except _SkipInvestment as e:
            summary.skipped += 1
            self.logger.debug(f"Investment {snapshot.id} skipped: {e}")
        except PlanNotFound as e:
            summary.skipped += 1
            self.logger.warning(
                "Investment {} of user {} left untouched: {}",
                snapshot.id,
                user_id,
                e,
                extra={"investment_id": snapshot.id, "plan_id": snapshot.plan_id},
            )
        except Exception as e:
            await self.rollback()
            summary.failed += 1
            error = StoreWriteFailure(str(e)) if isinstance(e, SQLAlchemyError) else e
            self.logger.error(
                "Accrual failed for investment {} of user {}: {}",
                snapshot.id,
                user_id,
                error,
                extra={"investment_id": snapshot.id, "user_id": user_id},
            )
        return None

    async def _credit_investment(
        self,
        user_id: int,
        email: str,
        snapshot: InvestmentSnapshot,
        accrual_date: date,
    ) -> CreditedInvestment | None:
        """
        Apply one payout day to one investment without committing.

        Returns:
            The credited payout, or None when the investment was only
            closed because its plan length was already reached

        Raises:
            PlanNotFound: If the plan is gone from the catalog
            _SkipInvestment: If there is nothing to do for this date
        """
        plan = await self.plan_repo.get_current(snapshot.plan_id)
        if plan is None:
            raise PlanNotFound(snapshot.plan_id)

        if snapshot.days_completed >= plan.days:
            await self.investment_repo.deactivate(snapshot.id, completed_at=utc_now())
            self.logger.info(
                f"Investment {snapshot.id} already at {snapshot.days_completed}/"
                f"{plan.days} days, closed without payout"
            )
            return None

        if (
            self.once_per_day
            and snapshot.last_accrued_on is not None
            and snapshot.last_accrued_on >= accrual_date
        ):
            raise _SkipInvestment(f"already paid for {snapshot.last_accrued_on}")

        completes = snapshot.days_completed + 1 >= plan.days
        advanced = await self.investment_repo.advance_day(
            snapshot.id,
            expected_days_completed=snapshot.days_completed,
            accrual_date=accrual_date,
            completes=completes,
            completed_at=utc_now() if completes else None,
        )
        if not advanced:
            raise _SkipInvestment("changed by a concurrent run")

        await self.user_repo.credit_balance(user_id, plan.daily)
        await self.transaction_repo.append_entry(
            user_id=user_id,
            type=TransactionType.DAILY_RETURN,
            transaction_id=make_transaction_id(TX_PREFIX_DAILY, user_id, plan.id),
            amount=plan.daily,
            status=TransactionStatus.COMPLETED,
            plan_id=plan.id,
        )
        await self.fanout.distribute(user_id, plan.daily, plan.id)

        if completes:
            self.logger.info(
                f"Investment {snapshot.id} completed after {plan.days} days",
                extra={"user_id": user_id, "plan_id": plan.id},
            )

        return CreditedInvestment(
            user_identifier=email,
            plan_name=plan.name,
            amount=plan.daily,
            investment_id=snapshot.id,
        )
