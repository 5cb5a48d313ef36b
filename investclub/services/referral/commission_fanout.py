"""
Commission fan-out.

Pays each ancestor of a payout recipient a percentage of that payout.
"""

from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from investclub.config.business_constants import REFERRAL_DEPTH, TX_PREFIX_COMMISSION
from investclub.models.enums import TransactionStatus, TransactionType
from investclub.repositories.transaction_repository import TransactionRepository
from investclub.repositories.user_repository import UserRepository
from investclub.services.base_service import BaseService
from investclub.services.referral.config import CommissionRates, calculate_commission
from investclub.utils.transaction_ids import make_transaction_id


@dataclass
class CommissionCredit:
    """One commission paid to one ancestor."""

    level: int
    referrer_id: int
    amount: Decimal
    transaction_id: str


class CommissionFanout(BaseService):
    """
    Walks `referred_by` upward from a payout recipient.

    Runs inside the caller's unit of work and never commits.
    """

    def __init__(self, session: AsyncSession, rates: CommissionRates) -> None:
        """
        Initialize fan-out.

        Args:
            session: Async database session
            rates: Commission percent per level
        """
        super().__init__(session)
        self.rates = rates
        self.user_repo = UserRepository(session)
        self.transaction_repo = TransactionRepository(session)

    async def distribute(
        self, recipient_id: int, amount: Decimal, plan_id: int | None = None
    ) -> list[CommissionCredit]:
        """
        Credit up to three ancestors for a payout.

        Level N receives `round(amount * rate_N / 100)`. Levels whose
        commission rounds to zero get no credit and no ledger entry but
        the walk continues past them. The walk stops at a missing code,
        an unknown code or a user already visited.

        Args:
            recipient_id: User who received the payout
            amount: Payout amount
            plan_id: Plan the payout came from

        Returns:
            Commissions credited, in level order
        """
        recipient = await self.user_repo.get_by_id(recipient_id)
        if recipient is None or not recipient.referred_by:
            return []

        credits: list[CommissionCredit] = []
        visited = {recipient_id}
        code: str | None = recipient.referred_by

        for level in range(1, REFERRAL_DEPTH + 1):
            if not code:
                break
            referrer = await self.user_repo.get_by_referral_code(code)
            if referrer is None:
                self.logger.debug(
                    f"Referral code {code} no longer resolves, stopping at level {level}"
                )
                break
            if referrer.id in visited:
                self.logger.warning(
                    f"Referral cycle at user {referrer.id}, stopping fan-out",
                    extra={"recipient_id": recipient_id, "level": level},
                )
                break
            visited.add(referrer.id)

            commission = calculate_commission(amount, self.rates.for_level(level))
            if commission > 0:
                await self.user_repo.credit_balance(referrer.id, commission)
                entry = await self.transaction_repo.append_entry(
                    user_id=referrer.id,
                    type=TransactionType.REFERRAL_COMMISSION,
                    transaction_id=make_transaction_id(
                        TX_PREFIX_COMMISSION, referrer.id, recipient_id
                    ),
                    amount=commission,
                    status=TransactionStatus.COMPLETED,
                    plan_id=plan_id,
                    source_user_id=recipient_id,
                )
                credits.append(
                    CommissionCredit(
                        level=level,
                        referrer_id=referrer.id,
                        amount=commission,
                        transaction_id=entry.transaction_id,
                    )
                )

            code = referrer.referred_by

        if credits:
            self.logger.info(
                f"Paid {len(credits)} commission(s) on payout to user {recipient_id}",
                extra={
                    "recipient_id": recipient_id,
                    "amount": str(amount),
                    "total": str(sum(c.amount for c in credits)),
                },
            )
        return credits
