"""
Report service.

Read-only views over the ledger: member history and platform totals.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from investclub.models.enums import TransactionType
from investclub.models.transaction import Transaction
from investclub.repositories.transaction_repository import TransactionRepository
from investclub.repositories.user_repository import UserRepository
from investclub.services.base_service import BaseService
from investclub.utils.datetime_utils import start_of_day, utc_today


@dataclass
class PlatformAnalytics:
    """Platform-wide totals over completed ledger entries."""

    total_invested: Decimal
    total_profit: Decimal
    total_commissions: Decimal
    total_deposits: Decimal
    total_withdrawals: Decimal
    total_users: int
    new_users_today: int

    def to_dict(self) -> dict:
        """Serializable view."""
        return {
            "totalInvested": str(self.total_invested),
            "totalProfit": str(self.total_profit),
            "totalCommissions": str(self.total_commissions),
            "totalDeposits": str(self.total_deposits),
            "totalWithdrawals": str(self.total_withdrawals),
            "totalUsers": self.total_users,
            "newUsersToday": self.new_users_today,
        }


class ReportService(BaseService):
    """Builds history and analytics reports."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize report service.

        Args:
            session: Async database session
        """
        super().__init__(session)
        self.user_repo = UserRepository(session)
        self.transaction_repo = TransactionRepository(session)

    async def get_transaction_history(
        self,
        user_id: int,
        type: TransactionType | None = None,
        page: int = 1,
        per_page: int = 50,
    ) -> tuple[list[Transaction], int]:
        """
        Get a member's ledger entries, newest first.

        Args:
            user_id: Member ID
            type: Optional entry type filter
            page: Page number (1-indexed)
            per_page: Items per page

        Returns:
            Tuple of (entries, total_count)
        """
        return await self.transaction_repo.find_for_user(
            user_id, type=type, page=page, per_page=per_page
        )

    async def get_daily_return_history(
        self, user_id: int, limit: int = 100
    ) -> list[Transaction]:
        """Get a member's most recent daily payouts."""
        entries, _ = await self.transaction_repo.find_for_user(
            user_id, type=TransactionType.DAILY_RETURN, per_page=limit
        )
        return entries

    async def get_platform_analytics(self, today: date | None = None) -> PlatformAnalytics:
        """
        Compute platform totals.

        Args:
            today: Day counted as "today", defaults to the UTC date

        Returns:
            PlatformAnalytics
        """
        today = today or utc_today()
        repo = self.transaction_repo
        return PlatformAnalytics(
            total_invested=await repo.sum_completed(TransactionType.INVESTMENT),
            total_profit=await repo.sum_completed(TransactionType.DAILY_RETURN),
            total_commissions=await repo.sum_completed(TransactionType.REFERRAL_COMMISSION),
            total_deposits=await repo.sum_completed(TransactionType.DEPOSIT),
            total_withdrawals=await repo.sum_completed(TransactionType.WITHDRAW),
            total_users=await self.user_repo.count_members(),
            new_users_today=await self.user_repo.count_registered_since(start_of_day(today)),
        )
