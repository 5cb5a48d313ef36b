"""
Team report.

Summarizes a user's downline per referral level together with the
commission each level has produced.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from investclub.config.business_constants import REFERRAL_DEPTH
from investclub.repositories.referral_repository import ReferralRepository
from investclub.repositories.transaction_repository import TransactionRepository
from investclub.repositories.user_repository import UserRepository
from investclub.services.base_service import BaseService
from investclub.services.referral.config import CommissionRates
from investclub.utils.exceptions import UserNotFound


@dataclass
class TeamLevel:
    """Downline statistics for one level."""

    level: int
    rate: Decimal
    referral_ids: list[int] = field(default_factory=list)
    commission: Decimal = Decimal("0")

    @property
    def count(self) -> int:
        """Number of referrals on this level."""
        return len(self.referral_ids)


@dataclass
class TeamReport:
    """Downline statistics for all levels."""

    user_id: int
    referral_code: str
    levels: list[TeamLevel] = field(default_factory=list)

    @property
    def team_size(self) -> int:
        """Referrals across all levels."""
        return sum(level.count for level in self.levels)

    @property
    def total_commission(self) -> Decimal:
        """Commission earned across all levels."""
        return sum((level.commission for level in self.levels), Decimal("0"))

    def to_dict(self) -> dict:
        """Serializable view of the report."""
        return {
            "userId": self.user_id,
            "referralCode": self.referral_code,
            "teamSize": self.team_size,
            "totalCommission": str(self.total_commission),
            "levels": [
                {
                    "level": level.level,
                    "rate": str(level.rate),
                    "count": level.count,
                    "referralIds": level.referral_ids,
                    "commission": str(level.commission),
                }
                for level in self.levels
            ],
        }


class TeamReportService(BaseService):
    """Builds team reports."""

    def __init__(self, session: AsyncSession, rates: CommissionRates) -> None:
        """
        Initialize team report service.

        Args:
            session: Async database session
            rates: Commission percent per level, shown in the report
        """
        super().__init__(session)
        self.rates = rates
        self.user_repo = UserRepository(session)
        self.referral_repo = ReferralRepository(session)
        self.transaction_repo = TransactionRepository(session)

    async def get_team_report(self, user_id: int) -> TeamReport:
        """
        Build the team report of a user.

        Commission is attributed to the level the payout recipient sits
        on in the user's downline.

        Args:
            user_id: Report owner

        Returns:
            TeamReport

        Raises:
            UserNotFound: If the user does not exist
        """
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise UserNotFound(user_id)

        by_source = await self.transaction_repo.sum_commissions_by_source(user_id)

        report = TeamReport(user_id=user_id, referral_code=user.referral_code)
        for level in range(1, REFERRAL_DEPTH + 1):
            referral_ids = await self.referral_repo.get_referral_ids(user_id, level)
            commission = sum(
                (by_source.get(referral_id, Decimal("0")) for referral_id in referral_ids),
                Decimal("0"),
            )
            report.levels.append(
                TeamLevel(
                    level=level,
                    rate=self.rates.for_level(level),
                    referral_ids=referral_ids,
                    commission=commission,
                )
            )
        return report
