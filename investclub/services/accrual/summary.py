"""
Accrual run results.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal


@dataclass(frozen=True)
class CreditedInvestment:
    """One daily payout credited during a run."""

    user_identifier: str
    plan_name: str
    amount: Decimal
    investment_id: int | None = None

    def to_dict(self) -> dict:
        """Wire representation."""
        return {
            "userIdentifier": self.user_identifier,
            "planName": self.plan_name,
            "amount": float(self.amount),
        }


@dataclass
class AccrualSummary:
    """
    Outcome of one accrual run.

    Attributes:
        accrual_date: Calendar date the run credited
        total_users_credited: Users with at least one payout this run
        credited_investments: Payouts in processing order
        skipped: Investments left untouched (missing plan, already paid today)
        failed: Investments whose unit of work was rolled back
    """

    accrual_date: date | None = None
    total_users_credited: int = 0
    credited_investments: list[CreditedInvestment] = field(default_factory=list)
    skipped: int = 0
    failed: int = 0

    @property
    def total_credit_events(self) -> int:
        """Number of payouts credited."""
        return len(self.credited_investments)

    @property
    def total_amount(self) -> Decimal:
        """Sum of payouts credited."""
        return sum(
            (item.amount for item in self.credited_investments), Decimal("0")
        )

    def add(self, item: CreditedInvestment) -> None:
        """Record a credited payout."""
        self.credited_investments.append(item)

    def to_dict(self) -> dict:
        """Wire representation of the run."""
        return {
            "totalUsersCredited": self.total_users_credited,
            "totalCreditEvents": self.total_credit_events,
            "creditedInvestments": [
                item.to_dict() for item in self.credited_investments
            ],
        }
