"""
Enumerations shared by models and services.
"""

from enum import StrEnum


class TransactionType(StrEnum):
    """Kind of money movement recorded in the ledger."""

    DEPOSIT = "deposit"
    WITHDRAW = "withdraw"
    INVESTMENT = "investment"
    DAILY_RETURN = "daily_return"
    REFERRAL_COMMISSION = "referral_commission"


class TransactionStatus(StrEnum):
    """Ledger entry status."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class WithdrawalStatus(StrEnum):
    """Withdrawal request review status."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
