"""
Database models.

Importing this package registers every table on `Base.metadata`.
"""

from investclub.models.base import Base
from investclub.models.enums import (
    TransactionStatus,
    TransactionType,
    WithdrawalStatus,
)
from investclub.models.investment import Investment
from investclub.models.plan import Plan
from investclub.models.referral import Referral
from investclub.models.transaction import Transaction
from investclub.models.user import User
from investclub.models.withdrawal_request import WithdrawalRequest

__all__ = [
    "Base",
    "Investment",
    "Plan",
    "Referral",
    "Transaction",
    "TransactionStatus",
    "TransactionType",
    "User",
    "WithdrawalRequest",
    "WithdrawalStatus",
]
