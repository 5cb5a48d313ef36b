"""Data access layer."""

from investclub.repositories.base import BaseRepository
from investclub.repositories.investment_repository import InvestmentRepository
from investclub.repositories.plan_repository import PlanRepository
from investclub.repositories.referral_repository import ReferralRepository
from investclub.repositories.transaction_repository import TransactionRepository
from investclub.repositories.user_repository import UserRepository
from investclub.repositories.withdrawal_request_repository import (
    WithdrawalRequestRepository,
)

__all__ = [
    "BaseRepository",
    "InvestmentRepository",
    "PlanRepository",
    "ReferralRepository",
    "TransactionRepository",
    "UserRepository",
    "WithdrawalRequestRepository",
]
