"""Daily return accrual."""

from investclub.services.accrual.engine import DailyAccrualEngine
from investclub.services.accrual.summary import AccrualSummary, CreditedInvestment

__all__ = ["AccrualSummary", "CreditedInvestment", "DailyAccrualEngine"]
