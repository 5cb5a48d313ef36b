"""
Domain exceptions.

Every error raised by services derives from ClubError so callers can
separate business failures from infrastructure failures.
"""

from decimal import Decimal


class ClubError(Exception):
    """Base class for all investment club errors."""


class UserNotFound(ClubError):
    """Raised when a user id does not resolve."""

    def __init__(self, user_id: int) -> None:
        self.user_id = user_id
        super().__init__(f"User {user_id} not found")


class UserAlreadyRegistered(ClubError):
    """Raised when an email is already taken."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(f"User with email {email} already exists")


class InvalidReferralCode(ClubError):
    """Raised when a referral code does not resolve to a user."""

    def __init__(self, code: str) -> None:
        self.code = code
        super().__init__(f"Invalid referral code: {code}")


class ReferralAlreadyLinked(ClubError):
    """Raised when a user who already has a referrer is linked again."""

    def __init__(self, user_id: int) -> None:
        self.user_id = user_id
        super().__init__(f"User {user_id} already has a referrer")


class PlanNotFound(ClubError):
    """Raised when a plan id does not resolve or the plan is inactive."""

    def __init__(self, plan_id: int) -> None:
        self.plan_id = plan_id
        super().__init__(f"Plan {plan_id} not found")


class InsufficientBalance(ClubError):
    """Raised when available balance does not cover a debit."""

    def __init__(self, user_id: int, required: Decimal) -> None:
        self.user_id = user_id
        self.required = required
        super().__init__(
            f"Insufficient balance for user {user_id}: {required} required"
        )


class InvalidAmount(ClubError):
    """Raised when a money amount is not positive."""


class StoreWriteFailure(ClubError):
    """Raised when a unit of work could not be persisted."""


class DuplicateTransactionId(StoreWriteFailure):
    """Raised when a ledger transaction id already exists."""

    def __init__(self, transaction_id: str) -> None:
        self.transaction_id = transaction_id
        super().__init__(f"Duplicate transaction id: {transaction_id}")


class TransactionNotFound(ClubError):
    """Raised when a ledger entry is missing or not in the expected state."""


class WithdrawalAlreadyReviewed(ClubError):
    """Raised when a withdrawal request was already approved or rejected."""

    def __init__(self, request_id: int, status: str) -> None:
        self.request_id = request_id
        self.status = status
        super().__init__(f"Withdrawal request {request_id} is already {status}")

