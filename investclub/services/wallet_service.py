"""
Wallet service.

Deposits and withdrawals of the available balance. Every settled money
movement leaves a ledger entry.
"""

from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from investclub.config.business_constants import TX_PREFIX_DEPOSIT, TX_PREFIX_WITHDRAW
from investclub.models.enums import TransactionStatus, TransactionType, WithdrawalStatus
from investclub.models.transaction import Transaction
from investclub.models.withdrawal_request import WithdrawalRequest
from investclub.repositories.transaction_repository import TransactionRepository
from investclub.repositories.user_repository import UserRepository
from investclub.repositories.withdrawal_request_repository import (
    WithdrawalRequestRepository,
)
from investclub.services.base_service import BaseService, transaction
from investclub.utils.datetime_utils import utc_now
from investclub.utils.exceptions import (
    InsufficientBalance,
    InvalidAmount,
    TransactionNotFound,
    UserNotFound,
    WithdrawalAlreadyReviewed,
)
from investclub.utils.transaction_ids import make_transaction_id


class WalletService(BaseService):
    """Manages deposits and withdrawals."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize wallet service.

        Args:
            session: Async database session
        """
        super().__init__(session)
        self.user_repo = UserRepository(session)
        self.transaction_repo = TransactionRepository(session)
        self.withdrawal_repo = WithdrawalRequestRepository(session)

    async def _require_user(self, user_id: int) -> None:
        if await self.user_repo.get_by_id(user_id) is None:
            raise UserNotFound(user_id)

    @staticmethod
    def _require_positive(amount: Decimal) -> Decimal:
        amount = Decimal(amount)
        if amount <= 0:
            raise InvalidAmount(f"Amount must be positive, got {amount}")
        return amount

    @transaction
    async def record_deposit(
        self,
        user_id: int,
        amount: Decimal,
        utr_number: str | None = None,
    ) -> Transaction:
        """
        Record a deposit awaiting confirmation.

        Args:
            user_id: Depositing member
            amount: Deposit amount
            utr_number: Bank transfer reference

        Returns:
            Pending deposit entry

        Raises:
            UserNotFound: If the user does not exist
            InvalidAmount: If the amount is not positive
        """
        amount = self._require_positive(amount)
        await self._require_user(user_id)

        entry = await self.transaction_repo.append_entry(
            user_id=user_id,
            type=TransactionType.DEPOSIT,
            transaction_id=make_transaction_id(TX_PREFIX_DEPOSIT, user_id),
            amount=amount,
            status=TransactionStatus.PENDING,
            utr_number=utr_number,
        )
        self.logger.info(
            f"Deposit of {amount} recorded for user {user_id}",
            extra={"transaction_id": entry.transaction_id},
        )
        return entry

    @transaction
    async def approve_deposit(self, entry_id: int) -> Transaction:
        """
        Confirm a pending deposit and credit the balance.

        Args:
            entry_id: Ledger row ID of the deposit

        Returns:
            Settled deposit entry

        Raises:
            TransactionNotFound: If no pending deposit has that ID
        """
        entry = await self.transaction_repo.get_by_id(entry_id)
        if entry is None or not await self.transaction_repo.settle_pending(
            entry_id, TransactionType.DEPOSIT, TransactionStatus.COMPLETED
        ):
            raise TransactionNotFound(
                f"Deposit {entry_id} not found or already processed"
            )

        await self.user_repo.credit_balance(entry.user_id, entry.amount)
        await self.session.refresh(entry)

        self.logger.info(
            f"Deposit {entry.transaction_id} approved",
            extra={"user_id": entry.user_id, "amount": str(entry.amount)},
        )
        return entry

    @transaction
    async def request_withdrawal(
        self,
        user_id: int,
        amount: Decimal,
        remarks: str | None = None,
    ) -> WithdrawalRequest:
        """
        File a withdrawal request for review.

        The balance is checked again at approval time.

        Raises:
            UserNotFound: If the user does not exist
            InvalidAmount: If the amount is not positive
            InsufficientBalance: If the balance does not cover the amount
        """
        amount = self._require_positive(amount)
        await self._require_user(user_id)

        balance = await self.user_repo.get_balance(user_id)
        if balance is None or balance < amount:
            raise InsufficientBalance(user_id, amount)

        request = await self.withdrawal_repo.create(
            user_id=user_id,
            amount=amount,
            status=WithdrawalStatus.PENDING.value,
            remarks=remarks,
        )
        self.logger.info(
            f"Withdrawal of {amount} requested by user {user_id}",
            extra={"request_id": request.id},
        )
        return request

    async def list_pending_withdrawals(self) -> list[WithdrawalRequest]:
        """Get withdrawal requests awaiting review, oldest first."""
        return await self.withdrawal_repo.get_pending()

    @transaction
    async def review_withdrawal(
        self,
        request_id: int,
        approve: bool,
        remarks: str | None = None,
    ) -> WithdrawalRequest:
        """
        Approve or reject a withdrawal request.

        The request is claimed with a conditional status update first, so
        of two concurrent reviews only one moves money. Approval debits the
        balance and appends a completed withdraw entry. Rejection appends a
        failed withdraw entry and leaves the balance alone.

        Args:
            request_id: Withdrawal request ID
            approve: True to pay out, False to reject
            remarks: Reviewer note

        Returns:
            Reviewed request

        Raises:
            TransactionNotFound: If the request does not exist
            WithdrawalAlreadyReviewed: If the request is no longer pending
            InsufficientBalance: If approving and the balance is too low
        """
        request = await self.withdrawal_repo.get_by_id(request_id)
        if request is None:
            raise TransactionNotFound(f"Withdrawal request {request_id} not found")

        request_status = WithdrawalStatus.APPROVED if approve else WithdrawalStatus.REJECTED

        # Pending to reviewed exactly once, before any money moves
        if not await self.withdrawal_repo.mark_reviewed(
            request_id, request_status, reviewed_at=utc_now(), remarks=remarks
        ):
            await self.session.refresh(request)
            raise WithdrawalAlreadyReviewed(request_id, request.status)

        if approve:
            if not await self.user_repo.debit_balance(request.user_id, request.amount):
                raise InsufficientBalance(request.user_id, request.amount)
            entry_status = TransactionStatus.COMPLETED
        else:
            entry_status = TransactionStatus.FAILED

        await self.transaction_repo.append_entry(
            user_id=request.user_id,
            type=TransactionType.WITHDRAW,
            transaction_id=make_transaction_id(TX_PREFIX_WITHDRAW, request.user_id),
            amount=request.amount,
            status=entry_status,
        )
        await self.session.refresh(request)

        self.logger.info(
            f"Withdrawal request {request_id} {request_status.value}",
            extra={"user_id": request.user_id, "amount": str(request.amount)},
        )
        return request
