"""
Transaction repository.

Data access layer for the append-only ledger. Entries are inserted and
never edited, with one exception: a pending deposit may be settled once.
"""

from decimal import Decimal
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from investclub.models.enums import TransactionStatus, TransactionType
from investclub.models.transaction import Transaction
from investclub.repositories.base import BaseRepository
from investclub.utils.exceptions import DuplicateTransactionId


class TransactionRepository(BaseRepository[Transaction]):
    """Ledger repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize transaction repository."""
        super().__init__(Transaction, session)

    async def append_entry(
        self,
        user_id: int,
        type: TransactionType,
        transaction_id: str,
        amount: Decimal,
        status: TransactionStatus = TransactionStatus.COMPLETED,
        **extra: Any,
    ) -> Transaction:
        """
        Append a ledger entry.

        Args:
            user_id: User the entry belongs to
            type: Entry type
            transaction_id: Unique business id
            amount: Non-negative amount
            status: Entry status
            **extra: plan_id, source_user_id, utr_number

        Returns:
            Created entry

        Raises:
            DuplicateTransactionId: If the transaction id already exists
        """
        if await self.exists(transaction_id=transaction_id):
            raise DuplicateTransactionId(transaction_id)

        try:
            return await self.create(
                user_id=user_id,
                type=type.value,
                transaction_id=transaction_id,
                amount=amount,
                status=status.value,
                **extra,
            )
        except IntegrityError as e:
            raise DuplicateTransactionId(transaction_id) from e

    async def find_for_user(
        self,
        user_id: int,
        type: TransactionType | None = None,
        page: int = 1,
        per_page: int = 50,
    ) -> tuple[list[Transaction], int]:
        """
        Get a user's entries, newest first.

        Args:
            user_id: User ID
            type: Optional entry type filter
            page: Page number (1-indexed)
            per_page: Items per page

        Returns:
            Tuple of (entries, total_count)
        """
        filters: dict[str, Any] = {"user_id": user_id}
        if type is not None:
            filters["type"] = type.value
        return await self.find_paginated(page=page, per_page=per_page, **filters)

    async def sum_completed(self, type: TransactionType) -> Decimal:
        """
        Sum completed entries of one type across all users.

        Args:
            type: Entry type

        Returns:
            Total amount, zero when there are no entries
        """
        stmt = select(func.coalesce(func.sum(Transaction.amount), 0)).where(
            Transaction.type == type.value,
            Transaction.status == TransactionStatus.COMPLETED.value,
        )
        result = await self.session.execute(stmt)
        return Decimal(str(result.scalar() or 0))

    async def sum_commissions_by_source(self, user_id: int) -> dict[int, Decimal]:
        """
        Sum a user's completed commissions per payout recipient.

        Args:
            user_id: Commission earner

        Returns:
            Mapping of source user ID to commission total
        """
        stmt = (
            select(Transaction.source_user_id, func.sum(Transaction.amount))
            .where(
                Transaction.user_id == user_id,
                Transaction.type == TransactionType.REFERRAL_COMMISSION.value,
                Transaction.status == TransactionStatus.COMPLETED.value,
                Transaction.source_user_id.is_not(None),
            )
            .group_by(Transaction.source_user_id)
        )
        result = await self.session.execute(stmt)
        return {
            source_id: Decimal(str(total))
            for source_id, total in result.all()
        }

    async def settle_pending(
        self, entry_id: int, type: TransactionType, status: TransactionStatus
    ) -> bool:
        """
        Move a pending entry to its final status exactly once.

        Args:
            entry_id: Ledger row ID
            type: Expected entry type
            status: Final status

        Returns:
            True if the entry was pending and is now settled
        """
        stmt = (
            update(Transaction)
            .where(
                Transaction.id == entry_id,
                Transaction.type == type.value,
                Transaction.status == TransactionStatus.PENDING.value,
            )
            .values(status=status.value)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0
