"""
Integration tests for ledger entry uniqueness.
"""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import func, select

from investclub.models import Transaction, TransactionStatus, TransactionType
from investclub.repositories.transaction_repository import TransactionRepository
from investclub.utils.exceptions import DuplicateTransactionId

pytestmark = pytest.mark.integration

ENTRY_ID = "DAILY_1_1_1760832000000000000_ABC123"


async def entries_with_id(session, transaction_id: str) -> int:
    result = await session.execute(
        select(func.count(Transaction.id)).where(
            Transaction.transaction_id == transaction_id
        )
    )
    return result.scalar()


async def append(repo: TransactionRepository, user_id: int) -> Transaction:
    return await repo.append_entry(
        user_id=user_id,
        type=TransactionType.DAILY_RETURN,
        transaction_id=ENTRY_ID,
        amount=Decimal("100"),
        status=TransactionStatus.COMPLETED,
    )


class TestAppendEntry:
    """Test TransactionRepository.append_entry."""

    @pytest.mark.asyncio
    async def test_existing_id_rejected(self, db_session, factory):
        """A transaction id already in the ledger is refused."""
        user = await factory.user()
        user_id = user.id
        repo = TransactionRepository(db_session)
        await append(repo, user_id)
        await db_session.commit()

        with pytest.raises(DuplicateTransactionId) as exc_info:
            await append(repo, user_id)

        assert exc_info.value.transaction_id == ENTRY_ID
        assert await entries_with_id(db_session, ENTRY_ID) == 1

    @pytest.mark.asyncio
    async def test_unique_index_conflict_mapped(self, db_session, factory):
        """An insert that loses the race on the unique index is reported the same way."""
        user = await factory.user()
        user_id = user.id
        repo = TransactionRepository(db_session)
        await append(repo, user_id)
        await db_session.commit()
        repo.exists = AsyncMock(return_value=False)

        with pytest.raises(DuplicateTransactionId):
            await append(repo, user_id)

        await db_session.rollback()
        assert await entries_with_id(db_session, ENTRY_ID) == 1
