"""
Withdrawal request repository.

Data access layer for WithdrawalRequest model.
"""

from datetime import datetime

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from investclub.models.enums import WithdrawalStatus
from investclub.models.withdrawal_request import WithdrawalRequest
from investclub.repositories.base import BaseRepository


class WithdrawalRequestRepository(BaseRepository[WithdrawalRequest]):
    """Withdrawal request repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize withdrawal request repository."""
        super().__init__(WithdrawalRequest, session)

    async def get_pending(self) -> list[WithdrawalRequest]:
        """Get requests awaiting review, oldest first."""
        return await self.find_by(status=WithdrawalStatus.PENDING.value)

    async def mark_reviewed(
        self,
        request_id: int,
        status: WithdrawalStatus,
        reviewed_at: datetime,
        remarks: str | None = None,
    ) -> bool:
        """
        Move a pending request to its review outcome exactly once.

        Args:
            request_id: Withdrawal request ID
            status: APPROVED or REJECTED
            reviewed_at: Review time
            remarks: Reviewer note, None keeps the stored one

        Returns:
            True if the request was pending and is now reviewed
        """
        values: dict = {"status": status.value, "reviewed_at": reviewed_at}
        if remarks is not None:
            values["remarks"] = remarks
        stmt = (
            update(WithdrawalRequest)
            .where(
                WithdrawalRequest.id == request_id,
                WithdrawalRequest.status == WithdrawalStatus.PENDING.value,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0
