"""
WithdrawalRequest model.

Member request to pay out part of the available balance, reviewed by an
administrator.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from investclub.models.base import Base
from investclub.models.enums import WithdrawalStatus
from investclub.models.types import MoneyType


class WithdrawalRequest(Base):
    """Withdrawal request awaiting or past review."""

    __tablename__ = "withdrawal_requests"
    __table_args__ = (
        CheckConstraint('amount > 0', name='check_withdrawal_amount_positive'),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    amount: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    status: Mapped[str] = mapped_column(
        String(16),
        default=WithdrawalStatus.PENDING.value,
        nullable=False,
        index=True,
    )
    remarks: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
    reviewed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<WithdrawalRequest(id={self.id}, user_id={self.user_id}, "
            f"amount={self.amount}, status={self.status})>"
        )
