"""
Transaction model.

Append-only ledger of every money movement.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column

from investclub.models.base import Base
from investclub.models.enums import TransactionStatus
from investclub.models.types import MoneyType


class Transaction(Base):
    """
    Ledger entry.

    Attributes:
        id: Primary key
        user_id: User whose balance the entry concerns
        type: TransactionType value
        transaction_id: Globally unique business id
        created_at: Entry time
        amount: Non-negative amount
        status: TransactionStatus value
        plan_id: Plan for investment, daily_return and commission entries
        source_user_id: Payout recipient that triggered a commission
        utr_number: Bank reference for manual deposits
    """

    __tablename__ = "transactions"
    __table_args__ = (
        CheckConstraint('amount >= 0', name='check_transaction_amount_non_negative'),
        CheckConstraint(
            "type IN ('deposit', 'withdraw', 'investment', "
            "'daily_return', 'referral_commission')",
            name='check_transaction_type'
        ),
        CheckConstraint(
            "status IN ('pending', 'completed', 'failed')",
            name='check_transaction_status'
        ),
        Index("idx_transactions_user_type", "user_id", "type"),
        Index("idx_transactions_type_status", "type", "status"),
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
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    transaction_id: Mapped[str] = mapped_column(
        String(128), unique=True, index=True, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
        index=True,
    )
    amount: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    status: Mapped[str] = mapped_column(
        String(16), default=TransactionStatus.PENDING.value, nullable=False
    )

    plan_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    source_user_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    utr_number: Mapped[str | None] = mapped_column(String(64), nullable=True)

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Transaction(transaction_id={self.transaction_id!r}, "
            f"type={self.type}, amount={self.amount}, status={self.status})>"
        )
