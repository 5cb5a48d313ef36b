"""
Investment model.

One purchase of a plan by a user. Progress is tracked in whole days.
"""

from datetime import UTC, date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from investclub.models.base import Base
from investclub.models.types import MoneyType

if TYPE_CHECKING:
    from investclub.models.user import User


class Investment(Base):
    """
    Investment entity.

    `plan_id` is a soft reference: a plan may be removed from the catalog
    while investments that point at it still exist. Such investments are
    left untouched by the accrual run.

    Attributes:
        id: Primary key, also the stored order of a user's investments
        user_id: Owner
        plan_id: Plan catalog id (no foreign key)
        amount: Amount paid for the plan
        started_at: Purchase time
        days_completed: Payout days already credited
        is_active: False once all payout days are credited
        last_accrued_on: Accrual date of the latest payout
        completed_at: When the last payout was credited
    """

    __tablename__ = "investments"
    __table_args__ = (
        CheckConstraint(
            'days_completed >= 0',
            name='check_investment_days_completed_non_negative'
        ),
        Index("idx_investments_user_active", "user_id", "is_active"),
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
    plan_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    amount: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    started_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    days_completed: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False
    )
    last_accrued_on: Mapped[date | None] = mapped_column(Date, nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    user: Mapped["User"] = relationship(
        "User", back_populates="investments", lazy="raise"
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Investment(id={self.id}, user_id={self.user_id}, "
            f"plan_id={self.plan_id}, days_completed={self.days_completed}, "
            f"active={self.is_active})>"
        )
