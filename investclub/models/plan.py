"""
Plan model.

Catalog of purchasable investment plans.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column

from investclub.models.base import Base
from investclub.models.types import MoneyType, PercentType


class Plan(Base):
    """
    Plan entity.

    A plan pays a fixed `daily` amount for `days` days in exchange for
    an up-front `invest` amount.

    Attributes:
        id: Primary key
        name: Display name
        invest: Purchase price
        daily: Payout credited per accrual day
        total: Total payout over the plan lifetime
        days: Number of payout days
        roi: Return on investment, percent
        badge: Optional marketing label
        benefits: Optional list of benefit strings
        is_active: Whether the plan can be purchased
        created_at: Creation time
    """

    __tablename__ = "investment_plans"
    __table_args__ = (
        CheckConstraint('days > 0', name='check_plan_days_positive'),
        CheckConstraint('daily >= 0', name='check_plan_daily_non_negative'),
        CheckConstraint('invest > 0', name='check_plan_invest_positive'),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    invest: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    daily: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    total: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    days: Mapped[int] = mapped_column(Integer, nullable=False)
    roi: Mapped[Decimal] = mapped_column(PercentType, nullable=False)

    badge: Mapped[str | None] = mapped_column(String(50), nullable=True)
    benefits: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)

    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Plan(id={self.id}, name={self.name!r}, "
            f"daily={self.daily}, days={self.days})>"
        )
