"""
User model.

Represents a registered club member.
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from investclub.config.business_constants import ROLE_USER
from investclub.models.base import Base
from investclub.models.types import MoneyType

if TYPE_CHECKING:
    from investclub.models.investment import Investment


class User(Base):
    """User model - registered club members."""

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            'available_balance >= 0',
            name='check_user_available_balance_non_negative'
        ),
        CheckConstraint(
            'total_invested >= 0',
            name='check_user_total_invested_non_negative'
        ),
    )

    # Primary key
    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )

    # Identity
    email: Mapped[str] = mapped_column(
        String(255), unique=True, index=True, nullable=False
    )
    name: Mapped[str | None] = mapped_column(
        String(255), nullable=True
    )
    role: Mapped[str] = mapped_column(
        String(20), default=ROLE_USER, nullable=False
    )

    # Referral data
    referral_code: Mapped[str] = mapped_column(
        String(8), unique=True, index=True, nullable=False
    )
    # Code of the direct referrer, set at most once
    referred_by: Mapped[str | None] = mapped_column(
        String(8), nullable=True, index=True
    )

    # Financial
    available_balance: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )
    total_invested: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    # Relationships
    investments: Mapped[list["Investment"]] = relationship(
        "Investment",
        back_populates="user",
        order_by="Investment.id",
        lazy="raise",
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<User(id={self.id}, email={self.email!r}, "
            f"referral_code={self.referral_code!r})>"
        )
