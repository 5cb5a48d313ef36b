"""
Referral model.

Edge of the referral graph: `referral_id` sits `level` steps below
`referrer_id`. A user's level-N referral list is every row with
`referrer_id = user` and `level = N`, in insertion order.
"""

from datetime import UTC, datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from investclub.models.base import Base


class Referral(Base):
    """Referral edge between an ancestor and a descendant."""

    __tablename__ = "referrals"
    __table_args__ = (
        CheckConstraint('level BETWEEN 1 AND 3', name='check_referral_level_range'),
        UniqueConstraint('referral_id', 'level', name='uq_referral_level'),
        UniqueConstraint('referrer_id', 'referral_id', name='uq_referrer_referral'),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    referrer_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    referral_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    level: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Referral(referrer_id={self.referrer_id}, "
            f"referral_id={self.referral_id}, level={self.level})>"
        )
