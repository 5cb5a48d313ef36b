"""
User repository.

Data access layer for User model. Balance changes are single UPDATE
statements with the arithmetic done by the database, so concurrent
credits never overwrite each other.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import func, select, update
from sqlalchemy.engine import Row
from sqlalchemy.ext.asyncio import AsyncSession

from investclub.config.business_constants import ROLE_SUPERADMIN
from investclub.models.investment import Investment
from investclub.models.user import User
from investclub.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """User repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize user repository."""
        super().__init__(User, session)

    async def get_by_email(self, email: str) -> User | None:
        """
        Get user by email.

        Args:
            email: Normalized email address

        Returns:
            User or None
        """
        return await self.get_by(email=email)

    async def get_by_referral_code(self, code: str) -> User | None:
        """
        Get user by referral code.

        Args:
            code: Referral code

        Returns:
            User or None
        """
        return await self.get_by(referral_code=code)

    async def referral_code_exists(self, code: str) -> bool:
        """Check whether a referral code is already assigned."""
        return await self.exists(referral_code=code)

    async def credit_balance(self, user_id: int, amount: Decimal) -> bool:
        """
        Atomically add to available balance.

        Args:
            user_id: User ID
            amount: Non-negative amount

        Returns:
            True if the user row was updated
        """
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(available_balance=User.available_balance + amount)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0

    async def debit_balance(self, user_id: int, amount: Decimal) -> bool:
        """
        Atomically subtract from available balance if it covers the amount.

        Args:
            user_id: User ID
            amount: Amount to take

        Returns:
            True if debited, False if the balance was too low
        """
        stmt = (
            update(User)
            .where(User.id == user_id, User.available_balance >= amount)
            .values(available_balance=User.available_balance - amount)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0

    async def add_invested(self, user_id: int, amount: Decimal) -> None:
        """Atomically increase the lifetime invested total."""
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(total_invested=User.total_invested + amount)
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)

    async def get_balance(self, user_id: int) -> Decimal | None:
        """
        Read the current available balance straight from the database.

        Args:
            user_id: User ID

        Returns:
            Balance or None if the user does not exist
        """
        stmt = select(User.available_balance).where(User.id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_investors(self) -> list[Row]:
        """
        Get every user holding at least one investment.

        Returns:
            Rows of (id, email) ordered by user id
        """
        stmt = (
            select(User.id, User.email)
            .where(select(Investment.id).where(Investment.user_id == User.id).exists())
            .order_by(User.id)
        )
        result = await self.session.execute(stmt)
        return list(result.all())

    async def count_members(self) -> int:
        """Count users, excluding superadmins."""
        stmt = select(func.count(User.id)).where(User.role != ROLE_SUPERADMIN)
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def count_registered_since(self, since: datetime) -> int:
        """Count users created at or after the given time."""
        stmt = select(func.count(User.id)).where(User.created_at >= since)
        result = await self.session.execute(stmt)
        return result.scalar() or 0
