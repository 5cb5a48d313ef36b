"""
Referral repository.

Data access layer for Referral model.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from investclub.models.referral import Referral
from investclub.repositories.base import BaseRepository


class ReferralRepository(BaseRepository[Referral]):
    """Referral repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize referral repository."""
        super().__init__(Referral, session)

    async def append(
        self, referrer_id: int, referral_id: int, level: int
    ) -> Referral:
        """
        Append a user to an ancestor's level list.

        Args:
            referrer_id: Ancestor user ID
            referral_id: New descendant user ID
            level: Distance between them (1-3)

        Returns:
            Created referral edge
        """
        return await self.create(
            referrer_id=referrer_id,
            referral_id=referral_id,
            level=level,
        )

    async def get_referral_ids(self, referrer_id: int, level: int) -> list[int]:
        """
        Get the level list of a user.

        Args:
            referrer_id: Ancestor user ID
            level: Referral level (1-3)

        Returns:
            Descendant user IDs in insertion order
        """
        stmt = (
            select(Referral.referral_id)
            .where(Referral.referrer_id == referrer_id, Referral.level == level)
            .order_by(Referral.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_ancestors(self, referral_id: int) -> dict[int, int]:
        """
        Get the ancestors recorded for a user.

        Args:
            referral_id: Descendant user ID

        Returns:
            Mapping of level to ancestor user ID
        """
        stmt = select(Referral.level, Referral.referrer_id).where(
            Referral.referral_id == referral_id
        )
        result = await self.session.execute(stmt)
        return {level: referrer_id for level, referrer_id in result.all()}
