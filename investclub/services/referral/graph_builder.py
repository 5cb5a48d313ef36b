"""
Referral graph builder.

Links a newly registered user into the three-level referral graph.
"""

from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncSession

from investclub.config.business_constants import REFERRAL_DEPTH
from investclub.repositories.referral_repository import ReferralRepository
from investclub.repositories.user_repository import UserRepository
from investclub.services.base_service import BaseService
from investclub.services.referral.code_generator import normalize_referral_code
from investclub.utils.exceptions import (
    InvalidReferralCode,
    ReferralAlreadyLinked,
    UserNotFound,
)


@dataclass
class ReferralLink:
    """Result of linking a user into the graph."""

    new_user_id: int
    referral_code: str | None = None
    # ancestor_ids[0] is the direct referrer, then level 2, then level 3
    ancestor_ids: list[int] = field(default_factory=list)

    @property
    def linked(self) -> bool:
        """Whether any ancestor was recorded."""
        return bool(self.ancestor_ids)

    @property
    def levels(self) -> dict[int, int]:
        """Mapping of level to ancestor user ID."""
        return {level: ancestor for level, ancestor in enumerate(self.ancestor_ids, 1)}


class ReferralGraphBuilder(BaseService):
    """
    Records a new user under up to three ancestors.

    Never commits: the caller owns the transaction, so the user row and
    every referral row are written together or not at all.
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize graph builder.

        Args:
            session: Async database session
        """
        super().__init__(session)
        self.user_repo = UserRepository(session)
        self.referral_repo = ReferralRepository(session)

    async def link_new_user(
        self, new_user_id: int, referral_code: str | None
    ) -> ReferralLink:
        """
        Link a new user to the owner of `referral_code` and that owner's upline.

        The direct referrer gets a level 1 edge and the new user's
        `referred_by` is set to the referrer's code. The walk then follows
        `referred_by` upward for levels 2 and 3 and stops quietly at the
        first code that does not resolve.

        Args:
            new_user_id: Freshly created user
            referral_code: Code entered at registration, may be empty

        Returns:
            ReferralLink listing the recorded ancestors

        Raises:
            InvalidReferralCode: If the code matches no user or the new user itself
            ReferralAlreadyLinked: If the user already has a referrer
            UserNotFound: If the new user does not exist
        """
        code = normalize_referral_code(referral_code)
        if not code:
            return ReferralLink(new_user_id=new_user_id)

        new_user = await self.user_repo.get_by_id(new_user_id)
        if new_user is None:
            raise UserNotFound(new_user_id)
        if new_user.referred_by:
            raise ReferralAlreadyLinked(new_user_id)

        referrer = await self.user_repo.get_by_referral_code(code)
        if referrer is None or referrer.id == new_user_id:
            raise InvalidReferralCode(code)

        await self.referral_repo.append(referrer.id, new_user_id, level=1)
        await self.user_repo.update(new_user_id, referred_by=referrer.referral_code)

        ancestor_ids = [referrer.id]
        ancestor = referrer
        for level in range(2, REFERRAL_DEPTH + 1):
            if not ancestor.referred_by:
                break
            ancestor = await self.user_repo.get_by_referral_code(ancestor.referred_by)
            if ancestor is None:
                self.logger.debug(
                    f"Referral chain of user {new_user_id} ends at level {level - 1}"
                )
                break
            if ancestor.id == new_user_id or ancestor.id in ancestor_ids:
                self.logger.warning(
                    f"Referral cycle detected above user {new_user_id}",
                    extra={"ancestor_id": ancestor.id, "level": level},
                )
                break
            await self.referral_repo.append(ancestor.id, new_user_id, level=level)
            ancestor_ids.append(ancestor.id)

        self.logger.info(
            f"User {new_user_id} linked under {len(ancestor_ids)} ancestor(s)",
            extra={"referral_code": code, "ancestor_ids": ancestor_ids},
        )
        return ReferralLink(
            new_user_id=new_user_id,
            referral_code=code,
            ancestor_ids=ancestor_ids,
        )
