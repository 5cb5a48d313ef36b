"""
User registration functionality.

Creates the member account, assigns a referral code and links the member
into the referral graph, all in one transaction.
"""

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from investclub.models.user import User
from investclub.repositories.user_repository import UserRepository
from investclub.services.base_service import BaseService, transaction
from investclub.services.referral.code_generator import (
    generate_unique_referral_code,
    normalize_referral_code,
)
from investclub.services.referral.graph_builder import (
    ReferralGraphBuilder,
    ReferralLink,
)
from investclub.utils.exceptions import InvalidReferralCode, UserAlreadyRegistered


@dataclass
class RegistrationResult:
    """Outcome of a registration."""

    user: User
    referral: ReferralLink | None = None
    referral_error: str | None = None


class UserRegistrationService(BaseService):
    """Registers new members."""

    def __init__(
        self,
        session: AsyncSession,
        invalid_referral_code_fatal: bool = False,
    ) -> None:
        """
        Initialize registration service.

        Args:
            session: Async database session
            invalid_referral_code_fatal: Abort registration on an unknown code
        """
        super().__init__(session)
        self.invalid_referral_code_fatal = invalid_referral_code_fatal
        self.user_repo = UserRepository(session)
        self.graph_builder = ReferralGraphBuilder(session)

    @transaction
    async def register_user(
        self,
        email: str,
        name: str | None = None,
        referral_code: str | None = None,
    ) -> RegistrationResult:
        """
        Register a new member with optional referral code.

        An unknown referral code is logged and ignored unless the service
        was built with `invalid_referral_code_fatal`, in which case nothing
        is written and the error propagates.

        Args:
            email: Member email, stored lower-cased
            name: Display name
            referral_code: Code of the inviting member

        Returns:
            RegistrationResult with the created user and referral link

        Raises:
            UserAlreadyRegistered: If the email is taken
            InvalidReferralCode: If the code is unknown and the policy is fatal
        """
        email = email.strip().lower()
        if await self.user_repo.get_by_email(email):
            raise UserAlreadyRegistered(email)

        code = await generate_unique_referral_code(self.user_repo)
        user = await self.user_repo.create(
            email=email,
            name=name,
            referral_code=code,
        )

        result = RegistrationResult(user=user)
        if normalize_referral_code(referral_code):
            try:
                result.referral = await self.graph_builder.link_new_user(
                    user.id, referral_code
                )
            except InvalidReferralCode as e:
                if self.invalid_referral_code_fatal:
                    raise
                result.referral_error = str(e)
                self.logger.warning(
                    "Registration of {} continues without referrer: {}",
                    email,
                    e,
                    extra={"user_id": user.id},
                )

        self.logger.info(
            "User registered: {}",
            email,
            extra={
                "user_id": user.id,
                "referral_code": user.referral_code,
                "referred_by": user.referred_by,
            },
        )
        return result
