"""
Referral code generation.

Codes are drawn with `secrets` and redrawn until unused.
"""

import secrets

from loguru import logger

from investclub.config.business_constants import (
    REFERRAL_CODE_ALPHABET,
    REFERRAL_CODE_LENGTH,
)
from investclub.repositories.user_repository import UserRepository


def generate_referral_code(length: int = REFERRAL_CODE_LENGTH) -> str:
    """
    Draw a random referral code.

    Args:
        length: Code length

    Returns:
        Upper-case alphanumeric code
    """
    return "".join(secrets.choice(REFERRAL_CODE_ALPHABET) for _ in range(length))


def normalize_referral_code(code: str | None) -> str:
    """Strip whitespace and upper-case a user-supplied code."""
    return (code or "").strip().upper()


async def generate_unique_referral_code(user_repo: UserRepository) -> str:
    """
    Draw codes until one is not assigned to any user.

    Args:
        user_repo: User repository used for the uniqueness check

    Returns:
        Unused referral code
    """
    attempts = 0
    while True:
        code = generate_referral_code()
        attempts += 1
        if not await user_repo.referral_code_exists(code):
            if attempts > 1:
                logger.debug(f"Referral code found after {attempts} attempts")
            return code
