"""
Unit tests for referral code generation.
"""

import re
from unittest.mock import AsyncMock, MagicMock

import pytest

from investclub.services.referral.code_generator import (
    generate_referral_code,
    generate_unique_referral_code,
    normalize_referral_code,
)

CODE_PATTERN = re.compile(r"^[A-Z0-9]{8}$")


class TestGenerateReferralCode:
    """Test random code format."""

    def test_format(self):
        """Codes are 8 upper-case alphanumeric characters."""
        for _ in range(200):
            assert CODE_PATTERN.match(generate_referral_code())

    def test_custom_length(self):
        """Length can be overridden."""
        assert len(generate_referral_code(12)) == 12

    def test_codes_vary(self):
        """Successive codes are not all the same."""
        codes = {generate_referral_code() for _ in range(50)}
        assert len(codes) > 1


class TestNormalizeReferralCode:
    """Test user input normalization."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("  abc123xy ", "ABC123XY"),
            ("R1", "R1"),
            ("", ""),
            ("   ", ""),
            (None, ""),
        ],
    )
    def test_normalize(self, raw, expected):
        """Whitespace is stripped and letters upper-cased."""
        assert normalize_referral_code(raw) == expected


class TestGenerateUniqueReferralCode:
    """Test the uniqueness retry loop."""

    @pytest.mark.asyncio
    async def test_retries_until_unused(self):
        """Codes already taken are redrawn."""
        user_repo = MagicMock()
        user_repo.referral_code_exists = AsyncMock(side_effect=[True, True, False])

        code = await generate_unique_referral_code(user_repo)

        assert CODE_PATTERN.match(code)
        assert user_repo.referral_code_exists.await_count == 3

    @pytest.mark.asyncio
    async def test_first_code_unused(self):
        """A free first draw is returned immediately."""
        user_repo = MagicMock()
        user_repo.referral_code_exists = AsyncMock(return_value=False)

        await generate_unique_referral_code(user_repo)

        user_repo.referral_code_exists.assert_awaited_once()
