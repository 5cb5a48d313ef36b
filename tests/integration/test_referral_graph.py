"""
Integration tests for linking new users into the referral graph.
"""

import pytest
from sqlalchemy import func, select

from investclub.models import Referral
from investclub.repositories.referral_repository import ReferralRepository
from investclub.services.referral import ReferralGraphBuilder
from investclub.utils.exceptions import (
    InvalidReferralCode,
    ReferralAlreadyLinked,
    UserNotFound,
)

pytestmark = pytest.mark.integration


async def referral_count(session) -> int:
    result = await session.execute(select(func.count(Referral.id)))
    return result.scalar()


class TestLinkNewUser:
    """Test ReferralGraphBuilder.link_new_user."""

    @pytest.mark.asyncio
    async def test_full_three_level_chain(self, db_session, factory):
        """A new user is appended to three ancestors' level lists."""
        c = await factory.user(referral_code="CCCC0001")
        b = await factory.user(referral_code="BBBB0001", referred_by="CCCC0001")
        a = await factory.user(referral_code="AAAA0001", referred_by="BBBB0001")
        u = await factory.user(referral_code="UUUU0001")

        link = await ReferralGraphBuilder(db_session).link_new_user(u.id, "AAAA0001")
        await db_session.commit()

        assert link.ancestor_ids == [a.id, b.id, c.id]
        assert link.levels == {1: a.id, 2: b.id, 3: c.id}

        repo = ReferralRepository(db_session)
        assert await repo.get_referral_ids(a.id, 1) == [u.id]
        assert await repo.get_referral_ids(b.id, 2) == [u.id]
        assert await repo.get_referral_ids(c.id, 3) == [u.id]
        assert u.referred_by == "AAAA0001"

    @pytest.mark.asyncio
    async def test_chain_shorter_than_three(self, db_session, factory):
        """The walk stops quietly at the top of the chain."""
        a = await factory.user(referral_code="AAAA0002")
        u = await factory.user()

        link = await ReferralGraphBuilder(db_session).link_new_user(u.id, "AAAA0002")
        await db_session.commit()

        assert link.ancestor_ids == [a.id]
        assert await referral_count(db_session) == 1

    @pytest.mark.asyncio
    async def test_broken_upper_code_stops_walk(self, db_session, factory):
        """An ancestor code that resolves to nobody ends the walk without error."""
        a = await factory.user(referral_code="AAAA0003", referred_by="GONE0001")
        u = await factory.user()

        link = await ReferralGraphBuilder(db_session).link_new_user(u.id, "AAAA0003")

        assert link.ancestor_ids == [a.id]

    @pytest.mark.asyncio
    async def test_code_is_normalized(self, db_session, factory):
        """Lower-case codes with whitespace still resolve."""
        a = await factory.user(referral_code="AAAA0004")
        u = await factory.user()

        link = await ReferralGraphBuilder(db_session).link_new_user(u.id, "  aaaa0004 ")

        assert link.ancestor_ids == [a.id]

    @pytest.mark.asyncio
    async def test_level_lists_keep_insertion_order(self, db_session, factory):
        """Level lists grow in the order users joined."""
        a = await factory.user(referral_code="AAAA0005")
        first = await factory.user()
        second = await factory.user()
        builder = ReferralGraphBuilder(db_session)

        await builder.link_new_user(first.id, "AAAA0005")
        await builder.link_new_user(second.id, "AAAA0005")
        await db_session.commit()

        repo = ReferralRepository(db_session)
        assert await repo.get_referral_ids(a.id, 1) == [first.id, second.id]

    @pytest.mark.asyncio
    async def test_empty_code_is_noop(self, db_session, factory):
        """No code means no referral rows."""
        u = await factory.user()

        link = await ReferralGraphBuilder(db_session).link_new_user(u.id, "   ")

        assert link.linked is False
        assert await referral_count(db_session) == 0

    @pytest.mark.asyncio
    async def test_unknown_code_raises_without_writes(self, db_session, factory):
        """An unknown code raises and writes nothing."""
        u = await factory.user()

        with pytest.raises(InvalidReferralCode):
            await ReferralGraphBuilder(db_session).link_new_user(u.id, "NOPE0000")

        assert await referral_count(db_session) == 0
        assert u.referred_by is None

    @pytest.mark.asyncio
    async def test_own_code_rejected(self, db_session, factory):
        """A user cannot refer themselves."""
        u = await factory.user(referral_code="SELF0001")

        with pytest.raises(InvalidReferralCode):
            await ReferralGraphBuilder(db_session).link_new_user(u.id, "SELF0001")

    @pytest.mark.asyncio
    async def test_second_link_rejected(self, db_session, factory):
        """referred_by is set at most once, replays raise."""
        await factory.user(referral_code="AAAA0006")
        await factory.user(referral_code="BBBB0006")
        u = await factory.user()
        builder = ReferralGraphBuilder(db_session)

        await builder.link_new_user(u.id, "AAAA0006")
        await db_session.commit()

        with pytest.raises(ReferralAlreadyLinked):
            await builder.link_new_user(u.id, "BBBB0006")
        assert u.referred_by == "AAAA0006"
        assert await referral_count(db_session) == 1

    @pytest.mark.asyncio
    async def test_missing_new_user(self, db_session, factory):
        """Linking a user id that does not exist raises."""
        await factory.user(referral_code="AAAA0007")

        with pytest.raises(UserNotFound):
            await ReferralGraphBuilder(db_session).link_new_user(9999, "AAAA0007")
