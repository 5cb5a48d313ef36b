"""
Integration tests for team reports and ledger reports.
"""

from datetime import date
from decimal import Decimal

import pytest

from investclub.models import User
from investclub.services.accrual import DailyAccrualEngine
from investclub.services.referral import CommissionRates, TeamReportService
from investclub.services.report_service import ReportService
from investclub.services.user import UserRegistrationService
from investclub.services.wallet_service import WalletService
from investclub.utils.exceptions import UserNotFound

pytestmark = pytest.mark.integration

DAY_1 = date(2026, 10, 19)


@pytest.fixture
async def chain(db_session):
    """top <- middle <- bottom, registered through referral codes."""
    service = UserRegistrationService(db_session)
    top = (await service.register_user("top@example.com")).user
    middle = (
        await service.register_user("middle@example.com", referral_code=top.referral_code)
    ).user
    bottom = (
        await service.register_user("bottom@example.com", referral_code=middle.referral_code)
    ).user
    return top.id, middle.id, bottom.id


class TestTeamReport:
    """Test TeamReportService.get_team_report."""

    @pytest.mark.asyncio
    async def test_levels_and_commission(self, db_session, factory, chain):
        """Each level lists its members and the commission they produced."""
        top_id, middle_id, bottom_id = chain
        plan = await factory.plan(daily=100)
        bottom = await db_session.get(User, bottom_id)
        await factory.investment(bottom, plan.id)
        await DailyAccrualEngine(db_session, CommissionRates()).run(DAY_1)

        report = await TeamReportService(db_session, CommissionRates()).get_team_report(top_id)

        assert [level.referral_ids for level in report.levels] == [[middle_id], [bottom_id], []]
        assert [level.commission for level in report.levels] == [
            Decimal("0"), Decimal("8"), Decimal("0"),
        ]
        assert report.team_size == 2
        assert report.total_commission == Decimal("8")
        data = report.to_dict()
        assert data["teamSize"] == 2
        assert data["levels"][0]["rate"] == "15"

    @pytest.mark.asyncio
    async def test_member_without_team(self, db_session, chain):
        """A leaf member has an empty report."""
        _, _, bottom_id = chain

        report = await TeamReportService(db_session, CommissionRates()).get_team_report(bottom_id)

        assert report.team_size == 0
        assert report.total_commission == Decimal("0")

    @pytest.mark.asyncio
    async def test_unknown_user(self, db_session):
        """Reports for missing users raise."""
        with pytest.raises(UserNotFound):
            await TeamReportService(db_session, CommissionRates()).get_team_report(404)


class TestReportService:
    """Test ledger history and platform analytics."""

    @pytest.mark.asyncio
    async def test_history_newest_first(self, db_session, factory):
        """History is paginated newest first and filterable by type."""
        user = await factory.user()
        plan = await factory.plan(daily=10)
        await factory.investment(user, plan.id)
        wallet = WalletService(db_session)
        await wallet.record_deposit(user.id, Decimal("5"))
        await DailyAccrualEngine(db_session, CommissionRates()).run(DAY_1)
        reports = ReportService(db_session)

        entries, total = await reports.get_transaction_history(user.id)
        payouts = await reports.get_daily_return_history(user.id)

        assert total == 2
        assert [entry.type for entry in entries] == ["daily_return", "deposit"]
        assert [entry.amount for entry in payouts] == [Decimal("10")]

    @pytest.mark.asyncio
    async def test_platform_analytics(self, db_session, factory):
        """Totals count completed entries only and skip superadmins."""
        await factory.user(role="superadmin")
        referrer = await factory.user(referral_code="REF00001")
        member = await factory.user(referred_by="REF00001", balance=0)
        plan = await factory.plan(daily=100)
        await factory.investment(member, plan.id)
        wallet = WalletService(db_session)
        deposit = await wallet.record_deposit(referrer.id, Decimal("40"))
        await wallet.record_deposit(referrer.id, Decimal("999"))
        await wallet.approve_deposit(deposit.id)
        await DailyAccrualEngine(db_session, CommissionRates()).run(DAY_1)

        analytics = await ReportService(db_session).get_platform_analytics()

        assert analytics.total_profit == Decimal("100")
        assert analytics.total_commissions == Decimal("15")
        assert analytics.total_deposits == Decimal("40")
        assert analytics.total_withdrawals == Decimal("0")
        assert analytics.total_users == 2
        assert analytics.new_users_today == 3
