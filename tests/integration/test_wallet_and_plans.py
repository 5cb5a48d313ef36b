"""
Integration tests for plan purchase, the plan catalog and the wallet.
"""

from decimal import Decimal

import pytest

from investclub.models import TransactionType
from investclub.services.investment_service import InvestmentService
from investclub.services.plan_service import PlanCatalogService
from investclub.services.wallet_service import WalletService
from investclub.utils.exceptions import (
    InsufficientBalance,
    InvalidAmount,
    PlanNotFound,
    TransactionNotFound,
    WithdrawalAlreadyReviewed,
)

pytestmark = pytest.mark.integration


class TestInvestInPlan:
    """Test InvestmentService.invest_in_plan."""

    @pytest.mark.asyncio
    async def test_purchase_debits_balance(self, db_session, factory):
        """Buying a plan moves its price from balance into a new investment."""
        user = await factory.user(balance=1500)
        plan = await factory.plan(invest=1000)

        investment = await InvestmentService(db_session).invest_in_plan(user.id, plan.id)

        assert investment.is_active is True
        assert investment.days_completed == 0
        assert investment.amount == Decimal("1000")
        assert await factory.balance(user.id) == Decimal("500")
        entries = await factory.ledger(user.id, TransactionType.INVESTMENT.value)
        assert len(entries) == 1
        assert entries[0].status == "completed"
        assert entries[0].transaction_id.startswith(f"INVEST_{user.id}_{plan.id}_")

    @pytest.mark.asyncio
    async def test_insufficient_balance(self, db_session, factory):
        """Nothing is written when the balance is short."""
        user = await factory.user(balance=999)
        plan = await factory.plan(invest=1000)
        user_id, plan_id = user.id, plan.id

        with pytest.raises(InsufficientBalance):
            await InvestmentService(db_session).invest_in_plan(user_id, plan_id)

        assert await factory.balance(user_id) == Decimal("999")
        assert await factory.ledger(user_id) == []

    @pytest.mark.asyncio
    async def test_inactive_plan_not_sold(self, db_session, factory):
        """Closed plans cannot be bought."""
        user = await factory.user(balance=5000)
        plan = await factory.plan(is_active=False)
        user_id, plan_id = user.id, plan.id

        with pytest.raises(PlanNotFound):
            await InvestmentService(db_session).invest_in_plan(user_id, plan_id)

        assert await factory.balance(user_id) == Decimal("5000")


class TestPlanCatalog:
    """Test PlanCatalogService."""

    @pytest.mark.asyncio
    async def test_create_plan_derives_totals(self, db_session):
        """total and roi default from the plan terms."""
        plan = await PlanCatalogService(db_session).create_plan(
            name="Gold", invest=Decimal("1000"), daily=Decimal("50"), days=30
        )

        assert plan.total == Decimal("1500")
        assert plan.roi == Decimal("50.00")
        assert plan.is_active is True

    @pytest.mark.asyncio
    async def test_create_plan_rejects_bad_terms(self, db_session):
        """Zero days is refused."""
        with pytest.raises(InvalidAmount):
            await PlanCatalogService(db_session).create_plan(
                name="Broken", invest=Decimal("100"), daily=Decimal("1"), days=0
            )

    @pytest.mark.asyncio
    async def test_deactivate_hides_plan(self, db_session, factory):
        """Deactivated plans leave the active list."""
        gold = await factory.plan(name="Gold")
        silver = await factory.plan(name="Silver")
        service = PlanCatalogService(db_session)

        await service.deactivate_plan(gold.id)

        assert [plan.id for plan in await service.list_active_plans()] == [silver.id]

    @pytest.mark.asyncio
    async def test_delete_missing_plan(self, db_session):
        """Deleting an unknown plan raises."""
        with pytest.raises(PlanNotFound):
            await PlanCatalogService(db_session).delete_plan(404)

    @pytest.mark.asyncio
    async def test_delete_keeps_investments(self, db_session, factory):
        """Investments survive removal of their plan."""
        user = await factory.user()
        plan = await factory.plan()
        investment = await factory.investment(user, plan.id, days_completed=2)

        await PlanCatalogService(db_session).delete_plan(plan.id)

        assert await factory.investment_state(investment.id) == (2, True)


class TestDeposits:
    """Test deposit recording and approval."""

    @pytest.mark.asyncio
    async def test_deposit_credited_on_approval(self, db_session, factory):
        """A deposit reaches the balance only once approved."""
        user = await factory.user()
        service = WalletService(db_session)

        entry = await service.record_deposit(user.id, Decimal("250"), utr_number="UTR123")
        assert entry.status == "pending"
        assert await factory.balance(user.id) == Decimal("0")

        approved = await service.approve_deposit(entry.id)

        assert approved.status == "completed"
        assert approved.utr_number == "UTR123"
        assert await factory.balance(user.id) == Decimal("250")

    @pytest.mark.asyncio
    async def test_deposit_approved_once(self, db_session, factory):
        """A second approval is refused and credits nothing."""
        user = await factory.user()
        service = WalletService(db_session)
        entry = await service.record_deposit(user.id, Decimal("100"))
        user_id, entry_id = user.id, entry.id
        await service.approve_deposit(entry_id)

        with pytest.raises(TransactionNotFound):
            await service.approve_deposit(entry_id)

        assert await factory.balance(user_id) == Decimal("100")

    @pytest.mark.asyncio
    async def test_non_positive_deposit(self, db_session, factory):
        """Zero deposits are refused."""
        user = await factory.user()
        user_id = user.id

        with pytest.raises(InvalidAmount):
            await WalletService(db_session).record_deposit(user_id, Decimal("0"))


class TestWithdrawals:
    """Test withdrawal requests and review."""

    @pytest.mark.asyncio
    async def test_approved_withdrawal_debits(self, db_session, factory):
        """Approval debits the balance and records a completed entry."""
        user = await factory.user(balance=300)
        service = WalletService(db_session)
        request = await service.request_withdrawal(user.id, Decimal("120"))

        reviewed = await service.review_withdrawal(request.id, approve=True, remarks="ok")

        assert reviewed.status == "approved"
        assert reviewed.remarks == "ok"
        assert reviewed.reviewed_at is not None
        assert await factory.balance(user.id) == Decimal("180")
        entries = await factory.ledger(user.id, TransactionType.WITHDRAW.value)
        assert [entry.status for entry in entries] == ["completed"]

    @pytest.mark.asyncio
    async def test_rejected_withdrawal_keeps_balance(self, db_session, factory):
        """Rejection records a failed entry and leaves the balance."""
        user = await factory.user(balance=300)
        service = WalletService(db_session)
        request = await service.request_withdrawal(user.id, Decimal("120"))

        reviewed = await service.review_withdrawal(request.id, approve=False)

        assert reviewed.status == "rejected"
        assert await factory.balance(user.id) == Decimal("300")
        entries = await factory.ledger(user.id, TransactionType.WITHDRAW.value)
        assert [entry.status for entry in entries] == ["failed"]

    @pytest.mark.asyncio
    async def test_request_above_balance(self, db_session, factory):
        """A request larger than the balance is refused."""
        user = await factory.user(balance=50)
        user_id = user.id

        with pytest.raises(InsufficientBalance):
            await WalletService(db_session).request_withdrawal(user_id, Decimal("51"))

    @pytest.mark.asyncio
    async def test_pending_queue(self, db_session, factory):
        """Only unreviewed requests are listed, oldest first."""
        user = await factory.user(balance=300)
        service = WalletService(db_session)
        first = await service.request_withdrawal(user.id, Decimal("10"))
        second = await service.request_withdrawal(user.id, Decimal("20"))
        third = await service.request_withdrawal(user.id, Decimal("30"))
        await service.review_withdrawal(second.id, approve=False)

        pending = await service.list_pending_withdrawals()

        assert [request.id for request in pending] == [first.id, third.id]

    @pytest.mark.asyncio
    async def test_review_twice(self, db_session, factory):
        """A reviewed request cannot be reviewed again."""
        user = await factory.user(balance=300)
        service = WalletService(db_session)
        request = await service.request_withdrawal(user.id, Decimal("100"))
        user_id, request_id = user.id, request.id
        await service.review_withdrawal(request_id, approve=True)

        with pytest.raises(WithdrawalAlreadyReviewed):
            await service.review_withdrawal(request_id, approve=True)

        assert await factory.balance(user_id) == Decimal("200")

    @pytest.mark.asyncio
    async def test_stale_concurrent_review_pays_once(self, db_session, session_maker, factory):
        """A reviewer holding a stale pending copy cannot approve a second time."""
        user = await factory.user(balance=300)
        service = WalletService(db_session)
        request = await service.request_withdrawal(user.id, Decimal("100"))
        user_id, request_id = user.id, request.id

        async with session_maker() as other_session:
            await WalletService(other_session).review_withdrawal(request_id, approve=True)

        with pytest.raises(WithdrawalAlreadyReviewed):
            await service.review_withdrawal(request_id, approve=True)

        assert await factory.balance(user_id) == Decimal("200")
        entries = await factory.ledger(user_id, TransactionType.WITHDRAW.value)
        assert len(entries) == 1

    @pytest.mark.asyncio
    async def test_failed_approval_keeps_request_pending(self, db_session, factory):
        """An approval the balance cannot cover leaves the request reviewable."""
        user = await factory.user(balance=300)
        service = WalletService(db_session)
        request = await service.request_withdrawal(user.id, Decimal("100"))
        user_id, request_id = user.id, request.id
        await service.request_withdrawal(user_id, Decimal("250"))
        later = (await service.list_pending_withdrawals())[-1]
        await service.review_withdrawal(later.id, approve=True)

        with pytest.raises(InsufficientBalance):
            await service.review_withdrawal(request_id, approve=True)

        pending = await service.list_pending_withdrawals()
        assert [item.id for item in pending] == [request_id]
        assert await factory.balance(user_id) == Decimal("50")
