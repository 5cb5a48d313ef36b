"""Pytest configuration and shared fixtures for all tests."""

import os
import sys
from pathlib import Path

# Minimal environment for Settings, must be set before investclub imports
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "DEBUG")
os.environ.setdefault("REDIS_HOST", "localhost")

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from datetime import date
from decimal import Decimal
from itertools import count
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from investclub.models import Base, Investment, Plan, Transaction, User
from investclub.repositories.user_repository import UserRepository


@pytest.fixture
def mock_session():
    """Mock AsyncSession for tests without a database."""
    session = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
async def db_engine():
    """In-memory SQLite engine with all tables created."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(db_engine):
    """Session factory bound to the test engine."""
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
async def db_session(session_maker):
    """Database session for one test."""
    async with session_maker() as session:
        yield session


class ClubFactory:
    """Creates rows directly and reads state back from the database."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self._seq = count(1)

    async def user(
        self,
        email: str | None = None,
        referral_code: str | None = None,
        referred_by: str | None = None,
        balance: Decimal | int = 0,
        role: str = "user",
    ) -> User:
        n = next(self._seq)
        user = User(
            email=email or f"member{n}@example.com",
            referral_code=referral_code or f"CODE{n:04d}",
            referred_by=referred_by,
            available_balance=Decimal(balance),
            total_invested=Decimal("0"),
            role=role,
        )
        self.session.add(user)
        await self.session.commit()
        return user

    async def plan(
        self,
        name: str = "Starter",
        invest: Decimal | int = 1000,
        daily: Decimal | int = 100,
        days: int = 30,
        is_active: bool = True,
    ) -> Plan:
        plan = Plan(
            name=name,
            invest=Decimal(invest),
            daily=Decimal(daily),
            total=Decimal(daily) * days,
            days=days,
            roi=Decimal("0"),
            is_active=is_active,
        )
        self.session.add(plan)
        await self.session.commit()
        return plan

    async def investment(
        self,
        user: User,
        plan_id: int,
        days_completed: int = 0,
        is_active: bool = True,
        last_accrued_on: date | None = None,
    ) -> Investment:
        investment = Investment(
            user_id=user.id,
            plan_id=plan_id,
            amount=Decimal("1000"),
            days_completed=days_completed,
            is_active=is_active,
            last_accrued_on=last_accrued_on,
        )
        self.session.add(investment)
        await self.session.commit()
        return investment

    async def balance(self, user_id: int) -> Decimal:
        """Available balance as stored."""
        return await UserRepository(self.session).get_balance(user_id)

    async def investment_state(self, investment_id: int) -> tuple[int, bool]:
        """(days_completed, is_active) as stored."""
        result = await self.session.execute(
            select(Investment.days_completed, Investment.is_active).where(
                Investment.id == investment_id
            )
        )
        days_completed, is_active = result.one()
        return days_completed, is_active

    async def ledger(self, user_id: int | None = None, type: str | None = None) -> list[Transaction]:
        """Ledger entries in insertion order, optionally filtered."""
        stmt = select(Transaction).order_by(Transaction.id)
        if user_id is not None:
            stmt = stmt.where(Transaction.user_id == user_id)
        if type is not None:
            stmt = stmt.where(Transaction.type == type)
        result = await self.session.execute(
            stmt.execution_options(populate_existing=True)
        )
        return list(result.scalars().all())


@pytest.fixture
def factory(db_session):
    """Row factory bound to the test session."""
    return ClubFactory(db_session)
