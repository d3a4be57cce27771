"""Pytest configuration and fixtures."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("RECONCILE_IN_PROCESS", "false")
os.environ.setdefault("JWT_KEY", "test-secret-key-with-enough-length")

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import AsyncGenerator, Dict
from uuid import UUID, uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import selectinload
from sqlalchemy.pool import StaticPool

from parkspot.db.base import Base
from parkspot.db.models import Parking, Slot
from parkspot.db.session import enable_sqlite_foreign_keys, get_db
from parkspot.main import app
from parkspot.security import create_access_token
from parkspot.services.locks import SlotLockRegistry

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")

BASE_TIME = datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)


class FakeClock:
    """Injectable clock that only moves when told to."""

    def __init__(self, now: datetime = BASE_TIME):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


def auth_header(user_id: UUID, is_admin: bool = False) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user_id, is_admin=is_admin)}"}


@pytest.fixture(scope="function")
async def test_engine():
    """Fresh schema on a private in-memory database for each test."""
    if TEST_DATABASE_URL.startswith("sqlite"):
        engine = create_async_engine(
            TEST_DATABASE_URL,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
        enable_sqlite_foreign_keys(engine)
    else:
        engine = create_async_engine(TEST_DATABASE_URL)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield engine
    await engine.dispose()


@pytest.fixture(scope="function")
def session_factory(test_engine) -> async_sessionmaker:
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture(scope="function")
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a clean database session for each test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture(scope="function")
def slot_locks() -> SlotLockRegistry:
    locks = SlotLockRegistry()
    app.state.slot_locks = locks
    return locks


@pytest.fixture(scope="function")
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(scope="function")
async def async_client(
    db_session: AsyncSession, slot_locks: SlotLockRegistry
) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def user_id() -> UUID:
    return uuid4()


@pytest.fixture
def make_parking(db_session: AsyncSession):
    """Create a parking with ``total_spots`` slots, loaded with its ledgers."""

    async def _make(total_spots: int = 1, name: str = "Central Garage") -> Parking:
        parking = Parking(
            name=name,
            address="1 Main Street",
            description="Covered parking",
            hours_start="06:00",
            hours_end="23:00",
            rate_per_hour=Decimal("50.00"),
            total_spots=total_spots,
            available_spots=total_spots,
            tags=["covered"],
        )
        parking.slots = [
            Slot(position=position, is_available=True) for position in range(1, total_spots + 1)
        ]
        db_session.add(parking)
        await db_session.commit()
        db_session.expunge_all()

        result = await db_session.execute(
            select(Parking)
            .where(Parking.id == parking.id)
            .options(selectinload(Parking.slots))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()

    return _make
