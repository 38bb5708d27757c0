import os
import uuid

# Settings are read at import time, give them something to work with
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("RUN_MIGRATIONS", "false")

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from prism.main import app
from prism.core import models
from prism.core.database import Base, get_db
from prism.core.clean_room.engine import get_aggregation_engine
from prism.core.exceptions import ExecutionError

# In-memory SQLite unless pointed at a real database (e.g. a PostgreSQL *_test db)
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite://")


# Fresh schema for every test, dropped once the test is done
@pytest_asyncio.fixture(scope="function")
async def test_engine():
    if TEST_DATABASE_URL.startswith("sqlite"):
        engine = create_async_engine(
            TEST_DATABASE_URL,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_async_engine(TEST_DATABASE_URL)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(test_engine):
    TestingSessionLocal = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with TestingSessionLocal() as session:
        yield session
        await session.rollback()


# Client
@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession):
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


class FakeEngine:
    """Stands in for the aggregation engine, records what it was asked to run."""

    def __init__(self, rows=None, error=None):
        self.rows = rows
        self.error = error
        self.executed = []

    async def execute(self, sql):
        self.executed.append(sql)
        if self.error is not None:
            raise ExecutionError(self.error)
        return self.rows


@pytest.fixture
def fake_engine():
    """Factory for engines used directly by the gateway, without HTTP."""
    return FakeEngine


@pytest_asyncio.fixture(scope="function")
async def use_engine(client):
    """use_engine(rows=[...]) or use_engine(error="...") routes /clean-room-query through a fake."""

    def _install(rows=None, error=None):
        fake = FakeEngine(rows=rows, error=error)
        app.dependency_overrides[get_aggregation_engine] = lambda: fake
        return fake

    return _install


@pytest.fixture
def requester():
    return f"analyst_{uuid.uuid4().hex[:8]}@prism.com"


# One region where both banks and insurers contribute enough rows for RISK_OVERLAY
@pytest_asyncio.fixture(scope="function")
async def overlapping_segments(db_session: AsyncSession):
    region = f"REGION-{uuid.uuid4().hex[:6]}"
    for score in (0.2, 0.4, 0.6, 0.8):
        db_session.add(
            models.BankTransaction(
                region=region, age_group="46-60", risk_score=score, customer_count=100
            )
        )
    for fraud in (10.0, 20.0, 30.0):
        db_session.add(
            models.InsuranceClaim(
                region=region,
                age_group="46-60",
                fraud_indicator=fraud,
                claims_count=5,
                customer_count=100,
            )
        )
    await db_session.commit()
    return region
