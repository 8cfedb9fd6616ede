"""Service test fixtures — in-memory stores, async SQLite DB, FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database and a fresh fake store
    - db_manager patched so routes and readiness checks use the test engine
    - Coordinators built with zero backoff: conflict retries don't slow tests

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for store/route tests
      (PostgreSQL serialization failures are exercised through the fake store)
    - StaticPool: all sessions share the one in-memory connection
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool
from httpx import ASGITransport, AsyncClient

from app.db.base import Base
from app import models  # noqa: F401
from app.api.routes.nicknames import get_claim_coordinator
from app.infrastructure.database import DatabaseSessionManager
from app.infrastructure.nickname_store import SqlNicknameStore
import app.infrastructure.database as db_module
from app.main import app
from app.services.claim_coordinator import ClaimCoordinator

from tests.services.fake_store import InMemoryNicknameStore


@pytest.fixture
def fake_store():
    return InMemoryNicknameStore()


@pytest.fixture
def coordinator(fake_store):
    return ClaimCoordinator(fake_store, max_attempts=5, base_delay_ms=0)


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def test_manager(test_engine, test_session_factory):
    """DatabaseSessionManager bound to the test engine."""
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = test_engine
    manager._session_factory = test_session_factory
    return manager


@pytest.fixture
def sql_store(test_manager):
    return SqlNicknameStore(test_manager)


@pytest.fixture
async def client(test_manager):
    """FastAPI test client with db_manager pointed at the test engine."""
    original_manager = db_module.db_manager
    db_module.db_manager = test_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def fake_client(client, fake_store):
    """Test client whose claim route runs against the in-memory store."""
    app.dependency_overrides[get_claim_coordinator] = (
        lambda: ClaimCoordinator(fake_store, base_delay_ms=0)
    )
    return client
