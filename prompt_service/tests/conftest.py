"""
Fixtures for the prompt service tests.

Each test gets a fresh in-memory SQLite database, a fake Redis client and a
listing cache driven by a manual clock, wired into a FastAPI app that is
exercised through ``httpx.ASGITransport``.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from prompt_service.api.main import create_app
from prompt_service.core.listing_cache import MemoryTier, PromptListingCache, RedisTier
from prompt_service.models.base import Base
from prompt_service.tests.stubs.fakes import FakeRedis, ManualClock
from prompt_service.utils.db_session import get_db_session, register_sqlite_functions

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def prompt_cache(fake_redis, clock) -> PromptListingCache:
    return PromptListingCache(
        RedisTier(fake_redis, key="prompts", ttl_seconds=60),
        MemoryTier(ttl_seconds=60, clock=clock),
        recheck_interval_seconds=30,
        clock=clock,
    )


@pytest_asyncio.fixture
async def db_engine():
    """Yield an engine bound to a fresh in-memory database with the schema created."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    register_sqlite_functions(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=db_engine, expire_on_commit=False, class_=AsyncSession)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def app(prompt_cache, session_factory):
    """FastAPI app using the test database and the fake-Redis listing cache."""
    application = create_app(prompt_cache=prompt_cache)

    async def _override_session():
        async with session_factory() as session:
            yield session

    application.dependency_overrides[get_db_session] = _override_session
    yield application
    application.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app, prompt_cache):
    """HTTP client for the app. The cache has already received its Redis ready signal."""
    await prompt_cache.connect()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http_client:
        yield http_client
