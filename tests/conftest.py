"""Test fixtures: a fresh in-memory database per test.

Learn: Each test gets its own aiosqlite in-memory engine (StaticPool
keeps the single connection alive so every session sees the same
database), the schema is created from Base.metadata, and the engine is
disposed afterwards. No PostgreSQL needed, no cross-test pollution.

bcrypt rounds are dropped to the minimum before the app is imported so
registration-heavy tests stay fast.
"""

import os

os.environ.setdefault("DIARY_PASSWORD_HASH_ROUNDS", "4")

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from diary_api.db.engine import get_db
from diary_api.db.models import Base
from diary_api.main import app


TEST_DB_URL = "sqlite+aiosqlite:///:memory:"

TEST_USER_ID = "00000000-0000-0000-0000-000000000001"


@pytest_asyncio.fixture()
async def db_session():
    """Per-test session bound to a brand new in-memory database."""
    engine = create_async_engine(TEST_DB_URL, echo=False, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session = AsyncSession(bind=engine, expire_on_commit=False)
    try:
        yield session
    finally:
        await session.close()
        await engine.dispose()


@pytest_asyncio.fixture()
async def client(db_session):
    """HTTP client with the app's get_db and auth overridden for testing.

    Learn: We override get_current_user to return a fixed identity so
    protected routes work without real JWT tokens.
    """
    from diary_api.auth.dependencies import CurrentIdentity, get_current_user

    async def override_get_db():
        yield db_session

    def override_get_current_user():
        return CurrentIdentity(
            user_id=TEST_USER_ID,
            username="fixture-user",
            permissions=[],
        )

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = override_get_current_user

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def unauthenticated_client(db_session):
    """HTTP client WITHOUT auth override, for testing real JWT flows.

    Learn: Only get_db is overridden (for DB isolation); bearer tokens
    go through the real verification pipeline.
    """
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
