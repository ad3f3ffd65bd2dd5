"""User service failure-mode tests.

Learn: These drive UserService with a mocked AsyncSession so database
faults can be injected. Every SQLAlchemy error must come out as
StoreError (rolled back first), except a unique-constraint violation
on insert, which is a concurrent registration and means 409.
"""

import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from diary_api.auth.jwt import create_access_token
from diary_api.db.engine import get_db
from diary_api.main import app
from diary_api.services.errors import StoreError
from diary_api.services.user_service import UsernameTakenError, UserService


def _broken_session() -> AsyncMock:
    db = AsyncMock(spec=AsyncSession)
    down = OperationalError("SELECT", {}, Exception("db down"))
    db.execute.side_effect = down
    db.flush.side_effect = down
    db.commit.side_effect = down
    return db


def _empty_lookup_session() -> AsyncMock:
    db = AsyncMock(spec=AsyncSession)
    result = MagicMock()
    result.scalars.return_value.first.return_value = None
    db.execute.return_value = result
    return db


@pytest.mark.asyncio
async def test_register_store_failure():
    db = _broken_session()
    with pytest.raises(StoreError, match="look up user"):
        await UserService(db).register("carol", "p1")
    db.rollback.assert_awaited()


@pytest.mark.asyncio
async def test_register_commit_failure():
    db = _empty_lookup_session()
    db.commit.side_effect = OperationalError("INSERT", {}, Exception("disk full"))
    with pytest.raises(StoreError, match="register user"):
        await UserService(db).register("carol", "p1")


@pytest.mark.asyncio
async def test_register_race_is_conflict():
    """Unique index violation on commit → UsernameTakenError, not StoreError."""
    db = _empty_lookup_session()
    db.commit.side_effect = IntegrityError("INSERT", {}, Exception("unique"))
    with pytest.raises(UsernameTakenError):
        await UserService(db).register("carol", "p1")
    db.rollback.assert_awaited()


@pytest.mark.asyncio
async def test_list_all_store_failure():
    with pytest.raises(StoreError, match="list users"):
        await UserService(_broken_session()).list_all()


@pytest.mark.asyncio
async def test_store_failure_is_500():
    """Routes answer 500 when the database is unusable."""
    async def override_get_db():
        yield _broken_session()

    app.dependency_overrides[get_db] = override_get_db
    try:
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            r = await ac.post(
                "/api/v1/auth/register",
                json={"username": "carol", "password": "p1"},
            )
            assert r.status_code == 500
            r = await ac.post(
                "/api/v1/auth/login",
                json={"username": "carol", "password": "p1"},
            )
            assert r.status_code == 500
    finally:
        app.dependency_overrides.clear()


@pytest.mark.asyncio
async def test_store_failure_is_500_on_protected_routes():
    """Listing users and diary routes also answer 500 on a dead database."""
    async def override_get_db():
        yield _broken_session()

    token = create_access_token({"id": str(uuid.uuid4()), "username": "carol"})
    headers = {"Authorization": f"Bearer {token}"}

    app.dependency_overrides[get_db] = override_get_db
    try:
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            r = await ac.get("/api/v1/auth/users", headers=headers)
            assert r.status_code == 500
            assert r.json()["detail"] == "Could not list users"

            r = await ac.post(
                "/api/v1/diaries", json={"text": "lost"}, headers=headers
            )
            assert r.status_code == 500
            assert r.json()["detail"] == "Could not create diary entry"

            r = await ac.get("/api/v1/diaries", headers=headers)
            assert r.status_code == 500

            r = await ac.get(f"/api/v1/diaries/{uuid.uuid4()}", headers=headers)
            assert r.status_code == 500
    finally:
        app.dependency_overrides.clear()
