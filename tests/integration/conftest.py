from datetime import timedelta

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from config import ApplicationConfig
from src.adapter.database import Database
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.app import create_app
from src.api.utils.jwt import TokenService
from src.app.services.passwords import hash_password
from src.domain.entities import User, UserRole
from tests.fixtures.json_loader import TestDataLoader

# bcrypt at production cost makes every login take ~250ms
ApplicationConfig.BCRYPT_ROUNDS = 4


@pytest_asyncio.fixture
def test_data():
    return TestDataLoader()


@pytest_asyncio.fixture
async def database(tmp_path):
    database = Database(f"sqlite+aiosqlite:///{tmp_path}/test.db")
    await database.init()
    yield database
    await database.drop_all()
    await database.close()


@pytest_asyncio.fixture
async def app(database):
    return create_app(ApplicationConfig, database=database)


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def users(database, test_data):
    """One active user per role, keyed super_admin / admin / moderator / member"""
    created = {}
    async with database.session() as session:
        uow = SqlAlchemyUnitOfWork(session)
        async with uow:
            for key in ("super_admin", "admin", "moderator", "member"):
                seed = test_data.user(key)
                user = await uow.users.create(
                    User(
                        email=seed["email"],
                        password_hash=hash_password(seed["password"]),
                        name=seed["name"],
                        role=UserRole(seed["role"]),
                    )
                )
                created[key] = user
            await uow.commit()
    return created


@pytest.fixture
def login(client, users, test_data):
    """Log a seeded user in; returns the login response body."""

    async def _login(key: str) -> dict:
        seed = test_data.user(key)
        response = await client.post(
            "/api/auth/login", json={"email": seed["email"], "password": seed["password"]}
        )
        assert response.status_code == 200, response.text
        return response.json()

    return _login


@pytest.fixture
def auth_headers(login):
    """Bearer headers for a seeded user."""

    async def _headers(key: str) -> dict:
        tokens = await login(key)
        return {"Authorization": f"Bearer {tokens['access_token']}"}

    return _headers


@pytest.fixture
def short_lived_tokens(app):
    """Swap in a token service whose access tokens expire after one second."""
    app.state.token_service = TokenService(
        access_secret=ApplicationConfig.JWT_ACCESS_SECRET,
        refresh_secret=ApplicationConfig.JWT_REFRESH_SECRET,
        access_ttl=timedelta(seconds=1),
        refresh_ttl=timedelta(seconds=ApplicationConfig.REFRESH_TOKEN_TTL_SECONDS),
    )
    return app.state.token_service


@pytest.fixture
def audit_events(database):
    """Read the audit trail straight from the database, newest first."""

    async def _events(**filters):
        async with database.session() as session:
            uow = SqlAlchemyUnitOfWork(session)
            async with uow:
                events, _ = await uow.audit_events.get_paginated(limit=100, **filters)
        return events

    return _events
