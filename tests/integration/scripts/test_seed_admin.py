import pytest
from httpx import AsyncClient

from config import ApplicationConfig
from scripts.seed_admin import seed_admin_user


@pytest.mark.asyncio
async def test_seeded_admin_can_log_in(client: AsyncClient, database):
    """The default seed credentials must pass login validation"""
    admin = await seed_admin_user(database)

    response = await client.post(
        "/api/auth/login",
        json={
            "email": ApplicationConfig.SEED_ADMIN_EMAIL,
            "password": ApplicationConfig.SEED_ADMIN_PASSWORD,
        },
    )

    assert response.status_code == 200, response.text
    assert response.json()["user"]["role"] == "super_admin"
    assert response.json()["user"]["id"] == str(admin.id)


@pytest.mark.asyncio
async def test_seed_is_idempotent(database):
    first = await seed_admin_user(database)
    second = await seed_admin_user(database)

    assert first.id == second.id
