import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_self_demotion_is_stripped(client: AsyncClient, auth_headers, audit_events):
    """role in a self-edit is ignored while the other fields still apply"""
    headers = await auth_headers("admin")

    response = await client.patch(
        "/api/auth/me", json={"role": "user", "name": "Renamed Admin"}, headers=headers
    )

    assert response.status_code == 200
    user = response.json()["user"]
    assert user["role"] == "admin"
    assert user["name"] == "Renamed Admin"

    me = await client.get("/api/auth/me", headers=headers)
    assert me.json()["user"]["role"] == "admin"

    events = await audit_events(action="UPDATE", resource="user")
    assert len(events) == 1
    assert events[0].changes["before"]["name"] == "Office Admin"
    assert events[0].changes["after"]["name"] == "Renamed Admin"
    assert events[0].changes["after"]["role"] == "admin"


@pytest.mark.asyncio
async def test_self_deactivation_is_stripped(client: AsyncClient, auth_headers):
    headers = await auth_headers("member")

    response = await client.patch("/api/auth/me", json={"is_active": False}, headers=headers)

    assert response.status_code == 200
    assert response.json()["user"]["is_active"] is True


@pytest.mark.asyncio
async def test_profile_email_conflict(client: AsyncClient, auth_headers, test_data):
    headers = await auth_headers("member")

    response = await client.patch(
        "/api/auth/me", json={"email": test_data.user("admin")["email"]}, headers=headers
    )

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "EMAIL_ALREADY_EXISTS"


@pytest.mark.asyncio
async def test_change_password_revokes_other_sessions(
    client: AsyncClient, login, test_data, audit_events
):
    seed = test_data.user("member")
    other = await login("member")
    current = await login("member")
    headers = {"Authorization": f"Bearer {current['access_token']}"}

    response = await client.post(
        "/api/auth/change-password",
        json={"current_password": seed["password"], "new_password": "BrandNew456!"},
        headers=headers,
    )

    assert response.status_code == 200
    assert response.json()["sessions_revoked"] == 1

    stale = await client.post("/api/auth/refresh", json={"refresh_token": other["refresh_token"]})
    assert stale.status_code == 401
    alive = await client.post(
        "/api/auth/refresh", json={"refresh_token": current["refresh_token"]}
    )
    assert alive.status_code == 200

    relogin = await client.post(
        "/api/auth/login", json={"email": seed["email"], "password": "BrandNew456!"}
    )
    assert relogin.status_code == 200

    events = await audit_events(action="PASSWORD_CHANGE")
    assert len(events) == 1
    body = events[0].details["body"]
    assert body == {"current_password": "[REDACTED]", "new_password": "[REDACTED]"}


@pytest.mark.asyncio
async def test_change_password_wrong_current(client: AsyncClient, auth_headers, audit_events):
    headers = await auth_headers("member")

    response = await client.post(
        "/api/auth/change-password",
        json={"current_password": "not-my-password", "new_password": "BrandNew456!"},
        headers=headers,
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_CURRENT_PASSWORD"

    events = await audit_events(action="PASSWORD_CHANGE")
    assert events[0].success is False
    assert events[0].error_message == "Current password is incorrect"
