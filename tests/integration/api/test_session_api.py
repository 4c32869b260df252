import pytest
from httpx import AsyncClient

from tests.utils.json_compare import exclude_keys


@pytest.mark.asyncio
async def test_me_returns_profile(client: AsyncClient, auth_headers, users):
    headers = await auth_headers("moderator")

    response = await client.get("/api/auth/me", headers=headers)

    assert response.status_code == 200
    user = response.json()["user"]
    assert user["id"] == str(users["moderator"].id)
    assert user["last_login_at"] is not None
    assert exclude_keys(user) == {
        "email": "mod@union.org",
        "name": "Content Moderator",
        "role": "moderator",
        "is_active": True,
    }


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "headers",
    [
        {},
        {"Authorization": "Bearer not-a-jwt"},
        {"Authorization": "Basic dXNlcjpwYXNz"},
    ],
)
async def test_me_requires_valid_bearer(client: AsyncClient, headers):
    response = await client.get("/api/auth/me", headers=headers)

    assert response.status_code == 401
    assert response.json()["error"] == {
        "code": "UNAUTHENTICATED",
        "message": "Authentication required",
    }


@pytest.mark.asyncio
async def test_deactivated_principal_rejected(client: AsyncClient, auth_headers, users):
    """A still-valid access token stops working once its principal is deactivated"""
    member = await auth_headers("member")
    admin = await auth_headers("admin")

    response = await client.patch(
        f"/api/users/{users['member'].id}/status", json={"is_active": False}, headers=admin
    )
    assert response.status_code == 200

    response = await client.get("/api/auth/me", headers=member)
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHENTICATED"


@pytest.mark.asyncio
async def test_logout_revokes_session(client: AsyncClient, login, audit_events, users):
    tokens = await login("member")
    headers = {"Authorization": f"Bearer {tokens['access_token']}"}

    response = await client.post("/api/auth/logout", headers=headers)

    assert response.status_code == 200
    assert response.json() == {"message": "Logged out successfully"}
    assert 'refresh_token=""' in response.headers["set-cookie"]

    refresh = await client.post(
        "/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
    )
    assert refresh.status_code == 401

    events = await audit_events(action="LOGOUT")
    assert len(events) == 1
    assert events[0].actor_id == users["member"].id
    assert events[0].resource_id == tokens["session_id"]


@pytest.mark.asyncio
async def test_logout_requires_authentication(client: AsyncClient, audit_events):
    response = await client.post("/api/auth/logout")

    assert response.status_code == 401

    events = await audit_events(action="LOGOUT")
    assert len(events) == 1
    assert events[0].success is False
    assert events[0].actor_id is None


@pytest.mark.asyncio
async def test_register_creates_member(client: AsyncClient, audit_events):
    response = await client.post(
        "/api/auth/register",
        json={"email": "New.Member@Union.org", "password": "NewMember123!", "name": "New"},
    )

    assert response.status_code == 201
    user = response.json()["user"]
    assert user["email"] == "new.member@union.org"
    assert user["role"] == "user"
    assert user["is_active"] is True

    events = await audit_events(action="CREATE", resource="user")
    assert len(events) == 1
    assert str(events[0].actor_id) == user["id"]
    assert events[0].changes["after"]["email"] == "new.member@union.org"

    login = await client.post(
        "/api/auth/login",
        json={"email": "new.member@union.org", "password": "NewMember123!"},
    )
    assert login.status_code == 200


@pytest.mark.asyncio
async def test_register_over_long_password(client: AsyncClient, audit_events):
    response = await client.post(
        "/api/auth/register",
        json={"email": "long@union.org", "password": "Aa1!" * 25, "name": "Long"},
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_PASSWORD"

    events = await audit_events(action="CREATE", resource="user")
    assert len(events) == 1
    assert events[0].success is False


@pytest.mark.asyncio
async def test_register_duplicate_email(client: AsyncClient, users, test_data):
    seed = test_data.user("member")

    response = await client.post(
        "/api/auth/register",
        json={"email": seed["email"], "password": "Another123!", "name": "Copy"},
    )

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "EMAIL_ALREADY_EXISTS"
