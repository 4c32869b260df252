import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_list_audit_events(client: AsyncClient, auth_headers, users):
    headers = await auth_headers("admin")

    response = await client.get("/api/audit/events", headers=headers)

    assert response.status_code == 200
    data = response.json()
    assert data["next_cursor"] is None
    login = data["events"][0]
    assert login["action"] == "LOGIN"
    assert login["actor_id"] == str(users["admin"].id)
    assert login["actor_email"] == "admin@union.org"
    assert login["success"] is True
    assert login["timestamp"].endswith("Z")


@pytest.mark.asyncio
async def test_audit_events_filters_and_pagination(client: AsyncClient, auth_headers, users):
    for _ in range(3):
        await auth_headers("member")
    await client.post(
        "/api/auth/login", json={"email": "member@union.org", "password": "bad-password"}
    )
    headers = await auth_headers("super_admin")

    failed = await client.get("/api/audit/events", params={"success": "false"}, headers=headers)
    assert [event["action"] for event in failed.json()["events"]] == ["LOGIN_FAILED"]

    page = await client.get(
        "/api/audit/events",
        params={"actor_id": str(users["member"].id), "action": "LOGIN", "limit": 2},
        headers=headers,
    )
    first = page.json()
    assert len(first["events"]) == 2
    assert first["next_cursor"] is not None

    rest = await client.get(
        "/api/audit/events",
        params={
            "actor_id": str(users["member"].id),
            "action": "LOGIN",
            "limit": 2,
            "cursor": first["next_cursor"],
        },
        headers=headers,
    )
    assert len(rest.json()["events"]) == 1
    assert rest.json()["next_cursor"] is None


@pytest.mark.asyncio
async def test_moderator_denied_audit_log(client: AsyncClient, auth_headers, audit_events):
    headers = await auth_headers("moderator")

    response = await client.get("/api/audit/events", headers=headers)

    assert response.status_code == 403
    events = await audit_events(action="ACCESS_DENIED")
    assert events[0].resource == "audit_events"


@pytest.mark.asyncio
async def test_audit_log_requires_authentication(client: AsyncClient):
    response = await client.get("/api/audit/events")

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_unknown_action_filter(client: AsyncClient, auth_headers):
    headers = await auth_headers("admin")

    response = await client.get(
        "/api/audit/events", params={"action": "EXPLODE"}, headers=headers
    )

    assert response.status_code == 400
