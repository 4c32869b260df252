from uuid import uuid4

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_service_lifecycle(client: AsyncClient, auth_headers, test_data, audit_events):
    headers = await auth_headers("moderator")

    created = await client.post("/api/services", json=test_data.content("service"), headers=headers)
    assert created.status_code == 201
    item = created.json()["item"]
    assert item["title"] == "Legal Assistance"
    assert item["is_active"] is True

    public = await client.get("/api/services")
    assert [service["id"] for service in public.json()["items"]] == [item["id"]]

    updated = await client.put(
        f"/api/services/{item['id']}", json={"title": "Legal Aid"}, headers=headers
    )
    assert updated.status_code == 200
    assert updated.json()["item"]["title"] == "Legal Aid"
    assert updated.json()["item"]["description"] == item["description"]

    deleted = await client.delete(f"/api/services/{item['id']}", headers=headers)
    assert deleted.status_code == 200
    assert deleted.json() == {"message": "Service deleted successfully"}

    missing = await client.get(f"/api/services/{item['id']}")
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "SERVICE_NOT_FOUND"

    events = await audit_events(resource="service")
    assert [event.action.value for event in events] == ["DELETE", "UPDATE", "CREATE"]
    assert all(event.resource_id == item["id"] for event in events)
    update_event = events[1]
    assert update_event.changes["before"]["title"] == "Legal Assistance"
    assert update_event.changes["after"]["title"] == "Legal Aid"
    assert events[0].changes["after"] is None


@pytest.mark.asyncio
async def test_member_cannot_create_content(
    client: AsyncClient, auth_headers, test_data, audit_events
):
    headers = await auth_headers("member")

    response = await client.post(
        "/api/leaders", json=test_data.content("leader"), headers=headers
    )

    assert response.status_code == 403
    events = await audit_events(action="ACCESS_DENIED")
    assert events[0].resource == "leader"
    assert events[0].details["attempted_action"] == "CREATE"

    public = await client.get("/api/leaders")
    assert public.json()["items"] == []


@pytest.mark.asyncio
async def test_anonymous_write_is_audited(client: AsyncClient, test_data, audit_events):
    response = await client.post("/api/services", json=test_data.content("service"))

    assert response.status_code == 401
    events = await audit_events(resource="service")
    assert len(events) == 1
    assert events[0].action.value == "CREATE"
    assert events[0].success is False
    assert events[0].actor_id is None


@pytest.mark.asyncio
async def test_update_unknown_item(client: AsyncClient, auth_headers, audit_events):
    headers = await auth_headers("admin")
    missing = uuid4()

    response = await client.put(
        f"/api/achievements/{missing}", json={"title": "Nope"}, headers=headers
    )

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "ACHIEVEMENT_NOT_FOUND"
    events = await audit_events(resource="achievement")
    assert events[0].success is False
    assert events[0].resource_id == str(missing)


@pytest.mark.asyncio
async def test_inactive_items_hidden_from_public(client: AsyncClient, auth_headers, test_data):
    headers = await auth_headers("admin")
    achievement = test_data.content("achievement")
    await client.post("/api/achievements", json=achievement, headers=headers)
    await client.post(
        "/api/achievements",
        json={**achievement, "title": "Draft", "is_active": False},
        headers=headers,
    )

    response = await client.get("/api/achievements")

    titles = [item["title"] for item in response.json()["items"]]
    assert titles == ["Collective agreement signed"]


@pytest.mark.asyncio
async def test_updates_filters(client: AsyncClient, auth_headers, test_data):
    headers = await auth_headers("admin")
    update = test_data.content("update")
    await client.post("/api/updates", json=update, headers=headers)
    await client.post(
        "/api/updates",
        json={**update, "title": "Hiring", "type": "job", "is_featured": False},
        headers=headers,
    )

    jobs = await client.get("/api/updates", params={"type": "job"})
    featured = await client.get("/api/updates", params={"featured": "true"})

    assert [item["title"] for item in jobs.json()["items"]] == ["Hiring"]
    assert [item["title"] for item in featured.json()["items"]] == ["Annual assembly"]


@pytest.mark.asyncio
async def test_content_validation(client: AsyncClient, auth_headers, audit_events):
    headers = await auth_headers("admin")

    response = await client.post("/api/services", json={"title": ""}, headers=headers)

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"
    assert await audit_events(resource="service") == []


@pytest.mark.asyncio
async def test_content_section_upsert(client: AsyncClient, auth_headers, test_data, audit_events):
    headers = await auth_headers("moderator")

    created = await client.put(
        "/api/content/home.hero", json=test_data.content("section"), headers=headers
    )
    assert created.status_code == 200
    assert created.json()["created"] is True

    updated = await client.put(
        "/api/content/home.hero", json={"content": "Join us"}, headers=headers
    )
    assert updated.status_code == 200
    assert updated.json()["created"] is False
    assert updated.json()["section"]["title"] == "Welcome"
    assert updated.json()["section"]["content"] == "Join us"

    sections = await client.get("/api/content")
    assert [section["key"] for section in sections.json()["sections"]] == ["home.hero"]

    events = await audit_events(resource="content_section")
    assert [event.details["created"] for event in events] == [False, True]
    assert events[0].resource_id == "home.hero"


@pytest.mark.asyncio
async def test_content_section_rules(client: AsyncClient, auth_headers):
    headers = await auth_headers("admin")

    bad_key = await client.put(
        "/api/content/Bad Key!", json={"title": "T", "content": "C"}, headers=headers
    )
    assert bad_key.status_code == 400

    incomplete = await client.put(
        "/api/content/about", json={"title": "About"}, headers=headers
    )
    assert incomplete.status_code == 400

    missing = await client.delete("/api/content/about", headers=headers)
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "CONTENT_SECTION_NOT_FOUND"
