import pytest
from httpx import ASGITransport, AsyncClient

from portal.main import create_app


@pytest.mark.asyncio
async def test_endpoints_report_initializing_without_dashboard(settings, fake_redis):
    app = create_app(settings, client=fake_redis)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        health = await client.get("/health")
        session = await client.get("/session")

    assert health.status_code == 200
    assert health.json() == {"status": "starting", "ready": False, "loading": True}
    assert session.status_code == 503
    assert session.json()["detail"] == "initializing"


@pytest.mark.asyncio
async def test_session_and_profile(api_client, dashboard):
    session = await api_client.get("/session")
    profile = await api_client.get("/profile")
    courses = await api_client.get("/courses")

    assert session.status_code == 200
    assert session.json()["identity_id"] == dashboard.session.identity_id
    assert session.json()["authoritative"] is True
    assert profile.json()["faculty_id"] == dashboard.session.identity_id[:8]
    assert profile.json()["course"] == "CS101"
    assert courses.json() == {"items": ["CS101", "BIO205", "ENG300"], "current": "CS101"}


@pytest.mark.asyncio
async def test_post_assignment_flow(api_client, dashboard, wait_until):
    await wait_until(lambda: dashboard.content.assignments_feed is not None)
    patched = await api_client.patch(
        "/forms/assignment",
        json={"title": "Quiz 2", "description": "Chapters 3-4", "due_date": "2024-06-01"},
    )
    assert patched.status_code == 200
    assert patched.json()["title"] == "Quiz 2"

    created = await api_client.post("/assignments")

    assert created.status_code == 201
    assert created.json()["status"] == "ok"
    await wait_until(lambda: len(dashboard.assignments) == 1)
    listing = await api_client.get("/assignments")
    body = listing.json()
    assert body["course"] == "CS101"
    assert body["items"][0]["title"] == "Quiz 2"
    assert body["items"][0]["due_date"] == "2024-06-01"
    form = await api_client.get("/forms/assignment")
    assert form.json() == {"title": "", "description": "", "due_date": "", "course": "CS101"}


@pytest.mark.asyncio
async def test_post_assignment_with_empty_form_is_rejected(api_client, dashboard):
    response = await api_client.post("/assignments")

    assert response.status_code == 422
    assert response.json()["status"] == "missing_field"
    assert response.json()["field"] == "title"
    assert await dashboard.store.list_documents(dashboard.settings.assignments_path()) == []


@pytest.mark.asyncio
async def test_post_schedule_entry_flow(api_client, dashboard, wait_until):
    await wait_until(lambda: dashboard.content.schedule_feed is not None)
    await api_client.patch("/forms/schedule", json={"location": "SW-305", "time": "9:00-10:30", "day": "Monday"})

    created = await api_client.post("/schedule")

    assert created.status_code == 201
    await wait_until(lambda: len(dashboard.schedule) == 1)
    listing = (await api_client.get("/schedule")).json()
    assert listing["items"][0]["location"] == "SW-305"
    assert listing["items"][0]["instructor"] == "Dr. Jane Smith"
    assert listing["items"][0]["course"] == "CS101"


@pytest.mark.asyncio
async def test_post_schedule_entry_with_invalid_day(api_client):
    await api_client.patch("/forms/schedule", json={"location": "SW-305", "time": "9:00", "day": "Sunday"})

    response = await api_client.post("/schedule")

    assert response.status_code == 422
    assert response.json()["field"] == "day"


@pytest.mark.asyncio
async def test_readiness_probe_pings_store(api_client):
    response = await api_client.get("/health/ready")

    assert response.status_code == 200
    assert response.json()["store"] == "up"


@pytest.mark.asyncio
async def test_metrics_exposes_portal_counters(api_client):
    await api_client.post("/assignments")

    response = await api_client.get("/metrics")

    assert response.status_code == 200
    assert "portal_commands_total" in response.text
