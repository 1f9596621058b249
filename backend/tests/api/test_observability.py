import pytest
from httpx import ASGITransport, AsyncClient

from portal.main import create_app
from portal.obs import middleware


@pytest.mark.asyncio
async def test_request_id_is_echoed(settings, fake_redis):
    app = create_app(settings, client=fake_redis)
    middleware.install(app)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        supplied = await client.get("/health", headers={"X-Request-Id": "req-42"})
        generated = await client.get("/health")

    assert supplied.headers["X-Request-Id"] == "req-42"
    assert generated.headers["X-Request-Id"]


@pytest.mark.asyncio
async def test_error_body_carries_request_id(settings, fake_redis):
    app = create_app(settings, client=fake_redis)
    middleware.install(app)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        response = await client.get("/profile", headers={"X-Request-Id": "req-7"})

    assert response.status_code == 503
    assert response.json() == {"detail": "initializing", "request_id": "req-7"}
