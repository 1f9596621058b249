import asyncio
import sys
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from fakeredis.aioredis import FakeRedis

# Ensure backend package is importable when tests run from repo root
BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
	sys.path.insert(0, str(BACKEND_ROOT))

from portal.dashboard import FacultyDashboard
from portal.infra.documents import DocumentStore
from portal.main import create_app
from portal.settings import Settings


def _make_settings(**overrides) -> Settings:
	values = {
		"app_id": "test-app",
		"store_config": {"url": "redis://localhost:6379/0"},
		"initial_auth_token": None,
		"secret_key": "test-secret",
		"subscription_poll_interval_seconds": 0.01,
		"subscription_block_ms": None,
		"environment": "dev",
		"obs_enabled": False,
	}
	values.update(overrides)
	return Settings(**values)


@pytest.fixture
def settings_factory():
	return _make_settings


@pytest.fixture
def settings():
	return _make_settings()


@pytest_asyncio.fixture
async def fake_redis():
	client = FakeRedis(decode_responses=True)
	try:
		yield client
	finally:
		await client.flushall()
		await client.aclose()


@pytest_asyncio.fixture
async def store(fake_redis, settings):
	documents = DocumentStore.from_settings(fake_redis, settings)
	try:
		yield documents
	finally:
		await documents.close()


@pytest.fixture
def wait_until():
	"""Poll ``predicate`` until it holds; realtime deliveries arrive on background tasks."""

	async def _wait(predicate, timeout: float = 2.0, interval: float = 0.01):
		loop = asyncio.get_running_loop()
		deadline = loop.time() + timeout
		while not predicate():
			if loop.time() >= deadline:
				raise AssertionError("condition not met before timeout")
			await asyncio.sleep(interval)

	return _wait


@pytest_asyncio.fixture
async def dashboard(settings, fake_redis):
	faculty = FacultyDashboard(settings, client=fake_redis)
	await faculty.start()
	try:
		yield faculty
	finally:
		await faculty.close()


@pytest_asyncio.fixture
async def api_client(settings, fake_redis, dashboard):
	# ASGITransport does not run the lifespan, so the dashboard is attached directly.
	app = create_app(settings, client=fake_redis)
	app.state.dashboard = dashboard
	transport = ASGITransport(app=app)
	async with AsyncClient(transport=transport, base_url="http://testserver") as client:
		yield client
