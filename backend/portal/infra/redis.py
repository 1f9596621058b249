"""Redis connection management for the document store.

Clients are built from the explicit settings object and handed to the
components that need them, so tests can pass a FakeRedis instance instead.
"""

from __future__ import annotations

from typing import Any, Dict

import redis.asyncio as redis

from portal.settings import Settings, require_store_config


def connection_kwargs(config: Dict[str, Any]) -> Dict[str, Any]:
	"""Translate optional credential fields of the store config into client kwargs."""
	kwargs: Dict[str, Any] = {"decode_responses": True}
	for key in ("username", "password"):
		value = config.get(key)
		if value:
			kwargs[key] = str(value)
	if config.get("db") not in (None, ""):
		kwargs["db"] = int(config["db"])
	return kwargs


def create_client(settings: Settings) -> redis.Redis:
	"""Return a client for the configured store; raises InitializationError without credentials."""
	config = require_store_config(settings)
	return redis.from_url(settings.store_url(), **connection_kwargs(config))


async def close_client(client: redis.Redis) -> None:
	await client.aclose()
