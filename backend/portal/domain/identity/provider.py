"""Identity provider: custom-token and anonymous sign-in with change listeners."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

import redis.asyncio as redis
import ulid
from jwt import InvalidTokenError
from redis.exceptions import RedisError

from portal.errors import AuthError
from portal.infra import jwt as jwt_helper
from portal.obs import metrics as obs_metrics
from portal.settings import Settings

from .models import Identity

logger = logging.getLogger(__name__)

IdentityListener = Callable[[Optional[Identity]], None]


def anonymous_key(uid: str) -> str:
	return f"identity:anonymous:{uid}"


class IdentityProvider:
	"""Holds the signed-in identity and notifies listeners when it changes.

	Listeners registered before the initial auth state is known are called
	once it settles (after the first sign-in attempt, successful or not), then
	again on every change.
	"""

	def __init__(self, settings: Settings, client: Optional[redis.Redis] = None) -> None:
		self._settings = settings
		self._client = client
		self._current: Optional[Identity] = None
		self._settled = False
		self._listeners: List[IdentityListener] = []

	@property
	def current_identity(self) -> Optional[Identity]:
		return self._current

	@property
	def settled(self) -> bool:
		return self._settled

	async def sign_in_with_token(self, token: str) -> Identity:
		try:
			payload = jwt_helper.decode_custom_token(self._settings, token)
		except InvalidTokenError as exc:
			obs_metrics.inc_sign_in("token", "rejected")
			raise AuthError("invalid_token") from exc
		display_name = payload.get("name")
		email = payload.get("email")
		identity = Identity(
			uid=str(payload["sub"]).strip(),
			anonymous=False,
			display_name=str(display_name) if display_name else None,
			email=str(email) if email else None,
		)
		obs_metrics.inc_sign_in("token", "ok")
		self._set_current(identity)
		return identity

	async def sign_in_anonymously(self) -> Identity:
		if self._client is None:
			obs_metrics.inc_sign_in("anonymous", "unavailable")
			raise AuthError("provider_unavailable")
		uid = ulid.new().str
		try:
			await self._client.hset(
				anonymous_key(uid),
				mapping={"created_at": datetime.now(timezone.utc).isoformat(), "app_id": self._settings.app_id},
			)
		except RedisError as exc:
			obs_metrics.inc_sign_in("anonymous", "failed")
			raise AuthError("anonymous_sign_in_failed") from exc
		identity = Identity(uid=uid, anonymous=True)
		obs_metrics.inc_sign_in("anonymous", "ok")
		self._set_current(identity)
		return identity

	def sign_out(self) -> None:
		self._set_current(None)

	def settle(self) -> None:
		"""Declare the initial auth state known, notifying listeners if nothing else has."""
		if self._settled:
			return
		self._settled = True
		self._notify()

	def on_identity_change(self, listener: IdentityListener) -> Callable[[], None]:
		"""Register ``listener``; returns a callable that removes it."""
		self._listeners.append(listener)
		if self._settled:
			self._call(listener, self._current)

		def unsubscribe() -> None:
			if listener in self._listeners:
				self._listeners.remove(listener)

		return unsubscribe

	def _set_current(self, identity: Optional[Identity]) -> None:
		self._current = identity
		self._settled = True
		self._notify()

	def _notify(self) -> None:
		for listener in list(self._listeners):
			self._call(listener, self._current)

	def _call(self, listener: IdentityListener, identity: Optional[Identity]) -> None:
		try:
			listener(identity)
		except Exception:
			logger.exception("identity.listener_failed")


def issue_custom_token(settings: Settings, uid: str, **claims) -> str:
	"""Mint a custom token accepted by ``sign_in_with_token``."""
	return jwt_helper.encode_custom_token(settings, uid, **claims)
