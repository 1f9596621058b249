"""Identity session bootstrap.

Signs in with the pre-issued token when one is configured, otherwise
anonymously, and resolves a Session exactly once. When the provider never
yields an identity the session falls back to a locally generated id so the
rest of the portal can run in a degraded, non-persistent mode.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Callable, Optional

from portal.errors import AuthError
from portal.obs import metrics as obs_metrics
from portal.settings import Settings

from .models import Identity, Session
from .provider import IdentityProvider

logger = logging.getLogger(__name__)


class IdentitySession:
	def __init__(self, provider: IdentityProvider, settings: Settings) -> None:
		self._provider = provider
		self._settings = settings
		self._session: Optional[Session] = None
		self._ready = asyncio.Event()
		self._unsubscribe: Optional[Callable[[], None]] = None

	@property
	def session(self) -> Optional[Session]:
		return self._session

	@property
	def ready(self) -> bool:
		return self._ready.is_set()

	async def initialize(self) -> Session:
		"""Sign in and return the session; never raises for authentication failures."""
		if self._session is not None:
			return self._session
		if self._unsubscribe is None:
			self._unsubscribe = self._provider.on_identity_change(self._on_identity_change)
		token = self._settings.initial_auth_token
		try:
			if token:
				await self._provider.sign_in_with_token(token)
			else:
				await self._provider.sign_in_anonymously()
		except AuthError as exc:
			logger.warning(
				"identity.sign_in_failed",
				extra={"reason": exc.reason, "method": "token" if token else "anonymous"},
			)
		self._provider.settle()
		await self._ready.wait()
		assert self._session is not None
		return self._session

	async def wait_ready(self) -> Session:
		await self._ready.wait()
		assert self._session is not None
		return self._session

	def shutdown(self) -> None:
		"""Stop listening for identity changes."""
		if self._unsubscribe is not None:
			self._unsubscribe()
			self._unsubscribe = None

	def _on_identity_change(self, identity: Optional[Identity]) -> None:
		if self._session is not None:
			if identity is None or identity.uid != self._session.identity_id:
				logger.info("identity.change_ignored", extra={"session_id": self._session.identity_id})
			return
		if identity is not None:
			session = Session(identity_id=identity.uid, anonymous=identity.anonymous, authoritative=True)
		else:
			obs_metrics.inc_identity_fallback()
			session = Session(identity_id=str(uuid.uuid4()), anonymous=True, authoritative=False)
			logger.warning("identity.fallback_identity", extra={"session_id": session.identity_id})
		self._session = session
		self._ready.set()
		logger.info("identity.ready", extra={"session_id": session.identity_id, "authoritative": session.authoritative})
