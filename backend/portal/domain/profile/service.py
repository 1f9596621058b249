"""Profile store: bootstrap-if-absent, then follow the record in realtime."""

from __future__ import annotations

import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, Union

from portal.errors import StoreError
from portal.infra.documents import DocumentStore, SubscriptionHandle
from portal.obs import metrics as obs_metrics
from portal.settings import Settings

from .models import Profile, default_profile

logger = logging.getLogger(__name__)

ProfileListener = Callable[[Profile], Union[None, Awaitable[None]]]


class ProfileStore:
	"""Owns the local copy of one faculty member's private profile record.

	Remote changes replace the local value wholesale. Failures are logged and
	leave the last known value in place.
	"""

	def __init__(self, store: DocumentStore, settings: Settings) -> None:
		self._store = store
		self._settings = settings
		self._current: Optional[Profile] = None
		self._identity_id: Optional[str] = None
		self._handle: Optional[SubscriptionHandle] = None
		self._listeners: List[ProfileListener] = []

	@property
	def current(self) -> Optional[Profile]:
		return self._current

	@property
	def handle(self) -> Optional[SubscriptionHandle]:
		return self._handle

	def add_listener(self, listener: ProfileListener) -> Callable[[], None]:
		self._listeners.append(listener)

		def remove() -> None:
			if listener in self._listeners:
				self._listeners.remove(listener)

		return remove

	async def open(self, identity_id: str) -> Tuple[Optional[Profile], SubscriptionHandle]:
		"""Load or create the profile for ``identity_id`` and start following it."""
		if self._handle is not None:
			await self.close()
		self._identity_id = identity_id
		path = self._settings.profile_path(identity_id)
		try:
			record = await self._store.get_record(path)
			if record is None:
				profile = default_profile(identity_id, self._settings)
				await self._store.set_record(path, profile.to_record())
				obs_metrics.inc_profile_bootstrap("created")
				logger.info("profile.created", extra={"identity_id": identity_id})
			else:
				profile = Profile.from_record(identity_id, record)
				obs_metrics.inc_profile_bootstrap("existing")
			await self._replace(profile)
		except StoreError as exc:
			obs_metrics.inc_profile_bootstrap("failed")
			logger.warning(
				"profile.bootstrap_failed",
				extra={"identity_id": identity_id, "reason": exc.reason},
				exc_info=True,
			)
			if self._current is None or self._current.owner_id != identity_id:
				# Local-only default so a course is known; the store is not written.
				await self._replace(default_profile(identity_id, self._settings))
		self._handle = self._store.watch_record(path, self._on_remote_change, self._on_error)
		return self._current, self._handle

	async def close(self) -> None:
		handle = self._handle
		self._handle = None
		if handle is not None:
			await self._store.unsubscribe(handle)

	async def _on_remote_change(self, record: Optional[Dict[str, Any]]) -> None:
		if record is None or self._identity_id is None:
			return
		await self._replace(Profile.from_record(self._identity_id, record))

	def _on_error(self, error: StoreError) -> None:
		logger.warning(
			"profile.subscription_failed",
			extra={"identity_id": self._identity_id, "reason": error.reason},
		)

	async def _replace(self, profile: Profile) -> None:
		if profile == self._current:
			return
		self._current = profile
		for listener in list(self._listeners):
			try:
				result = listener(profile)
				if inspect.isawaitable(result):
					await result
			except Exception:
				logger.exception("profile.listener_failed")
