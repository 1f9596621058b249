"""Faculty dashboard: wires identity, profile and content for one faculty user.

Data flows identity -> profile -> course -> content feeds. Posting commands
write into the collections the feeds observe, so new records come back
through the realtime path rather than a refetch.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

import redis.asyncio as redis

from portal.domain.content import (
	Assignment,
	AssignmentForm,
	CommandResult,
	ContentSubscriptions,
	ScheduleEntry,
	ScheduleForm,
	post_assignment,
	post_schedule_entry,
)
from portal.domain.identity import IdentityProvider, IdentitySession, Session
from portal.domain.profile import Profile, ProfileStore
from portal.errors import InitializationError
from portal.infra.documents import DocumentStore
from portal.infra.redis import close_client, create_client
from portal.settings import Settings, require_store_config

logger = logging.getLogger(__name__)

DashboardListener = Callable[[str, Any], Union[None, Awaitable[None]]]


class FacultyDashboard:
	def __init__(self, settings: Settings, *, client: Optional[redis.Redis] = None) -> None:
		self.settings = settings
		self._client = client
		self._owns_client = client is None
		self.store: Optional[DocumentStore] = None
		self.provider: Optional[IdentityProvider] = None
		self.identity: Optional[IdentitySession] = None
		self.profiles: Optional[ProfileStore] = None
		self.content: Optional[ContentSubscriptions] = None
		self.loading = True
		self.error: Optional[str] = None
		self.assignment_form = AssignmentForm(course=settings.default_course)
		self.schedule_form = ScheduleForm(course=settings.default_course)
		self._listeners: List[DashboardListener] = []

	# --- observable state ----------------------------------------------

	@property
	def session(self) -> Optional[Session]:
		return self.identity.session if self.identity else None

	@property
	def ready(self) -> bool:
		return self.session is not None

	@property
	def profile(self) -> Optional[Profile]:
		return self.profiles.current if self.profiles else None

	@property
	def assignments(self) -> List[Assignment]:
		return self.content.assignments if self.content else []

	@property
	def schedule(self) -> List[ScheduleEntry]:
		return self.content.schedule if self.content else []

	@property
	def available_courses(self) -> List[str]:
		return list(self.settings.available_courses)

	def snapshot(self) -> Dict[str, Any]:
		session = self.session
		profile = self.profile
		return {
			"loading": self.loading,
			"session": session.to_dict() if session else None,
			"profile": profile.to_dict() if profile else None,
			"assignments": [item.to_dict() for item in self.assignments],
			"schedule": [item.to_dict() for item in self.schedule],
		}

	def add_listener(self, listener: DashboardListener) -> Callable[[], None]:
		"""Register ``listener(topic, payload)`` for session/profile/assignments/schedule changes."""
		self._listeners.append(listener)

		def remove() -> None:
			if listener in self._listeners:
				self._listeners.remove(listener)

		return remove

	# --- lifecycle -----------------------------------------------------

	async def start(self) -> Session:
		"""Sign in, open the profile and start the content feeds.

		Raises InitializationError when the store configuration is missing;
		every other failure is logged and leaves the dashboard degraded.
		"""
		try:
			require_store_config(self.settings)
		except InitializationError as exc:
			self.loading = False
			self.error = exc.reason
			logger.error("dashboard.initialization_failed", extra={"reason": exc.reason})
			raise
		if self._client is None:
			self._client = create_client(self.settings)
		self.store = DocumentStore.from_settings(self._client, self.settings)
		self.provider = IdentityProvider(self.settings, self._client)
		self.identity = IdentitySession(self.provider, self.settings)
		self.profiles = ProfileStore(self.store, self.settings)
		self.content = ContentSubscriptions(self.store, self.settings)
		self.profiles.add_listener(self._on_profile)
		self.content.add_listener(self._on_content)

		session = await self.identity.initialize()
		self.loading = False
		await self._emit("session", session.to_dict())
		await self.profiles.open(session.identity_id)
		return session

	async def close(self) -> None:
		if self.content is not None:
			await self.content.close()
		if self.profiles is not None:
			await self.profiles.close()
		if self.identity is not None:
			self.identity.shutdown()
		if self.store is not None:
			await self.store.close()
		if self._client is not None and self._owns_client:
			await close_client(self._client)
			self._client = None
		self._listeners.clear()

	# --- forms and commands --------------------------------------------

	def update_assignment_form(self, **values: Any) -> AssignmentForm:
		self.assignment_form.update(**values)
		return self.assignment_form

	def update_schedule_form(self, **values: Any) -> ScheduleForm:
		self.schedule_form.update(**values)
		return self.schedule_form

	async def post_assignment(self) -> CommandResult:
		return await post_assignment(
			self.store,
			self.assignment_form,
			self.profile,
			collection=self.settings.assignments_path(),
		)

	async def post_schedule_entry(self) -> CommandResult:
		return await post_schedule_entry(
			self.store,
			self.schedule_form,
			self.profile,
			collection=self.settings.schedule_path(),
		)

	# --- internals -----------------------------------------------------

	async def _on_profile(self, profile: Profile) -> None:
		# Course and instructor on the forms are display copies of the profile.
		self.assignment_form.course = profile.course
		self.schedule_form.course = profile.course
		self.schedule_form.instructor = profile.name
		await self._emit("profile", profile.to_dict())
		if self.content is not None:
			await self.content.set_course(profile.course)

	async def _on_content(self, name: str, items: List[Any]) -> None:
		await self._emit(name, [item.to_dict() for item in items])

	async def _emit(self, topic: str, payload: Any) -> None:
		for listener in list(self._listeners):
			try:
				result = listener(topic, payload)
				if inspect.isawaitable(result):
					await result
			except Exception:
				logger.exception("dashboard.listener_failed", extra={"topic": topic})
