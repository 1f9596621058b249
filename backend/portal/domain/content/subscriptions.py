"""Course-scoped realtime subscriptions for assignments and schedule entries.

Both feeds follow the faculty member's course. Switching course closes the
old feeds before opening new ones, and every delivery is tagged with the
generation it was opened under so a late snapshot from a closed filter is
dropped instead of overwriting the new course's lists.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Iterable, List, Optional, Union

from portal.errors import StoreError
from portal.infra.documents import Document, DocumentStore
from portal.obs import metrics as obs_metrics
from portal.settings import Settings

from .feeds import SnapshotFeed
from .models import Assignment, ScheduleEntry
from .projections import project_assignments, project_schedule

logger = logging.getLogger(__name__)

ASSIGNMENTS = "assignments"
SCHEDULE = "schedule"
COURSE_FIELD = "course"

ContentListener = Callable[[str, List[Any]], Union[None, Awaitable[None]]]


class ContentSubscriptions:
	def __init__(self, store: DocumentStore, settings: Settings) -> None:
		self._store = store
		self._settings = settings
		self._course: Optional[str] = None
		self._generation = 0
		self._assignments: Optional[SnapshotFeed[Assignment]] = None
		self._schedule: Optional[SnapshotFeed[ScheduleEntry]] = None
		self._listeners: List[ContentListener] = []
		self._lock = asyncio.Lock()

	@property
	def course(self) -> Optional[str]:
		return self._course

	@property
	def generation(self) -> int:
		return self._generation

	@property
	def assignments_feed(self) -> Optional[SnapshotFeed[Assignment]]:
		return self._assignments

	@property
	def schedule_feed(self) -> Optional[SnapshotFeed[ScheduleEntry]]:
		return self._schedule

	@property
	def assignments(self) -> List[Assignment]:
		return self._assignments.snapshot if self._assignments else []

	@property
	def schedule(self) -> List[ScheduleEntry]:
		return self._schedule.snapshot if self._schedule else []

	def add_listener(self, listener: ContentListener) -> Callable[[], None]:
		self._listeners.append(listener)

		def remove() -> None:
			if listener in self._listeners:
				self._listeners.remove(listener)

		return remove

	def watch_assignments(self, course: str, *, generation: Optional[int] = None) -> SnapshotFeed[Assignment]:
		"""Open a feed of assignments for ``course``, newest first."""
		return self._open(ASSIGNMENTS, self._settings.assignments_path(), course, project_assignments, generation)

	def watch_schedule(self, course: str, *, generation: Optional[int] = None) -> SnapshotFeed[ScheduleEntry]:
		"""Open a feed of schedule entries for ``course`` in store order."""
		return self._open(SCHEDULE, self._settings.schedule_path(), course, project_schedule, generation)

	async def set_course(self, course: Optional[str]) -> None:
		"""Point both feeds at ``course``; an empty course leaves them closed."""
		async with self._lock:
			course = (course or "").strip()
			if course and course == self._course and self._feeds_open():
				return
			previous = self._course
			await self._close_feeds()
			self._generation += 1
			if not course:
				self._course = None
				return
			self._course = course
			self._assignments = self.watch_assignments(course, generation=self._generation)
			self._schedule = self.watch_schedule(course, generation=self._generation)
			obs_metrics.subscription_opened(ASSIGNMENTS)
			obs_metrics.subscription_opened(SCHEDULE)
			logger.info(
				"content.rescoped",
				extra={"course": course, "previous_course": previous, "generation": self._generation},
			)

	async def close(self) -> None:
		async with self._lock:
			await self._close_feeds()
			self._generation += 1
			self._course = None

	def _feeds_open(self) -> bool:
		return all(feed is not None and not feed.closed for feed in (self._assignments, self._schedule))

	async def _close_feeds(self) -> None:
		for feed in (self._assignments, self._schedule):
			if feed is not None and not feed.closed:
				await feed.close()
				obs_metrics.subscription_closed(feed.name)
		self._assignments = None
		self._schedule = None

	def _open(
		self,
		name: str,
		collection: str,
		course: str,
		project: Callable[[Iterable[Document]], List[Any]],
		generation: Optional[int],
	) -> SnapshotFeed[Any]:
		feed: SnapshotFeed[Any] = SnapshotFeed(name, course, generation=generation)

		async def on_change(documents: List[Document]) -> None:
			if feed.closed or self._is_stale(feed):
				obs_metrics.inc_stale_snapshot(name)
				logger.debug("content.stale_snapshot_dropped", extra={"feed": name, "course": course})
				return
			items = project(documents)
			await feed.publish(items)
			obs_metrics.inc_snapshot(name)
			if feed.generation is not None:
				await self._notify(name, items)

		def on_error(error: StoreError) -> None:
			feed.failed = True
			obs_metrics.inc_subscription_error(name)
			logger.warning(
				"content.subscription_failed",
				extra={"feed": name, "course": course, "reason": error.reason},
			)

		feed.handle = self._store.subscribe(collection, COURSE_FIELD, course, on_change, on_error)
		return feed

	def _is_stale(self, feed: SnapshotFeed[Any]) -> bool:
		return feed.generation is not None and feed.generation != self._generation

	async def _notify(self, name: str, items: List[Any]) -> None:
		for listener in list(self._listeners):
			try:
				result = listener(name, items)
				if inspect.isawaitable(result):
					await result
			except Exception:
				logger.exception("content.listener_failed", extra={"feed": name})
