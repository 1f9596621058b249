"""Snapshot feeds: the consumer-side view of one realtime subscription."""

from __future__ import annotations

import asyncio
from typing import AsyncIterator, Generic, List, Optional, TypeVar

from portal.infra.documents import SubscriptionHandle

T = TypeVar("T")


class SnapshotFeed(Generic[T]):
	"""Holds the latest full-list snapshot of a subscription plus its cancellation handle.

	Iterating a feed yields each new snapshot; a slow consumer only sees the
	most recent one. Iteration ends when the feed is closed.
	"""

	def __init__(self, name: str, course: str, *, generation: Optional[int] = None) -> None:
		self.name = name
		self.course = course
		self.generation = generation
		self.handle: Optional[SubscriptionHandle] = None
		self.failed = False
		self._snapshot: List[T] = []
		self._version = 0
		self._closed = False
		self._changed = asyncio.Condition()

	@property
	def snapshot(self) -> List[T]:
		return list(self._snapshot)

	@property
	def version(self) -> int:
		"""Number of snapshots delivered so far."""
		return self._version

	@property
	def closed(self) -> bool:
		return self._closed

	async def publish(self, items: List[T]) -> None:
		async with self._changed:
			self._snapshot = list(items)
			self._version += 1
			self._changed.notify_all()

	async def close(self) -> None:
		if self._closed:
			return
		self._closed = True
		if self.handle is not None:
			await self.handle.close()
		async with self._changed:
			self._changed.notify_all()

	async def wait_for_version(self, version: int, timeout: Optional[float] = None) -> List[T]:
		"""Wait until at least ``version`` snapshots were delivered and return the latest."""

		async def _wait() -> List[T]:
			async with self._changed:
				await self._changed.wait_for(lambda: self._version >= version or self._closed)
				return list(self._snapshot)

		return await asyncio.wait_for(_wait(), timeout)

	async def updates(self) -> AsyncIterator[List[T]]:
		seen = 0
		while True:
			async with self._changed:
				await self._changed.wait_for(lambda: self._version > seen or self._closed)
				if self._version == seen:
					return
				seen = self._version
				snapshot = list(self._snapshot)
			yield snapshot

	def __aiter__(self) -> AsyncIterator[List[T]]:
		return self.updates()
