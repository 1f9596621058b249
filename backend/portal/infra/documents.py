"""Document store backed by Redis.

Layout:
- keyed record ``p``      -> JSON string at ``doc:{p}``
- collection ``c``        -> hash ``col:{c}`` of document id -> JSON
- change feed for a path  -> stream ``changes:{path}`` with ``{op, id}`` entries

Realtime subscriptions are background tasks that follow a change stream and
redeliver the complete (filtered) result set after every batch of changes.
"""

from __future__ import annotations

import asyncio
import inspect
import json
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Set, Union

import redis.asyncio as redis
import ulid
from redis.exceptions import RedisError

from portal.errors import StoreReadError, StoreWriteError, SubscriptionError
from portal.settings import Settings

logger = logging.getLogger(__name__)

TIMESTAMP_KEY = "__timestamp__"
CHANGE_STREAM_MAXLEN = 1000

Callback = Callable[[Any], Union[None, Awaitable[None]]]


def record_key(path: str) -> str:
	return f"doc:{path}"


def collection_key(path: str) -> str:
	return f"col:{path}"


def changes_key(path: str) -> str:
	return f"changes:{path}"


def _json_default(value: Any) -> Any:
	if isinstance(value, datetime):
		if value.tzinfo is None:
			value = value.replace(tzinfo=timezone.utc)
		return {TIMESTAMP_KEY: value.isoformat()}
	if isinstance(value, date):
		midnight = datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
		return {TIMESTAMP_KEY: midnight.isoformat()}
	raise TypeError(f"unsupported_type:{type(value).__name__}")


def _object_hook(obj: Dict[str, Any]) -> Any:
	if len(obj) == 1 and TIMESTAMP_KEY in obj:
		return datetime.fromisoformat(obj[TIMESTAMP_KEY])
	return obj


def encode_document(value: Mapping[str, Any]) -> str:
	"""Serialise a document; datetimes and dates become timestamp objects."""
	return json.dumps(dict(value), default=_json_default, separators=(",", ":"))


def decode_document(raw: str) -> Dict[str, Any]:
	data = json.loads(raw, object_hook=_object_hook)
	if not isinstance(data, dict):
		raise ValueError("document_not_object")
	return data


@dataclass(slots=True)
class Document:
	id: str
	data: Dict[str, Any]


@dataclass(eq=False)
class SubscriptionHandle:
	"""Cancellation handle for one realtime listener."""

	path: str
	description: str
	task: Optional[asyncio.Task] = None
	closed: bool = False

	@property
	def active(self) -> bool:
		return not self.closed and self.task is not None and not self.task.done()

	async def close(self) -> None:
		if self.closed:
			return
		self.closed = True
		task = self.task
		if task is None or task.done():
			return
		task.cancel()
		try:
			await task
		except asyncio.CancelledError:
			# Only the listener's own cancellation is expected here.
			current = asyncio.current_task()
			if current is not None and current.cancelling():
				raise


async def _invoke(callback: Callback, value: Any) -> None:
	result = callback(value)
	if inspect.isawaitable(result):
		await result


class DocumentStore:
	"""Keyed records, append-only collections and filtered realtime queries."""

	def __init__(
		self,
		client: redis.Redis,
		*,
		poll_interval: float = 0.5,
		block_ms: Optional[int] = None,
	) -> None:
		self._client = client
		self.poll_interval = max(0.0, float(poll_interval))
		self.block_ms = block_ms
		self._handles: Set[SubscriptionHandle] = set()

	@classmethod
	def from_settings(cls, client: redis.Redis, settings: Settings) -> "DocumentStore":
		return cls(
			client,
			poll_interval=settings.subscription_poll_interval_seconds,
			block_ms=settings.subscription_block_ms,
		)

	@property
	def client(self) -> redis.Redis:
		return self._client

	# --- keyed records -------------------------------------------------

	async def get_record(self, path: str) -> Optional[Dict[str, Any]]:
		"""Return the record at ``path`` or None when it does not exist."""
		try:
			raw = await self._client.get(record_key(path))
		except RedisError as exc:
			raise StoreReadError("record_read_failed", path=path) from exc
		if raw is None:
			return None
		try:
			return decode_document(raw)
		except ValueError as exc:
			raise StoreReadError("record_corrupt", path=path) from exc

	async def set_record(self, path: str, value: Mapping[str, Any]) -> None:
		try:
			payload = encode_document(value)
		except (TypeError, ValueError) as exc:
			raise StoreWriteError("record_unserialisable", path=path) from exc
		try:
			async with self._client.pipeline(transaction=True) as pipe:
				pipe.set(record_key(path), payload)
				pipe.xadd(changes_key(path), {"op": "set", "id": path}, maxlen=CHANGE_STREAM_MAXLEN, approximate=True)
				await pipe.execute()
		except RedisError as exc:
			raise StoreWriteError("record_write_failed", path=path) from exc

	# --- collections ---------------------------------------------------

	async def add_record(self, collection: str, value: Mapping[str, Any]) -> str:
		"""Append a new document to ``collection`` and return its generated id."""
		doc_id = ulid.new().str
		try:
			payload = encode_document(value)
		except (TypeError, ValueError) as exc:
			raise StoreWriteError("document_unserialisable", path=collection) from exc
		try:
			async with self._client.pipeline(transaction=True) as pipe:
				pipe.hset(collection_key(collection), doc_id, payload)
				pipe.xadd(changes_key(collection), {"op": "add", "id": doc_id}, maxlen=CHANGE_STREAM_MAXLEN, approximate=True)
				await pipe.execute()
		except RedisError as exc:
			raise StoreWriteError("document_write_failed", path=collection) from exc
		return doc_id

	async def list_documents(
		self,
		collection: str,
		*,
		field: Optional[str] = None,
		value: Any = None,
	) -> List[Document]:
		"""Return documents of ``collection`` in id order, optionally where ``field == value``."""
		try:
			raw = await self._client.hgetall(collection_key(collection))
		except RedisError as exc:
			raise StoreReadError("collection_read_failed", path=collection) from exc
		documents: List[Document] = []
		for doc_id in sorted(raw):
			try:
				data = decode_document(raw[doc_id])
			except ValueError:
				logger.warning("documents.skip_corrupt", extra={"collection": collection, "doc_id": doc_id})
				continue
			if field is not None and data.get(field) != value:
				continue
			documents.append(Document(id=doc_id, data=data))
		return documents

	# --- realtime ------------------------------------------------------

	def watch_record(self, path: str, on_change: Callback, on_error: Callback) -> SubscriptionHandle:
		"""Deliver the record at ``path`` (or None) now and after each change."""

		async def load() -> Optional[Dict[str, Any]]:
			return await self.get_record(path)

		return self._spawn(path, f"record:{path}", load, on_change, on_error)

	def subscribe(
		self,
		collection: str,
		field: str,
		value: Any,
		on_change: Callback,
		on_error: Callback,
	) -> SubscriptionHandle:
		"""Deliver every document of ``collection`` with ``field == value`` as a full list."""

		async def load() -> List[Document]:
			return await self.list_documents(collection, field=field, value=value)

		return self._spawn(collection, f"query:{collection}:{field}=={value}", load, on_change, on_error)

	async def unsubscribe(self, handle: SubscriptionHandle) -> None:
		self._handles.discard(handle)
		await handle.close()

	async def close(self) -> None:
		"""Cancel every listener opened through this store."""
		handles = list(self._handles)
		self._handles.clear()
		for handle in handles:
			await handle.close()

	def _spawn(
		self,
		path: str,
		description: str,
		load: Callable[[], Awaitable[Any]],
		on_change: Callback,
		on_error: Callback,
	) -> SubscriptionHandle:
		handle = SubscriptionHandle(path=path, description=description)
		handle.task = asyncio.create_task(
			self._follow(handle, load, on_change, on_error),
			name=f"subscription:{description}",
		)
		self._handles.add(handle)
		return handle

	async def _stream_tail(self, stream: str) -> str:
		entries = await self._client.xrevrange(stream, count=1)
		if not entries:
			return "0-0"
		return entries[0][0]

	async def _follow(
		self,
		handle: SubscriptionHandle,
		load: Callable[[], Awaitable[Any]],
		on_change: Callback,
		on_error: Callback,
	) -> None:
		# A cancel can be absorbed by an in-flight redis command, so the loop also
		# stops on handle.closed, which close() sets before cancelling.
		stream = changes_key(handle.path)

		async def deliver() -> None:
			snapshot = await load()
			if not handle.closed:
				await _invoke(on_change, snapshot)

		try:
			last_id = await self._stream_tail(stream)
			if handle.closed:
				return
			await deliver()
			while not handle.closed:
				batches = await self._client.xread({stream: last_id}, count=100, block=self.block_ms)
				if handle.closed:
					break
				if not batches:
					await asyncio.sleep(self.poll_interval)
					continue
				for _stream_name, entries in batches:
					if entries:
						last_id = entries[-1][0]
				await deliver()
		except asyncio.CancelledError:
			raise
		except Exception as exc:
			if handle.closed:
				return
			logger.warning("documents.subscription_failed", extra={"subscription": handle.description}, exc_info=True)
			error = exc if isinstance(exc, SubscriptionError) else SubscriptionError("subscription_failed", path=handle.path)
			try:
				await _invoke(on_error, error)
			except Exception:  # pragma: no cover
				logger.exception("documents.error_callback_failed", extra={"subscription": handle.description})
		finally:
			self._handles.discard(handle)


__all__ = [
	"Document",
	"DocumentStore",
	"SubscriptionHandle",
	"changes_key",
	"collection_key",
	"decode_document",
	"encode_document",
	"record_key",
]
