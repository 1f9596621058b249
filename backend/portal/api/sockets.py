"""Socket.IO namespace pushing dashboard snapshots to connected clients."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

import socketio
from socketio import exceptions as sio_exceptions

from portal.dashboard import FacultyDashboard
from portal.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)

TOPICS = ("session", "profile", "assignments", "schedule")


class DashboardNamespace(socketio.AsyncNamespace):
	"""Sends the full dashboard state on connect, then one event per change."""

	def __init__(self) -> None:
		super().__init__("/dashboard")
		self._dashboard: Optional[FacultyDashboard] = None
		self._detach: Optional[Callable[[], None]] = None

	@property
	def dashboard(self) -> Optional[FacultyDashboard]:
		return self._dashboard

	def attach(self, dashboard: FacultyDashboard) -> None:
		self.detach()
		self._dashboard = dashboard
		self._detach = dashboard.add_listener(self.broadcast)

	def detach(self) -> None:
		if self._detach is not None:
			self._detach()
		self._detach = None
		self._dashboard = None

	async def on_connect(self, sid: str, environ: dict) -> None:
		obs_metrics.socket_connected(self.namespace)
		if self._dashboard is None:
			obs_metrics.socket_disconnected(self.namespace)
			raise sio_exceptions.ConnectionRefusedError("initializing")
		await self.emit("snapshot", self._dashboard.snapshot(), room=sid)

	async def on_disconnect(self, sid: str) -> None:
		obs_metrics.socket_disconnected(self.namespace)

	async def broadcast(self, topic: str, payload: Any) -> None:
		if topic not in TOPICS:
			return
		obs_metrics.socket_event(self.namespace, topic)
		await self.emit(topic, payload)
