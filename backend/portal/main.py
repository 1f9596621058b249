"""FastAPI application entrypoint."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

import redis.asyncio as redis
import socketio
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from portal.api import dashboard as dashboard_api
from portal.api import ops as ops_api
from portal.api.errors import install_error_handlers
from portal.api.sockets import DashboardNamespace
from portal.dashboard import FacultyDashboard
from portal.obs import init as obs_init
from portal.settings import Settings, load_settings


def create_app(settings: Optional[Settings] = None, *, client: Optional[redis.Redis] = None) -> FastAPI:
	settings = settings or load_settings()
	namespace = DashboardNamespace()

	@asynccontextmanager
	async def lifespan(app: FastAPI):
		dashboard = getattr(app.state, "dashboard", None)
		owned = dashboard is None
		if owned:
			dashboard = FacultyDashboard(settings, client=client)
			# InitializationError propagates and aborts startup.
			await dashboard.start()
			app.state.dashboard = dashboard
		namespace.attach(dashboard)
		try:
			yield
		finally:
			namespace.detach()
			if owned:
				await dashboard.close()
				app.state.dashboard = None

	app = FastAPI(title="Faculty Portal", lifespan=lifespan)
	app.state.settings = settings
	app.state.dashboard = None
	app.state.namespace = namespace
	install_error_handlers(app)

	allow_origins = ["http://localhost:3000", "http://127.0.0.1:3000"] if settings.is_dev() else []
	app.add_middleware(
		CORSMiddleware,
		allow_origins=allow_origins,
		allow_credentials=True,
		allow_methods=["*"],
		allow_headers=["*"],
	)
	obs_init(app, settings)
	app.include_router(ops_api.router)
	app.include_router(dashboard_api.router, tags=["dashboard"])

	sio = socketio.AsyncServer(async_mode="asgi", cors_allowed_origins=allow_origins)
	sio.register_namespace(namespace)
	app.state.sio = sio
	return app


app = create_app()
socket_app = socketio.ASGIApp(app.state.sio, other_asgi_app=app)
