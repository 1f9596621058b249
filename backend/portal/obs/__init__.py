"""Observability package bootstrap."""

from __future__ import annotations

from fastapi import FastAPI

from portal.obs import logging as obs_logging
from portal.obs import middleware
from portal.settings import Settings


def init(app: FastAPI, settings: Settings) -> None:
	if getattr(app.state, "obs_initialised", False):
		return
	if not settings.obs_enabled:
		return
	obs_logging.configure_logging(settings)
	middleware.install(app)
	app.state.obs_initialised = True


__all__ = ["init"]
