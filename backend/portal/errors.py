"""Error taxonomy for the faculty portal.

Nothing in the dashboard core lets these escape to callers except
InitializationError, which halts startup. Everything else is logged at the
point of failure and turned into a degraded-but-valid state.
"""

from __future__ import annotations


class PortalError(Exception):
	"""Base error carrying a short machine-readable reason."""

	def __init__(self, reason: str) -> None:
		super().__init__(reason)
		self.reason = reason


class InitializationError(PortalError):
	"""Environment configuration is missing or unusable; no session is created."""


class AuthError(PortalError):
	"""Sign-in with the identity provider failed."""


class StoreError(PortalError):
	"""Base for document store failures."""

	def __init__(self, reason: str, *, path: str | None = None) -> None:
		super().__init__(reason)
		self.path = path


class StoreReadError(StoreError):
	pass


class StoreWriteError(StoreError):
	pass


class SubscriptionError(StoreError):
	"""A realtime listener failed; it is not restarted."""


__all__ = [
	"AuthError",
	"InitializationError",
	"PortalError",
	"StoreError",
	"StoreReadError",
	"StoreWriteError",
	"SubscriptionError",
]
