"""JWT helpers for custom sign-in tokens.

Uses HS256 with the configured secret key. Validates standard claims and
the expected issuer/audience values.
"""

from __future__ import annotations

import time
from typing import Any, Dict

import jwt
from jwt import InvalidTokenError

from portal.settings import Settings


ISSUER = "faculty-portal"
AUDIENCE = "faculty-portal-client"


def encode_custom_token(settings: Settings, uid: str, *, ttl_seconds: int | None = None, **claims: Any) -> str:
	"""Mint a custom token for ``uid`` (used by tooling and tests)."""
	now = int(time.time())
	ttl = settings.custom_token_ttl_seconds if ttl_seconds is None else ttl_seconds
	body: Dict[str, Any] = {"iss": ISSUER, "aud": AUDIENCE, "iat": now, "exp": now + int(ttl), "sub": uid}
	body.update(claims)
	return jwt.encode(body, settings.secret_key, algorithm="HS256")


def decode_custom_token(settings: Settings, token: str) -> dict[str, object]:
	"""Decode and validate a custom token.

	Raises jwt.InvalidTokenError subclasses on failure.
	"""
	options = {"require": ["exp", "iat", "iss", "aud", "sub"]}
	payload = jwt.decode(
		token,
		settings.secret_key,
		algorithms=["HS256"],
		audience=AUDIENCE,
		issuer=ISSUER,
		leeway=5,
		options=options,
	)
	if not str(payload.get("sub") or "").strip():
		raise InvalidTokenError("missing_claim:sub")
	return payload  # type: ignore[return-value]
