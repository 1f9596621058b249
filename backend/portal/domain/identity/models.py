"""Identity domain models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(slots=True, frozen=True)
class Identity:
	"""An identity issued by the provider."""

	uid: str
	anonymous: bool = False
	display_name: Optional[str] = None
	email: Optional[str] = None


@dataclass(slots=True, frozen=True)
class Session:
	"""The identity context for the lifetime of the process.

	``authoritative`` is False when sign-in never produced an identity and the
	id was generated locally; such sessions are not recognised by the provider.
	"""

	identity_id: str
	ready: bool = True
	anonymous: bool = False
	authoritative: bool = True

	def to_dict(self) -> dict:
		return {
			"identity_id": self.identity_id,
			"ready": self.ready,
			"anonymous": self.anonymous,
			"authoritative": self.authoritative,
		}
