"""Faculty profile model."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from typing import Any, Dict, Mapping, Optional

from portal.settings import Settings

SHORT_ID_LENGTH = 8
PROFILE_FIELDS = ("name", "faculty_id", "email", "course", "last_login")


def _plain(value: Any) -> Any:
	if isinstance(value, (datetime, date)):
		return value.isoformat()
	if isinstance(value, dict):
		return {key: _plain(item) for key, item in value.items()}
	if isinstance(value, list):
		return [_plain(item) for item in value]
	return value


@dataclass(slots=True, frozen=True)
class Profile:
	owner_id: str
	name: str
	faculty_id: str
	email: str
	course: str
	last_login: Optional[datetime] = None
	# Stored keys this service does not interpret; written back unchanged.
	extras: Dict[str, Any] = field(default_factory=dict)

	@classmethod
	def from_record(cls, owner_id: str, data: Mapping[str, Any]) -> "Profile":
		last_login = data.get("last_login")
		return cls(
			owner_id=owner_id,
			name=str(data.get("name") or ""),
			faculty_id=str(data.get("faculty_id") or ""),
			email=str(data.get("email") or ""),
			course=str(data.get("course") or ""),
			last_login=last_login if isinstance(last_login, datetime) else None,
			extras={key: value for key, value in data.items() if key not in PROFILE_FIELDS},
		)

	def to_record(self) -> Dict[str, Any]:
		record = dict(self.extras)
		record.update(
			name=self.name,
			faculty_id=self.faculty_id,
			email=self.email,
			course=self.course,
			last_login=self.last_login,
		)
		return record

	def to_dict(self) -> Dict[str, Any]:
		body = {key: _plain(value) for key, value in self.to_record().items()}
		body["owner_id"] = self.owner_id
		return body

	def with_course(self, course: str) -> "Profile":
		return replace(self, course=course)


def default_profile(identity_id: str, settings: Settings, *, now: Optional[datetime] = None) -> Profile:
	"""Profile seeded for an identity seen for the first time."""
	return Profile(
		owner_id=identity_id,
		name=settings.default_profile_name,
		faculty_id=identity_id[:SHORT_ID_LENGTH],
		email=settings.default_profile_email,
		course=settings.default_course,
		last_login=now or datetime.now(timezone.utc),
	)
