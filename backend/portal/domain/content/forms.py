"""Local form state for the two posting forms."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Optional, Tuple

from .models import DEFAULT_DAY


class _Form:
	REQUIRED: Tuple[str, ...] = ()

	def update(self, **values: Any) -> None:
		"""Apply key/value edits; unknown keys raise ValueError."""
		known = {item.name for item in fields(self)}  # type: ignore[arg-type]
		unknown = sorted(set(values) - known)
		if unknown:
			raise ValueError(f"unknown_field:{unknown[0]}")
		for key, value in values.items():
			setattr(self, key, "" if value is None else str(value))

	def missing_field(self) -> Optional[str]:
		for name in self.REQUIRED:
			if not getattr(self, name):
				return name
		return None

	def to_dict(self) -> Dict[str, str]:
		return asdict(self)  # type: ignore[call-overload]


@dataclass
class AssignmentForm(_Form):
	title: str = ""
	description: str = ""
	due_date: str = ""
	course: str = ""

	REQUIRED = ("title", "description", "due_date")

	def reset(self, course: str) -> None:
		self.title = ""
		self.description = ""
		self.due_date = ""
		self.course = course


@dataclass
class ScheduleForm(_Form):
	course: str = ""
	location: str = ""
	time: str = ""
	day: str = DEFAULT_DAY
	instructor: str = ""

	REQUIRED = ("location", "time", "day")

	def reset(self, course: str, instructor: str) -> None:
		self.course = course
		self.location = ""
		self.time = ""
		self.day = DEFAULT_DAY
		self.instructor = instructor
