"""Domain models for course content shared with students."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Optional

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday")
DEFAULT_DAY = WEEKDAYS[0]
TIME_PLACEHOLDER = "N/A"


@dataclass(slots=True, frozen=True)
class Assignment:
	id: str
	title: str
	description: str
	course: str
	due_date: Optional[date]
	posted_by: str
	posted_at: Optional[datetime]

	def to_dict(self) -> Dict[str, Any]:
		return {
			"id": self.id,
			"title": self.title,
			"description": self.description,
			"course": self.course,
			"due_date": self.due_date.isoformat() if self.due_date else None,
			"posted_by": self.posted_by,
			"posted_at": self.posted_at.isoformat() if self.posted_at else None,
		}


@dataclass(slots=True, frozen=True)
class ScheduleEntry:
	id: str
	course: str
	location: str
	time: str
	day: str
	instructor: str
	posted_at: Optional[datetime]

	def to_dict(self) -> Dict[str, Any]:
		return {
			"id": self.id,
			"course": self.course,
			"location": self.location,
			"time": self.time,
			"day": self.day,
			"instructor": self.instructor,
			"posted_at": self.posted_at.isoformat() if self.posted_at else None,
		}
