"""Map stored documents onto local content lists."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Iterable, List, Optional

from portal.infra.documents import Document

from .models import TIME_PLACEHOLDER, Assignment, ScheduleEntry


def _text(value: Any) -> str:
	return "" if value is None else str(value)


def _timestamp(value: Any) -> Optional[datetime]:
	return value if isinstance(value, datetime) else None


def _due_date(value: Any) -> Optional[date]:
	if isinstance(value, datetime):
		return value.date()
	if isinstance(value, date):
		return value
	return None


def project_assignment(document: Document) -> Assignment:
	data = document.data
	return Assignment(
		id=document.id,
		title=_text(data.get("title")),
		description=_text(data.get("description")),
		course=_text(data.get("course")),
		due_date=_due_date(data.get("due_date")),
		posted_by=_text(data.get("posted_by")),
		posted_at=_timestamp(data.get("posted_at")),
	)


def posted_at_sort_key(assignment: Assignment) -> float:
	# Missing timestamps sort as the epoch, i.e. oldest.
	return assignment.posted_at.timestamp() if assignment.posted_at else 0.0


def project_assignments(documents: Iterable[Document]) -> List[Assignment]:
	"""Newest first by ``posted_at``."""
	assignments = [project_assignment(document) for document in documents]
	return sorted(assignments, key=posted_at_sort_key, reverse=True)


def project_schedule_entry(document: Document) -> ScheduleEntry:
	data = document.data
	return ScheduleEntry(
		id=document.id,
		course=_text(data.get("course")),
		location=_text(data.get("location")),
		time=_text(data.get("time")) if data.get("time") else TIME_PLACEHOLDER,
		day=_text(data.get("day")),
		instructor=_text(data.get("instructor")),
		posted_at=_timestamp(data.get("posted_at")),
	)


def project_schedule(documents: Iterable[Document]) -> List[ScheduleEntry]:
	"""Store delivery order is kept as-is."""
	return [project_schedule_entry(document) for document in documents]
