"""Posting commands for assignments and schedule entries.

Commands validate the local form, attach profile-derived fields, append one
document to the shared collection and reset the form. They do not touch the
local lists: the realtime subscription reflects the new document back.
Failures are reported through CommandResult and logged, never raised.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Dict, Optional

from portal.errors import StoreError
from portal.infra.documents import DocumentStore
from portal.obs import metrics as obs_metrics
from portal.domain.profile import Profile

from .forms import AssignmentForm, ScheduleForm
from .models import WEEKDAYS

logger = logging.getLogger(__name__)

STATUS_OK = "ok"
STATUS_MISSING_FIELD = "missing_field"
STATUS_INVALID_FIELD = "invalid_field"
STATUS_UNAVAILABLE = "unavailable"
STATUS_WRITE_FAILED = "write_failed"


@dataclass(slots=True, frozen=True)
class CommandResult:
	status: str
	record_id: Optional[str] = None
	field: Optional[str] = None
	error: Optional[str] = None

	@property
	def ok(self) -> bool:
		return self.status == STATUS_OK

	@classmethod
	def success(cls, record_id: str) -> "CommandResult":
		return cls(STATUS_OK, record_id=record_id)

	@classmethod
	def missing(cls, field: str) -> "CommandResult":
		return cls(STATUS_MISSING_FIELD, field=field)

	@classmethod
	def invalid(cls, field: str, error: str) -> "CommandResult":
		return cls(STATUS_INVALID_FIELD, field=field, error=error)

	@classmethod
	def unavailable(cls, error: str) -> "CommandResult":
		return cls(STATUS_UNAVAILABLE, error=error)

	@classmethod
	def write_failed(cls, error: str) -> "CommandResult":
		return cls(STATUS_WRITE_FAILED, error=error)

	def to_dict(self) -> Dict[str, Any]:
		return {"status": self.status, "record_id": self.record_id, "field": self.field, "error": self.error}


def parse_due_date(value: str) -> datetime:
	"""Parse a ``YYYY-MM-DD`` form value into a UTC-midnight timestamp."""
	parsed = date.fromisoformat(value.strip())
	return datetime(parsed.year, parsed.month, parsed.day, tzinfo=timezone.utc)


def _precondition(store: Optional[DocumentStore], profile: Optional[Profile]) -> Optional[CommandResult]:
	if store is None:
		return CommandResult.unavailable("store_unavailable")
	if profile is None or not profile.course:
		return CommandResult.unavailable("course_unset")
	return None


def _record(command: str, result: CommandResult) -> CommandResult:
	obs_metrics.inc_command(command, result.status)
	return result


async def post_assignment(
	store: Optional[DocumentStore],
	form: AssignmentForm,
	profile: Optional[Profile],
	*,
	collection: str,
	now: Optional[datetime] = None,
) -> CommandResult:
	command = "post_assignment"
	blocked = _precondition(store, profile)
	if blocked is not None:
		return _record(command, blocked)
	missing = form.missing_field()
	if missing is not None:
		return _record(command, CommandResult.missing(missing))
	try:
		due_date = parse_due_date(form.due_date)
	except ValueError:
		return _record(command, CommandResult.invalid("due_date", "invalid_date"))
	assert store is not None and profile is not None
	record = {
		"title": form.title,
		"description": form.description,
		"course": profile.course,
		"due_date": due_date,
		"posted_by": profile.name,
		"posted_at": now or datetime.now(timezone.utc),
	}
	try:
		record_id = await store.add_record(collection, record)
	except StoreError as exc:
		logger.warning("commands.post_assignment_failed", extra={"reason": exc.reason, "course": profile.course}, exc_info=True)
		return _record(command, CommandResult.write_failed(exc.reason))
	form.reset(course=profile.course)
	logger.info("commands.assignment_posted", extra={"record_id": record_id, "course": profile.course})
	return _record(command, CommandResult.success(record_id))


async def post_schedule_entry(
	store: Optional[DocumentStore],
	form: ScheduleForm,
	profile: Optional[Profile],
	*,
	collection: str,
	now: Optional[datetime] = None,
) -> CommandResult:
	"""Instructor and course come from the profile, not from the form's copies."""
	command = "post_schedule_entry"
	blocked = _precondition(store, profile)
	if blocked is not None:
		return _record(command, blocked)
	missing = form.missing_field()
	if missing is not None:
		return _record(command, CommandResult.missing(missing))
	if form.day not in WEEKDAYS:
		return _record(command, CommandResult.invalid("day", "unknown_day"))
	assert store is not None and profile is not None
	record = {
		"course": profile.course,
		"location": form.location,
		"time": form.time,
		"day": form.day,
		"instructor": profile.name,
		"posted_at": now or datetime.now(timezone.utc),
	}
	try:
		record_id = await store.add_record(collection, record)
	except StoreError as exc:
		logger.warning("commands.post_schedule_failed", extra={"reason": exc.reason, "course": profile.course}, exc_info=True)
		return _record(command, CommandResult.write_failed(exc.reason))
	form.reset(course=profile.course, instructor=profile.name)
	logger.info("commands.schedule_posted", extra={"record_id": record_id, "course": profile.course})
	return _record(command, CommandResult.success(record_id))
