"""Pydantic schemas for the dashboard API."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from portal.domain.content import Assignment, AssignmentForm, CommandResult, ScheduleEntry, ScheduleForm
from portal.domain.identity import Session
from portal.domain.profile import Profile


class HealthResponse(BaseModel):
	status: str
	ready: bool
	loading: bool


class SessionOut(BaseModel):
	identity_id: str
	ready: bool
	anonymous: bool
	authoritative: bool

	@classmethod
	def from_model(cls, session: Session) -> "SessionOut":
		return cls(**session.to_dict())


class ProfileOut(BaseModel):
	owner_id: str
	name: str
	faculty_id: str
	email: str
	course: str
	last_login: Optional[datetime] = None
	extras: Dict[str, Any] = Field(default_factory=dict)

	@classmethod
	def from_model(cls, profile: Profile) -> "ProfileOut":
		return cls(
			owner_id=profile.owner_id,
			name=profile.name,
			faculty_id=profile.faculty_id,
			email=profile.email,
			course=profile.course,
			last_login=profile.last_login,
			extras={key: value for key, value in profile.to_dict().items() if key in profile.extras},
		)


class AssignmentOut(BaseModel):
	id: str
	title: str
	description: str
	course: str
	due_date: Optional[date] = None
	posted_by: str
	posted_at: Optional[datetime] = None

	@classmethod
	def from_model(cls, assignment: Assignment) -> "AssignmentOut":
		return cls(
			id=assignment.id,
			title=assignment.title,
			description=assignment.description,
			course=assignment.course,
			due_date=assignment.due_date,
			posted_by=assignment.posted_by,
			posted_at=assignment.posted_at,
		)


class ScheduleEntryOut(BaseModel):
	id: str
	course: str
	location: str
	time: str
	day: str
	instructor: str
	posted_at: Optional[datetime] = None

	@classmethod
	def from_model(cls, entry: ScheduleEntry) -> "ScheduleEntryOut":
		return cls(
			id=entry.id,
			course=entry.course,
			location=entry.location,
			time=entry.time,
			day=entry.day,
			instructor=entry.instructor,
			posted_at=entry.posted_at,
		)


class AssignmentListResponse(BaseModel):
	course: Optional[str] = None
	items: List[AssignmentOut]


class ScheduleListResponse(BaseModel):
	course: Optional[str] = None
	items: List[ScheduleEntryOut]


class CoursesResponse(BaseModel):
	items: List[str]
	current: Optional[str] = None


class AssignmentFormPatch(BaseModel):
	title: Optional[str] = Field(default=None, max_length=200)
	description: Optional[str] = Field(default=None, max_length=4000)
	due_date: Optional[str] = Field(default=None, examples=["2024-05-01"])
	course: Optional[str] = None


class AssignmentFormOut(BaseModel):
	title: str
	description: str
	due_date: str
	course: str

	@classmethod
	def from_model(cls, form: AssignmentForm) -> "AssignmentFormOut":
		return cls(**form.to_dict())


class ScheduleFormPatch(BaseModel):
	course: Optional[str] = None
	location: Optional[str] = Field(default=None, max_length=200)
	time: Optional[str] = Field(default=None, max_length=100)
	day: Optional[str] = None
	instructor: Optional[str] = None


class ScheduleFormOut(BaseModel):
	course: str
	location: str
	time: str
	day: str
	instructor: str

	@classmethod
	def from_model(cls, form: ScheduleForm) -> "ScheduleFormOut":
		return cls(**form.to_dict())


class CommandResultOut(BaseModel):
	status: str
	record_id: Optional[str] = None
	field: Optional[str] = None
	error: Optional[str] = None

	@classmethod
	def from_model(cls, result: CommandResult) -> "CommandResultOut":
		return cls(**result.to_dict())
