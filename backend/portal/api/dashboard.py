"""FastAPI endpoints exposing the faculty dashboard state and commands."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from portal.api import schemas
from portal.dashboard import FacultyDashboard
from portal.domain.content.commands import (
	STATUS_INVALID_FIELD,
	STATUS_MISSING_FIELD,
	STATUS_OK,
	CommandResult,
)

router = APIRouter()


def get_dashboard(request: Request) -> FacultyDashboard:
	dashboard = getattr(request.app.state, "dashboard", None)
	if dashboard is None:
		raise HTTPException(status.HTTP_503_SERVICE_UNAVAILABLE, detail="initializing")
	return dashboard


def require_ready(dashboard: FacultyDashboard = Depends(get_dashboard)) -> FacultyDashboard:
	if not dashboard.ready:
		raise HTTPException(status.HTTP_503_SERVICE_UNAVAILABLE, detail="initializing")
	return dashboard


def _command_status(result: CommandResult) -> int:
	if result.status == STATUS_OK:
		return status.HTTP_201_CREATED
	if result.status in (STATUS_MISSING_FIELD, STATUS_INVALID_FIELD):
		return status.HTTP_422_UNPROCESSABLE_ENTITY
	return status.HTTP_503_SERVICE_UNAVAILABLE


@router.get("/health", response_model=schemas.HealthResponse, tags=["ops"])
async def health(request: Request) -> schemas.HealthResponse:
	dashboard = getattr(request.app.state, "dashboard", None)
	if dashboard is None:
		return schemas.HealthResponse(status="starting", ready=False, loading=True)
	return schemas.HealthResponse(status="ok", ready=dashboard.ready, loading=dashboard.loading)


@router.get("/session", response_model=schemas.SessionOut)
async def get_session(dashboard: FacultyDashboard = Depends(require_ready)) -> schemas.SessionOut:
	session = dashboard.session
	assert session is not None
	return schemas.SessionOut.from_model(session)


@router.get("/profile", response_model=schemas.ProfileOut)
async def get_profile(dashboard: FacultyDashboard = Depends(require_ready)) -> schemas.ProfileOut:
	profile = dashboard.profile
	if profile is None:
		raise HTTPException(status.HTTP_404_NOT_FOUND, detail="profile_unavailable")
	return schemas.ProfileOut.from_model(profile)


@router.get("/courses", response_model=schemas.CoursesResponse)
async def list_courses(dashboard: FacultyDashboard = Depends(require_ready)) -> schemas.CoursesResponse:
	profile = dashboard.profile
	return schemas.CoursesResponse(items=dashboard.available_courses, current=profile.course if profile else None)


@router.get("/assignments", response_model=schemas.AssignmentListResponse)
async def list_assignments(dashboard: FacultyDashboard = Depends(require_ready)) -> schemas.AssignmentListResponse:
	profile = dashboard.profile
	return schemas.AssignmentListResponse(
		course=profile.course if profile else None,
		items=[schemas.AssignmentOut.from_model(item) for item in dashboard.assignments],
	)


@router.get("/schedule", response_model=schemas.ScheduleListResponse)
async def list_schedule(dashboard: FacultyDashboard = Depends(require_ready)) -> schemas.ScheduleListResponse:
	profile = dashboard.profile
	return schemas.ScheduleListResponse(
		course=profile.course if profile else None,
		items=[schemas.ScheduleEntryOut.from_model(item) for item in dashboard.schedule],
	)


@router.get("/forms/assignment", response_model=schemas.AssignmentFormOut)
async def get_assignment_form(dashboard: FacultyDashboard = Depends(require_ready)) -> schemas.AssignmentFormOut:
	return schemas.AssignmentFormOut.from_model(dashboard.assignment_form)


@router.patch("/forms/assignment", response_model=schemas.AssignmentFormOut)
async def patch_assignment_form(
	payload: schemas.AssignmentFormPatch,
	dashboard: FacultyDashboard = Depends(require_ready),
) -> schemas.AssignmentFormOut:
	try:
		form = dashboard.update_assignment_form(**payload.model_dump(exclude_unset=True))
	except ValueError as exc:
		raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
	return schemas.AssignmentFormOut.from_model(form)


@router.get("/forms/schedule", response_model=schemas.ScheduleFormOut)
async def get_schedule_form(dashboard: FacultyDashboard = Depends(require_ready)) -> schemas.ScheduleFormOut:
	return schemas.ScheduleFormOut.from_model(dashboard.schedule_form)


@router.patch("/forms/schedule", response_model=schemas.ScheduleFormOut)
async def patch_schedule_form(
	payload: schemas.ScheduleFormPatch,
	dashboard: FacultyDashboard = Depends(require_ready),
) -> schemas.ScheduleFormOut:
	try:
		form = dashboard.update_schedule_form(**payload.model_dump(exclude_unset=True))
	except ValueError as exc:
		raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
	return schemas.ScheduleFormOut.from_model(form)


@router.post("/assignments", response_model=schemas.CommandResultOut, status_code=status.HTTP_201_CREATED)
async def post_assignment(
	response: Response,
	dashboard: FacultyDashboard = Depends(require_ready),
) -> schemas.CommandResultOut:
	result = await dashboard.post_assignment()
	response.status_code = _command_status(result)
	return schemas.CommandResultOut.from_model(result)


@router.post("/schedule", response_model=schemas.CommandResultOut, status_code=status.HTTP_201_CREATED)
async def post_schedule_entry(
	response: Response,
	dashboard: FacultyDashboard = Depends(require_ready),
) -> schemas.CommandResultOut:
	result = await dashboard.post_schedule_entry()
	response.status_code = _command_status(result)
	return schemas.CommandResultOut.from_model(result)
