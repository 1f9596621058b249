from datetime import datetime, timezone

import pytest

from portal.domain.content import AssignmentForm, ScheduleForm, post_assignment, post_schedule_entry
from portal.domain.content.commands import (
    STATUS_INVALID_FIELD,
    STATUS_MISSING_FIELD,
    STATUS_UNAVAILABLE,
    STATUS_WRITE_FAILED,
)
from portal.domain.profile import Profile
from portal.errors import StoreWriteError

POSTED_AT = datetime(2024, 4, 2, 8, 15, tzinfo=timezone.utc)


@pytest.fixture
def profile():
    return Profile(owner_id="u-1", name="Dr. Smith", faculty_id="u-1", email="smith@rbc.edu", course="CS101")


def _filled_assignment_form(**overrides) -> AssignmentForm:
    form = AssignmentForm(title="Lab 1", description="Sorting algorithms", due_date="2024-04-15", course="CS101")
    form.update(**overrides)
    return form


@pytest.mark.asyncio
@pytest.mark.parametrize("blank", ["title", "description", "due_date"])
async def test_post_assignment_rejects_missing_field(store, settings, profile, blank):
    form = _filled_assignment_form(**{blank: ""})
    before = form.to_dict()

    result = await post_assignment(store, form, profile, collection=settings.assignments_path())

    assert result.status == STATUS_MISSING_FIELD
    assert result.field == blank
    assert form.to_dict() == before
    assert await store.list_documents(settings.assignments_path()) == []


@pytest.mark.asyncio
async def test_post_assignment_appends_record_and_resets_form(store, settings, profile):
    form = _filled_assignment_form(course="ENG300")

    result = await post_assignment(store, form, profile, collection=settings.assignments_path(), now=POSTED_AT)

    assert result.ok
    documents = await store.list_documents(settings.assignments_path())
    assert [doc.id for doc in documents] == [result.record_id]
    assert documents[0].data == {
        "title": "Lab 1",
        "description": "Sorting algorithms",
        "course": "CS101",
        "due_date": datetime(2024, 4, 15, tzinfo=timezone.utc),
        "posted_by": "Dr. Smith",
        "posted_at": POSTED_AT,
    }
    assert form.to_dict() == {"title": "", "description": "", "due_date": "", "course": "CS101"}


@pytest.mark.asyncio
async def test_post_assignment_rejects_bad_due_date(store, settings, profile):
    form = _filled_assignment_form(due_date="next friday")

    result = await post_assignment(store, form, profile, collection=settings.assignments_path())

    assert result.status == STATUS_INVALID_FIELD
    assert result.field == "due_date"
    assert form.due_date == "next friday"


@pytest.mark.asyncio
async def test_post_schedule_entry_uses_profile_course_and_name(store, settings, profile):
    form = ScheduleForm(course="BIO205", location="SW-305", time="9:00-10:30", day="Monday", instructor="Someone Else")

    result = await post_schedule_entry(store, form, profile, collection=settings.schedule_path(), now=POSTED_AT)

    assert result.ok
    documents = await store.list_documents(settings.schedule_path())
    assert len(documents) == 1
    assert documents[0].data == {
        "course": "CS101",
        "location": "SW-305",
        "time": "9:00-10:30",
        "day": "Monday",
        "instructor": "Dr. Smith",
        "posted_at": POSTED_AT,
    }
    assert form.to_dict() == {
        "course": "CS101",
        "location": "",
        "time": "",
        "day": "Monday",
        "instructor": "Dr. Smith",
    }


@pytest.mark.asyncio
@pytest.mark.parametrize("blank", ["location", "time", "day"])
async def test_post_schedule_entry_rejects_missing_field(store, settings, profile, blank):
    form = ScheduleForm(location="SW-305", time="9:00", day="Tuesday")
    form.update(**{blank: ""})

    result = await post_schedule_entry(store, form, profile, collection=settings.schedule_path())

    assert result.status == STATUS_MISSING_FIELD
    assert result.field == blank
    assert await store.list_documents(settings.schedule_path()) == []


@pytest.mark.asyncio
async def test_post_schedule_entry_rejects_weekend(store, settings, profile):
    form = ScheduleForm(location="SW-305", time="9:00", day="Saturday")

    result = await post_schedule_entry(store, form, profile, collection=settings.schedule_path())

    assert result.status == STATUS_INVALID_FIELD
    assert result.field == "day"


@pytest.mark.asyncio
async def test_commands_unavailable_without_store_or_course(store, settings, profile):
    form = _filled_assignment_form()

    no_store = await post_assignment(None, form, profile, collection=settings.assignments_path())
    no_course = await post_assignment(store, form, profile.with_course(""), collection=settings.assignments_path())
    no_profile = await post_schedule_entry(store, ScheduleForm(), None, collection=settings.schedule_path())

    assert (no_store.status, no_store.error) == (STATUS_UNAVAILABLE, "store_unavailable")
    assert (no_course.status, no_course.error) == (STATUS_UNAVAILABLE, "course_unset")
    assert no_profile.status == STATUS_UNAVAILABLE
    assert form.title == "Lab 1"


@pytest.mark.asyncio
async def test_write_failure_keeps_form(store, settings, profile, monkeypatch):
    async def failing_add_record(collection, value):
        raise StoreWriteError("document_write_failed", path=collection)

    monkeypatch.setattr(store, "add_record", failing_add_record)
    form = _filled_assignment_form()

    result = await post_assignment(store, form, profile, collection=settings.assignments_path())

    assert result.status == STATUS_WRITE_FAILED
    assert result.error == "document_write_failed"
    assert form.title == "Lab 1"


def test_form_update_rejects_unknown_field():
    with pytest.raises(ValueError):
        AssignmentForm().update(grade="A")
