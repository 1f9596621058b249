from datetime import date, datetime, timezone

import pytest

from portal.domain.content.models import TIME_PLACEHOLDER
from portal.domain.content.projections import project_assignments, project_schedule
from portal.infra.documents import Document


def _at(day: int) -> datetime:
    return datetime(2024, 2, day, 9, 0, tzinfo=timezone.utc)


def test_assignments_sorted_newest_first_with_missing_last():
    documents = [
        Document("a", {"title": "old", "course": "CS101", "posted_at": _at(1)}),
        Document("b", {"title": "undated", "course": "CS101"}),
        Document("c", {"title": "new", "course": "CS101", "posted_at": _at(10)}),
        Document("d", {"title": "mid", "course": "CS101", "posted_at": _at(5)}),
    ]

    assert [item.title for item in project_assignments(documents)] == ["new", "mid", "old", "undated"]


def test_assignments_with_equal_timestamps_keep_delivery_order():
    documents = [
        Document("a", {"title": "first", "posted_at": _at(3)}),
        Document("b", {"title": "second", "posted_at": _at(3)}),
    ]

    assert [item.id for item in project_assignments(documents)] == ["a", "b"]


def test_assignment_due_date_becomes_calendar_date():
    documents = [
        Document("a", {"title": "t", "due_date": datetime(2024, 3, 8, tzinfo=timezone.utc)}),
        Document("b", {"title": "u"}),
    ]

    projected = {item.id: item for item in project_assignments(documents)}

    assert projected["a"].due_date == date(2024, 3, 8)
    assert projected["b"].due_date is None
    assert projected["b"].to_dict()["posted_at"] is None


@pytest.mark.parametrize("raw", [{}, {"time": None}, {"time": ""}])
def test_schedule_time_defaults_to_placeholder(raw):
    document = Document("s", {"course": "CS101", "day": "Monday", **raw})

    assert project_schedule([document])[0].time == TIME_PLACEHOLDER


def test_schedule_keeps_store_order():
    documents = [
        Document("2", {"course": "CS101", "day": "Friday", "time": "14:00"}),
        Document("1", {"course": "CS101", "day": "Monday", "time": "9:00-10:30"}),
    ]

    entries = project_schedule(documents)

    assert [entry.id for entry in entries] == ["2", "1"]
    assert entries[1].time == "9:00-10:30"
