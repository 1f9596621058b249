"""Content domain exports."""

from .commands import CommandResult, parse_due_date, post_assignment, post_schedule_entry
from .feeds import SnapshotFeed
from .forms import AssignmentForm, ScheduleForm
from .models import DEFAULT_DAY, TIME_PLACEHOLDER, WEEKDAYS, Assignment, ScheduleEntry
from .subscriptions import ASSIGNMENTS, SCHEDULE, ContentSubscriptions

__all__ = [
	"ASSIGNMENTS",
	"Assignment",
	"AssignmentForm",
	"CommandResult",
	"ContentSubscriptions",
	"DEFAULT_DAY",
	"SCHEDULE",
	"ScheduleEntry",
	"ScheduleForm",
	"SnapshotFeed",
	"TIME_PLACEHOLDER",
	"WEEKDAYS",
	"parse_due_date",
	"post_assignment",
	"post_schedule_entry",
]
