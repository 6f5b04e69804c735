"""Ports - interfaces/protocols for external dependencies."""

from .task_source import TaskSource
from .workday_calendar import WorkdayCalendar, WorkdayLookupError

__all__ = [
    "TaskSource",
    "WorkdayCalendar",
    "WorkdayLookupError",
]
