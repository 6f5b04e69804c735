"""Functional core - pure business logic with no I/O."""

from .tasks import Task, TaskState, ClockEntry, filter_open, sort_by_priority
from .repeater import Repeater, RepeaterKind, RepeaterUnit, parse_repeater, next_occurrence
from .timestamp import ParsedTimestamp, TimestampKind, parse_timestamp, format_timestamp
from .agenda import DayAgenda, TaskWithOffset, build_day_agenda, build_range_agenda
from .markdown import extract_tasks

__all__ = [
    # Tasks
    "Task",
    "TaskState",
    "ClockEntry",
    "filter_open",
    "sort_by_priority",
    # Recurrence
    "Repeater",
    "RepeaterKind",
    "RepeaterUnit",
    "parse_repeater",
    "next_occurrence",
    # Timestamps
    "ParsedTimestamp",
    "TimestampKind",
    "parse_timestamp",
    "format_timestamp",
    # Agenda
    "DayAgenda",
    "TaskWithOffset",
    "build_day_agenda",
    "build_range_agenda",
    # Extraction
    "extract_tasks",
]
