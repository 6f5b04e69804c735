"""Pure agenda classification logic - no I/O dependencies."""

from dataclasses import dataclass, field, replace
from datetime import date, timedelta
from enum import Enum

from .repeater import DatePreference, RepeaterUnit, closest_occurrence, days_in_month
from .tasks import Task
from .timestamp import (
    DEFAULT_WARNING_DAYS,
    ParsedTimestamp,
    TimestampKind,
    format_clock,
    format_date,
    format_timestamp,
    parse_timestamp,
)
from mdagenda.ports.workday_calendar import WorkdayCalendar


class Bucket(Enum):
    """Where a task lands on a single agenda day."""

    OVERDUE = "overdue"
    SCHEDULED_TIMED = "scheduled_timed"
    SCHEDULED_NO_TIME = "scheduled_no_time"
    UPCOMING = "upcoming"


@dataclass
class TaskWithOffset:
    """A task with its day offset: negative = overdue, positive = days until due."""

    task: Task
    days_offset: int | None = None


@dataclass
class DayAgenda:
    """Tasks for one civil date, split into display buckets."""

    date: date
    overdue: list[TaskWithOffset] = field(default_factory=list)
    scheduled_timed: list[TaskWithOffset] = field(default_factory=list)
    scheduled_no_time: list[TaskWithOffset] = field(default_factory=list)
    upcoming: list[TaskWithOffset] = field(default_factory=list)

    def add(self, bucket: Bucket, entry: TaskWithOffset) -> None:
        getattr(self, bucket.value).append(entry)

    def is_empty(self) -> bool:
        return not (self.overdue or self.scheduled_timed or self.scheduled_no_time or self.upcoming)

    def sort(self) -> None:
        """Oldest overdue first, timed by clock time, nearest upcoming first."""
        self.overdue.sort(key=lambda e: e.days_offset or 0)
        self.scheduled_timed.sort(key=lambda e: e.task.timestamp_time or "99:99")
        self.upcoming.sort(key=lambda e: e.days_offset or 0)


def _with_stamp(
    task: Task,
    parsed: ParsedTimestamp,
    keep_time: bool = True,
    occurrence: date | None = None,
) -> Task:
    """
    Copy of a task whose derived timestamp fields come from ``parsed``.

    With an ``occurrence`` the raw directive is rewritten to point at that
    date; otherwise it is kept as written.
    """
    shown = parsed.at(occurrence or parsed.date, keep_time=keep_time)
    return replace(
        task,
        timestamp=format_timestamp(shown) if occurrence else task.timestamp,
        timestamp_type=parsed.type_label,
        timestamp_date=format_date(shown.date),
        timestamp_time=format_clock(shown.time),
        timestamp_end_time=format_clock(shown.display_end_time),
    )


def _scheduled_bucket(parsed: ParsedTimestamp) -> Bucket:
    return Bucket.SCHEDULED_TIMED if parsed.time else Bucket.SCHEDULED_NO_TIME


def classify_task(
    task: Task,
    parsed: ParsedTimestamp,
    day: date,
    today: date,
    workdays: WorkdayCalendar | None = None,
    warning_days: int = DEFAULT_WARNING_DAYS,
) -> tuple[Bucket, TaskWithOffset] | None:
    """
    Decide where a task shows on ``day`` when the current date is ``today``.

    Returns None when the task is not visible that day. The branches are
    mutually exclusive, so a task appears at most once per day.

    Pure function - no I/O.
    """
    if parsed.deadline_warning_days is not None:
        warning_days = parsed.deadline_warning_days
    is_deadline = parsed.kind == TimestampKind.DEADLINE

    if parsed.repeater is None:
        task_date = parsed.date
        days_diff = (task_date - day).days

        if days_diff == 0:
            return _scheduled_bucket(parsed), TaskWithOffset(_with_stamp(task, parsed))
        # Overdue and upcoming only ever show on today's agenda
        if day != today or task.is_done:
            return None
        if days_diff < 0:
            return Bucket.OVERDUE, TaskWithOffset(_with_stamp(task, parsed, keep_time=False), days_diff)
        if is_deadline and days_diff <= warning_days:
            return Bucket.UPCOMING, TaskWithOffset(_with_stamp(task, parsed, keep_time=False), days_diff)
        return None

    repeater = parsed.repeater
    # Last occurrence up to today, and the next one from the viewed day
    deadline = closest_occurrence(parsed.date, repeater, today, DatePreference.PAST, workdays)
    if day <= today:
        repeat = deadline
    else:
        repeat = closest_occurrence(parsed.date, repeater, day, DatePreference.FUTURE, workdays)
    if deadline is None or repeat is None:
        return None

    if day in (deadline, repeat):
        return _scheduled_bucket(parsed), TaskWithOffset(_with_stamp(task, parsed, occurrence=day))
    if day != today or task.is_done:
        return None

    if deadline < today:
        # Skipped workday occurrences only count as overdue on workdays
        if repeater.unit == RepeaterUnit.WORKDAY and not workdays.is_workday(today):
            return None
        overdue = _with_stamp(task, parsed, keep_time=False, occurrence=deadline)
        return Bucket.OVERDUE, TaskWithOffset(overdue, (deadline - today).days)

    days_until = (repeat - today).days
    if repeat > today and is_deadline and days_until <= warning_days:
        upcoming = _with_stamp(task, parsed, keep_time=False, occurrence=repeat)
        return Bucket.UPCOMING, TaskWithOffset(upcoming, days_until)
    return None


def _parse_tasks(tasks: list[Task]) -> list[tuple[Task, ParsedTimestamp]]:
    parsed = []
    for task in tasks:
        if not task.timestamp:
            continue
        stamp = parse_timestamp(task.timestamp)
        if stamp is not None:
            parsed.append((task, stamp))
    return parsed


def _classify_day(
    parsed_tasks: list[tuple[Task, ParsedTimestamp]],
    day: date,
    today: date,
    workdays: WorkdayCalendar | None,
    warning_days: int,
) -> DayAgenda:
    agenda = DayAgenda(date=day)
    for task, parsed in parsed_tasks:
        placement = classify_task(task, parsed, day, today, workdays, warning_days)
        if placement is not None:
            agenda.add(*placement)
    agenda.sort()
    return agenda


def build_day_agenda(
    tasks: list[Task],
    day: date,
    today: date,
    workdays: WorkdayCalendar | None = None,
    warning_days: int = DEFAULT_WARNING_DAYS,
) -> DayAgenda:
    """
    Build the agenda for a single day.

    Tasks without a parseable timestamp are skipped. Pure function - no I/O.
    """
    return _classify_day(_parse_tasks(tasks), day, today, workdays, warning_days)


def build_range_agenda(
    tasks: list[Task],
    start: date,
    end: date,
    today: date,
    workdays: WorkdayCalendar | None = None,
    warning_days: int = DEFAULT_WARNING_DAYS,
) -> list[DayAgenda]:
    """Build one DayAgenda per date from ``start`` to ``end`` inclusive."""
    parsed_tasks = _parse_tasks(tasks)
    return [
        _classify_day(parsed_tasks, day, today, workdays, warning_days)
        for day in iter_days(start, end)
    ]


def iter_days(start: date, end: date) -> list[date]:
    return [start + timedelta(days=i) for i in range((end - start).days + 1)]


def week_bounds(d: date) -> tuple[date, date]:
    """Monday to Sunday of the week containing ``d``."""
    monday = d - timedelta(days=d.weekday())
    return monday, monday + timedelta(days=6)


def month_bounds(d: date) -> tuple[date, date]:
    """First to last day of the month containing ``d``."""
    return d.replace(day=1), d.replace(day=days_in_month(d.year, d.month))
