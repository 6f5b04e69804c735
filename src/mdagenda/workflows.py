"""
Shared workflow layer.

Resolves agenda modes into date ranges and wires configuration to the
adapters and the functional core. Used by the CLI.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .adapters.holiday_table import HolidayDataError, HolidayTable
from .adapters.markdown_directory import MarkdownDirectorySource
from .config import Config
from .core.agenda import DayAgenda, build_range_agenda, month_bounds, week_bounds
from .core.render import (
    render_days_html,
    render_days_json,
    render_days_markdown,
    render_tasks_html,
    render_tasks_json,
    render_tasks_markdown,
)
from .core.tasks import Task, filter_open, sort_by_priority
from .core.timestamp import DEFAULT_WARNING_DAYS, weekday_mappings
from .errors import (
    AgendaError,
    DateRangeError,
    InvalidDateError,
    InvalidModeError,
    InvalidTimezoneError,
)
from .ports.task_source import TaskSource
from .ports.workday_calendar import WorkdayCalendar

logger = logging.getLogger(__name__)

MODES = ("day", "week", "month", "tasks")
FORMATS = ("json", "md", "html")


@dataclass
class AgendaResult:
    """Either a list of days (day/week/month) or a flat task list (tasks)."""

    mode: str
    days: list[DayAgenda] = field(default_factory=list)
    tasks: list[Task] = field(default_factory=list)

    @property
    def is_task_list(self) -> bool:
        return self.mode == "tasks"


def parse_date_arg(value: str, label: str) -> date:
    """Parse a YYYY-MM-DD argument, naming it in the error."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as e:
        raise InvalidDateError(f"{label} '{value}': {e}. Use YYYY-MM-DD format") from e


def resolve_today(tz_name: str, current_date: str | None = None) -> date:
    """Today's civil date in a timezone, unless overridden."""
    try:
        tz = ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise InvalidTimezoneError(f"Unknown timezone '{tz_name}'") from e

    if current_date:
        return parse_date_arg(current_date, "current-date")
    return datetime.now(tz).date()


def resolve_range(
    mode: str,
    today: date,
    day: str | None = None,
    from_date: str | None = None,
    to_date: str | None = None,
) -> tuple[date, date]:
    """Date span shown by a day, week or month agenda."""
    if mode == "day":
        target = parse_date_arg(day, "date") if day else today
        return target, target

    if from_date or to_date:
        if not (from_date and to_date):
            raise DateRangeError("Both --from and --to are required for an explicit range")
        start = parse_date_arg(from_date, "from")
        end = parse_date_arg(to_date, "to")
        if start > end:
            raise DateRangeError(f"Start date {from_date} is after end date {to_date}")
        return start, end

    target = parse_date_arg(day, "date") if day else today
    return week_bounds(target) if mode == "week" else month_bounds(target)


def build_agenda(
    tasks: list[Task],
    mode: str = "day",
    day: str | None = None,
    from_date: str | None = None,
    to_date: str | None = None,
    tz: str = "Europe/Moscow",
    current_date: str | None = None,
    workdays: WorkdayCalendar | None = None,
    warning_days: int = DEFAULT_WARNING_DAYS,
) -> AgendaResult:
    """
    Dispatch an agenda mode.

    ``day``/``week``/``month`` classify tasks for every date in the resolved
    range; ``tasks`` ignores dates and lists open tasks by priority.
    Raises AgendaError subclasses for bad user input.
    """
    if mode not in MODES:
        raise InvalidModeError(f"Invalid agenda mode '{mode}' (expected one of: {', '.join(MODES)})")

    today = resolve_today(tz, current_date)

    if mode == "tasks":
        return AgendaResult(mode=mode, tasks=sort_by_priority(filter_open(tasks)))

    start, end = resolve_range(mode, today, day, from_date, to_date)
    logger.debug(f"Building {mode} agenda {start}..{end} (today {today}) for {len(tasks)} tasks")
    days = build_range_agenda(tasks, start, end, today, workdays, warning_days)
    return AgendaResult(mode=mode, days=days)


def get_workday_calendar(config: Config) -> WorkdayCalendar:
    """
    Holiday calendar from configuration.

    A table that fails to load falls back to plain Saturday/Sunday weekends
    with no holidays; the failure is logged.
    """
    try:
        return HolidayTable.load(config.holidays_file or None)
    except HolidayDataError as e:
        logger.warning(f"{e}; assuming ordinary weekends and no holidays")
        return HolidayTable.weekends_only()


def get_task_source(config: Config) -> TaskSource:
    return MarkdownDirectorySource(
        config.dir,
        glob=config.glob,
        mappings=weekday_mappings(config.locale),
    )


def render_result(result: AgendaResult, fmt: str) -> str:
    """Render an agenda result as json, md or html."""
    match fmt, result.is_task_list:
        case "json", True:
            return render_tasks_json(result.tasks)
        case "json", False:
            return render_days_json(result.days)
        case "md", True:
            return render_tasks_markdown(result.tasks)
        case "md", False:
            return render_days_markdown(result.days)
        case "html", True:
            return render_tasks_html(result.tasks)
        case "html", False:
            return render_days_html(result.days)
    raise AgendaError(f"Unknown output format '{fmt}'")
