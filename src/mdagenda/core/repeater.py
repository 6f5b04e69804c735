"""Pure recurrence logic - no I/O dependencies."""

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Iterator

from mdagenda.ports.workday_calendar import WorkdayCalendar, WorkdayLookupError

# Upper bound on next_workday calls per lookup (roughly 40 years of workdays)
MAX_WORKDAY_STEPS = 10_000


class RepeaterKind(Enum):
    """How the next occurrence is derived."""

    CUMULATIVE = "+"
    CATCH_UP = "++"
    RESTART = ".+"


class RepeaterUnit(Enum):
    """Recurrence unit. Values are the suffixes used in directives."""

    DAY = "d"
    WEEK = "w"
    MONTH = "m"
    YEAR = "y"
    HOUR = "h"
    WORKDAY = "wd"


class DatePreference(Enum):
    """Which side of a reference date an occurrence lookup prefers."""

    PAST = "past"
    FUTURE = "future"


@dataclass(frozen=True)
class Repeater:
    """A recurrence rule such as ``+1w`` or ``.+2wd``."""

    kind: RepeaterKind
    interval: int
    unit: RepeaterUnit

    def __str__(self) -> str:
        return f"{self.kind.value}{self.interval}{self.unit.value}"

    @property
    def day_step(self) -> int | None:
        """Fixed step in days, or None for calendar/workday units."""
        match self.unit:
            case RepeaterUnit.DAY:
                return self.interval
            case RepeaterUnit.WEEK:
                return self.interval * 7
            case RepeaterUnit.HOUR:
                # Agendas are day-granular: an hourly repeater fires every day
                return 1
            case _:
                return None

    @property
    def month_step(self) -> int | None:
        """Step in calendar months, or None for day-based units."""
        match self.unit:
            case RepeaterUnit.MONTH:
                return self.interval
            case RepeaterUnit.YEAR:
                return self.interval * 12
            case _:
                return None


def parse_repeater(token: str) -> Repeater | None:
    """
    Parse a repeater token like ``+1d``, ``++2w``, ``.+1m`` or ``+1wd``.

    Returns None for malformed tokens (unknown prefix or unit, empty or
    non-numeric interval, zero interval).
    """
    token = token.strip()

    if token.startswith(".+"):
        kind, rest = RepeaterKind.RESTART, token[2:]
    elif token.startswith("++"):
        kind, rest = RepeaterKind.CATCH_UP, token[2:]
    elif token.startswith("+"):
        kind, rest = RepeaterKind.CUMULATIVE, token[1:]
    else:
        return None

    # "wd" must win over the single-letter "d"
    if rest.endswith("wd"):
        unit = RepeaterUnit.WORKDAY
        value = rest[:-2]
    else:
        try:
            unit = RepeaterUnit(rest[-1:])
        except ValueError:
            return None
        value = rest[:-1]

    if not value.isdigit():
        return None
    interval = int(value)
    if interval < 1:
        return None

    return Repeater(kind=kind, interval=interval, unit=unit)


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def add_months(d: date, months: int) -> date:
    """Add N calendar months, clamping the day to the target month's length."""
    month = d.month - 1 + months
    year = d.year + month // 12
    month = month % 12 + 1
    return d.replace(year=year, month=month, day=min(d.day, days_in_month(year, month)))


def _months_between(start: date, end: date) -> int:
    return (end.year - start.year) * 12 + (end.month - start.month)


def _iter_workdays(start: date, workdays: WorkdayCalendar) -> Iterator[date]:
    """Successive workdays after ``start``, capped at MAX_WORKDAY_STEPS."""
    current = start
    for _ in range(MAX_WORKDAY_STEPS):
        current = workdays.next_workday(current)
        yield current


def _one_interval_after(d: date, repeater: Repeater) -> date:
    months = repeater.month_step
    if months is not None:
        return add_months(d, months)
    return d + timedelta(days=repeater.day_step)


def next_occurrence(
    base_date: date,
    repeater: Repeater,
    from_date: date,
    workdays: WorkdayCalendar | None = None,
) -> date | None:
    """
    Next occurrence of a repeating timestamp relative to ``from_date``.

    - Cumulative (+): steps from ``base_date`` in whole intervals until the
      result reaches or passes ``from_date``.
    - Catch-up (++): jumps forward from ``from_date``; weekly repeaters keep
      the weekday of ``base_date``.
    - Restart (.+): one interval after ``from_date``.

    Workday repeaters need a calendar; None is returned when there is none
    or when it cannot resolve the next workday. A cumulative workday
    occurrence always lies strictly after ``from_date`` once the schedule
    has started.

    Pure function - no I/O.
    """
    if repeater.unit == RepeaterUnit.WORKDAY:
        return _next_workday_occurrence(base_date, repeater, from_date, workdays)

    match repeater.kind:
        case RepeaterKind.CUMULATIVE:
            return closest_occurrence(base_date, repeater, from_date, DatePreference.FUTURE)
        case RepeaterKind.CATCH_UP if repeater.unit == RepeaterUnit.WEEK:
            current = from_date
            while current.weekday() != base_date.weekday() or current <= base_date:
                current += timedelta(days=1)
            return current
        case _:
            return _one_interval_after(from_date, repeater)


def _next_workday_occurrence(
    base_date: date,
    repeater: Repeater,
    from_date: date,
    workdays: WorkdayCalendar | None,
) -> date | None:
    if workdays is None:
        return None

    try:
        if repeater.kind == RepeaterKind.CUMULATIVE:
            if base_date > from_date:
                return base_date
            # Always moves past from_date, so the anchor day itself is never returned
            for n, day in enumerate(_iter_workdays(base_date, workdays), start=1):
                if n % repeater.interval == 0 and day > from_date:
                    return day
            return None

        # Catch-up and restart both count workdays from the reference date
        for n, day in enumerate(_iter_workdays(from_date, workdays), start=1):
            if n == repeater.interval:
                return day
    except WorkdayLookupError:
        return None
    return None


def is_occurrence_day(
    base_date: date,
    repeater: Repeater,
    check_date: date,
    workdays: WorkdayCalendar | None = None,
) -> bool:
    """
    Whether ``check_date`` falls on the cumulative schedule anchored at ``base_date``.

    Month and year repeaters match on the day of month; when the anchor day
    does not exist in a month, that month's (clamped) last day matches.
    """
    if check_date < base_date:
        return False

    match repeater.unit:
        case RepeaterUnit.DAY | RepeaterUnit.WEEK | RepeaterUnit.HOUR:
            return (check_date - base_date).days % repeater.day_step == 0
        case RepeaterUnit.MONTH | RepeaterUnit.YEAR:
            if repeater.unit == RepeaterUnit.YEAR and check_date.month != base_date.month:
                return False
            expected_day = min(base_date.day, days_in_month(check_date.year, check_date.month))
            if check_date.day != expected_day:
                return False
            return _months_between(base_date, check_date) % repeater.month_step == 0
        case RepeaterUnit.WORKDAY:
            return _is_workday_occurrence(base_date, repeater, check_date, workdays)
    return False


def _is_workday_occurrence(
    base_date: date,
    repeater: Repeater,
    check_date: date,
    workdays: WorkdayCalendar | None,
) -> bool:
    if workdays is None:
        return False

    try:
        if not workdays.is_workday(check_date):
            return False
        if check_date == base_date:
            return True
        for n, day in enumerate(_iter_workdays(base_date, workdays), start=1):
            if day >= check_date:
                return day == check_date and n % repeater.interval == 0
    except WorkdayLookupError:
        return False
    return False


def closest_occurrence(
    base_date: date,
    repeater: Repeater,
    target: date,
    prefer: DatePreference,
    workdays: WorkdayCalendar | None = None,
) -> date | None:
    """
    Occurrence of the cumulative schedule nearest to ``target``.

    PAST returns the latest occurrence on or before ``target``; FUTURE the
    earliest on or after it. Until the schedule starts, both return
    ``base_date``. Returns None when a workday schedule cannot be resolved,
    including when no calendar is given.

    Pure function - no I/O.
    """
    if repeater.unit == RepeaterUnit.WORKDAY:
        return _closest_workday_occurrence(base_date, repeater, target, prefer, workdays)

    if target <= base_date:
        return base_date

    months = repeater.month_step
    if months is not None:
        # Always step from the anchor so clamped months don't drift the day
        n = _months_between(base_date, target) // months
        candidate = add_months(base_date, n * months)
        if candidate > target:
            n -= 1
            candidate = add_months(base_date, n * months)
        if prefer == DatePreference.PAST or candidate == target:
            return candidate
        return add_months(base_date, (n + 1) * months)

    step = repeater.day_step
    candidate = base_date + timedelta(days=(target - base_date).days // step * step)
    if prefer == DatePreference.PAST or candidate == target:
        return candidate
    return candidate + timedelta(days=step)


def _closest_workday_occurrence(
    base_date: date,
    repeater: Repeater,
    target: date,
    prefer: DatePreference,
    workdays: WorkdayCalendar | None,
) -> date | None:
    if workdays is None:
        return None
    if target <= base_date:
        return base_date

    previous = base_date
    try:
        for n, day in enumerate(_iter_workdays(base_date, workdays), start=1):
            if n % repeater.interval:
                continue
            if day == target:
                return day
            if day > target:
                return previous if prefer == DatePreference.PAST else day
            previous = day
    except WorkdayLookupError:
        return None
    return None
