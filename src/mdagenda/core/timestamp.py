"""Pure org-style timestamp parsing - no I/O dependencies."""

import re
from dataclasses import dataclass, replace
from datetime import date, datetime
from datetime import time as clock_time
from enum import Enum

from .clock import CLOCK_RE
from .repeater import Repeater, parse_repeater

DEFAULT_WARNING_DAYS = 14

WEEKDAY_ABBR = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

WEEKDAY_TRANSLATIONS: dict[str, list[tuple[str, str]]] = {
    "ru": [
        ("Понедельник", "Monday"),
        ("Вторник", "Tuesday"),
        ("Среда", "Wednesday"),
        ("Четверг", "Thursday"),
        ("Пятница", "Friday"),
        ("Суббота", "Saturday"),
        ("Воскресенье", "Sunday"),
        ("Пн", "Mon"),
        ("Вт", "Tue"),
        ("Ср", "Wed"),
        ("Чт", "Thu"),
        ("Пт", "Fri"),
        ("Сб", "Sat"),
        ("Вс", "Sun"),
    ],
}

_WEEKDAY = (
    r"(?:\s+(?:Monday|Tuesday|Wednesday|Thursday|Friday|Saturday|Sunday"
    r"|Mon|Tue|Wed|Thu|Fri|Sat|Sun))?"
)
_PREFIX = r"(?:\b(?P<kind>SCHEDULED|DEADLINE|CLOSED):\s*)?"
_START = (
    r"<(?P<date>\d{4}-\d{2}-\d{2})" + _WEEKDAY
    + r"(?:\s+(?P<time>\d{1,2}:\d{2})(?:-(?P<end_time>\d{1,2}:\d{2}))?)?"
    + r"(?:\s*(?P<repeater>[.+]+\d+(?:wd|[dwmyh])))?"
    + r"(?:\s+-(?P<warning>\d+)d)?>"
)
_END = (
    r"<(?P<range_date>\d{4}-\d{2}-\d{2})" + _WEEKDAY
    + r"(?:\s+(?P<range_time>\d{1,2}:\d{2})(?:-\d{1,2}:\d{2})?)?>"
)

RANGE_RE = re.compile(_PREFIX + _START + "--" + _END)
SINGLE_RE = re.compile(_PREFIX + _START)

# Loose matchers used to pull a directive out of surrounding text
_DIRECTIVE_RE = re.compile(
    r"\b(?:SCHEDULED|DEADLINE|CLOSED):\s*<\d{4}-\d{2}-\d{2}[^>]*>(?:--<\d{4}-\d{2}-\d{2}[^>]*>)?"
)
_BARE_RE = re.compile(r"<\d{4}-\d{2}-\d{2}[^>]*>(?:--<\d{4}-\d{2}-\d{2}[^>]*>)?")
CREATED_RE = re.compile(r"CREATED:\s*[<\[]([^>\]]+)[>\]]")


class TimestampKind(Enum):
    """Directive prefix; PLAIN for a bare bracketed date."""

    SCHEDULED = "SCHEDULED"
    DEADLINE = "DEADLINE"
    CLOSED = "CLOSED"
    PLAIN = "PLAIN"


@dataclass(frozen=True)
class ParsedTimestamp:
    """Structured form of a timestamp directive."""

    kind: TimestampKind
    date: date
    time: clock_time | None = None
    end_time: clock_time | None = None
    end_date: date | None = None
    range_end_time: clock_time | None = None
    repeater: Repeater | None = None
    deadline_warning_days: int | None = None

    @property
    def warning_days(self) -> int:
        """Deadline warning window, 14 days unless the directive sets ``-Nd``."""
        if self.deadline_warning_days is None:
            return DEFAULT_WARNING_DAYS
        return self.deadline_warning_days

    @property
    def type_label(self) -> str | None:
        """Prefix keyword as shown on tasks; None for plain dates."""
        if self.kind == TimestampKind.PLAIN:
            return None
        return self.kind.value

    @property
    def display_end_time(self) -> clock_time | None:
        """End of the ``HH:MM-HH:MM`` span, else the clock time closing a date range."""
        return self.end_time or self.range_end_time

    def at(self, occurrence: date, keep_time: bool = True) -> "ParsedTimestamp":
        """Copy moved to another occurrence date, optionally without clock times."""
        if keep_time:
            return replace(self, date=occurrence)
        return replace(self, date=occurrence, time=None, end_time=None, range_end_time=None)


def weekday_mappings(locale: str) -> list[tuple[str, str]]:
    """Localized -> English weekday names for a comma-separated locale list."""
    mappings = []
    for loc in locale.split(","):
        mappings.extend(WEEKDAY_TRANSLATIONS.get(loc.strip(), []))
    return mappings


def normalize_weekdays(text: str, mappings: list[tuple[str, str]] | None) -> str:
    """Replace localized weekday names with their canonical English form."""
    for localized, english in mappings or []:
        if localized in text:
            text = text.replace(localized, english)
    return text


def _parse_date(value: str) -> date:
    return datetime.strptime(value, "%Y-%m-%d").date()


def _parse_clock(value: str | None) -> clock_time | None:
    if value is None:
        return None
    return datetime.strptime(value, "%H:%M").time()


def parse_timestamp(
    text: str, mappings: list[tuple[str, str]] | None = None
) -> ParsedTimestamp | None:
    """
    Parse a directive such as ``DEADLINE: <2024-12-01 Sun 10:00 +1w -3d>``.

    Tries the range form first, then the single form. Returns None when
    neither matches or the date/time values are not valid calendar values.
    A malformed repeater is dropped rather than failing the whole stamp.
    """
    text = normalize_weekdays(text, mappings)

    match = RANGE_RE.search(text) or SINGLE_RE.search(text)
    if not match:
        return None

    groups = match.groupdict()
    try:
        start = _parse_date(groups["date"])
        start_time = _parse_clock(groups["time"])
        end_time = _parse_clock(groups["end_time"])
        end_date = _parse_date(groups["range_date"]) if groups.get("range_date") else None
        range_end_time = _parse_clock(groups.get("range_time"))
    except ValueError:
        return None

    return ParsedTimestamp(
        kind=TimestampKind(groups["kind"]) if groups["kind"] else TimestampKind.PLAIN,
        date=start,
        time=start_time,
        end_time=end_time,
        end_date=end_date,
        range_end_time=range_end_time,
        repeater=parse_repeater(groups["repeater"]) if groups["repeater"] else None,
        deadline_warning_days=int(groups["warning"]) if groups["warning"] else None,
    )


def format_clock(value: clock_time | None) -> str | None:
    return value.strftime("%H:%M") if value else None


def format_date(value: date) -> str:
    return value.isoformat()


def format_timestamp(parsed: ParsedTimestamp) -> str:
    """Render a ParsedTimestamp back into directive form."""
    parts = [format_date(parsed.date), WEEKDAY_ABBR[parsed.date.weekday()]]
    if parsed.time:
        clock = format_clock(parsed.time)
        if parsed.end_time:
            clock += f"-{format_clock(parsed.end_time)}"
        parts.append(clock)
    if parsed.repeater:
        parts.append(str(parsed.repeater))
    if parsed.deadline_warning_days is not None:
        parts.append(f"-{parsed.deadline_warning_days}d")
    stamp = f"<{' '.join(parts)}>"

    if parsed.end_date is not None:
        end_parts = [format_date(parsed.end_date), WEEKDAY_ABBR[parsed.end_date.weekday()]]
        if parsed.range_end_time:
            end_parts.append(format_clock(parsed.range_end_time))
        stamp += f"--<{' '.join(end_parts)}>"

    if parsed.type_label:
        return f"{parsed.type_label}: {stamp}"
    return stamp


def extract_created(text: str, mappings: list[tuple[str, str]] | None = None) -> str | None:
    """The value of a ``CREATED:`` stamp, kept as an opaque string."""
    match = CREATED_RE.search(normalize_weekdays(text, mappings))
    return match.group(1).strip() if match else None


def extract_timestamp(text: str, mappings: list[tuple[str, str]] | None = None) -> str | None:
    """
    Pull the first timestamp directive out of free text.

    Prefixed directives win over bare dates; CREATED and CLOCK stamps are
    never returned.
    """
    text = normalize_weekdays(text, mappings)
    text = CREATED_RE.sub(" ", text)
    text = CLOCK_RE.sub(" ", text)

    match = _DIRECTIVE_RE.search(text) or _BARE_RE.search(text)
    return match.group(0).strip() if match else None
