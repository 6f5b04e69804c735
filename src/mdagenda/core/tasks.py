"""Pure task domain logic - no I/O dependencies."""

from dataclasses import dataclass, field
from enum import Enum

# Sort position for tasks without a priority cookie
UNRANKED = 999


class TaskState(Enum):
    """Completion keyword of a task heading."""

    TODO = "TODO"
    DONE = "DONE"


@dataclass(frozen=True)
class ClockEntry:
    """A ``CLOCK:`` line: start, optional end and optional ``=> H:MM`` duration."""

    start: str
    end: str | None = None
    duration: str | None = None


@dataclass(frozen=True)
class Task:
    """
    A heading extracted from a markdown document.

    ``timestamp`` is the raw directive; the ``timestamp_*`` fields are its
    parsed parts as display strings. Agenda views derive copies of a task
    with these fields rewritten for a single occurrence.
    """

    file: str
    line: int
    heading: str
    content: str = ""
    state: TaskState | None = None
    priority: str | None = None
    created: str | None = None
    timestamp: str | None = None
    timestamp_type: str | None = None
    timestamp_date: str | None = None
    timestamp_time: str | None = None
    timestamp_end_time: str | None = None
    clocks: tuple[ClockEntry, ...] = field(default_factory=tuple)
    total_clock_time: str | None = None

    @property
    def is_done(self) -> bool:
        return self.state == TaskState.DONE

    @property
    def is_open(self) -> bool:
        return self.state == TaskState.TODO

    def priority_rank(self) -> int:
        """A=0, B=1, C=2, then the rest of the alphabet; no priority sorts last."""
        return priority_rank(self.priority)


def priority_rank(letter: str | None) -> int:
    if not letter:
        return UNRANKED
    return ord(letter) - ord("A")


def parse_priority(letter: str | None) -> str | None:
    """Validate a priority cookie letter (A-Z)."""
    if letter and len(letter) == 1 and "A" <= letter <= "Z":
        return letter
    return None


def filter_open(tasks: list[Task]) -> list[Task]:
    """Filter to tasks still marked TODO."""
    return [t for t in tasks if t.is_open]


def sort_by_priority(tasks: list[Task]) -> list[Task]:
    """
    Sort tasks by priority (A first, unranked last).

    Stable: ties keep document order. Pure function - no I/O.
    """
    return sorted(tasks, key=lambda t: t.priority_rank())
