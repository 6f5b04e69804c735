"""Workday calendar interface."""

from datetime import date
from typing import Protocol


class WorkdayLookupError(Exception):
    """Raised when a calendar cannot resolve the next workday."""


class WorkdayCalendar(Protocol):
    """Interface for answering workday questions from any holiday source."""

    def is_workday(self, target_date: date) -> bool:
        """Whether the date is a working day."""
        ...

    def next_workday(self, target_date: date) -> date:
        """Nearest later date that is a working day. May raise WorkdayLookupError."""
        ...
