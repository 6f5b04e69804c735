"""JSON-backed holiday calendar adapter."""

import json
import logging
from datetime import date, timedelta
from pathlib import Path

from mdagenda.ports.workday_calendar import WorkdayLookupError

logger = logging.getLogger(__name__)

DEFAULT_HOLIDAYS_FILE = Path(__file__).resolve().parent.parent / "data" / "holidays_ru.json"

# Longest stretch scanned for the next workday before giving up
MAX_SCAN_DAYS = 366


class HolidayDataError(Exception):
    """Raised when the holiday table cannot be loaded."""


class HolidayTable:
    """
    Workday calendar from a fixed table of holidays and moved workdays.

    Implements WorkdayCalendar protocol. The file maps each year to
    ``{"holidays": [...], "workdays": [...]}`` with ISO dates; "workdays"
    are weekend days declared working.
    """

    def __init__(self, holidays: set[date] | None = None, workdays: set[date] | None = None):
        self.holidays = set(holidays or ())
        self.workdays = set(workdays or ())

    @classmethod
    def weekends_only(cls) -> "HolidayTable":
        """Ordinary Saturday/Sunday weekends, no holidays."""
        return cls()

    @classmethod
    def load(cls, path: Path | str | None = None) -> "HolidayTable":
        """Load a holiday table. Raises HolidayDataError on any read or format problem."""
        path = Path(path).expanduser() if path else DEFAULT_HOLIDAYS_FILE
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            holidays: set[date] = set()
            workdays: set[date] = set()
            for year, year_data in data.items():
                holidays.update(date.fromisoformat(d) for d in year_data.get("holidays", []))
                workdays.update(date.fromisoformat(d) for d in year_data.get("workdays", []))
        except OSError as e:
            raise HolidayDataError(f"Cannot read holiday table {path}: {e}") from e
        except (json.JSONDecodeError, AttributeError, TypeError, ValueError) as e:
            raise HolidayDataError(f"Malformed holiday table {path}: {e}") from e

        logger.debug(f"Loaded {len(holidays)} holidays and {len(workdays)} workdays from {path}")
        return cls(holidays, workdays)

    def is_workday(self, target_date: date) -> bool:
        """Declared workdays win, then declared holidays, then the weekend rule."""
        if target_date in self.workdays:
            return True
        if target_date in self.holidays:
            return False
        return target_date.weekday() < 5

    def next_workday(self, target_date: date) -> date:
        """Nearest later workday."""
        current = target_date
        for _ in range(MAX_SCAN_DAYS):
            current += timedelta(days=1)
            if self.is_workday(current):
                return current
        raise WorkdayLookupError(f"No workday within {MAX_SCAN_DAYS} days after {target_date}")

    def holidays_for_year(self, year: int) -> list[date]:
        """Declared holidays of one year, sorted."""
        return sorted(d for d in self.holidays if d.year == year)
