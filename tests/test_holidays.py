"""Tests for the holiday table adapter."""

import json
from datetime import date, timedelta

import pytest

from mdagenda.adapters.holiday_table import HolidayDataError, HolidayTable
from mdagenda.ports.workday_calendar import WorkdayLookupError


@pytest.fixture(scope="module")
def table():
    return HolidayTable.load()


class TestBundledTable:
    def test_new_year_break(self, table):
        assert table.next_workday(date(2026, 1, 4)) == date(2026, 1, 12)

    def test_weekend(self, table):
        assert table.next_workday(date(2025, 12, 5)) == date(2025, 12, 8)

    @pytest.mark.parametrize("holiday", [date(2026, 3, 9), date(2026, 5, 11), date(2025, 12, 31)])
    def test_moved_holidays(self, table, holiday):
        assert not table.is_workday(holiday)

    def test_working_saturday(self, table):
        assert table.is_workday(date(2025, 11, 1))

    def test_ordinary_days(self, table):
        assert table.is_workday(date(2025, 12, 8))
        assert not table.is_workday(date(2025, 12, 6))

    def test_holidays_for_year(self, table):
        holidays = table.holidays_for_year(2026)
        assert holidays == sorted(holidays)
        assert holidays[:9] == [date(2026, 1, d) for d in range(1, 10)]
        assert all(d.year == 2026 for d in holidays)

    def test_unknown_year(self, table):
        assert table.holidays_for_year(1999) == []


class TestLoad:
    def test_custom_file(self, tmp_path):
        path = tmp_path / "holidays.json"
        path.write_text(json.dumps({"2030": {"holidays": ["2030-01-01"], "workdays": ["2030-01-05"]}}))
        table = HolidayTable.load(path)
        assert not table.is_workday(date(2030, 1, 1))
        assert table.is_workday(date(2030, 1, 5))

    def test_missing_file(self, tmp_path):
        with pytest.raises(HolidayDataError, match="Cannot read"):
            HolidayTable.load(tmp_path / "missing.json")

    @pytest.mark.parametrize(
        "content",
        ["not json", '{"2030": ["2030-01-01"]}', '{"2030": {"holidays": ["2030-13-01"]}}'],
    )
    def test_malformed_file(self, tmp_path, content):
        path = tmp_path / "holidays.json"
        path.write_text(content)
        with pytest.raises(HolidayDataError, match="Malformed"):
            HolidayTable.load(path)


class TestWeekendsOnly:
    def test_no_holidays(self):
        table = HolidayTable.weekends_only()
        assert table.is_workday(date(2026, 1, 1))
        assert not table.is_workday(date(2026, 1, 3))
        assert table.holidays_for_year(2026) == []

    def test_bounded_search(self):
        start = date(2030, 1, 1)
        table = HolidayTable(holidays={start + timedelta(days=i) for i in range(400)})
        with pytest.raises(WorkdayLookupError):
            table.next_workday(start)
