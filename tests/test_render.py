"""Tests for output rendering."""

import json
from datetime import date

import pytest

from mdagenda.core.agenda import DayAgenda, TaskWithOffset
from mdagenda.core.render import (
    day_to_dict,
    describe_offset,
    format_entry_line,
    render_days_html,
    render_days_json,
    render_days_markdown,
    render_tasks_html,
    render_tasks_json,
    render_tasks_markdown,
    task_to_dict,
)
from mdagenda.core.tasks import ClockEntry, Task, TaskState


@pytest.fixture
def task():
    return Task(
        file="notes.md",
        line=5,
        heading="Write report",
        content="Draft it.",
        state=TaskState.TODO,
        priority="A",
        timestamp="SCHEDULED: <2025-12-05 Fri 10:00>",
        timestamp_type="SCHEDULED",
        timestamp_date="2025-12-05",
        timestamp_time="10:00",
    )


@pytest.fixture
def day(task):
    overdue = Task(file="a.md", line=1, heading="Old", state=TaskState.TODO)
    return DayAgenda(
        date=date(2025, 12, 5),
        overdue=[TaskWithOffset(overdue, -4)],
        scheduled_timed=[TaskWithOffset(task)],
    )


class TestDicts:
    def test_task_omits_absent_fields(self, task):
        data = task_to_dict(task)
        assert data["state"] == "TODO"
        assert data["timestamp_time"] == "10:00"
        assert "created" not in data
        assert "clocks" not in data
        assert "timestamp_end_time" not in data

    def test_clocks(self):
        task = Task(
            file="a.md",
            line=1,
            heading="Clocked",
            clocks=(ClockEntry("2025-12-04 Thu 10:00", "2025-12-04 Thu 11:00", "1:00"), ClockEntry("x")),
            total_clock_time="1:00",
        )
        data = task_to_dict(task)
        assert data["clocks"][0]["duration"] == "1:00"
        assert data["clocks"][1] == {"start": "x"}
        assert data["total_clock_time"] == "1:00"

    def test_day_omits_empty_buckets(self, day):
        data = day_to_dict(day)
        assert data["date"] == "2025-12-05"
        assert set(data) == {"date", "overdue", "scheduled_timed"}
        assert data["overdue"][0]["days_offset"] == -4
        assert "days_offset" not in data["scheduled_timed"][0]


class TestJson:
    def test_days(self, day):
        assert json.loads(render_days_json([day]))[0]["scheduled_timed"][0]["heading"] == "Write report"

    def test_tasks_keep_unicode(self):
        output = render_tasks_json([Task(file="a.md", line=1, heading="Оплатить счёт")])
        assert "Оплатить счёт" in output


class TestMarkdown:
    def test_offset(self):
        assert describe_offset(-4) == "4d overdue"
        assert describe_offset(5) == "due in 5d"
        assert describe_offset(None) == ""

    def test_entry_line(self, task):
        assert format_entry_line(TaskWithOffset(task)) == "- 10:00 TODO [#A] Write report `notes.md:5`"

    def test_days(self, day):
        output = render_days_markdown([day, DayAgenda(date=date(2025, 12, 6))])
        assert "## 2025-12-05 Fri" in output
        assert "### Overdue" in output
        assert "- TODO Old (4d overdue) `a.md:1`" in output
        assert "### Upcoming deadlines" not in output
        assert "## 2025-12-06 Sat\n\nNo tasks." in output

    def test_tasks(self, task):
        output = render_tasks_markdown([task])
        assert output.startswith("# Tasks")
        assert "**Priority:** A" in output
        assert "**Time:** SCHEDULED: <2025-12-05 Fri 10:00>" in output
        assert "Draft it." in output


class TestHtml:
    def test_escapes(self):
        day = DayAgenda(
            date=date(2025, 12, 5),
            scheduled_no_time=[TaskWithOffset(Task(file="a.md", line=1, heading="<b>bold</b>"))],
        )
        output = render_days_html([day])
        assert "&lt;b&gt;bold&lt;/b&gt;" in output
        assert "<b>bold</b>" not in output

    def test_empty_day(self):
        assert "<p>No tasks.</p>" in render_days_html([DayAgenda(date=date(2025, 12, 6))])

    def test_tasks(self, task):
        output = render_tasks_html([task])
        assert "<h2>Write report</h2>" in output
        assert "<strong>Priority:</strong> A" in output
