"""Tests for the command line interface."""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from mdagenda.cli import main
from mdagenda.config import Config

NOTES = """# TODO [#B] Write report
`SCHEDULED: <2025-12-05 Fri 10:00>`

# TODO [#A] Pay rent
`DEADLINE: <2025-12-10 Ср>`

# TODO Old chore
`SCHEDULED: <2025-12-01 Пн>`

# DONE Finished
`SCHEDULED: <2025-12-02 Tue>`
"""


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def notes_dir(tmp_path):
    (tmp_path / "notes.md").write_text(NOTES, encoding="utf-8")
    return tmp_path


@pytest.fixture(autouse=True)
def config():
    """Keep the user's agenda.conf out of the tests."""
    with patch("mdagenda.cli.load_config", return_value=Config()) as mock_load:
        yield mock_load


def run_agenda(runner, notes_dir, *args):
    return runner.invoke(
        main,
        ["agenda", "--dir", str(notes_dir), "--current-date", "2025-12-05", *args],
    )


class TestAgendaCommand:
    def test_day_json(self, runner, notes_dir):
        result = run_agenda(runner, notes_dir)
        assert result.exit_code == 0, result.output
        days = json.loads(result.output)
        assert len(days) == 1
        day = days[0]
        assert day["date"] == "2025-12-05"
        assert [t["heading"] for t in day["scheduled_timed"]] == ["Write report"]
        assert day["overdue"][0]["heading"] == "Old chore"
        assert day["overdue"][0]["days_offset"] == -4
        assert day["upcoming"][0]["timestamp"] == "DEADLINE: <2025-12-10 Wed>"
        assert day["upcoming"][0]["days_offset"] == 5

    def test_week_markdown(self, runner, notes_dir):
        result = run_agenda(runner, notes_dir, "--mode", "week", "--format", "md")
        assert result.exit_code == 0, result.output
        assert result.output.startswith("# Agenda")
        assert "## 2025-12-01 Mon" in result.output
        assert "## 2025-12-07 Sun" in result.output

    def test_agenda_alias(self, runner, notes_dir):
        result = run_agenda(runner, notes_dir, "--agenda", "month")
        assert result.exit_code == 0, result.output
        assert len(json.loads(result.output)) == 31

    def test_tasks_mode(self, runner, notes_dir):
        result = run_agenda(runner, notes_dir, "--mode", "tasks")
        assert result.exit_code == 0, result.output
        tasks = json.loads(result.output)
        assert [t["heading"] for t in tasks] == ["Pay rent", "Write report", "Old chore"]

    def test_html_to_file(self, runner, notes_dir, tmp_path):
        output = tmp_path / "agenda.html"
        result = run_agenda(runner, notes_dir, "--format", "html", "--output", str(output))
        assert result.exit_code == 0, result.output
        assert output.read_text(encoding="utf-8").startswith("<html>")

    def test_config_defaults(self, runner, notes_dir, config):
        config.return_value = Config(dir=str(notes_dir), format="md")
        result = runner.invoke(main, ["agenda", "--current-date", "2025-12-05"])
        assert result.exit_code == 0, result.output
        assert result.output.startswith("# Agenda")

    def test_missing_directory(self, runner, tmp_path):
        result = run_agenda(runner, tmp_path / "missing")
        assert result.exit_code == 1
        assert "Error: Directory does not exist" in result.output

    def test_invalid_date(self, runner, notes_dir):
        result = run_agenda(runner, notes_dir, "--date", "2025-02-30")
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_half_range(self, runner, notes_dir):
        result = run_agenda(runner, notes_dir, "--mode", "week", "--from", "2025-12-01")
        assert result.exit_code == 1
        assert "--from and --to" in result.output

    def test_invalid_timezone(self, runner, notes_dir):
        result = run_agenda(runner, notes_dir, "--tz", "Nowhere/Special")
        assert result.exit_code == 1
        assert "Unknown timezone" in result.output

    def test_invalid_mode(self, runner, notes_dir):
        result = run_agenda(runner, notes_dir, "--mode", "year")
        assert result.exit_code == 2


class TestExtractCommand:
    def test_dumps_all_tasks(self, runner, notes_dir):
        result = runner.invoke(main, ["extract", "--dir", str(notes_dir)])
        assert result.exit_code == 0, result.output
        tasks = json.loads(result.output)
        assert len(tasks) == 4
        assert tasks[3]["state"] == "DONE"

    def test_missing_directory(self, runner, tmp_path):
        result = runner.invoke(main, ["extract", "--dir", str(tmp_path / "missing")])
        assert result.exit_code == 1


class TestHolidaysCommand:
    def test_lists_year(self, runner):
        result = runner.invoke(main, ["holidays", "2026"])
        assert result.exit_code == 0, result.output
        holidays = json.loads(result.output)
        assert "2026-01-09" in holidays
        assert "2026-03-09" in holidays
        assert all(h.startswith("2026-") for h in holidays)
