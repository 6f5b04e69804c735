"""mdagenda CLI - agenda views over markdown task notes."""

import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

import click

from .config import load_config
from .core.render import render_tasks_json
from .errors import AgendaError
from .workflows import (
    FORMATS,
    MODES,
    build_agenda,
    get_task_source,
    get_workday_calendar,
    render_result,
)


@click.group()
@click.version_option(package_name="mdagenda")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """mdagenda - Org-style agenda for markdown notes."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if debug else logging.WARNING,
    )


def _write(output: str, output_path: Path | None) -> None:
    if output_path:
        output_path.write_text(output, encoding="utf-8")
        click.echo(f"Agenda saved to {output_path}", err=True)
    else:
        click.echo(output)


@main.command()
@click.option("--dir", "directory", default=None, help="Directory to search for markdown files")
@click.option("--glob", default=None, help="File name pattern, e.g. '*.md'")
@click.option("--format", "fmt", type=click.Choice(FORMATS), default=None, help="Output format")
@click.option("--output", "-o", type=click.Path(path_type=Path), default=None,
              help="Write to a file instead of stdout")
@click.option("--locale", default=None, help="Comma-separated weekday locales, e.g. 'ru,en'")
@click.option("--mode", "--agenda", "mode", type=click.Choice(MODES), default="day",
              show_default=True, help="Agenda mode")
@click.option("--date", "-d", "target_date", default=None,
              help="Date to view (YYYY-MM-DD), defaults to today")
@click.option("--from", "from_date", default=None, help="Range start (YYYY-MM-DD)")
@click.option("--to", "to_date", default=None, help="Range end (YYYY-MM-DD)")
@click.option("--tz", default=None, help="IANA timezone used to determine today")
@click.option("--current-date", default=None, help="Override today's date (YYYY-MM-DD)")
@click.option("--warning-days", type=int, default=None,
              help="Days before a deadline it shows as upcoming")
def agenda(
    directory: str | None,
    glob: str | None,
    fmt: str | None,
    output: Path | None,
    locale: str | None,
    mode: str,
    target_date: str | None,
    from_date: str | None,
    to_date: str | None,
    tz: str | None,
    current_date: str | None,
    warning_days: int | None,
):
    """Show the agenda for a day, week, month, or the open task list."""
    config = load_config()
    overrides = {
        "dir": directory,
        "glob": glob,
        "format": fmt,
        "locale": locale,
        "timezone": tz,
        "deadline_warning_days": warning_days,
    }
    config = replace(config, **{k: v for k, v in overrides.items() if v is not None})

    try:
        tasks = get_task_source(config).fetch_all()
        result = build_agenda(
            tasks,
            mode=mode,
            day=target_date,
            from_date=from_date,
            to_date=to_date,
            tz=config.timezone,
            current_date=current_date,
            workdays=get_workday_calendar(config),
            warning_days=config.deadline_warning_days,
        )
        rendered = render_result(result, config.format)
    except AgendaError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    _write(rendered, output)


@main.command()
@click.option("--dir", "directory", default=None, help="Directory to search for markdown files")
@click.option("--glob", default=None, help="File name pattern, e.g. '*.md'")
def extract(directory: str | None, glob: str | None):
    """Dump every extracted task as JSON for debugging."""
    config = load_config()
    if directory:
        config = replace(config, dir=directory)
    if glob:
        config = replace(config, glob=glob)

    try:
        tasks = get_task_source(config).fetch_all()
    except AgendaError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(render_tasks_json(tasks))


@main.command()
@click.argument("year", type=int)
def holidays(year: int):
    """List declared holidays for a year."""
    calendar = get_workday_calendar(load_config())
    dates = [d.isoformat() for d in calendar.holidays_for_year(year)]
    click.echo(json.dumps(dates, indent=2))


if __name__ == "__main__":
    main()
