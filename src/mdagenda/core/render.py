"""Pure output formatting - no I/O dependencies."""

import json
from html import escape

from .agenda import DayAgenda, TaskWithOffset
from .tasks import Task
from .timestamp import WEEKDAY_ABBR

BUCKET_TITLES = {
    "overdue": "Overdue",
    "scheduled_timed": "Scheduled",
    "scheduled_no_time": "Scheduled (no time)",
    "upcoming": "Upcoming deadlines",
}


def task_to_dict(task: Task) -> dict:
    """Serialize a task, omitting absent optional fields."""
    data = {
        "file": task.file,
        "line": task.line,
        "heading": task.heading,
        "content": task.content,
    }
    optional = {
        "state": task.state.value if task.state else None,
        "priority": task.priority,
        "created": task.created,
        "timestamp": task.timestamp,
        "timestamp_type": task.timestamp_type,
        "timestamp_date": task.timestamp_date,
        "timestamp_time": task.timestamp_time,
        "timestamp_end_time": task.timestamp_end_time,
        "total_clock_time": task.total_clock_time,
    }
    data.update({k: v for k, v in optional.items() if v is not None})
    if task.clocks:
        data["clocks"] = [
            {k: v for k, v in vars(c).items() if v is not None} for c in task.clocks
        ]
    return data


def entry_to_dict(entry: TaskWithOffset) -> dict:
    data = task_to_dict(entry.task)
    if entry.days_offset is not None:
        data["days_offset"] = entry.days_offset
    return data


def day_to_dict(day: DayAgenda) -> dict:
    """Serialize a day, omitting empty buckets."""
    data: dict = {"date": day.date.isoformat()}
    for bucket in BUCKET_TITLES:
        entries = getattr(day, bucket)
        if entries:
            data[bucket] = [entry_to_dict(e) for e in entries]
    return data


def render_days_json(days: list[DayAgenda]) -> str:
    return json.dumps([day_to_dict(d) for d in days], indent=2, ensure_ascii=False)


def render_tasks_json(tasks: list[Task]) -> str:
    return json.dumps([task_to_dict(t) for t in tasks], indent=2, ensure_ascii=False)


def describe_offset(days_offset: int | None) -> str:
    """Human-readable offset: "3d overdue", "due in 5d"."""
    if days_offset is None:
        return ""
    if days_offset < 0:
        return f"{-days_offset}d overdue"
    return f"due in {days_offset}d"


def format_entry_line(entry: TaskWithOffset) -> str:
    """
    Format a single agenda entry as a markdown bullet.

    Pure function - no I/O.
    """
    task = entry.task
    parts = []
    if task.timestamp_time:
        clock = task.timestamp_time
        if task.timestamp_end_time:
            clock += f"-{task.timestamp_end_time}"
        parts.append(clock)
    if task.state:
        parts.append(task.state.value)
    if task.priority:
        parts.append(f"[#{task.priority}]")
    parts.append(task.heading)

    line = "- " + " ".join(parts)
    offset = describe_offset(entry.days_offset)
    if offset:
        line += f" ({offset})"
    return f"{line} `{task.file}:{task.line}`"


def render_days_markdown(days: list[DayAgenda]) -> str:
    lines = ["# Agenda", ""]
    for day in days:
        lines.append(f"## {day.date.isoformat()} {WEEKDAY_ABBR[day.date.weekday()]}")
        lines.append("")
        if day.is_empty():
            lines.append("No tasks.")
            lines.append("")
            continue
        for bucket, title in BUCKET_TITLES.items():
            entries = getattr(day, bucket)
            if not entries:
                continue
            lines.append(f"### {title}")
            lines.extend(format_entry_line(e) for e in entries)
            lines.append("")
    return "\n".join(lines)


def render_tasks_markdown(tasks: list[Task]) -> str:
    lines = ["# Tasks", ""]
    for task in tasks:
        lines.append(f"## {task.heading}")
        lines.append(f"**File:** {task.file}:{task.line}")
        if task.state:
            lines.append(f"**Type:** {task.state.value}")
        if task.priority:
            lines.append(f"**Priority:** {task.priority}")
        if task.created:
            lines.append(f"**Created:** {task.created}")
        if task.timestamp:
            lines.append(f"**Time:** {task.timestamp}")
        if task.total_clock_time:
            lines.append(f"**Clocked:** {task.total_clock_time}")
        if task.content:
            lines.extend(["", task.content])
        lines.append("")
    return "\n".join(lines)


def _html_entry(entry: TaskWithOffset) -> str:
    task = entry.task
    label = " ".join(
        p for p in (
            task.timestamp_time,
            task.state.value if task.state else None,
            f"[#{task.priority}]" if task.priority else None,
        ) if p
    )
    offset = describe_offset(entry.days_offset)
    return (
        "<li>"
        + (f"<strong>{escape(label)}</strong> " if label else "")
        + escape(task.heading)
        + (f" <em>({escape(offset)})</em>" if offset else "")
        + f" <code>{escape(task.file)}:{task.line}</code></li>"
    )


def render_days_html(days: list[DayAgenda]) -> str:
    out = ["<html><body><h1>Agenda</h1>"]
    for day in days:
        out.append(f"<h2>{day.date.isoformat()} {WEEKDAY_ABBR[day.date.weekday()]}</h2>")
        if day.is_empty():
            out.append("<p>No tasks.</p>")
            continue
        for bucket, title in BUCKET_TITLES.items():
            entries = getattr(day, bucket)
            if not entries:
                continue
            out.append(f"<h3>{title}</h3>")
            out.append("<ul>")
            out.extend(_html_entry(e) for e in entries)
            out.append("</ul>")
    out.append("</body></html>")
    return "\n".join(out)


def render_tasks_html(tasks: list[Task]) -> str:
    out = ["<html><body><h1>Tasks</h1>"]
    for task in tasks:
        out.append(f"<h2>{escape(task.heading)}</h2>")
        out.append(f"<p><strong>File:</strong> {escape(task.file)}:{task.line}</p>")
        fields = [
            ("Type", task.state.value if task.state else None),
            ("Priority", task.priority),
            ("Created", task.created),
            ("Time", task.timestamp),
            ("Clocked", task.total_clock_time),
        ]
        for name, value in fields:
            if value:
                out.append(f"<p><strong>{name}:</strong> {escape(value)}</p>")
        if task.content:
            out.append(f"<p>{escape(task.content)}</p>")
    out.append("</body></html>")
    return "\n".join(out)
