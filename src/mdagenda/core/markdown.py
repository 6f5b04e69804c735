"""Pure markdown task extraction - no I/O dependencies."""

import logging
import re
from dataclasses import dataclass, field

from .clock import extract_clocks, format_duration, total_minutes
from .tasks import ClockEntry, Task, TaskState, parse_priority
from .timestamp import (
    extract_created,
    extract_timestamp,
    format_clock,
    format_date,
    parse_timestamp,
)

logger = logging.getLogger(__name__)

MAX_TASKS = 10_000

HEADING_RE = re.compile(r"^ {0,3}(#{1,6})(?:[ \t]+(.*?))?(?:[ \t]+#+)?[ \t]*$")
TASK_HEADING_RE = re.compile(r"^(TODO|DONE)\s+(?:\[#([A-Z])\]\s+)?(.+)$")
FENCE_RE = re.compile(r"^ {0,3}(`{3,}|~{3,})")
INLINE_CODE_RE = re.compile(r"(`+)(.+?)\1")
INDENTED_CODE_RE = re.compile(r"^(?: {4}|\t)(.*)$")


@dataclass
class _Section:
    """Everything collected under one heading so far."""

    heading: str
    line: int
    state: TaskState | None = None
    priority: str | None = None
    content: str = ""
    created: str | None = None
    timestamp: str | None = None
    clocks: list[ClockEntry] = field(default_factory=list)

    def absorb_code(self, code: str, mappings: list[tuple[str, str]]) -> None:
        created = extract_created(code, mappings)
        if created:
            self.created = created
        timestamp = extract_timestamp(code, mappings)
        if timestamp:
            self.timestamp = timestamp
        self.clocks.extend(extract_clocks(code))


def parse_heading(text: str) -> tuple[TaskState | None, str | None, str]:
    """
    Split ``TODO [#A] Title`` into state, priority and title.

    Headings without a TODO/DONE keyword come back unchanged with no state.
    """
    match = TASK_HEADING_RE.match(text)
    if not match:
        return None, None, text
    return TaskState(match.group(1)), parse_priority(match.group(2)), match.group(3)


def _finalize(path: str, section: _Section) -> Task | None:
    parsed = parse_timestamp(section.timestamp) if section.timestamp else None

    # Not a task, just a heading
    if section.state is None and parsed is None:
        return None

    minutes = total_minutes(section.clocks)
    return Task(
        file=path,
        line=section.line,
        heading=section.heading,
        content=section.content,
        state=section.state,
        priority=section.priority,
        created=section.created,
        timestamp=section.timestamp,
        timestamp_type=parsed.type_label if parsed else None,
        timestamp_date=format_date(parsed.date) if parsed else None,
        timestamp_time=format_clock(parsed.time) if parsed else None,
        timestamp_end_time=format_clock(parsed.display_end_time) if parsed else None,
        clocks=tuple(section.clocks),
        total_clock_time=format_duration(minutes) if minutes else None,
    )


def extract_tasks(
    path: str,
    content: str,
    mappings: list[tuple[str, str]] | None = None,
) -> list[Task]:
    """
    Extract tasks from markdown text.

    Directives are read from inline code spans and code blocks under each
    heading; the first non-empty paragraph becomes the task content.
    Stops at MAX_TASKS per document.
    """
    mappings = mappings or []
    tasks: list[Task] = []
    section: _Section | None = None
    paragraph: list[str] = []
    code_lines: list[str] = []
    fence: str | None = None

    def flush_paragraph() -> None:
        if section is not None and paragraph:
            text = " ".join(paragraph)
            for match in INLINE_CODE_RE.finditer(text):
                section.absorb_code(match.group(2), mappings)
            prose = " ".join(INLINE_CODE_RE.sub(" ", text).split())
            if prose and not section.content:
                section.content = prose
        paragraph.clear()

    def flush_code() -> None:
        if section is not None and code_lines:
            section.absorb_code("\n".join(code_lines).strip().strip("`"), mappings)
        code_lines.clear()

    def close_section() -> None:
        if section is not None:
            task = _finalize(path, section)
            if task is not None:
                tasks.append(task)

    for number, line in enumerate(content.splitlines(), start=1):
        if fence is not None:
            if line.lstrip().startswith(fence):
                fence = None
                flush_code()
            else:
                code_lines.append(line)
            continue

        fence_match = FENCE_RE.match(line)
        if fence_match:
            flush_paragraph()
            flush_code()
            fence = fence_match.group(1)
            continue

        # Indented code cannot interrupt a paragraph
        indented = INDENTED_CODE_RE.match(line)
        if indented and not paragraph:
            code_lines.append(indented.group(1))
            continue
        flush_code()

        heading = HEADING_RE.match(line)
        if heading:
            flush_paragraph()
            close_section()
            if len(tasks) >= MAX_TASKS:
                logger.warning(f"Reached maximum task limit ({MAX_TASKS}) in {path}")
                return tasks
            state, priority, title = parse_heading((heading.group(2) or "").strip())
            section = _Section(heading=title, line=number, state=state, priority=priority)
            continue

        if line.strip():
            paragraph.append(line.strip())
        else:
            flush_paragraph()

    if fence is not None:
        # Unterminated fence runs to the end of the document
        flush_code()
    flush_paragraph()
    flush_code()
    close_section()
    return tasks[:MAX_TASKS]
