"""Pure CLOCK entry parsing - no I/O dependencies."""

import re

from .tasks import ClockEntry

# CLOCK: [start]--[end] => H:MM, with square or angle brackets
CLOCK_RE = re.compile(
    r"CLOCK:\s*[\[<]([^\]>]+)[\]>](?:--[\[<]([^\]>]+)[\]>])?(?:\s*=>\s*([0-9]+:[0-9]+))?"
)


def extract_clocks(text: str) -> list[ClockEntry]:
    """Extract all CLOCK entries from text."""
    return [
        ClockEntry(start=m.group(1), end=m.group(2), duration=m.group(3))
        for m in CLOCK_RE.finditer(text)
    ]


def parse_duration(value: str) -> int | None:
    """Parse ``H:MM`` into minutes."""
    hours, sep, minutes = value.partition(":")
    if not sep or not hours.isdigit() or not minutes.isdigit():
        return None
    return int(hours) * 60 + int(minutes)


def total_minutes(clocks: list[ClockEntry] | tuple[ClockEntry, ...]) -> int | None:
    """Sum of closed clock durations, or None when nothing was clocked."""
    total = 0
    for clock in clocks:
        if clock.duration:
            total += parse_duration(clock.duration) or 0
    return total or None


def format_duration(minutes: int) -> str:
    return f"{minutes // 60}:{minutes % 60:02d}"
