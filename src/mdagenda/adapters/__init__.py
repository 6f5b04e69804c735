"""Adapters - I/O implementations of ports."""

from .holiday_table import HolidayDataError, HolidayTable
from .markdown_directory import MarkdownDirectorySource, ProcessingStats

__all__ = [
    "HolidayDataError",
    "HolidayTable",
    "MarkdownDirectorySource",
    "ProcessingStats",
]
