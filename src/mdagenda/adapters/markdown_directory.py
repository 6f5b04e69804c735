"""Markdown directory scanning adapter."""

import fnmatch
import logging
import re
from dataclasses import dataclass
from pathlib import Path

from mdagenda.core.markdown import extract_tasks
from mdagenda.core.tasks import Task
from mdagenda.errors import InvalidDirectoryError, InvalidGlobError

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 10 * 1024 * 1024

# Cheap pre-filter: only files that could contain a task get parsed
CANDIDATE_RE = re.compile(
    r"(^#+\s+(TODO|DONE)\s|DEADLINE:|SCHEDULED:|CREATED:|CLOSED:|<\d{4}-\d{2}-\d{2})",
    re.MULTILINE,
)


@dataclass
class ProcessingStats:
    """Counters for one directory scan."""

    files_processed: int = 0
    files_skipped_size: int = 0
    files_failed_read: int = 0

    def has_warnings(self) -> bool:
        return self.files_skipped_size > 0 or self.files_failed_read > 0

    def summary(self) -> str:
        lines = [f"Files processed: {self.files_processed}"]
        if self.files_skipped_size:
            lines.append(f"Files skipped (too large): {self.files_skipped_size}")
        if self.files_failed_read:
            lines.append(f"Files failed to read: {self.files_failed_read}")
        return ", ".join(lines)


def validate_glob(pattern: str) -> None:
    if not pattern or pattern.endswith("*."):
        raise InvalidGlobError(f"Invalid glob '{pattern}': extension cannot be empty")


def matches_glob(path: Path, pattern: str) -> bool:
    """Match a file name against a glob such as ``*.md`` or ``README.md``."""
    validate_glob(pattern)
    return fnmatch.fnmatch(path.name, pattern)


class MarkdownDirectorySource:
    """
    Tasks from every matching markdown file under a directory.

    Implements TaskSource protocol. Hidden files and directories are skipped.
    """

    def __init__(
        self,
        root: Path | str,
        glob: str = "*.md",
        mappings: list[tuple[str, str]] | None = None,
    ):
        self.root = Path(root).expanduser()
        self.glob = glob
        self.mappings = mappings or []
        self.stats = ProcessingStats()

    def _iter_files(self):
        for path in sorted(self.root.rglob("*")):
            relative = path.relative_to(self.root)
            if any(part.startswith(".") for part in relative.parts):
                continue
            if path.is_file() and matches_glob(path, self.glob):
                yield path

    def _read(self, path: Path) -> str | None:
        try:
            if path.stat().st_size > MAX_FILE_SIZE:
                logger.warning(f"Skipping {path}: larger than {MAX_FILE_SIZE} bytes")
                self.stats.files_skipped_size += 1
                return None
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Failed to read {path}: {e}")
            self.stats.files_failed_read += 1
            return None

    def fetch_all(self) -> list[Task]:
        """Scan the directory and extract tasks, in path order."""
        if not self.root.exists():
            raise InvalidDirectoryError(f"Directory does not exist: {self.root}")
        if not self.root.is_dir():
            raise InvalidDirectoryError(f"Path is not a directory: {self.root}")
        validate_glob(self.glob)

        self.stats = ProcessingStats()
        tasks: list[Task] = []
        for path in self._iter_files():
            content = self._read(path)
            if content is None:
                continue
            self.stats.files_processed += 1
            if not CANDIDATE_RE.search(content):
                continue
            found = extract_tasks(str(path), content, self.mappings)
            logger.debug(f"{path}: {len(found)} tasks")
            tasks.extend(found)

        if self.stats.has_warnings():
            logger.warning(f"Processing summary: {self.stats.summary()}")
        return tasks
