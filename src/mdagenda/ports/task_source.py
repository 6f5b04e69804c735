"""Task source interface."""

from typing import Protocol

from mdagenda.core.tasks import Task


class TaskSource(Protocol):
    """Interface for fetching extracted tasks from any backend."""

    def fetch_all(self) -> list[Task]:
        """Fetch all tasks."""
        ...
