"""
Task Store Port - Access to the project and task files.

The files themselves are the only persisted state: issue_id, created_at
and updated_at in each task header are the whole synchronization memory.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path

from ..domain.entities import ProjectDocument, TaskRecord
from ..exceptions import TaskStoreError


class TaskStorePort(ABC):
    """Abstract interface for loading and saving project/task files."""

    @abstractmethod
    def load_project(self, path: Path) -> ProjectDocument:
        """
        Read and parse the project file.

        Raises:
            TaskStoreError: If the file cannot be read
            ParserError: If it cannot be parsed
        """
        ...

    @abstractmethod
    def load_task(self, path: Path) -> TaskRecord:
        """
        Read and parse a task file.

        Raises:
            TaskStoreError: If the file cannot be read
            ParserError: If it cannot be parsed
        """
        ...

    @abstractmethod
    def modified_time(self, path: Path) -> datetime:
        """Last modification time of a file, as an aware UTC datetime."""
        ...

    @abstractmethod
    def save_task(self, path: Path, record: TaskRecord, synced_at: datetime) -> None:
        """
        Atomically rewrite a task file from a record.

        The file's modification time is set to `synced_at`. On failure the
        original file is left untouched.

        Raises:
            TaskStoreError: If the write did not complete
        """
        ...

    @abstractmethod
    def link_tasks(self, project_path: Path, links: dict[str, int]) -> None:
        """
        Atomically rewrite the project file, marking new tasks as linked.

        Args:
            project_path: The project file
            links: Task path (as written in the project file) -> issue number
        """
        ...


__all__ = ["TaskStorePort", "TaskStoreError"]
