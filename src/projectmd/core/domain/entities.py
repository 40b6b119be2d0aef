"""
Domain Entities - The objects the sync engine reasons about.

A project file lists TaskReferences; each reference points at a task
file whose parsed content is a TaskRecord.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional


@dataclass(frozen=True)
class RemoteStatus:
    """
    Whether a task reference is already linked to a remote issue.

    Either New (no issue number yet) or Linked(issue_number).
    """

    issue_number: Optional[int] = None

    @classmethod
    def new(cls) -> "RemoteStatus":
        return cls(None)

    @classmethod
    def linked(cls, issue_number: int) -> "RemoteStatus":
        return cls(issue_number)

    @property
    def is_new(self) -> bool:
        return self.issue_number is None

    def __str__(self) -> str:
        return "new" if self.is_new else f"#{self.issue_number}"


@dataclass(frozen=True)
class TaskReference:
    """One line item in the project's task list."""

    path: Path
    description: str = ""
    remote_status: RemoteStatus = field(default_factory=RemoteStatus.new)


@dataclass(frozen=True)
class TaskRecord:
    """
    Parsed content of one task file.

    Timestamps are kept as the strings found in the header; the staleness
    policy parses them so malformed values are reported rather than guessed.
    `content` is the raw text following the header and is written back
    unchanged.
    """

    issue_id: Optional[int] = None
    task_type: Optional[str] = None
    tags: Optional[list[str]] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    extra: dict[str, Any] = field(default_factory=dict)
    title: str = ""
    body: str = ""
    content: str = field(default="", repr=False)

    @property
    def labels(self) -> list[str]:
        """Tags as the label list sent to the tracker."""
        return list(self.tags or [])

    @property
    def is_linked(self) -> bool:
        return self.issue_id is not None


@dataclass(frozen=True)
class ProjectConfig:
    """Header of the project file."""

    backend: str
    repo: str
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ProjectDocument:
    """A parsed project file."""

    config: ProjectConfig
    tasks: list[TaskReference] = field(default_factory=list)
    content: str = field(default="", repr=False)

    @property
    def new_tasks(self) -> list[TaskReference]:
        return [t for t in self.tasks if t.remote_status.is_new]

    @property
    def linked_tasks(self) -> list[TaskReference]:
        return [t for t in self.tasks if not t.remote_status.is_new]
