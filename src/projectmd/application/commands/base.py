"""
Command Base - Shared machinery for write operations against the tracker.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

from ...core.ports.issue_tracker import IssueTrackerError


@dataclass
class CommandResult:
    """Outcome of executing a command."""

    success: bool = True
    data: Any = None
    error: Optional[str] = None
    dry_run: bool = False

    @classmethod
    def ok(cls, data: Any = None, dry_run: bool = False) -> "CommandResult":
        return cls(success=True, data=data, dry_run=dry_run)

    @classmethod
    def fail(cls, error: str) -> "CommandResult":
        return cls(success=False, error=error)


class Command(ABC):
    """
    A single write operation.

    Subclasses implement validate() and _execute(); execute() handles
    dry-run and converts tracker errors into a failed result.
    """

    def __init__(self, dry_run: bool = False):
        self.dry_run = dry_run
        self.logger = logging.getLogger(self.__class__.__name__)

    @property
    @abstractmethod
    def description(self) -> str:
        """Human readable summary, used in logs."""
        ...

    @abstractmethod
    def validate(self) -> Optional[str]:
        """Return an error message if the command cannot run, else None."""
        ...

    @abstractmethod
    def _execute(self) -> Any:
        """Perform the operation and return its data."""
        ...

    def execute(self) -> CommandResult:
        error = self.validate()
        if error:
            return CommandResult.fail(error)

        if self.dry_run:
            self.logger.info(f"[DRY-RUN] Would {self.description}")
            return CommandResult.ok(dry_run=True)

        try:
            return CommandResult.ok(self._execute())
        except IssueTrackerError as e:
            self.logger.error(f"Failed to {self.description}: {e}")
            return CommandResult.fail(str(e))
