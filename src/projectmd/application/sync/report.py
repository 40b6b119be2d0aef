"""
Sync Report - Ordered per-task outcomes of one sync run.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional


class SyncAction(Enum):
    """What happened to a single task."""

    CREATED = "created"
    UPDATED = "updated"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class SyncOutcome:
    """
    Result of one synchronization attempt.

    issue_number is set for CREATED/UPDATED (None for a dry-run create)
    and for SKIPPED tasks that are already linked. error is set for FAILED.
    """

    action: SyncAction
    issue_number: Optional[int] = None
    error: Optional[str] = None
    dry_run: bool = False

    @classmethod
    def created(cls, issue_number: Optional[int], dry_run: bool = False) -> "SyncOutcome":
        return cls(SyncAction.CREATED, issue_number=issue_number, dry_run=dry_run)

    @classmethod
    def updated(cls, issue_number: int, dry_run: bool = False) -> "SyncOutcome":
        return cls(SyncAction.UPDATED, issue_number=issue_number, dry_run=dry_run)

    @classmethod
    def skipped(cls, issue_number: Optional[int] = None) -> "SyncOutcome":
        return cls(SyncAction.SKIPPED, issue_number=issue_number)

    @classmethod
    def failed(cls, error: str) -> "SyncOutcome":
        return cls(SyncAction.FAILED, error=error)

    def __str__(self) -> str:
        if self.action == SyncAction.FAILED:
            return f"failed: {self.error}"
        if self.issue_number is not None:
            return f"{self.action.value} #{self.issue_number}"
        return self.action.value


@dataclass
class SyncReport:
    """Result of a sync run, in project task-list order."""

    entries: list[tuple[Path, SyncOutcome]] = field(default_factory=list)
    dry_run: bool = False
    force: bool = False
    warnings: list[str] = field(default_factory=list)

    def add(self, path: Path, outcome: SyncOutcome) -> None:
        """Append the outcome for one task reference."""
        self.entries.append((path, outcome))

    def add_warning(self, warning: str) -> None:
        self.warnings.append(warning)

    def _with_action(self, action: SyncAction) -> list[tuple[Path, SyncOutcome]]:
        return [(path, outcome) for path, outcome in self.entries if outcome.action == action]

    @property
    def total(self) -> int:
        return len(self.entries)

    @property
    def created(self) -> list[tuple[Path, SyncOutcome]]:
        return self._with_action(SyncAction.CREATED)

    @property
    def updated(self) -> list[tuple[Path, SyncOutcome]]:
        return self._with_action(SyncAction.UPDATED)

    @property
    def skipped(self) -> list[tuple[Path, SyncOutcome]]:
        return self._with_action(SyncAction.SKIPPED)

    @property
    def failed(self) -> list[tuple[Path, SyncOutcome]]:
        return self._with_action(SyncAction.FAILED)

    @property
    def success(self) -> bool:
        """True when no task needs manual attention."""
        return not self.failed

    def counts(self) -> dict[SyncAction, int]:
        counts = {action: 0 for action in SyncAction}
        for _, outcome in self.entries:
            counts[outcome.action] += 1
        return counts
