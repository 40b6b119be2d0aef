"""
Issue Commands - Create and update remote issues.
"""

from typing import Optional

from ...core.ports.issue_tracker import IssueTrackerPort, IssueData
from .base import Command


class CreateIssueCommand(Command):
    """Create a new issue; result data is the created IssueData."""

    def __init__(
        self,
        tracker: IssueTrackerPort,
        title: str,
        body: str = "",
        labels: Optional[list[str]] = None,
        dry_run: bool = False,
    ):
        super().__init__(dry_run=dry_run)
        self.tracker = tracker
        self.title = title
        self.body = body
        self.labels = list(labels or [])

    @property
    def description(self) -> str:
        return f"create issue '{self.title[:50]}'"

    def validate(self) -> Optional[str]:
        if not self.title or not self.title.strip():
            return "Missing title: task file has no '# ' heading"
        return None

    def _execute(self) -> IssueData:
        return self.tracker.create_issue(self.title, self.body, self.labels)


class UpdateIssueCommand(Command):
    """Overwrite title, body and labels of an existing issue."""

    def __init__(
        self,
        tracker: IssueTrackerPort,
        issue_number: int,
        title: str,
        body: str = "",
        labels: Optional[list[str]] = None,
        dry_run: bool = False,
    ):
        super().__init__(dry_run=dry_run)
        self.tracker = tracker
        self.issue_number = issue_number
        self.title = title
        self.body = body
        self.labels = list(labels or [])

    @property
    def description(self) -> str:
        return f"update issue #{self.issue_number}"

    def validate(self) -> Optional[str]:
        if not self.issue_number or self.issue_number <= 0:
            return f"Invalid issue number: {self.issue_number!r}"
        if not self.title or not self.title.strip():
            return "Missing title: task file has no '# ' heading"
        return None

    def _execute(self) -> IssueData:
        return self.tracker.update_issue(self.issue_number, self.title, self.body, self.labels)
