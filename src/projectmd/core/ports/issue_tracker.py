"""
Issue Tracker Port - Abstract interface for remote issue trackers.

The sync engine only ever talks to a tracker through this interface.
Adapters (GitHub, ...) implement it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

from ..exceptions import ProjectMdError


@dataclass
class IssueData:
    """Tracker-agnostic view of a remote issue."""

    number: int
    title: str = ""
    body: str = ""
    state: str = ""
    labels: list[str] = field(default_factory=list)
    url: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.state.lower() == "open"


class IssueTrackerError(ProjectMdError):
    """Base exception for issue tracker errors."""

    def __init__(
        self,
        message: str,
        issue_number: Optional[int] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message, cause=cause)
        self.issue_number = issue_number


class AuthenticationError(IssueTrackerError):
    """Authentication with the tracker failed."""


class NotFoundError(IssueTrackerError):
    """The requested issue or repository does not exist."""


class TrackerPermissionError(IssueTrackerError):
    """The credentials lack permission for the operation."""


class RateLimitError(IssueTrackerError):
    """The tracker refused the request because of rate limiting."""

    def __init__(
        self,
        message: str,
        reset_at: Optional[int] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message, cause=cause)
        self.reset_at = reset_at


class TransientError(IssueTrackerError):
    """Network failure or timeout; retrying later may succeed."""


BackendError = IssueTrackerError


class IssueTrackerPort(ABC):
    """
    Abstract interface for issue tracker operations.

    Every method raises IssueTrackerError (or a subclass) on failure.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human readable tracker name."""
        ...

    @abstractmethod
    def test_connection(self) -> bool:
        """Return True if the tracker is reachable with the configured credentials."""
        ...

    @abstractmethod
    def create_issue(self, title: str, body: str, labels: list[str]) -> IssueData:
        """Create a new issue and return it (with its number)."""
        ...

    @abstractmethod
    def update_issue(
        self,
        number: int,
        title: str,
        body: str,
        labels: list[str],
    ) -> IssueData:
        """Replace title, body and labels of an existing issue."""
        ...

    @abstractmethod
    def get_issue(self, number: int) -> IssueData:
        """Fetch a single issue."""
        ...

    @abstractmethod
    def list_issues(self, state: str = "all") -> list[IssueData]:
        """List issues of the repository."""
        ...
