"""
GitHub Adapter - Implementation of IssueTrackerPort for GitHub Issues.
"""

from .adapter import GitHubAdapter
from .client import GitHubApiClient

__all__ = [
    "GitHubAdapter",
    "GitHubApiClient",
]
