"""
GitHub Adapter - Implements IssueTrackerPort for GitHub Issues.

This is the main entry point for GitHub integration.
"""

import logging
from typing import Any, Optional

import requests

from ...core.ports.issue_tracker import IssueTrackerPort, IssueData, IssueTrackerError, NotFoundError
from ...core.ports.config_provider import TrackerConfig
from .client import GitHubApiClient


class GitHubAdapter(IssueTrackerPort):
    """
    GitHub implementation of the IssueTrackerPort.

    Translates between IssueData and GitHub's issue payloads.
    """

    def __init__(
        self,
        config: TrackerConfig,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the GitHub adapter.

        Args:
            config: Tracker configuration (repo must be 'owner/name')
            session: Optional requests session (mainly for tests)

        Raises:
            ValueError: If the repo is not in 'owner/name' form
        """
        self.config = config
        self.owner, self.repo = config.owner_and_name
        self.logger = logging.getLogger("GitHubAdapter")

        self._client = GitHubApiClient(
            token=config.token,
            owner=self.owner,
            repo=self.repo,
            base_url=config.api_url,
            timeout=config.timeout,
            session=session,
        )

    # -------------------------------------------------------------------------
    # IssueTrackerPort Implementation - Properties
    # -------------------------------------------------------------------------

    @property
    def name(self) -> str:
        return "GitHub"

    def test_connection(self) -> bool:
        return self._client.test_connection()

    # -------------------------------------------------------------------------
    # IssueTrackerPort Implementation - Read Operations
    # -------------------------------------------------------------------------

    def get_issue(self, number: int) -> IssueData:
        data = self._client.get(f"{self._client.repo_url}/issues/{number}")
        return self._parse_issue(data)

    def list_issues(self, state: str = "all") -> list[IssueData]:
        items = self._client.get_paginated(
            f"{self._client.repo_url}/issues",
            params={"state": state},
        )
        # The issues endpoint also returns pull requests
        return [self._parse_issue(item) for item in items if "pull_request" not in item]

    # -------------------------------------------------------------------------
    # IssueTrackerPort Implementation - Write Operations
    # -------------------------------------------------------------------------

    def create_issue(self, title: str, body: str, labels: list[str]) -> IssueData:
        data = self._client.post(
            f"{self._client.repo_url}/issues",
            json={"title": title, "body": body, "labels": list(labels)},
        )
        issue = self._parse_issue(data)
        self.logger.info(f"Created issue #{issue.number} in {self.owner}/{self.repo}")
        return issue

    def update_issue(
        self,
        number: int,
        title: str,
        body: str,
        labels: list[str],
    ) -> IssueData:
        try:
            data = self._client.patch(
                f"{self._client.repo_url}/issues/{number}",
                json={"title": title, "body": body, "labels": list(labels)},
            )
        except NotFoundError as e:
            raise NotFoundError(f"Issue #{number} not found in {self.owner}/{self.repo}", issue_number=number, cause=e)
        issue = self._parse_issue(data)
        self.logger.info(f"Updated issue #{issue.number} in {self.owner}/{self.repo}")
        return issue

    # -------------------------------------------------------------------------
    # Private Methods
    # -------------------------------------------------------------------------

    def _parse_issue(self, data: dict[str, Any]) -> IssueData:
        """Parse a GitHub API issue payload into IssueData."""
        try:
            labels = [
                label["name"] if isinstance(label, dict) else str(label)
                for label in data.get("labels") or []
            ]
            return IssueData(
                number=int(data["number"]),
                title=data.get("title") or "",
                body=data.get("body") or "",
                state=data.get("state") or "",
                labels=labels,
                url=data.get("html_url"),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise IssueTrackerError(f"Unexpected issue payload from GitHub: {str(data)[:200]}", cause=e)
