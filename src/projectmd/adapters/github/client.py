"""
GitHub API Client - Low-level HTTP client for the GitHub REST API.

This handles the raw HTTP communication with GitHub.
The GitHubAdapter uses this to implement the IssueTrackerPort.
"""

import logging
from typing import Any, Optional

import requests

from ...core.ports.issue_tracker import (
    IssueTrackerError,
    AuthenticationError,
    NotFoundError,
    TrackerPermissionError,
    RateLimitError,
    TransientError,
)


class GitHubApiClient:
    """
    Low-level GitHub REST API client.

    Handles authentication, request/response, and error handling.
    """

    API_VERSION = "2022-11-28"
    DEFAULT_URL = "https://api.github.com"

    def __init__(
        self,
        token: str,
        owner: str,
        repo: str,
        base_url: str = DEFAULT_URL,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the GitHub client.

        Args:
            token: Personal access token
            owner: Repository owner (user or organisation)
            repo: Repository name
            base_url: API root (GitHub Enterprise uses https://host/api/v3)
            timeout: Per-request timeout in seconds
            session: Optional pre-configured requests session
        """
        self.base_url = base_url.rstrip("/")
        self.repo_url = f"{self.base_url}/repos/{owner}/{repo}"
        self.timeout = timeout
        self.logger = logging.getLogger("GitHubApiClient")

        self.headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": self.API_VERSION,
        }
        if token:
            self.headers["Authorization"] = f"Bearer {token}"

        self._session = session or requests.Session()
        self._session.headers.update(self.headers)

    # -------------------------------------------------------------------------
    # Core Request Methods
    # -------------------------------------------------------------------------

    def request(
        self,
        method: str,
        url: str,
        **kwargs
    ) -> Any:
        """
        Make an authenticated request to the GitHub API.

        Args:
            method: HTTP method (GET, POST, PATCH)
            url: Absolute URL or path relative to the API root
            **kwargs: Additional arguments for requests

        Returns:
            Decoded JSON response

        Raises:
            IssueTrackerError: On API errors
        """
        if not url.startswith("http"):
            url = f"{self.base_url}/{url.lstrip('/')}"
        kwargs.setdefault("timeout", self.timeout)

        self.logger.debug(f"{method} {url}")
        response = self._send(method, url, **kwargs)
        return self._handle_response(response, url)

    def get(self, url: str, **kwargs) -> Any:
        """GET request."""
        return self.request("GET", url, **kwargs)

    def post(self, url: str, json: Optional[dict] = None, **kwargs) -> Any:
        """POST request."""
        return self.request("POST", url, json=json, **kwargs)

    def patch(self, url: str, json: Optional[dict] = None, **kwargs) -> Any:
        """PATCH request."""
        return self.request("PATCH", url, json=json, **kwargs)

    def get_paginated(self, url: str, params: Optional[dict] = None, per_page: int = 100) -> list[Any]:
        """GET every page of a list endpoint, following Link headers."""
        params = dict(params or {})
        params["per_page"] = per_page
        if not url.startswith("http"):
            url = f"{self.base_url}/{url.lstrip('/')}"

        items: list[Any] = []
        next_url: Optional[str] = url
        while next_url:
            response = self._send("GET", next_url, params=params, timeout=self.timeout)
            page = self._handle_response(response, next_url)
            items.extend(page or [])
            next_url = response.links.get("next", {}).get("url")
            # The next link already carries the query string
            params = None
        return items

    # -------------------------------------------------------------------------
    # Response Handling
    # -------------------------------------------------------------------------

    def _send(self, method: str, url: str, **kwargs) -> requests.Response:
        try:
            return self._session.request(method, url, **kwargs)
        except requests.exceptions.Timeout as e:
            raise TransientError(f"Request timed out: {e}", cause=e)
        except requests.exceptions.ConnectionError as e:
            raise TransientError(f"Connection failed: {e}", cause=e)
        except requests.exceptions.RequestException as e:
            raise IssueTrackerError(f"Request failed: {e}", cause=e)

    def _handle_response(
        self,
        response: requests.Response,
        url: str
    ) -> Any:
        """Handle API response and errors."""
        if response.ok:
            if not response.text:
                return {}
            try:
                return response.json()
            except ValueError as e:
                raise IssueTrackerError(f"Invalid JSON in response from {url}: {response.text[:200]}", cause=e)

        status = response.status_code
        message = self._error_message(response)

        if status == 401:
            raise AuthenticationError(
                "Authentication failed. Check GITHUB_TOKEN."
            )

        if status == 429 or (status == 403 and response.headers.get("X-RateLimit-Remaining") == "0"):
            reset = response.headers.get("X-RateLimit-Reset")
            raise RateLimitError(
                f"Rate limit exceeded: {message}",
                reset_at=int(reset) if reset and reset.isdigit() else None,
            )

        if status == 403:
            raise TrackerPermissionError(f"Permission denied for {url}: {message}")

        if status in (404, 410):
            raise NotFoundError(f"Not found: {url}")

        if status >= 500:
            raise TransientError(f"GitHub server error {status}: {message}")

        raise IssueTrackerError(f"API error {status}: {message}")

    def _error_message(self, response: requests.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            return response.text[:500] if response.text else response.reason or ""
        if isinstance(data, dict) and data.get("message"):
            return str(data["message"])
        return str(data)[:500]

    # -------------------------------------------------------------------------
    # Convenience Methods
    # -------------------------------------------------------------------------

    def test_connection(self) -> bool:
        """Test if the repository is reachable with the configured token."""
        try:
            self.get(self.repo_url)
            return True
        except IssueTrackerError:
            return False
