"""Tests for the GitHub adapter and API client."""

from unittest.mock import Mock

import pytest
import requests

from projectmd.adapters.github import GitHubAdapter, GitHubApiClient
from projectmd.core.ports.config_provider import TrackerConfig
from projectmd.core.ports.issue_tracker import (
    IssueTrackerError,
    AuthenticationError,
    NotFoundError,
    TrackerPermissionError,
    RateLimitError,
    TransientError,
)


def make_response(status=200, json_data=None, headers=None, links=None, text=None):
    response = Mock()
    response.status_code = status
    response.ok = status < 400
    response.json.return_value = json_data
    response.text = text if text is not None else ("" if json_data is None else "{...}")
    response.reason = "Reason"
    response.headers = headers or {}
    response.links = links or {}
    return response


def issue_payload(number, title="Title", state="open", **extra):
    payload = {
        "number": number,
        "title": title,
        "body": "Body",
        "state": state,
        "labels": [{"name": "infra"}],
        "html_url": f"https://github.com/owner/repo/issues/{number}",
    }
    payload.update(extra)
    return payload


@pytest.fixture
def session():
    return Mock()


@pytest.fixture
def adapter(session):
    config = TrackerConfig(repo="owner/repo", token="secret-token")
    return GitHubAdapter(config, session=session)


class TestGitHubApiClient:
    """Tests for GitHubApiClient request handling."""

    def test_sets_headers(self, session):
        GitHubApiClient(token="abc", owner="o", repo="r", session=session)

        headers = session.headers.update.call_args[0][0]
        assert headers["Authorization"] == "Bearer abc"
        assert headers["Accept"] == "application/vnd.github+json"
        assert headers["X-GitHub-Api-Version"] == "2022-11-28"

    def test_enterprise_base_url(self, session):
        client = GitHubApiClient(token="abc", owner="o", repo="r", base_url="https://ghe.local/api/v3/", session=session)
        assert client.repo_url == "https://ghe.local/api/v3/repos/o/r"

    def test_relative_url_and_timeout(self, session):
        session.request.return_value = make_response(json_data={"login": "me"})
        client = GitHubApiClient(token="abc", owner="o", repo="r", timeout=5.0, session=session)

        assert client.get("user") == {"login": "me"}

        session.request.assert_called_once_with("GET", "https://api.github.com/user", timeout=5.0)

    @pytest.mark.parametrize("status,error", [
        (401, AuthenticationError),
        (403, TrackerPermissionError),
        (404, NotFoundError),
        (410, NotFoundError),
        (422, IssueTrackerError),
        (500, TransientError),
        (502, TransientError),
    ])
    def test_error_mapping(self, session, status, error):
        session.request.return_value = make_response(status, json_data={"message": "nope"})
        client = GitHubApiClient(token="abc", owner="o", repo="r", session=session)

        with pytest.raises(error):
            client.get("user")

    def test_validation_error_message(self, session):
        session.request.return_value = make_response(422, json_data={"message": "Validation Failed"})
        client = GitHubApiClient(token="abc", owner="o", repo="r", session=session)

        with pytest.raises(IssueTrackerError, match="Validation Failed"):
            client.post("repos/o/r/issues", json={})

    def test_rate_limit(self, session):
        session.request.return_value = make_response(
            403,
            json_data={"message": "API rate limit exceeded"},
            headers={"X-RateLimit-Remaining": "0", "X-RateLimit-Reset": "1700000000"},
        )
        client = GitHubApiClient(token="abc", owner="o", repo="r", session=session)

        with pytest.raises(RateLimitError) as exc_info:
            client.get("user")
        assert exc_info.value.reset_at == 1700000000

    def test_secondary_rate_limit(self, session):
        session.request.return_value = make_response(429, json_data={"message": "slow down"})
        client = GitHubApiClient(token="abc", owner="o", repo="r", session=session)

        with pytest.raises(RateLimitError):
            client.get("user")

    @pytest.mark.parametrize("exc,error", [
        (requests.exceptions.Timeout("timed out"), TransientError),
        (requests.exceptions.ConnectionError("refused"), TransientError),
        (requests.exceptions.InvalidURL("bad"), IssueTrackerError),
    ])
    def test_network_errors(self, session, exc, error):
        session.request.side_effect = exc
        client = GitHubApiClient(token="abc", owner="o", repo="r", session=session)

        with pytest.raises(error):
            client.get("user")

    def test_non_json_error_body(self, session):
        response = make_response(500, text="<html>Bad gateway</html>")
        response.json.side_effect = ValueError("not json")
        session.request.return_value = response
        client = GitHubApiClient(token="abc", owner="o", repo="r", session=session)

        with pytest.raises(TransientError, match="Bad gateway"):
            client.get("user")

    def test_non_json_success_body(self, session):
        response = make_response(200, text="<html>captive portal</html>")
        response.json.side_effect = ValueError("Expecting value")
        session.request.return_value = response
        client = GitHubApiClient(token="abc", owner="o", repo="r", session=session)

        with pytest.raises(IssueTrackerError, match="Invalid JSON") as exc_info:
            client.get("user")
        assert isinstance(exc_info.value.cause, ValueError)

    def test_empty_success_body(self, session):
        session.request.return_value = make_response(204)
        client = GitHubApiClient(token="abc", owner="o", repo="r", session=session)

        assert client.get("user") == {}

    def test_pagination_follows_links(self, session):
        session.request.side_effect = [
            make_response(json_data=[{"id": 1}], links={"next": {"url": "https://api.github.com/page2"}}),
            make_response(json_data=[{"id": 2}]),
        ]
        client = GitHubApiClient(token="abc", owner="o", repo="r", session=session)

        items = client.get_paginated("repos/o/r/issues", params={"state": "all"})

        assert items == [{"id": 1}, {"id": 2}]
        first, second = session.request.call_args_list
        assert first[1]["params"] == {"state": "all", "per_page": 100}
        assert second[0][1] == "https://api.github.com/page2"
        assert second[1]["params"] is None

    def test_connection(self, session):
        session.request.return_value = make_response(json_data={"full_name": "o/r"})
        client = GitHubApiClient(token="abc", owner="o", repo="r", session=session)
        assert client.test_connection()

        session.request.return_value = make_response(404, json_data={"message": "Not Found"})
        assert not client.test_connection()


class TestGitHubAdapter:
    """Tests for GitHubAdapter."""

    def test_invalid_repo(self, session):
        with pytest.raises(ValueError, match="owner/repo"):
            GitHubAdapter(TrackerConfig(repo="just-a-name"), session=session)

    def test_name(self, adapter):
        assert adapter.name == "GitHub"

    def test_connection_checks_repository(self, adapter, session):
        session.request.return_value = make_response(json_data={"full_name": "owner/repo"})

        assert adapter.test_connection()
        assert session.request.call_args[0] == ("GET", "https://api.github.com/repos/owner/repo")

        session.request.return_value = make_response(401, json_data={"message": "Bad credentials"})
        assert not adapter.test_connection()

    def test_create_issue(self, adapter, session):
        session.request.return_value = make_response(201, json_data=issue_payload(12, "New task"))

        issue = adapter.create_issue("New task", "Body", ["infra"])

        assert issue.number == 12
        assert issue.labels == ["infra"]
        assert issue.url == "https://github.com/owner/repo/issues/12"
        method, url = session.request.call_args[0]
        assert (method, url) == ("POST", "https://api.github.com/repos/owner/repo/issues")
        assert session.request.call_args[1]["json"] == {"title": "New task", "body": "Body", "labels": ["infra"]}

    def test_update_issue_overwrites_fields(self, adapter, session):
        session.request.return_value = make_response(json_data=issue_payload(7))

        issue = adapter.update_issue(7, "Title", "", [])

        assert issue.number == 7
        method, url = session.request.call_args[0]
        assert (method, url) == ("PATCH", "https://api.github.com/repos/owner/repo/issues/7")
        assert session.request.call_args[1]["json"] == {"title": "Title", "body": "", "labels": []}

    def test_update_missing_issue(self, adapter, session):
        session.request.return_value = make_response(404, json_data={"message": "Not Found"})

        with pytest.raises(NotFoundError) as exc_info:
            adapter.update_issue(99, "Title", "", [])
        assert exc_info.value.issue_number == 99
        assert "#99" in str(exc_info.value)

    def test_get_issue_with_null_fields(self, adapter, session):
        session.request.return_value = make_response(json_data={"number": 3, "title": "T", "body": None, "labels": None})

        issue = adapter.get_issue(3)

        assert issue.body == ""
        assert issue.labels == []
        assert issue.url is None

    @pytest.mark.parametrize("payload", [
        {"message": "proxy"},
        {"number": "not-a-number"},
        ["unexpected"],
    ])
    def test_malformed_issue_payload(self, adapter, session, payload):
        session.request.return_value = make_response(201, json_data=payload)

        with pytest.raises(IssueTrackerError, match="Unexpected issue payload"):
            adapter.create_issue("Title", "", [])

    def test_list_issues_skips_pull_requests(self, adapter, session):
        session.request.return_value = make_response(json_data=[
            issue_payload(1),
            issue_payload(2, state="closed"),
            issue_payload(3, pull_request={"url": "..."}),
        ])

        issues = adapter.list_issues()

        assert [issue.number for issue in issues] == [1, 2]
        assert [issue.is_open for issue in issues] == [True, False]
