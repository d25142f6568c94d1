import json
from types import SimpleNamespace

import pytest
import requests
from jira import JIRAError

from worklog_app.core.errors import UpstreamSearchError, UpstreamWorklogFetchError
from worklog_app.core.jira_client import JiraAPI


class FakeResponse:
    def __init__(self, status_code=200, payload=None, reason="OK"):
        self.status_code = status_code
        self.reason = reason
        self._payload = payload

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeSession:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    def _handle(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if self.exc is not None:
            raise self.exc
        return self.response

    def post(self, url, **kwargs):
        return self._handle("POST", url, **kwargs)

    def get(self, url, **kwargs):
        return self._handle("GET", url, **kwargs)


def _api(session):
    return JiraAPI("https://jira.example.com/", "token", client=SimpleNamespace(_session=session))


def test_search_posts_single_capped_page():
    session = FakeSession(FakeResponse(payload={"issues": [{"key": "AB-1", "fields": {"summary": "One"}}]}))
    issues = _api(session).search_issues('worklogAuthor in ("jdoe") AND worklogDate >= -30d')
    assert issues == [{"key": "AB-1", "fields": {"summary": "One"}}]
    method, url, kwargs = session.calls[0]
    assert method == "POST"
    assert url == "https://jira.example.com/rest/api/2/search"
    body = json.loads(kwargs["data"])
    assert body["maxResults"] == 1000
    assert body["fields"] == ["key", "summary"]
    assert body["jql"].startswith("worklogAuthor in")


def test_search_missing_issues_list_is_empty():
    session = FakeSession(FakeResponse(payload={}))
    assert _api(session).search_issues("x") == []


def test_search_error_carries_status_text():
    session = FakeSession(FakeResponse(status_code=503, reason="Service Unavailable"))
    with pytest.raises(UpstreamSearchError, match="Service Unavailable") as info:
        _api(session).search_issues("x")
    assert info.value.status_code == 503
    assert len(session.calls) == 1


def test_search_wraps_jira_error():
    exc = JIRAError(status_code=401, text="Unauthorized", response=FakeResponse(401, reason="Unauthorized"))
    with pytest.raises(UpstreamSearchError, match="Unauthorized"):
        _api(FakeSession(exc=exc)).search_issues("x")


def test_search_wraps_transport_error():
    with pytest.raises(UpstreamSearchError, match="refused"):
        _api(FakeSession(exc=requests.ConnectionError("connection refused"))).search_issues("x")


def test_fetch_worklogs_returns_entries():
    entries = [{"author": {"name": "jdoe"}, "started": "2024-05-06T09:00:00.000+0000", "timeSpentSeconds": 60}]
    session = FakeSession(FakeResponse(payload={"worklogs": entries}))
    assert _api(session).fetch_worklogs("AB-1") == entries
    assert session.calls[0][1] == "https://jira.example.com/rest/api/2/issue/AB-1/worklog"


@pytest.mark.parametrize(
    "session",
    [
        FakeSession(FakeResponse(status_code=404, reason="Not Found")),
        FakeSession(FakeResponse(payload=None)),
        FakeSession(FakeResponse(payload={"unexpected": True})),
        FakeSession(exc=requests.Timeout("read timed out")),
    ],
)
def test_fetch_worklogs_failures_raise_per_issue_error(session):
    with pytest.raises(UpstreamWorklogFetchError) as info:
        _api(session).fetch_worklogs("AB-7")
    assert info.value.issue_key == "AB-7"


def test_missing_session_is_reported():
    api = JiraAPI("https://jira.example.com", "token", client=SimpleNamespace())
    with pytest.raises(RuntimeError, match="session unavailable"):
        api.search_issues("x")
