"""Jira API client wrapper (REST v2 search + per-issue worklog listing)."""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

import requests
from jira import JIRA, JIRAError

from .config import MAX_SEARCH_RESULTS, SEARCH_FIELDS
from .errors import UpstreamSearchError, UpstreamWorklogFetchError


def _status_text(resp: Any) -> str:
    reason = getattr(resp, "reason", None)
    if reason:
        return str(reason)
    return str(getattr(resp, "status_code", "unknown status"))


def _jira_error_text(exc: JIRAError) -> str:
    response = getattr(exc, "response", None)
    if response is not None:
        return _status_text(response)
    return exc.text or str(exc.status_code or "unknown status")


class JiraAPI:
    def __init__(self, server: str, token: str, *, client: Any = None):
        self.server = server.rstrip("/")
        # No retries: a transient upstream failure must surface immediately.
        self.client = client or JIRA(server=self.server, token_auth=token, max_retries=0)

    def _session(self):
        session = getattr(self.client, "_session", None)
        if session is None:
            raise RuntimeError("JIRA session unavailable")
        return session

    def search_issues(
        self,
        jql: str,
        fields: Sequence[str] = SEARCH_FIELDS,
        max_results: int = MAX_SEARCH_RESULTS,
    ) -> list[dict[str, Any]]:
        """Run one search page and return the raw issue objects.

        Raises
        ------
        UpstreamSearchError
            On any non-success response or transport failure. The message
            carries the upstream status text.
        """
        url = f"{self.server}/rest/api/2/search"
        payload = {"jql": jql, "fields": list(fields), "maxResults": max_results}
        try:
            resp = self._session().post(url, data=json.dumps(payload))
        except JIRAError as exc:
            raise UpstreamSearchError(
                f"Search failed: {_jira_error_text(exc)}", status_code=exc.status_code
            ) from exc
        except requests.RequestException as exc:
            raise UpstreamSearchError(f"Search failed: {exc}") from exc
        if resp.status_code >= 400:
            raise UpstreamSearchError(f"Search failed: {_status_text(resp)}", status_code=resp.status_code)
        try:
            data = resp.json()
        except ValueError as exc:
            raise UpstreamSearchError(f"Search failed: invalid JSON body ({exc})") from exc
        return list(data.get("issues") or [])

    def fetch_worklogs(self, issue_key: str) -> list[dict[str, Any]]:
        """Return the raw worklog entries of one issue.

        Raises
        ------
        UpstreamWorklogFetchError
            On any failure for this issue; callers decide whether to skip it.
        """
        url = f"{self.server}/rest/api/2/issue/{issue_key}/worklog"
        try:
            resp = self._session().get(url)
        except JIRAError as exc:
            raise UpstreamWorklogFetchError(
                issue_key, _jira_error_text(exc), status_code=exc.status_code
            ) from exc
        except requests.RequestException as exc:
            raise UpstreamWorklogFetchError(issue_key, str(exc)) from exc
        if resp.status_code >= 400:
            raise UpstreamWorklogFetchError(issue_key, _status_text(resp), status_code=resp.status_code)
        try:
            data = resp.json()
        except ValueError as exc:
            raise UpstreamWorklogFetchError(issue_key, f"invalid JSON body ({exc})") from exc
        worklogs = data.get("worklogs") if isinstance(data, dict) else None
        if not isinstance(worklogs, list):
            raise UpstreamWorklogFetchError(issue_key, "response has no worklogs list")
        return worklogs
