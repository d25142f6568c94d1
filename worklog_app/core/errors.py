"""Exception taxonomy for the worklog pipeline and navigation state."""

from __future__ import annotations


class WorklogAppError(Exception):
    """Base class for all errors raised by worklog_app."""


class ConfigurationError(WorklogAppError):
    """Jira location or credentials are missing."""


class InvalidRequestError(WorklogAppError, ValueError):
    """Caller input was rejected before any network call was made."""


class UpstreamSearchError(WorklogAppError, RuntimeError):
    """The issue search call failed; fatal to the whole request."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class UpstreamWorklogFetchError(WorklogAppError, RuntimeError):
    """A single issue's worklog listing failed; the issue is skipped."""

    def __init__(self, issue_key: str, message: str, status_code: int | None = None):
        super().__init__(f"Worklog fetch failed for {issue_key}: {message}")
        self.issue_key = issue_key
        self.status_code = status_code


class UnknownTabError(WorklogAppError, KeyError):
    """A navigation transition referenced a tab id that does not exist."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message instead.
        return str(self.args[0]) if self.args else ""
