"""Domain data models for worklog requests, records, and results."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .config import DEFAULT_WINDOW_DAYS, NO_TITLE_SENTINEL
from .errors import InvalidRequestError


@dataclass(slots=True, frozen=True)
class IssueRef:
    key: str
    summary: str | None = None


@dataclass(slots=True, frozen=True)
class RawWorklog:
    author: str
    started: str
    seconds: int


@dataclass(slots=True, frozen=True)
class TicketInfo:
    key: str
    summary: str = NO_TITLE_SENTINEL

    def to_dict(self) -> dict[str, str]:
        return {"key": self.key, "summary": self.summary}


@dataclass(slots=True, frozen=True)
class WorklogRecord:
    ticket_key: str
    author: str
    started: str
    date: str
    seconds: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.ticket_key,
            "started": self.started,
            "timeSpentSeconds": self.seconds,
            "date": self.date,
            "author": self.author,
        }


def _positive_days(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidRequestError(f"days must be a positive integer, got {value!r}")
    return value


@dataclass(slots=True, frozen=True)
class AggregationRequest:
    """Inputs shared by every aggregation function.

    ``reference_now`` is injected rather than read from the clock so that the
    same records and request always produce the same views.
    """

    authors: frozenset[str]
    window_days: int
    reference_now: datetime

    def __post_init__(self):
        if not self.authors:
            raise InvalidRequestError("At least one author is required")
        _positive_days(self.window_days)

    @property
    def authors_lower(self) -> frozenset[str]:
        return frozenset(a.lower() for a in self.authors)


@dataclass(slots=True, frozen=True)
class WorklogRequest:
    usernames: tuple[str, ...]
    days: int = DEFAULT_WINDOW_DAYS

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any] | None) -> WorklogRequest:
        """Validate an inbound ``{usernames, days}`` payload."""
        if not isinstance(payload, Mapping):
            raise InvalidRequestError("Request body must be an object")
        usernames = payload.get("usernames")
        if not usernames or not isinstance(usernames, list):
            raise InvalidRequestError("At least one username is required")
        if not all(isinstance(u, str) and u.strip() for u in usernames):
            raise InvalidRequestError("Usernames must be non-empty strings")
        days = payload.get("days")
        if days is None:
            days = DEFAULT_WINDOW_DAYS
        return cls(usernames=tuple(usernames), days=_positive_days(days))


@dataclass(slots=True)
class WorklogResult:
    worklogs: list[WorklogRecord] = field(default_factory=list)
    ticket_info: dict[str, TicketInfo] = field(default_factory=dict)
    usernames: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "worklogs": [w.to_dict() for w in self.worklogs],
            "ticketInfo": {key: info.to_dict() for key, info in self.ticket_info.items()},
            "usernames": list(self.usernames),
        }
