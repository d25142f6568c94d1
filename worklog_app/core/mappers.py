"""Mapping raw Jira search/worklog JSON into records and DataFrames."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

import pandas as pd

from .config import NO_TITLE_SENTINEL
from .models import IssueRef, RawWorklog, TicketInfo, WorklogRecord, WorklogResult

RECORD_COLUMNS: Sequence[str] = ("key", "author", "started", "date", "seconds")


def date_from_started(started: str) -> str:
    """Date portion of a tracker timestamp, taken verbatim (no tz conversion)."""
    return started.split("T")[0]


def author_name(author: Any) -> str | None:
    # Server/Data Center exposes ``name``; Cloud only has ``displayName``.
    if isinstance(author, Mapping):
        name = author.get("name") or author.get("displayName")
        return str(name) if name else None
    if isinstance(author, str):
        return author or None
    return None


def map_issue_ref(raw: Mapping[str, Any]) -> IssueRef | None:
    key = raw.get("key")
    if not key:
        return None
    fields = raw.get("fields") or {}
    return IssueRef(key=str(key), summary=fields.get("summary"))


def map_worklog_entry(raw: Mapping[str, Any]) -> RawWorklog | None:
    author = author_name(raw.get("author"))
    started = raw.get("started")
    if not author or not isinstance(started, str) or not started:
        return None
    try:
        seconds = int(raw.get("timeSpentSeconds") or 0)
    except (TypeError, ValueError):
        return None
    return RawWorklog(author=author, started=started, seconds=max(seconds, 0))


def ticket_info_from_issues(issues: Iterable[IssueRef]) -> dict[str, TicketInfo]:
    return {
        issue.key: TicketInfo(key=issue.key, summary=issue.summary or NO_TITLE_SENTINEL) for issue in issues
    }


def normalize_worklogs(
    issues: Sequence[IssueRef],
    raw_by_issue: Mapping[str, Sequence[RawWorklog]],
) -> tuple[list[WorklogRecord], dict[str, TicketInfo]]:
    """Flatten filtered worklogs into records plus a ticket metadata map.

    Records follow the order of ``issues`` and, within an issue, the order the
    tracker returned. Issues missing from ``raw_by_issue`` (skipped fetches)
    contribute no records but still get ticket metadata.
    """
    records: list[WorklogRecord] = []
    for issue in issues:
        for w in raw_by_issue.get(issue.key, ()):
            records.append(
                WorklogRecord(
                    ticket_key=issue.key,
                    author=w.author,
                    started=w.started,
                    date=date_from_started(w.started),
                    seconds=w.seconds,
                )
            )
    return records, ticket_info_from_issues(issues)


def records_from_payload(items: Iterable[Mapping[str, Any]]) -> list[WorklogRecord]:
    """Rebuild records from the outbound ``worklogs`` JSON list."""
    records = []
    for item in items:
        started = str(item.get("started") or "")
        records.append(
            WorklogRecord(
                ticket_key=str(item.get("key")),
                author=str(item.get("author")),
                started=started,
                date=str(item.get("date") or date_from_started(started)),
                seconds=int(item.get("timeSpentSeconds") or 0),
            )
        )
    return records


def ticket_info_from_payload(payload: Mapping[str, Mapping[str, Any]]) -> dict[str, TicketInfo]:
    return {
        key: TicketInfo(key=key, summary=(info or {}).get("summary") or NO_TITLE_SENTINEL)
        for key, info in payload.items()
    }


def records_to_dataframe(records: Iterable[WorklogRecord]) -> pd.DataFrame:
    rows = [
        {
            "key": r.ticket_key,
            "author": r.author,
            "started": r.started,
            "date": r.date,
            "seconds": r.seconds,
        }
        for r in records
    ]
    df = pd.DataFrame(rows, columns=list(RECORD_COLUMNS))
    df["seconds"] = df["seconds"].astype("int64")
    return df


def result_from_payload(payload: Mapping[str, Any]) -> WorklogResult:
    """Inverse of ``WorklogResult.to_dict`` for JSON kept between reruns."""
    return WorklogResult(
        worklogs=records_from_payload(payload.get("worklogs") or []),
        ticket_info=ticket_info_from_payload(payload.get("ticketInfo") or {}),
        usernames=list(payload.get("usernames") or []),
    )
