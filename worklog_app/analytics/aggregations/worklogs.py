"""Worklog aggregations: day, ticket, and per-user summaries.

Every function takes the record frame produced by
:func:`worklog_app.core.mappers.records_to_dataframe` and returns a new
DataFrame; nothing is cached or mutated. Seconds are accumulated as integers
and converted to hours (rounded to two decimals) only in the returned frames.

Day-axis views cover exactly the weekdays of the window: weekend worklogs are
left out of them, and weekdays without worklogs appear with zero hours.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import datetime

import pandas as pd

from worklog_app.analytics.metrics.calendar import weekdays_in_window, window_cutoff
from worklog_app.core.config import (
    HOURS_DECIMALS,
    NO_TITLE_SENTINEL,
    SECONDS_PER_HOUR,
    is_reserved_username,
)
from worklog_app.core.errors import InvalidRequestError
from worklog_app.core.models import TicketInfo

TicketInfoMap = Mapping[str, TicketInfo]

DAILY_COLUMNS = ["date", "hours", "cumulative_hours"]
TICKET_COLUMNS = ["ticket", "title", "hours"]
USER_STAT_COLUMNS = ["username", "total_hours", "total_seconds", "days_logged", "consistency_pct"]


def to_hours(seconds):
    """Seconds (scalar, Series, or array) to hours rounded for display."""
    hours = seconds / SECONDS_PER_HOUR
    if isinstance(hours, float):
        return round(hours, HOURS_DECIMALS)
    return hours.round(HOURS_DECIMALS)


def ticket_title(ticket_info: TicketInfoMap | None, key: str) -> str:
    info = (ticket_info or {}).get(key)
    return info.summary if info is not None else NO_TITLE_SENTINEL


def unique_authors(authors: Sequence[str]) -> list[str]:
    """Caller order with case-insensitive duplicates dropped (first spelling wins).

    Raises ``InvalidRequestError`` for names that would collide with the fixed
    output columns.
    """
    seen: set[str] = set()
    out: list[str] = []
    for a in authors:
        if is_reserved_username(a):
            raise InvalidRequestError(f"{a!r} is reserved and cannot be used as a username")
        low = a.lower()
        if low not in seen:
            seen.add(low)
            out.append(a)
    return out


def restrict_to_authors(df: pd.DataFrame, authors: Sequence[str]) -> pd.DataFrame:
    """Keep rows whose author matches ``authors`` case-insensitively.

    Adds an ``_author`` column holding the caller's spelling of the name so
    per-author outputs are keyed consistently.
    """
    lookup = {a.lower(): a for a in unique_authors(authors)}
    if df.empty or not lookup:
        return df.iloc[0:0].assign(_author=pd.Series(dtype=object))
    canonical = df["author"].astype(str).str.lower().map(lookup)
    out = df.assign(_author=canonical)
    return out[out["_author"].notna()]


def _first_seen(values: pd.Series) -> list[str]:
    return list(dict.fromkeys(values.tolist()))


def filter_by_window(df: pd.DataFrame, window_days: int, reference_now: datetime) -> pd.DataFrame:
    """Rows dated on or after the window start (ISO strings compare lexically)."""
    cutoff = window_cutoff(window_days, reference_now)
    if df.empty:
        return df.copy()
    return df[df["date"].astype(str) >= cutoff].reset_index(drop=True)


def daily_totals(df: pd.DataFrame, window_days: int, reference_now: datetime) -> pd.DataFrame:
    days = weekdays_in_window(window_days, reference_now)
    if df.empty:
        seconds = pd.Series(0, index=days, dtype="int64")
    else:
        seconds = df.groupby("date", sort=False)["seconds"].sum().reindex(days, fill_value=0)
    out = pd.DataFrame({"date": days})
    out["hours"] = to_hours(seconds.to_numpy(dtype="int64"))
    out["cumulative_hours"] = to_hours(seconds.cumsum().to_numpy(dtype="int64"))
    return out[DAILY_COLUMNS]


def ticket_totals(df: pd.DataFrame, ticket_info: TicketInfoMap | None = None) -> pd.DataFrame:
    """Hours per ticket, largest first; exact ties keep first-seen order."""
    if df.empty:
        return pd.DataFrame(columns=TICKET_COLUMNS)
    seconds = df.groupby("key", sort=False)["seconds"].sum()
    out = pd.DataFrame(
        {
            "ticket": seconds.index.tolist(),
            "title": [ticket_title(ticket_info, k) for k in seconds.index],
            "_seconds": seconds.to_numpy(dtype="int64"),
        }
    )
    out = out.sort_values("_seconds", ascending=False, kind="stable")
    out["hours"] = to_hours(out["_seconds"])
    return out[TICKET_COLUMNS].reset_index(drop=True)


def multi_user_daily(
    df: pd.DataFrame,
    authors: Sequence[str],
    window_days: int,
    reference_now: datetime,
) -> pd.DataFrame:
    """Hours per (weekday, author); one column per visible author."""
    visible = unique_authors(authors)
    days = weekdays_in_window(window_days, reference_now)
    subset = restrict_to_authors(df, visible)
    if subset.empty:
        grid = pd.DataFrame(0, index=days, columns=visible, dtype="int64")
    else:
        grid = (
            subset.groupby(["date", "_author"], sort=False)["seconds"]
            .sum()
            .unstack(fill_value=0)
            .reindex(index=days, columns=visible, fill_value=0)
        )
    out = pd.DataFrame({"date": days})
    for author in visible:
        out[author] = to_hours(grid[author].to_numpy(dtype="int64"))
    return out


def multi_user_ticket(
    df: pd.DataFrame,
    authors: Sequence[str],
    ticket_info: TicketInfoMap | None = None,
) -> pd.DataFrame:
    """Hours per (ticket, author) plus a ``total`` column, largest total first."""
    visible = unique_authors(authors)
    columns = ["ticket", "title", "total", *visible]
    subset = restrict_to_authors(df, visible)
    if subset.empty:
        return pd.DataFrame(columns=columns)
    order = _first_seen(subset["key"])
    grid = (
        subset.groupby(["key", "_author"], sort=False)["seconds"]
        .sum()
        .unstack(fill_value=0)
        .reindex(index=order, columns=visible, fill_value=0)
    )
    out = pd.DataFrame(
        {
            "ticket": order,
            "title": [ticket_title(ticket_info, k) for k in order],
            "_seconds": grid.sum(axis=1).to_numpy(dtype="int64"),
        }
    )
    for author in visible:
        out[author] = to_hours(grid[author].to_numpy(dtype="int64"))
    out = out.sort_values("_seconds", ascending=False, kind="stable")
    out["total"] = to_hours(out["_seconds"])
    return out[columns].reset_index(drop=True)


def ticket_daily_breakdown(
    df: pd.DataFrame,
    ticket_key: str,
    window_days: int,
    reference_now: datetime,
) -> pd.DataFrame:
    subset = df[df["key"] == ticket_key] if not df.empty else df
    return daily_totals(subset, window_days, reference_now)[["date", "hours"]]


def day_ticket_breakdown(
    df: pd.DataFrame,
    day: str,
    ticket_info: TicketInfoMap | None = None,
) -> pd.DataFrame:
    """Ticket totals for one exact date; tickets without work are simply absent."""
    subset = df[df["date"] == day] if not df.empty else df
    return ticket_totals(subset, ticket_info)


def user_stats(
    df: pd.DataFrame,
    authors: Sequence[str],
    window_days: int,
    reference_now: datetime,
    colors: Mapping[str, str] | None = None,
) -> pd.DataFrame:
    """Per-author hours, distinct days logged, and consistency percentage.

    Consistency is ``days_logged / weekdays_in_window * 100``, clamped to
    ``[0, 100]`` and 0 when the window has no weekdays.
    """
    visible = unique_authors(authors)
    subset = restrict_to_authors(filter_by_window(df, window_days, reference_now), visible)
    total_weekdays = len(weekdays_in_window(window_days, reference_now))
    rows = []
    for name in visible:
        logs = subset[subset["_author"] == name]
        days_logged = int(logs["date"].nunique())
        if total_weekdays > 0:
            consistency = min(days_logged / total_weekdays * 100.0, 100.0)
        else:
            consistency = 0.0
        seconds = int(logs["seconds"].sum())
        rows.append(
            {
                "username": name,
                "total_hours": float(to_hours(seconds)),
                "total_seconds": seconds,
                "days_logged": days_logged,
                "consistency_pct": consistency,
            }
        )
    out = pd.DataFrame(rows, columns=USER_STAT_COLUMNS)
    if colors is not None:
        out["color"] = [colors.get(name) for name in out["username"]]
    return out


def rank_by_hours(stats: pd.DataFrame) -> pd.DataFrame:
    # Sort on exact seconds, not rounded hours.
    return stats.sort_values("total_seconds", ascending=False, kind="stable").reset_index(drop=True)


def rank_by_consistency(stats: pd.DataFrame) -> pd.DataFrame:
    return stats.sort_values("consistency_pct", ascending=False, kind="stable").reset_index(drop=True)
