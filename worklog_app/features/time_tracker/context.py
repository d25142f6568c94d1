"""Pure helpers to build the time tracker context (no Streamlit)."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

import pandas as pd

from worklog_app.analytics.aggregations import worklogs as agg
from worklog_app.core.models import AggregationRequest, TicketInfo
from worklog_app.features.navigation import NavigationTab, TabKind
from worklog_app.features.roster import UserRoster, color_map, visible_usernames


@dataclass(slots=True)
class TimeTrackerContext:
    """Everything the time tracker page renders for one window."""

    visible_usernames: list[str]
    worklogs: pd.DataFrame
    daily: pd.DataFrame
    tickets: pd.DataFrame
    user_stats: pd.DataFrame
    ranked_by_hours: pd.DataFrame
    ranked_by_consistency: pd.DataFrame
    user_totals: dict[str, float] = field(default_factory=dict)
    total_hours: float = 0.0
    unique_tickets: int = 0
    days_with_logs: int = 0
    avg_hours_per_day: float = 0.0


def build_time_tracker_context(
    df: pd.DataFrame,
    ticket_info: Mapping[str, TicketInfo],
    roster: UserRoster,
    request: AggregationRequest,
) -> TimeTrackerContext:
    """Assemble summary cards, rankings, and base views for the page.

    Parameters
    ----------
    df : pd.DataFrame
        Record frame from ``records_to_dataframe``.
    ticket_info : Mapping[str, TicketInfo]
        Ticket metadata keyed by issue key.
    roster : UserRoster
        Tracked users; only visible ones are charted.
    request : AggregationRequest
        Authors, window length, and "today" for the window.
    """
    window_days, reference_now = request.window_days, request.reference_now
    visible = [u for u in visible_usernames(roster) if u.lower() in request.authors_lower]
    windowed = agg.filter_by_window(df, window_days, reference_now)
    visible_logs = agg.restrict_to_authors(windowed, visible)

    stats = agg.user_stats(windowed, visible, window_days, reference_now, colors=color_map(roster))
    user_totals = dict(zip(stats["username"], stats["total_hours"], strict=True))
    total_seconds = int(visible_logs["seconds"].sum()) if not visible_logs.empty else 0
    total_hours = float(agg.to_hours(total_seconds))
    days_with_logs = int(visible_logs["date"].nunique()) if not visible_logs.empty else 0
    avg = float(agg.to_hours(total_seconds / days_with_logs)) if days_with_logs else 0.0

    return TimeTrackerContext(
        visible_usernames=visible,
        worklogs=windowed,
        daily=agg.multi_user_daily(windowed, visible, window_days, reference_now),
        tickets=agg.multi_user_ticket(windowed, visible, ticket_info),
        user_stats=stats,
        ranked_by_hours=agg.rank_by_hours(stats),
        ranked_by_consistency=agg.rank_by_consistency(stats),
        user_totals=user_totals,
        total_hours=total_hours,
        unique_tickets=int(visible_logs["key"].nunique()) if not visible_logs.empty else 0,
        days_with_logs=days_with_logs,
        avg_hours_per_day=avg,
    )


def view_for_tab(
    tab: NavigationTab,
    ctx: TimeTrackerContext,
    ticket_info: Mapping[str, TicketInfo],
    request: AggregationRequest,
) -> pd.DataFrame:
    """The DataFrame behind a tab: a base view or a drill-down breakdown."""
    if tab.kind is TabKind.BASE_DAILY:
        return ctx.daily
    if tab.kind is TabKind.BASE_TICKETS:
        return ctx.tickets
    if tab.kind is TabKind.TICKET_DETAIL:
        return agg.ticket_daily_breakdown(
            ctx.worklogs, tab.payload or "", request.window_days, request.reference_now
        )
    return agg.day_ticket_breakdown(ctx.worklogs, tab.payload or "", ticket_info)
