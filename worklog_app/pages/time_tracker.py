"""Time Tracker page - worklog hours per day, per ticket, and per user.

Users are tracked in a session roster; the page fetches their worklogs for
the selected trailing window and lets the viewer drill into a single day or
ticket through closable tabs.
"""

from __future__ import annotations

import logging
from datetime import datetime

import pytz
import streamlit as st

from worklog_app.app import register_page
from worklog_app.core.config import DATE_RANGE_OPTIONS, DEFAULT_WINDOW_DAYS, TIMEZONE, is_reserved_username
from worklog_app.core.errors import WorklogAppError
from worklog_app.core.mappers import records_to_dataframe, result_from_payload
from worklog_app.core.models import AggregationRequest, WorklogRequest, WorklogResult
from worklog_app.core.service import WorklogService
from worklog_app.features import navigation as nav
from worklog_app.features import roster as rs
from worklog_app.features.time_tracker import TimeTrackerContext, build_time_tracker_context, view_for_tab
from worklog_app.visual.charts import (
    day_ticket_chart,
    multi_user_daily_chart,
    multi_user_ticket_chart,
    ticket_daily_chart,
)
from worklog_app.visual.progress import FetchProgress
from worklog_app.visual.tables import render_ticket_table, ticket_url

logger = logging.getLogger(__name__)

TZ = pytz.timezone(TIMEZONE)
PAGE_KEY = "time_tracker"


def _state(name: str, default):
    key = f"{PAGE_KEY}_{name}"
    if key not in st.session_state:
        st.session_state[key] = default
    return st.session_state[key]


def _set_state(name: str, value) -> None:
    st.session_state[f"{PAGE_KEY}_{name}"] = value


def _forget_user_widgets(usernames) -> None:
    # Widget state outlives the user; a re-added name must start visible.
    for username in usernames:
        st.session_state.pop(f"{PAGE_KEY}_show_{username}", None)


def _render_user_manager(roster: rs.UserRoster) -> rs.UserRoster:
    st.subheader("Users")
    with st.form(f"{PAGE_KEY}_add_user", clear_on_submit=True):
        name = st.text_input("Jira username")
        if st.form_submit_button("Add user"):
            if is_reserved_username(name):
                st.warning(f"'{name.strip()}' is reserved and cannot be tracked.")
            roster = rs.add_username(roster, name)
    for username in roster.usernames:
        col_name, col_toggle, col_remove = st.columns([4, 1, 1])
        col_name.markdown(
            f"<span style='color:{rs.user_color(roster, username)}'>&#9679;</span> {username}",
            unsafe_allow_html=True,
        )
        shown = col_toggle.checkbox("Show", value=username in roster.visible, key=f"{PAGE_KEY}_show_{username}")
        if shown != (username in roster.visible):
            roster = rs.toggle_visibility(roster, username)
        if col_remove.button("Remove", key=f"{PAGE_KEY}_remove_{username}"):
            roster = rs.remove_username(roster, username)
            _forget_user_widgets([username])
    if roster.usernames and st.button("Clear all", key=f"{PAGE_KEY}_clear_users"):
        _forget_user_widgets(roster.usernames)
        roster = rs.clear(roster)
    return roster


def _load_worklogs(service: WorklogService, roster: rs.UserRoster, days: int, force: bool) -> WorklogResult | None:
    if not roster.usernames:
        return None
    cache_key = (roster.usernames, days)
    cached = st.session_state.get(f"{PAGE_KEY}_result")
    if cached is not None and not force and st.session_state.get(f"{PAGE_KEY}_result_key") == cache_key:
        return result_from_payload(cached)
    progress = FetchProgress()
    try:
        result = service.fetch(WorklogRequest(usernames=roster.usernames, days=days), progress=progress.callback)
    except WorklogAppError as exc:
        logger.error("Error fetching worklogs: %s", exc)
        progress.error("Failed to fetch worklogs")
        st.error(f"Failed to fetch worklogs: {exc}")
        return None
    progress.complete(len(result.worklogs), len(result.ticket_info))
    _set_state("result", result.to_dict())
    _set_state("result_key", cache_key)
    return result


def _render_summary(ctx: TimeTrackerContext) -> None:
    col_total, col_tickets, col_avg = st.columns(3)
    col_total.metric("Total Hours", f"{ctx.total_hours:.2f}")
    for username in ctx.visible_usernames:
        col_total.caption(f"{username}: {ctx.user_totals.get(username, 0.0):.2f}h")
    col_tickets.metric("Tickets Worked", ctx.unique_tickets)
    col_avg.metric("Avg Hours / Day", f"{ctx.avg_hours_per_day:.2f}")

    if len(ctx.visible_usernames) > 1:
        col_hours, col_consistency = st.columns(2)
        with col_hours:
            st.subheader("Most Hours Logged")
            for idx, row in enumerate(ctx.ranked_by_hours.itertuples(index=False), start=1):
                st.write(f"#{idx} {row.username}: {row.total_hours:.2f}h")
        with col_consistency:
            st.subheader("Most Consistent")
            for idx, row in enumerate(ctx.ranked_by_consistency.itertuples(index=False), start=1):
                st.write(f"#{idx} {row.username}: {row.consistency_pct:.0f}% ({row.days_logged} days)")


def _render_tabs(
    ctx: TimeTrackerContext,
    result: WorklogResult,
    roster: rs.UserRoster,
    request: AggregationRequest,
) -> None:
    state: nav.NavigationState = _state("nav", nav.initial_state())
    tab_ids = [tab.id for tab in state.tabs]
    labels = {tab.id: tab.label for tab in state.tabs}
    selected = st.radio(
        "View",
        tab_ids,
        index=tab_ids.index(state.active_tab_id),
        format_func=lambda tab_id: labels[tab_id],
        horizontal=True,
        label_visibility="collapsed",
    )
    if selected != state.active_tab_id:
        state = nav.switch_tab(state, selected)

    tab = nav.active_tab(state)
    if not tab.kind.is_base and st.button(f"Close {tab.label}", key=f"{PAGE_KEY}_close"):
        state = nav.close_tab(state, tab.id)
        _set_state("nav", state)
        st.rerun()

    colors = rs.color_map(roster)
    server = st.session_state.get("jira_server", "")
    view = view_for_tab(tab, ctx, result.ticket_info, request)

    if tab.kind is nav.TabKind.BASE_DAILY:
        chart = multi_user_daily_chart(view, ctx.visible_usernames, colors)
        if chart is not None:
            st.altair_chart(chart, width="stretch")
        day = st.selectbox("Ticket breakdown for day", view["date"].tolist(), key=f"{PAGE_KEY}_day_pick")
        if day and st.button("Open day", key=f"{PAGE_KEY}_open_day"):
            state = nav.open_day(state, day)
    elif tab.kind is nav.TabKind.BASE_TICKETS:
        chart = multi_user_ticket_chart(view, ctx.visible_usernames, colors)
        if chart is not None:
            st.altair_chart(chart, width="stretch")
        render_ticket_table(view, server, ["title", "total", *ctx.visible_usernames])
        ticket = st.selectbox("Daily breakdown for ticket", view["ticket"].tolist(), key=f"{PAGE_KEY}_ticket_pick")
        if ticket and st.button("Open ticket", key=f"{PAGE_KEY}_open_ticket"):
            state = nav.open_ticket(state, ticket)
    elif tab.kind is nav.TabKind.TICKET_DETAIL:
        st.subheader(f"Daily Hours for {tab.payload}")
        info = result.ticket_info.get(tab.payload or "")
        if info is not None:
            st.caption(f"[{info.summary}]({ticket_url(server, info.key)})")
        chart = ticket_daily_chart(view)
        if chart is not None:
            st.altair_chart(chart, width="stretch")
    else:
        st.subheader(f"Tickets worked on {tab.label}")
        if view.empty:
            st.info("No worklogs on this day.")
        else:
            chart = day_ticket_chart(view)
            if chart is not None:
                st.altair_chart(chart, width="stretch")
            render_ticket_table(view, server, ["title", "hours"])

    if state != _state("nav", nav.initial_state()):
        _set_state("nav", state)
        st.rerun()


@register_page("Time Tracker")
def time_tracker_page():
    st.title("JIRA Time Tracker")
    service: WorklogService | None = st.session_state.get("worklog_service")
    if service is None:
        st.warning("Initialize connection on Setup page first.")
        return

    col_range, col_refresh = st.columns([3, 1])
    days = col_range.selectbox(
        "Date range",
        list(DATE_RANGE_OPTIONS),
        index=list(DATE_RANGE_OPTIONS).index(DEFAULT_WINDOW_DAYS),
        format_func=lambda d: f"Last {d} days",
        key=f"{PAGE_KEY}_days",
    )
    refresh = col_refresh.button("Refresh", type="primary")

    roster = _render_user_manager(_state("roster", rs.UserRoster()))
    _set_state("roster", roster)
    if not roster.usernames:
        st.info("Add at least one Jira username to load worklogs.")
        return

    result = _load_worklogs(service, roster, int(days), force=refresh)
    if result is None:
        return
    if not result.worklogs:
        st.info("No worklogs found for the selected users and period.")
        return

    request = AggregationRequest(
        authors=frozenset(roster.usernames), window_days=int(days), reference_now=datetime.now(TZ)
    )
    ctx = build_time_tracker_context(records_to_dataframe(result.worklogs), result.ticket_info, roster, request)
    _render_summary(ctx)
    _render_tabs(ctx, result, roster, request)
