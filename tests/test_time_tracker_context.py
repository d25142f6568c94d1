from datetime import datetime

import pytz

from worklog_app.core.mappers import records_to_dataframe
from worklog_app.core.models import AggregationRequest, TicketInfo, WorklogRecord
from worklog_app.features import navigation as nav
from worklog_app.features import roster as rs
from worklog_app.features.time_tracker import build_time_tracker_context, view_for_tab

NOW = datetime(2024, 5, 7, 15, 0, tzinfo=pytz.UTC)
INFO = {
    "AB-1": TicketInfo("AB-1", "Login page"),
    "AB-2": TicketInfo("AB-2", "Billing export"),
    "AB-3": TicketInfo("AB-3", "Search relevance"),
}


def _df():
    rows = [
        ("AB-1", "jdoe", "2024-05-06", 3600),
        ("AB-2", "jdoe", "2024-05-07", 5400),
        ("AB-3", "asmith", "2024-05-07", 7200),
        ("AB-1", "jdoe", "2024-04-20", 3600),  # outside the window
    ]
    return records_to_dataframe(
        WorklogRecord(key, author, f"{day}T09:00:00.000+0000", day, secs) for key, author, day, secs in rows
    )


def _roster():
    roster = rs.add_username(rs.add_username(rs.UserRoster(), "jdoe"), "asmith")
    return rs.toggle_visibility(roster, "asmith")


REQUEST = AggregationRequest(authors=frozenset({"jdoe", "asmith"}), window_days=2, reference_now=NOW)


def _ctx():
    return build_time_tracker_context(_df(), INFO, _roster(), REQUEST)


def test_summary_counts_visible_users_only():
    ctx = _ctx()
    assert ctx.visible_usernames == ["jdoe"]
    assert ctx.total_hours == 2.5
    assert ctx.unique_tickets == 2
    assert ctx.days_with_logs == 2
    assert ctx.avg_hours_per_day == 1.25
    assert ctx.user_totals == {"jdoe": 2.5}


def test_base_views():
    ctx = _ctx()
    assert ctx.tickets["ticket"].tolist() == ["AB-2", "AB-1"]
    assert list(ctx.daily.columns) == ["date", "jdoe"]
    assert ctx.daily["jdoe"].tolist() == [1.0, 1.5]
    assert ctx.user_stats.loc[0, "color"] == "#3B82F6"
    assert ctx.ranked_by_hours["username"].tolist() == ["jdoe"]


def test_window_drops_old_records():
    ctx = _ctx()
    assert "2024-04-20" not in ctx.worklogs["date"].tolist()


def test_detail_views_cover_all_tracked_authors():
    ctx = _ctx()
    state = nav.open_ticket(nav.initial_state(), "AB-3")
    ticket_view = view_for_tab(nav.active_tab(state), ctx, INFO, REQUEST)
    assert ticket_view.to_dict("records") == [
        {"date": "2024-05-06", "hours": 0.0},
        {"date": "2024-05-07", "hours": 2.0},
    ]

    state = nav.open_day(state, "2024-05-07")
    day_view = view_for_tab(nav.active_tab(state), ctx, INFO, REQUEST)
    assert day_view["ticket"].tolist() == ["AB-3", "AB-2"]
    assert day_view["title"].tolist() == ["Search relevance", "Billing export"]


def test_base_tabs_return_context_frames():
    ctx = _ctx()
    state = nav.initial_state()
    assert view_for_tab(nav.active_tab(state), ctx, INFO, REQUEST) is ctx.daily
    state = nav.switch_tab(state, nav.TICKETS_TAB_ID)
    assert view_for_tab(nav.active_tab(state), ctx, INFO, REQUEST) is ctx.tickets


def test_no_visible_users_gives_zeros():
    roster = rs.toggle_visibility(_roster(), "jdoe")
    ctx = build_time_tracker_context(_df(), INFO, roster, REQUEST)
    assert ctx.total_hours == 0.0
    assert ctx.unique_tickets == 0
    assert ctx.avg_hours_per_day == 0.0
    assert ctx.tickets.empty


def test_visible_users_limited_to_request_authors():
    roster = rs.toggle_visibility(_roster(), "asmith")
    request = AggregationRequest(authors=frozenset({"ASMITH"}), window_days=2, reference_now=NOW)
    ctx = build_time_tracker_context(_df(), INFO, roster, request)
    assert ctx.visible_usernames == ["asmith"]
    assert ctx.total_hours == 2.0
