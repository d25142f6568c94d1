"""Drill-down tab navigation for the time tracker views."""

from worklog_app.features.navigation.state import (
    BASE_TABS,
    DAILY_TAB_ID,
    TICKETS_TAB_ID,
    NavigationState,
    NavigationTab,
    TabKind,
    active_tab,
    close_tab,
    detail_tabs,
    initial_state,
    open_day,
    open_detail,
    open_ticket,
    switch_tab,
    tab_id_for,
)

__all__ = [
    "BASE_TABS",
    "DAILY_TAB_ID",
    "TICKETS_TAB_ID",
    "NavigationState",
    "NavigationTab",
    "TabKind",
    "active_tab",
    "close_tab",
    "detail_tabs",
    "initial_state",
    "open_day",
    "open_detail",
    "open_ticket",
    "switch_tab",
    "tab_id_for",
]
