"""Drill-down tab navigation as pure state transitions.

Each transition takes a :class:`NavigationState` and returns a new one, so the
page keeps a single value in session state and every rule can be tested
without Streamlit.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from worklog_app.analytics.metrics.calendar import format_day_label
from worklog_app.core.errors import UnknownTabError


class TabKind(str, Enum):
    BASE_DAILY = "base-daily"
    BASE_TICKETS = "base-tickets"
    TICKET_DETAIL = "ticket-detail"
    DAY_DETAIL = "day-detail"

    @property
    def is_base(self) -> bool:
        return self in (TabKind.BASE_DAILY, TabKind.BASE_TICKETS)


@dataclass(slots=True, frozen=True)
class NavigationTab:
    id: str
    kind: TabKind
    label: str
    payload: str | None = None


DAILY_TAB_ID = "daily"
TICKETS_TAB_ID = "tickets"

BASE_TABS: tuple[NavigationTab, ...] = (
    NavigationTab(DAILY_TAB_ID, TabKind.BASE_DAILY, "Daily Hours"),
    NavigationTab(TICKETS_TAB_ID, TabKind.BASE_TICKETS, "Tickets Summary"),
)

_ID_PREFIX = {TabKind.TICKET_DETAIL: "ticket-", TabKind.DAY_DETAIL: "day-"}


@dataclass(slots=True, frozen=True)
class NavigationState:
    tabs: tuple[NavigationTab, ...] = BASE_TABS
    active_tab_id: str = DAILY_TAB_ID

    def get(self, tab_id: str) -> NavigationTab | None:
        for tab in self.tabs:
            if tab.id == tab_id:
                return tab
        return None


def initial_state() -> NavigationState:
    return NavigationState()


def tab_id_for(kind: TabKind, key: str) -> str:
    if kind not in _ID_PREFIX:
        raise ValueError(f"Only detail tabs have derived ids, got {kind.value}")
    return f"{_ID_PREFIX[kind]}{key}"


def detail_tabs(state: NavigationState) -> tuple[NavigationTab, ...]:
    return tuple(tab for tab in state.tabs if not tab.kind.is_base)


def active_tab(state: NavigationState) -> NavigationTab:
    tab = state.get(state.active_tab_id)
    if tab is None:
        raise UnknownTabError(f"Active tab {state.active_tab_id!r} does not exist")
    return tab


def open_detail(state: NavigationState, kind: TabKind, key: str) -> NavigationState:
    """Activate the detail tab for ``key``, creating it on first use."""
    tab_id = tab_id_for(kind, key)
    if state.get(tab_id) is not None:
        return replace(state, active_tab_id=tab_id)
    label = format_day_label(key) if kind is TabKind.DAY_DETAIL else key
    tab = NavigationTab(tab_id, kind, label, payload=key)
    return replace(state, tabs=(*state.tabs, tab), active_tab_id=tab_id)


def open_ticket(state: NavigationState, ticket_key: str) -> NavigationState:
    return open_detail(state, TabKind.TICKET_DETAIL, ticket_key)


def open_day(state: NavigationState, day: str) -> NavigationState:
    return open_detail(state, TabKind.DAY_DETAIL, day)


def switch_tab(state: NavigationState, tab_id: str) -> NavigationState:
    if state.get(tab_id) is None:
        raise UnknownTabError(f"Unknown tab {tab_id!r}")
    return replace(state, active_tab_id=tab_id)


def close_tab(state: NavigationState, tab_id: str) -> NavigationState:
    """Remove a detail tab; base tabs and unknown ids are left untouched.

    When the closed tab was active, focus moves to the detail tab now at the
    closed tab's position (or the last one), else back to the daily view.
    """
    tab = state.get(tab_id)
    if tab is None or tab.kind.is_base:
        return state
    details = detail_tabs(state)
    closed_index = next(i for i, t in enumerate(details) if t.id == tab_id)
    remaining = tuple(t for t in details if t.id != tab_id)
    tabs = (*(t for t in state.tabs if t.kind.is_base), *remaining)
    if state.active_tab_id != tab_id:
        return replace(state, tabs=tabs)
    if remaining:
        active = remaining[min(closed_index, len(remaining) - 1)].id
    else:
        active = DAILY_TAB_ID
    return NavigationState(tabs=tabs, active_tab_id=active)
