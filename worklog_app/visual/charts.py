"""Chart builders (Altair) for worklog views."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

import altair as alt
import pandas as pd

from worklog_app.analytics.metrics.calendar import format_day_label

DEFAULT_BAR_COLOR = "#3B82F6"


def _color_scale(users: Sequence[str], colors: Mapping[str, str] | None) -> alt.Scale:
    colors = colors or {}
    return alt.Scale(domain=list(users), range=[colors.get(u, DEFAULT_BAR_COLOR) for u in users])


def _with_day_labels(df: pd.DataFrame) -> pd.DataFrame:
    out = df.copy()
    out["day"] = out["date"].astype(str).apply(format_day_label)
    return out


def multi_user_daily_chart(
    daily: pd.DataFrame,
    users: Sequence[str],
    colors: Mapping[str, str] | None = None,
):
    """Grouped bars: one bar per visible user for every weekday of the window."""
    users = [u for u in users if u in daily.columns]
    if daily.empty or not users:
        return None
    long = _with_day_labels(daily).melt(
        id_vars=["date", "day"], value_vars=users, var_name="user", value_name="hours"
    )
    day_order = _with_day_labels(daily)["day"].tolist()
    totals = long.groupby("date")["hours"].transform("sum").round(2)
    long = long.assign(day_total=totals)
    chart = (
        alt.Chart(long)
        .mark_bar()
        .encode(
            x=alt.X("day:N", sort=day_order, title="Date", axis=alt.Axis(labelAngle=-45)),
            xOffset=alt.XOffset("user:N", sort=list(users)),
            y=alt.Y("hours:Q", title="Hours"),
            color=alt.Color("user:N", scale=_color_scale(users, colors), title="User"),
            tooltip=[
                alt.Tooltip("date:N", title="Date"),
                alt.Tooltip("user:N", title="User"),
                alt.Tooltip("hours:Q", title="Hours", format=".2f"),
                alt.Tooltip("day_total:Q", title="Total", format=".2f"),
            ],
        )
        .properties(height=400)
    )
    return chart


def multi_user_ticket_chart(
    tickets: pd.DataFrame,
    users: Sequence[str],
    colors: Mapping[str, str] | None = None,
):
    """Stacked bars per ticket, ordered by total hours."""
    users = [u for u in users if u in tickets.columns]
    if tickets.empty or not users:
        return None
    order = tickets["ticket"].tolist()
    long = tickets.melt(
        id_vars=["ticket", "title", "total"], value_vars=users, var_name="user", value_name="hours"
    )
    chart = (
        alt.Chart(long)
        .mark_bar()
        .encode(
            x=alt.X("ticket:N", sort=order, title="Ticket", axis=alt.Axis(labelAngle=-45)),
            y=alt.Y("hours:Q", title="Hours", stack="zero"),
            color=alt.Color("user:N", scale=_color_scale(users, colors), title="User"),
            tooltip=[
                alt.Tooltip("ticket:N", title="Ticket"),
                alt.Tooltip("title:N", title="Title"),
                alt.Tooltip("user:N", title="User"),
                alt.Tooltip("hours:Q", title="Hours", format=".2f"),
                alt.Tooltip("total:Q", title="Total", format=".2f"),
            ],
        )
        .properties(height=400)
    )
    return chart


def ticket_daily_chart(breakdown: pd.DataFrame, color: str = DEFAULT_BAR_COLOR):
    if breakdown.empty:
        return None
    data = _with_day_labels(breakdown)
    return (
        alt.Chart(data)
        .mark_bar(color=color)
        .encode(
            x=alt.X("day:N", sort=data["day"].tolist(), title="Date", axis=alt.Axis(labelAngle=-45)),
            y=alt.Y("hours:Q", title="Hours"),
            tooltip=[
                alt.Tooltip("date:N", title="Date"),
                alt.Tooltip("hours:Q", title="Hours", format=".2f"),
            ],
        )
        .properties(height=400)
    )


def day_ticket_chart(breakdown: pd.DataFrame, color: str = "#10B981"):
    if breakdown.empty:
        return None
    return (
        alt.Chart(breakdown)
        .mark_bar(color=color)
        .encode(
            y=alt.Y("ticket:N", sort=breakdown["ticket"].tolist(), title="Ticket"),
            x=alt.X("hours:Q", title="Hours"),
            tooltip=[
                alt.Tooltip("ticket:N", title="Ticket"),
                alt.Tooltip("title:N", title="Title"),
                alt.Tooltip("hours:Q", title="Hours", format=".2f"),
            ],
        )
        .properties(height=alt.Step(28))
    )
