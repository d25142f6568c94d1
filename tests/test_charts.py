import pandas as pd

from worklog_app.visual.charts import (
    day_ticket_chart,
    multi_user_daily_chart,
    multi_user_ticket_chart,
    ticket_daily_chart,
)


def test_multi_user_daily_chart_builds():
    daily = pd.DataFrame({"date": ["2024-05-06", "2024-05-07"], "jdoe": [1.0, 0.0], "asmith": [0.5, 2.0]})
    chart = multi_user_daily_chart(daily, ["jdoe", "asmith"], {"jdoe": "#3B82F6", "asmith": "#10B981"})
    assert chart is not None
    encoding = chart.to_dict()["encoding"]
    assert encoding["color"]["scale"]["range"] == ["#3B82F6", "#10B981"]


def test_multi_user_ticket_chart_builds():
    tickets = pd.DataFrame(
        {"ticket": ["AB-2", "AB-1"], "title": ["B", "A"], "total": [2.0, 1.0], "jdoe": [2.0, 0.5], "asmith": [0.0, 0.5]}
    )
    assert multi_user_ticket_chart(tickets, ["jdoe", "asmith"]) is not None


def test_single_view_charts():
    breakdown = pd.DataFrame({"date": ["2024-05-06"], "hours": [1.0]})
    assert ticket_daily_chart(breakdown) is not None
    day = pd.DataFrame({"ticket": ["AB-1"], "title": ["A"], "hours": [1.0]})
    assert day_ticket_chart(day) is not None


def test_empty_inputs_return_none():
    assert multi_user_daily_chart(pd.DataFrame(columns=["date"]), ["jdoe"]) is None
    assert multi_user_ticket_chart(pd.DataFrame(columns=["ticket", "title", "total"]), []) is None
    assert ticket_daily_chart(pd.DataFrame(columns=["date", "hours"])) is None
    assert day_ticket_chart(pd.DataFrame(columns=["ticket", "title", "hours"])) is None
