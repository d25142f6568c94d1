import pandas as pd

from worklog_app.visual.tables import add_ticket_link, ticket_url


def test_add_ticket_link_builds_browse_urls():
    df = pd.DataFrame({"ticket": ["AB-1", "AB-2"], "hours": [1.0, 2.0]})
    out, cfg = add_ticket_link(df, "https://jira.example.com/")
    assert out["Ticket"].tolist() == [
        "https://jira.example.com/browse/AB-1",
        "https://jira.example.com/browse/AB-2",
    ]
    assert "Ticket" in cfg
    assert "Ticket" not in df.columns


def test_add_ticket_link_without_key_column():
    df = pd.DataFrame({"date": ["2024-05-06"]})
    out, cfg = add_ticket_link(df, "https://jira.example.com")
    assert out is df
    assert cfg == {}


def test_ticket_url_handles_blank_key():
    assert ticket_url("https://jira.example.com", "AB-1") == "https://jira.example.com/browse/AB-1"
    assert ticket_url("https://jira.example.com", "") == ""
