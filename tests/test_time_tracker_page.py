from worklog_app.features import roster as rs
from worklog_app.pages import time_tracker as page


def test_removed_user_widget_state_is_forgotten(monkeypatch):
    state = {"time_tracker_show_jdoe": False, "time_tracker_show_asmith": True, "jira_server": "x"}
    monkeypatch.setattr(page.st, "session_state", state)
    page._forget_user_widgets(["jdoe"])
    assert state == {"time_tracker_show_asmith": True, "jira_server": "x"}

    # Re-adding starts visible and no stale checkbox value remains to hide it.
    roster = rs.add_username(rs.UserRoster(), "jdoe")
    assert rs.visible_usernames(roster) == ["jdoe"]
    assert "time_tracker_show_jdoe" not in state


def test_forget_unknown_user_is_harmless(monkeypatch):
    state = {}
    monkeypatch.setattr(page.st, "session_state", state)
    page._forget_user_widgets(["ghost"])
    assert state == {}
