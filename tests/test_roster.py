from worklog_app.features import roster as rs


def test_add_trims_and_ignores_duplicates():
    roster = rs.add_username(rs.UserRoster(), "  jdoe ")
    roster = rs.add_username(roster, "JDOE")
    roster = rs.add_username(roster, "   ")
    roster = rs.add_username(roster, "asmith")
    assert roster.usernames == ("jdoe", "asmith")
    assert rs.visible_usernames(roster) == ["jdoe", "asmith"]


def test_toggle_and_remove():
    roster = rs.add_username(rs.add_username(rs.UserRoster(), "jdoe"), "asmith")
    roster = rs.toggle_visibility(roster, "jdoe")
    assert rs.visible_usernames(roster) == ["asmith"]
    assert rs.toggle_visibility(roster, "ghost") is roster
    roster = rs.toggle_visibility(roster, "jdoe")
    assert rs.visible_usernames(roster) == ["jdoe", "asmith"]
    roster = rs.remove_username(roster, "jdoe")
    assert roster.usernames == ("asmith",)
    assert "jdoe" not in roster.visible


def test_colors_follow_roster_position():
    roster = rs.add_username(rs.add_username(rs.UserRoster(), "jdoe"), "asmith")
    hidden = rs.toggle_visibility(roster, "jdoe")
    assert rs.user_color(hidden, "asmith") == "#10B981"
    assert rs.color_map(roster) == {"jdoe": "#3B82F6", "asmith": "#10B981"}
    assert rs.user_color(roster, "unknown") == "#3B82F6"


def test_clear():
    roster = rs.add_username(rs.UserRoster(), "jdoe")
    assert rs.clear(roster) == rs.UserRoster()


def test_reserved_names_are_ignored():
    roster = rs.UserRoster()
    for name in ("total", "Ticket", " date ", "title"):
        roster = rs.add_username(roster, name)
    assert roster.usernames == ()
    assert rs.add_username(roster, "totals").usernames == ("totals",)
