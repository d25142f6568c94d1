"""Tracked usernames and their chart visibility."""

from worklog_app.features.roster.state import (
    UserRoster,
    add_username,
    clear,
    color_map,
    remove_username,
    toggle_visibility,
    user_color,
    visible_usernames,
)

__all__ = [
    "UserRoster",
    "add_username",
    "clear",
    "color_map",
    "remove_username",
    "toggle_visibility",
    "user_color",
    "visible_usernames",
]
