"""In-memory user roster: tracked usernames and which of them are charted."""

from __future__ import annotations

from dataclasses import dataclass, replace

from worklog_app.core.config import is_reserved_username
from worklog_app.core.config import user_color as palette_color


@dataclass(slots=True, frozen=True)
class UserRoster:
    usernames: tuple[str, ...] = ()
    visible: frozenset[str] = frozenset()


def add_username(roster: UserRoster, username: str) -> UserRoster:
    """Add a trimmed name unless blank, reserved, or already present (case-insensitive)."""
    name = username.strip()
    if not name or is_reserved_username(name) or any(u.lower() == name.lower() for u in roster.usernames):
        return roster
    return UserRoster(usernames=(*roster.usernames, name), visible=roster.visible | {name})


def remove_username(roster: UserRoster, username: str) -> UserRoster:
    return UserRoster(
        usernames=tuple(u for u in roster.usernames if u != username),
        visible=roster.visible - {username},
    )


def toggle_visibility(roster: UserRoster, username: str) -> UserRoster:
    if username not in roster.usernames:
        return roster
    if username in roster.visible:
        return replace(roster, visible=roster.visible - {username})
    return replace(roster, visible=roster.visible | {username})


def clear(roster: UserRoster) -> UserRoster:
    return UserRoster()


def visible_usernames(roster: UserRoster) -> list[str]:
    return [u for u in roster.usernames if u in roster.visible]


def user_color(roster: UserRoster, username: str) -> str:
    """Color tied to the roster position, stable when others are hidden."""
    try:
        index = roster.usernames.index(username)
    except ValueError:
        index = 0
    return palette_color(index)


def color_map(roster: UserRoster) -> dict[str, str]:
    return {u: user_color(roster, u) for u in roster.usernames}
