"""Central configuration, constants, and tuning knobs for the worklog tracker."""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from .errors import ConfigurationError

# =============================================================================
# Jira Connection Settings
# =============================================================================
# Reporting timezone used to decide what "today" is when building a window.
TIMEZONE = "UTC"

# Keys accepted from Streamlit secrets or the process environment.
# The first key present wins.
SERVER_KEYS: Sequence[str] = ("JIRA_URL", "JIRA_SERVER")
TOKEN_KEYS: Sequence[str] = ("JIRA_TOKEN", "JIRA_API_TOKEN")

# =============================================================================
# Worklog Query Settings
# =============================================================================
DEFAULT_WINDOW_DAYS: int = 30
DATE_RANGE_OPTIONS: Sequence[int] = (7, 14, 30, 60, 90)

# Single page only; anything beyond this cap is not fetched.
MAX_SEARCH_RESULTS: int = 1000
SEARCH_FIELDS: Sequence[str] = ("key", "summary")

NO_TITLE_SENTINEL = "No title available"

SECONDS_PER_HOUR: int = 3600
HOURS_DECIMALS: int = 2

# Per-author columns sit next to these fixed columns in the day/ticket grids
# and their long-form chart data, so usernames may not reuse them.
RESERVED_USERNAMES: frozenset[str] = frozenset(
    {"date", "day", "ticket", "title", "total", "hours", "user", "day_total", "_author", "_seconds"}
)


def is_reserved_username(name: str) -> bool:
    return name.strip().lower() in RESERVED_USERNAMES

# Parallel worklog fetching
# Threads because jira client calls are I/O bound (HTTP) and the library is
# synchronous. Keep worker count moderate to avoid hitting Jira rate limits.
WORKLOG_FETCH_MAX_WORKERS = 8
WORKLOG_FETCH_MIN_PARALLEL = 4  # below this, stay sequential to reduce overhead

# =============================================================================
# UI Defaults
# =============================================================================
USER_COLORS: Sequence[str] = (
    "#3B82F6",
    "#10B981",
    "#F59E0B",
    "#EF4444",
    "#8B5CF6",
    "#EC4899",
    "#06B6D4",
    "#84CC16",
)


def user_color(index: int) -> str:
    """Return the palette color for a roster position (wraps around)."""
    return USER_COLORS[index % len(USER_COLORS)]


@dataclass(slots=True, frozen=True)
class JiraSettings:
    server: str
    token: str

    @classmethod
    def from_mapping(cls, values: Mapping[str, object]) -> JiraSettings:
        """Build settings from a secrets/environment style mapping.

        Raises
        ------
        ConfigurationError
            If the server URL or the token is missing.
        """
        server = _first_present(values, SERVER_KEYS)
        token = _first_present(values, TOKEN_KEYS)
        if not server or not token:
            raise ConfigurationError("Missing JIRA configuration")
        return cls(server=server.rstrip("/"), token=token)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> JiraSettings:
        return cls.from_mapping(os.environ if environ is None else environ)


def _first_present(values: Mapping[str, object], keys: Sequence[str]) -> str | None:
    for key in keys:
        value = values.get(key)
        if value:
            return str(value).strip()
    return None


@dataclass(slots=True)
class AppSettings:
    max_table_rows: int = 1000


SETTINGS = AppSettings()
