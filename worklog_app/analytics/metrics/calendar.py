"""Calendar helpers for trailing windows (pure functions)."""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pandas as pd

_WEEKDAY_LETTERS = "MTWTFSS"


def window_start(window_days: int, reference_now: datetime) -> date:
    return (reference_now - timedelta(days=window_days)).date()


def window_cutoff(window_days: int, reference_now: datetime) -> str:
    """ISO date string of the first day in the window (inclusive)."""
    return window_start(window_days, reference_now).isoformat()


def weekdays_in_window(window_days: int, reference_now: datetime) -> list[str]:
    """Mon-Fri ISO dates in ``[now - window_days, now]``, ascending."""
    days = pd.bdate_range(start=window_start(window_days, reference_now), end=reference_now.date())
    return [d.strftime("%Y-%m-%d") for d in days]


def format_day_label(day: str) -> str:
    """Short label such as ``"M May 06"``; falls back to the raw string."""
    try:
        parsed = date.fromisoformat(day)
    except ValueError:
        return day
    return f"{_WEEKDAY_LETTERS[parsed.weekday()]} {parsed.strftime('%b %d')}"
