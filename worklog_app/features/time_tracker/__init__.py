"""Time tracker feature module: page context assembly."""

from worklog_app.features.time_tracker.context import (
    TimeTrackerContext,
    build_time_tracker_context,
    view_for_tab,
)

__all__ = [
    "TimeTrackerContext",
    "build_time_tracker_context",
    "view_for_tab",
]
