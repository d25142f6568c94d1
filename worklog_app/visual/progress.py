"""Progress banner for the worklog fetch pipeline."""

from __future__ import annotations

import streamlit as st


class FetchProgress:
    """Status box + progress bar fed by ``WorklogService`` progress callbacks."""

    def __init__(self, title: str = "Fetching worklogs from Jira"):
        self._status = st.status(title, expanded=False)
        self._bar = self._status.progress(0.0)
        self._done = False

    def callback(self, message: str, current: int | None = None, total: int | None = None) -> None:
        if self._done:
            return
        if current is not None and total:
            self._status.update(label=f"{message} ({current}/{total})")
            self._bar.progress(min(max(current / total, 0.0), 1.0))
        else:
            # Unknown total (search phase); reset to an empty bar.
            self._status.update(label=message)
            self._bar.progress(0.0)

    def complete(self, worklog_count: int, ticket_count: int) -> None:
        if self._done:
            return
        self._bar.progress(1.0)
        self._status.update(
            label=f"Loaded {worklog_count} worklog(s) across {ticket_count} ticket(s)",
            state="complete",
        )
        self._done = True

    def error(self, message: str) -> None:
        if self._done:
            return
        self._status.update(label=message, state="error")
        self._done = True
