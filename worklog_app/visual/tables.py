"""Ticket tables with links back to Jira."""

from __future__ import annotations

import pandas as pd
import streamlit as st

from worklog_app.core.config import SETTINGS

LINK_COLUMN = "Ticket"


def ticket_url(server: str, key: str) -> str:
    return f"{server.rstrip('/')}/browse/{key}" if key else ""


def add_ticket_link(df: pd.DataFrame, server: str, key_col: str = "ticket"):
    """Return a copy with a ``Ticket`` URL column and its column config."""
    if df.empty or key_col not in df.columns:
        return df, {}
    linked = df.assign(**{LINK_COLUMN: [ticket_url(server, str(k)) for k in df[key_col]]})
    cfg = {
        LINK_COLUMN: st.column_config.LinkColumn(
            LINK_COLUMN,
            display_text=r"browse/(.*)$",
            help="Open in Jira",
        )
    }
    return linked, cfg


def render_ticket_table(df: pd.DataFrame, server: str, columns: list[str], limit: int | None = None):
    linked, cfg = add_ticket_link(df, server)
    shown = [c for c in columns if c in linked.columns and c != "ticket"]
    if LINK_COLUMN in linked.columns:
        shown = [LINK_COLUMN, *shown]
    st.dataframe(
        linked[shown].head(limit or SETTINGS.max_table_rows),
        hide_index=True,
        column_config=cfg,
    )
