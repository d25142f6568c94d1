"""Convenience launcher for the Streamlit app.

Usage:
  streamlit run run_dashboard.py

Automatically imports every module in ``worklog_app/pages`` so each page
decorated with ``@register_page`` registers itself without manual edits here.
"""

import logging
import os
from importlib import import_module
from pathlib import Path

import streamlit as st

from worklog_app.app import main
from worklog_app.core.config import JiraSettings
from worklog_app.core.errors import ConfigurationError

logger = logging.getLogger("run_dashboard")

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

st.set_page_config(layout="wide")


def _auto_init_worklog_service():
    """Initialize the Jira service from Streamlit secrets or the environment."""
    if "worklog_service" in st.session_state:
        return

    # Try a [jira] secrets section, then top-level secrets, then env vars.
    sources = [st.secrets.get("jira", {}), st.secrets, os.environ]
    for source in sources:
        try:
            settings = JiraSettings.from_mapping(source)
        except ConfigurationError:
            continue
        st.sidebar.info("Jira settings found, attempting to connect...")
        try:
            from worklog_app.pages.setup import connect

            connect(settings)
            st.sidebar.success("Jira connection successful!")
        except Exception as e:
            st.sidebar.error(f"Jira connection failed: {e}")
            # Clear any partial state to ensure user is directed to setup
            if "worklog_service" in st.session_state:
                del st.session_state["worklog_service"]
        return
    st.sidebar.warning("Jira settings not found. Please use the Setup page.")


PAGES_DIR = Path(__file__).parent / "worklog_app" / "pages"
for py in sorted(PAGES_DIR.glob("[!_]*.py")):
    mod_name = f"worklog_app.pages.{py.stem}"
    try:
        import_module(mod_name)
    except Exception:  # pragma: no cover
        logger.exception("Failed importing page %s", mod_name)

_auto_init_worklog_service()

if __name__ == "__main__":
    main()
