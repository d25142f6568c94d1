"""Connection setup page: collect Jira location and token, build WorklogService."""

from __future__ import annotations

import logging

import streamlit as st

from worklog_app.app import register_page
from worklog_app.core.config import JiraSettings
from worklog_app.core.errors import ConfigurationError
from worklog_app.core.jira_client import JiraAPI
from worklog_app.core.service import WorklogService

logger = logging.getLogger(__name__)


def connect(settings: JiraSettings) -> WorklogService:
    api = JiraAPI(settings.server, settings.token)
    st.session_state["jira_server"] = settings.server
    st.session_state["worklog_service"] = WorklogService(api)
    logger.info("Connected to Jira at %s", settings.server)
    return st.session_state["worklog_service"]


@register_page("Setup / Connection")
def setup_page():
    st.title("Jira Connection Setup")
    st.caption("Enter the server URL and a personal access token (use secrets in production).")

    jira_secrets = st.secrets.get("jira", {})
    server = st.text_input(
        "Jira Server URL",
        value=st.session_state.get("jira_server")
        or jira_secrets.get("JIRA_URL")
        or jira_secrets.get("JIRA_SERVER")
        or "",
    )
    token = st.text_input("Personal Access Token", type="password")
    init_btn = st.button("Initialize Connection", type="primary")

    if init_btn:
        try:
            connect(JiraSettings.from_mapping({"JIRA_URL": server, "JIRA_TOKEN": token}))
            st.success("Connection initialized.")
        except ConfigurationError:
            st.error("Server URL and token are both required.")
        except Exception as e:  # pragma: no cover
            logger.exception("Jira client initialization failed")
            st.error(f"Failed to initialize Jira client: {e}")

    if "worklog_service" in st.session_state:
        st.info("WorklogService ready.")
