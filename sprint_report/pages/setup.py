"""Connection setup page: collect Jira credentials and initialize ReportService."""

from __future__ import annotations

import logging

import streamlit as st

from sprint_report.app import register_page
from sprint_report.core.config import JIRA_DEFAULT_SERVER
from sprint_report.core.errors import FetchError
from sprint_report.core.jira_client import JiraAPI
from sprint_report.core.service import ReportService

logger = logging.getLogger(__name__)


def read_secrets() -> tuple[str | None, str | None, str | None]:
    """Return (server, email, token) from a [jira] secrets section or top-level keys."""
    jira_secrets = st.secrets.get("jira", {})
    server = jira_secrets.get("JIRA_SERVER") or st.secrets.get("JIRA_SERVER")
    email = jira_secrets.get("JIRA_EMAIL") or st.secrets.get("JIRA_EMAIL")
    token = jira_secrets.get("JIRA_API_TOKEN") or st.secrets.get("JIRA_API_TOKEN")
    return server, email, token


def init_service(server: str, email: str, token: str, ttl: float | None = None) -> ReportService:
    api = JiraAPI(server, email, token)
    if ttl is not None:
        api._cache_ttl = float(ttl)
    service = ReportService(api)
    st.session_state["jira_server"] = server
    st.session_state["jira_email"] = email
    st.session_state["report_service"] = service
    # A new connection invalidates any view model bound to the old one
    st.session_state.pop("report_view_model", None)
    return service


@register_page("Setup / Connection")
def setup_page():
    st.title("Jira Connection Setup")
    st.caption("Enter credentials (use secrets manager in production).")

    secret_server, secret_email, secret_token = read_secrets()
    server = st.text_input(
        "Jira Server URL",
        value=st.session_state.get("jira_server") or secret_server or JIRA_DEFAULT_SERVER,
    )
    email = st.text_input(
        "Email / Username",
        value=st.session_state.get("jira_email") or secret_email or "",
    )
    token = st.text_input("API Token", type="password", value=secret_token or "")
    ttl = st.number_input("Client cache TTL (seconds)", min_value=60, max_value=3600, value=300)

    if st.button("Initialize Connection", type="primary"):
        if not (server and email and token):
            st.error("All fields required.")
            return
        try:
            init_service(server, email, token, ttl)
            st.success("Connection initialized.")
        except FetchError as exc:
            logger.error("Failed to initialize Jira client: %s", exc)
            st.error(f"Failed to initialize Jira client: {exc}")

    if "report_service" in st.session_state:
        st.info("ReportService ready.")
