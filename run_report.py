"""Convenience launcher for the Streamlit app.

Usage:
  streamlit run run_report.py

Automatically imports every module in ``sprint_report/pages`` so each page
decorated with ``@register_page`` registers itself without manual edits here.
"""

import logging
from importlib import import_module
from pathlib import Path

import streamlit as st

from sprint_report.app import main
from sprint_report.core.config import SETTINGS
from sprint_report.core.errors import FetchError

st.set_page_config(layout="wide")
logging.basicConfig(
    level=getattr(logging, SETTINGS.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("sprint_report")


def _auto_init_report_service():
    """Initialize the Jira service from Streamlit secrets if available."""
    if "report_service" in st.session_state:
        return

    from sprint_report.pages.setup import init_service, read_secrets

    server, email, token = read_secrets()
    if server and email and token:
        try:
            init_service(server, email, token)
            st.sidebar.success("Jira connection successful!")
        except FetchError as exc:
            logger.error("Jira connection failed: %s", exc)
            st.sidebar.error(f"Jira connection failed: {exc}")
    else:
        st.sidebar.warning("Jira secrets not found. Please use the Setup page.")


PAGES_DIR = Path(__file__).parent / "sprint_report" / "pages"
for py in sorted(PAGES_DIR.glob("[!_]*.py")):
    mod_name = f"sprint_report.pages.{py.stem}"
    try:
        import_module(mod_name)
    except ImportError as exc:  # pragma: no cover
        logger.error("Failed importing page %s: %s", mod_name, exc)

_auto_init_report_service()

if __name__ == "__main__":
    main()
