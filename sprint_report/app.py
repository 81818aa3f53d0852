"""Application entry point: page registry and router."""

from __future__ import annotations

import streamlit as st

PAGES = {}


def register_page(label):
    def decorator(func):
        PAGES[label] = func
        return func

    return decorator


def main():
    st.sidebar.title("Sprint Report")
    pages = list(PAGES.keys())
    if not pages:
        st.write("No pages registered yet.")
        return
    preferred_order = [
        "Sprint Report",
        "Setup / Connection",
    ]
    ordered = [name for name in preferred_order if name in pages]
    trailing = sorted(name for name in pages if name not in preferred_order)
    pages = ordered + trailing

    # Without a service yet, land on the setup page
    if "Setup / Connection" in pages and "report_service" not in st.session_state:
        default = pages.index("Setup / Connection")
    else:
        default = 0
    page = st.sidebar.selectbox("Page", pages, index=default)
    PAGES[page]()


if __name__ == "__main__":
    main()
