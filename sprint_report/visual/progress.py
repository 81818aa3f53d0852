"""Progress reporting for Streamlit pages while a sprint is being fetched."""

from __future__ import annotations

import streamlit as st


class ProgressReporter:
    """Banner + progress bar; ``callback`` matches ReportService progress callbacks."""

    def __init__(self, title: str):
        self._placeholder = st.empty()
        self._container = self._placeholder.container()
        self._container.info(title)
        self._message_placeholder = self._container.empty()
        self._progress_placeholder = self._container.progress(0.0)
        self._finalized = False

    def callback(self, message: str, current: int | None = None, total: int | None = None) -> None:
        if self._finalized:
            return
        self._message_placeholder.write(message)
        if total and current is not None:
            self._progress_placeholder.progress(min(max(current / total, 0.0), 1.0))

    def complete(self) -> None:
        if self._finalized:
            return
        self._placeholder.empty()
        self._finalized = True
