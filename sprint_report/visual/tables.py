"""Streamlit rendering of TableModel instances with clickable sort headers."""

from __future__ import annotations

import streamlit as st

from sprint_report.core.config import SETTINGS
from sprint_report.visual.table_model import ASC, TableModel

_ARROWS = {"asc": " ▲", "desc": " ▼"}


def _sort_state_key(key: str) -> str:
    return f"{key}_sort"


def restore_sort(model: TableModel, key: str) -> None:
    """Re-apply the sort state kept in session_state for the table ``key``."""
    order_by, direction = st.session_state.get(_sort_state_key(key), (None, ASC))
    if order_by in model.column_ids:
        model.set_sort(order_by, direction)


def render_sortable_table(model: TableModel, key: str) -> None:
    restore_sort(model, key)
    if model.title:
        st.subheader(model.title)

    header = st.columns(len(model.columns))
    for col_slot, column in zip(header, model.columns, strict=True):
        arrow = _ARROWS.get(model.sort_direction_for(column.id) or "", "")
        if col_slot.button(f"{column.label}{arrow}", key=f"{key}_hdr_{column.id}", use_container_width=True):
            model.request_sort(column.id)
            st.session_state[_sort_state_key(key)] = (model.order_by, model.direction)
            st.rerun()

    rendered = model.render()
    if rendered and rendered[0].placeholder:
        st.info(rendered[0].cells[0].value)
        return
    st.dataframe(
        model.to_dataframe().head(SETTINGS.max_table_rows),
        hide_index=True,
        use_container_width=True,
    )
