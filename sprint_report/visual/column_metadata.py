"""Central column metadata for the report tables."""

from __future__ import annotations

from collections.abc import Iterable

from sprint_report.core.column_config import get_columns
from sprint_report.visual.table_model import Column

# Mapping of row keys to column descriptors
COLUMN_METADATA: dict[str, Column] = {
    # Assignee summary
    "assignee": Column("assignee", "Assignee"),
    "total_cards": Column("total_cards", "Total Cards", align="right"),
    "done_cards": Column("done_cards", "Done", align="right"),
    "in_progress_cards": Column("in_progress_cards", "In Progress", align="right"),
    "time_spent_hours": Column("time_spent_hours", "Hours", align="right", render="hours"),
    "completion": Column("completion", "Completion", align="right", render="completion"),
    # Status summary
    "status": Column("status", "Status"),
    "count": Column("count", "Cards", align="right"),
}


def columns_for(keys: Iterable[str]) -> list[Column]:
    """Return descriptors for the known keys, in the given order."""
    return [COLUMN_METADATA[key] for key in keys if key in COLUMN_METADATA]


def assignee_columns() -> list[Column]:
    return columns_for(get_columns("assignee"))


def status_columns() -> list[Column]:
    return columns_for(get_columns("status"))
