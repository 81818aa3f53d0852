"""Column-agnostic sortable table model (no Streamlit).

The model holds a fixed column set, a row sequence it never mutates, and the
transient sort state of one rendered table. ``visual/tables.py`` draws it with
Streamlit and ``visual/export.py`` draws it into the PDF export.
"""

from __future__ import annotations

import numbers
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

import pandas as pd

from sprint_report.core.config import EMPTY_TABLE_MESSAGE

ASC = "asc"
DESC = "desc"
ALIGNMENTS = ("left", "right", "center")

Row = Mapping[str, Any]


def _hours(row: Row, column_id: str) -> Any:
    value = _value(row, column_id)
    return None if _is_missing(value) else f"{value} h"


def _completion(row: Row, column_id: str) -> Any:
    total = _value(row, "total_cards") or 0
    done = _value(row, "done_cards") or 0
    if not total:
        return "0%"
    return f"{round(100 * done / total)}%"


# Computed cell renderers, referenced by name from Column.render
CELL_RENDERERS: dict[str, Callable[[Row, str], Any]] = {
    "hours": _hours,
    "completion": _completion,
}


@dataclass(slots=True, frozen=True)
class Column:
    """Column descriptor.

    A column with ``render=None`` shows the raw value at ``row[id]``; otherwise
    ``render`` names an entry of CELL_RENDERERS that computes the cell.
    """

    id: str
    label: str
    align: str = "left"
    render: str | None = None

    def __post_init__(self):
        if self.align not in ALIGNMENTS:
            raise ValueError(f"Unsupported alignment {self.align!r} for column {self.id}")
        if self.render is not None and self.render not in CELL_RENDERERS:
            raise ValueError(f"Unknown cell renderer {self.render!r} for column {self.id}")

    @property
    def kind(self) -> str:
        return "value" if self.render is None else "computed"


@dataclass(slots=True)
class RenderedCell:
    value: Any
    align: str = "left"
    colspan: int = 1


@dataclass(slots=True)
class RenderedRow:
    cells: list[RenderedCell] = field(default_factory=list)
    placeholder: bool = False


def _value(row: Any, column_id: str) -> Any:
    if isinstance(row, Mapping):
        return row.get(column_id)
    return getattr(row, column_id, None)


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        # Containers are never treated as missing
        return False


def _sort_key(value: Any):
    # Real numbers sort before strings; anything else after, grouped by type
    if isinstance(value, numbers.Real) and not isinstance(value, bool):
        return (0, "", value)
    if isinstance(value, str):
        return (1, "", value)
    return (2, type(value).__name__, value)


def _text_sort_key(value: Any):
    # Same grouping as _sort_key; only the values after the strings compare as text
    rank, type_name, natural = _sort_key(value)
    if rank < 2:
        return (rank, type_name, natural)
    return (rank, type_name, str(natural))


def sort_rows(rows: Sequence[Row], order_by: str | None, direction: str = ASC) -> list[Row]:
    """Return a stably sorted copy of ``rows`` by ``row[order_by]``.

    Missing values (absent key, None, NaN) always go last regardless of
    ``direction``. With no ``order_by`` the original order is returned.
    """
    if direction not in (ASC, DESC):
        raise ValueError(f"Unsupported sort direction {direction!r}")
    if not order_by:
        return list(rows)
    present = [row for row in rows if not _is_missing(_value(row, order_by))]
    missing = [row for row in rows if _is_missing(_value(row, order_by))]
    reverse = direction == DESC
    try:
        ordered = sorted(present, key=lambda r: _sort_key(_value(r, order_by)), reverse=reverse)
    except TypeError:
        # Values of one type that define no order compare as text within their group
        ordered = sorted(present, key=lambda r: _text_sort_key(_value(r, order_by)), reverse=reverse)
    return ordered + missing


class TableModel:
    """Sort state and cell rendering for one table.

    Parameters
    ----------
    columns : sequence of Column
        Fixed for the lifetime of the model.
    rows : sequence of mappings
        Row data. Never mutated; sorting always returns a new list.
    title : str, optional
        Caption shown above the table.
    empty_message : str
        Text of the placeholder row shown when there are no rows.
    """

    def __init__(
        self,
        columns: Sequence[Column],
        rows: Sequence[Row] = (),
        *,
        title: str | None = None,
        empty_message: str = EMPTY_TABLE_MESSAGE,
    ):
        if not columns:
            raise ValueError("A table needs at least one column")
        self.columns: tuple[Column, ...] = tuple(columns)
        self.rows: tuple[Row, ...] = tuple(rows)
        self.title = title
        self.empty_message = empty_message
        self.order_by: str | None = None
        self.direction: str = ASC

    @property
    def column_ids(self) -> list[str]:
        return [c.id for c in self.columns]

    def request_sort(self, column_id: str) -> None:
        """Apply a click on a column header."""
        if column_id not in self.column_ids:
            raise KeyError(column_id)
        if self.order_by == column_id:
            self.direction = DESC if self.direction == ASC else ASC
        else:
            self.order_by = column_id
            self.direction = ASC

    def set_sort(self, order_by: str | None, direction: str = ASC) -> None:
        if order_by is not None and order_by not in self.column_ids:
            raise KeyError(order_by)
        if direction not in (ASC, DESC):
            raise ValueError(f"Unsupported sort direction {direction!r}")
        self.order_by = order_by
        self.direction = direction

    def sort_direction_for(self, column_id: str) -> str | None:
        return self.direction if self.order_by == column_id else None

    def sorted_rows(self) -> list[Row]:
        return sort_rows(self.rows, self.order_by, self.direction)

    @staticmethod
    def cell(row: Row, column: Column) -> Any:
        if column.render is not None:
            return CELL_RENDERERS[column.render](row, column.id)
        return _value(row, column.id)

    def render(self) -> list[RenderedRow]:
        if not self.rows:
            placeholder = RenderedCell(self.empty_message, align="center", colspan=len(self.columns))
            return [RenderedRow(cells=[placeholder], placeholder=True)]
        return [
            RenderedRow(cells=[RenderedCell(self.cell(row, col), align=col.align) for col in self.columns])
            for row in self.sorted_rows()
        ]

    def to_dataframe(self) -> pd.DataFrame:
        """Rendered cells keyed by column label, for display and export."""
        labels = [c.label for c in self.columns]
        if not self.rows:
            return pd.DataFrame(columns=labels)
        data = [[cell.value for cell in row.cells] for row in self.render()]
        return pd.DataFrame(data, columns=labels)
