"""Single-page PDF export of the report region (matplotlib)."""

from __future__ import annotations

from io import BytesIO

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

from sprint_report.core.config import EXPORT_PAGE_SIZE_INCHES  # noqa: E402
from sprint_report.features.report.view_model import ReportRegion  # noqa: E402
from sprint_report.visual.table_model import TableModel  # noqa: E402

HEADER_COLOR = "#573996"


def _draw_table(ax, model: TableModel) -> None:
    ax.axis("off")
    if model.title:
        ax.set_title(model.title, fontsize=12, loc="center")
    labels = [c.label for c in model.columns]
    rows = model.render()
    if rows and rows[0].placeholder:
        cell_text = [[rows[0].cells[0].value] + [""] * (len(labels) - 1)]
    else:
        cell_text = [["" if cell.value is None else str(cell.value) for cell in row.cells] for row in rows]
    table = ax.table(cellText=cell_text, colLabels=labels, loc="upper center", cellLoc="left")
    table.auto_set_font_size(False)
    table.set_fontsize(9)
    for (row_idx, _), cell in table.get_celld().items():
        if row_idx == 0:
            cell.set_facecolor(HEADER_COLOR)
            cell.get_text().set_color("white")


def render_pdf(region: ReportRegion) -> bytes:
    """Draw the title and the two summary tables onto one A4 page."""
    fig, (top, bottom) = plt.subplots(2, 1, figsize=EXPORT_PAGE_SIZE_INCHES)
    try:
        fig.suptitle(f"{region.title}\n{region.subtitle}", fontsize=14)
        _draw_table(top, region.assignee_table)
        _draw_table(bottom, region.status_table)
        bio = BytesIO()
        fig.savefig(bio, format="pdf")
        return bio.getvalue()
    finally:
        plt.close(fig)


def region_signature(region: ReportRegion) -> tuple:
    """Hashable digest of what :func:`render_pdf` draws, used to reuse a built PDF."""
    parts: list = [region.title, region.subtitle]
    for model in region.tables:
        cells = tuple(tuple(str(cell.value) for cell in row.cells) for row in model.render())
        parts.append((model.title, model.order_by, model.direction, cells))
    return tuple(parts)
