"""Chart builders (Altair) for sprint progress."""

from __future__ import annotations

import altair as alt
import pandas as pd

from sprint_report.core.models import SprintProgress

PROGRESS_COLORS = {
    "Completed": "#36A2EB",
    "Blocked": "#FF6384",
    "In Progress": "#FFCE56",
}


def progress_frame(progress: SprintProgress) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "bucket": list(PROGRESS_COLORS),
            "percent": [progress.completed, progress.blocked, progress.in_progress],
        }
    )


def progress_doughnut(progress: SprintProgress, size: int = 260):
    """Doughnut of completed / blocked / in-progress shares, or None when all are zero."""
    data = progress_frame(progress)
    if float(data["percent"].sum()) <= 0:
        return None
    return (
        alt.Chart(data)
        .mark_arc(innerRadius=size // 4)
        .encode(
            theta=alt.Theta("percent:Q", stack=True),
            color=alt.Color(
                "bucket:N",
                scale=alt.Scale(domain=list(PROGRESS_COLORS), range=list(PROGRESS_COLORS.values())),
                legend=alt.Legend(title="Sprint Progress"),
            ),
            tooltip=[
                alt.Tooltip("bucket:N", title="Bucket"),
                alt.Tooltip("percent:Q", title="%", format=".1f"),
            ],
        )
        .properties(width=size, height=size)
    )
