"""Status-based aggregations."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import asdict
from typing import Any

import pandas as pd

from sprint_report.analytics.filters import filter_active
from sprint_report.core.mappers import issues_to_dataframe
from sprint_report.core.models import IssueModel, SprintProgress, StatusSummary
from sprint_report.core.status import BLOCKED_BUCKET, DONE_BUCKET, IN_PROGRESS_BUCKET, status_bucket


def count_by_status(issues: Iterable[IssueModel | dict[str, Any]]) -> list[StatusSummary]:
    """Count non-cancelled issues per raw status label, in first-seen order."""
    df = issues_to_dataframe(filter_active(issues))
    if df.empty:
        return []
    counts = df.groupby("status", sort=False).size()
    return [StatusSummary(status=str(status), count=int(count)) for status, count in counts.items()]


def sprint_progress(issues: Iterable[IssueModel | dict[str, Any]]) -> SprintProgress:
    """Share of non-cancelled issues that are done, blocked, or in progress (percent)."""
    df = issues_to_dataframe(filter_active(issues))
    if df.empty:
        return SprintProgress()
    buckets = df["status"].map(status_bucket)
    total = len(df)

    def _pct(bucket: str) -> float:
        return round(100.0 * int((buckets == bucket).sum()) / total, 1)

    return SprintProgress(
        completed=_pct(DONE_BUCKET),
        blocked=_pct(BLOCKED_BUCKET),
        in_progress=_pct(IN_PROGRESS_BUCKET),
    )


def status_summary_frame(summaries: Iterable[StatusSummary]) -> pd.DataFrame:
    return pd.DataFrame([asdict(s) for s in summaries], columns=["status", "count"])
