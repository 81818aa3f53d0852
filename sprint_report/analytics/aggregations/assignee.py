"""Assignee-based aggregations."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import asdict
from typing import Any

import pandas as pd

from sprint_report.analytics.filters import filter_active
from sprint_report.core.config import SECONDS_PER_HOUR
from sprint_report.core.mappers import issues_to_dataframe
from sprint_report.core.models import AssigneeSummary, IssueModel
from sprint_report.core.status import DONE_BUCKET, IN_PROGRESS_BUCKET, status_bucket

SUMMARY_COLUMNS = [
    "assignee",
    "account_id",
    "avatar_url",
    "total_cards",
    "done_cards",
    "in_progress_cards",
    "time_spent_hours",
]


def _optional(value):
    return None if value is None or pd.isna(value) else value


def _first(series: pd.Series):
    # GroupBy.first skips nulls; the identity fields come from the first issue seen
    return _optional(series.iloc[0])


def group_by_assignee(issues: Iterable[IssueModel | dict[str, Any]]) -> list[AssigneeSummary]:
    """Summarise the workload of each assignee over the non-cancelled issues.

    Parameters
    ----------
    issues : iterable of IssueModel or raw Jira issue dicts
        Snapshot of the sprint. Cancelled issues are dropped first.

    Returns
    -------
    list[AssigneeSummary]
        One row per assignee display name, in order of first appearance.
        Issues without an assignee are grouped under "Unassigned".

    Raises
    ------
    DataError
        If any raw record is missing its fields or status.
    """
    df = issues_to_dataframe(filter_active(issues))
    if df.empty:
        return []
    df["bucket"] = df["status"].map(status_bucket)
    df["is_done"] = (df["bucket"] == DONE_BUCKET).astype(int)
    df["is_in_progress"] = (df["bucket"] == IN_PROGRESS_BUCKET).astype(int)
    agg = df.groupby("assignee", sort=False).agg(
        account_id=("account_id", _first),
        avatar_url=("avatar_url", _first),
        total_cards=("id", "size"),
        done_cards=("is_done", "sum"),
        in_progress_cards=("is_in_progress", "sum"),
        time_spent_seconds=("time_spent_seconds", "sum"),
    )
    summaries: list[AssigneeSummary] = []
    for assignee, row in agg.iterrows():
        summaries.append(
            AssigneeSummary(
                assignee=str(assignee),
                account_id=_optional(row["account_id"]),
                avatar_url=_optional(row["avatar_url"]),
                total_cards=int(row["total_cards"]),
                done_cards=int(row["done_cards"]),
                in_progress_cards=int(row["in_progress_cards"]),
                # Floor once over the summed seconds so partial hours add up
                time_spent_hours=int(row["time_spent_seconds"]) // SECONDS_PER_HOUR,
            )
        )
    return summaries


def filter_assignee_rows(
    rows: list[AssigneeSummary], assignee: str | None, all_label: str
) -> list[AssigneeSummary]:
    if not assignee or assignee == all_label:
        return list(rows)
    return [row for row in rows if row.assignee == assignee]


def assignee_summary_frame(summaries: Iterable[AssigneeSummary]) -> pd.DataFrame:
    return pd.DataFrame([asdict(s) for s in summaries], columns=SUMMARY_COLUMNS)
