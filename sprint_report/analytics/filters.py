"""Issue filters applied before any aggregation."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from sprint_report.core.mappers import coerce_issues
from sprint_report.core.models import IssueModel
from sprint_report.core.status import is_cancelled_status


def filter_active(issues: Iterable[IssueModel | dict[str, Any]]) -> list[IssueModel]:
    """Drop cancelled issues, keeping the input order.

    Raw Jira records are mapped first, so a malformed record raises
    ``DataError`` instead of being skipped.
    """
    return [issue for issue in coerce_issues(issues) if not is_cancelled_status(issue.status)]
