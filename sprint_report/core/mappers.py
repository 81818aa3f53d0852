"""Mapping raw Jira JSON (REST v3 and Agile API) into domain models."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import pandas as pd
import pytz

from .config import TIMEZONE, UNASSIGNED_LABEL
from .errors import DataError
from .models import AssigneeModel, BoardModel, IssueModel, ProjectModel, SprintModel


def parse_dt(val):
    if not val:
        return None
    ts = pd.to_datetime(val, utc=True, errors="coerce")
    if ts is None or pd.isna(ts):
        return None
    return ts.to_pydatetime()


def to_local(value):
    if value is None:
        return None
    return value.astimezone(pytz.timezone(TIMEZONE))


def _status_name(raw_status: Any) -> str | None:
    if isinstance(raw_status, dict):
        return raw_status.get("name")
    if isinstance(raw_status, str):
        return raw_status
    return None


def _map_assignee(raw_assignee: Any, key: str | None = None) -> AssigneeModel | None:
    if not raw_assignee:
        return None
    if not isinstance(raw_assignee, dict):
        raise DataError(
            f"Issue {key} has a malformed assignee: {type(raw_assignee).__name__}", issue_key=key
        )
    avatar_urls = raw_assignee.get("avatarUrls") or {}
    avatar = raw_assignee.get("avatarUrl") or avatar_urls.get("48x48")
    return AssigneeModel(
        account_id=raw_assignee.get("accountId"),
        # An assignee record with an empty name stays its own group
        display_name=raw_assignee.get("displayName") or "",
        avatar_url=avatar,
    )


def _time_spent_seconds(fields: dict[str, Any], key: str | None) -> int:
    tracking = fields.get("timetracking") or {}
    if not isinstance(tracking, dict):
        raise DataError(
            f"Issue {key} has malformed time tracking: {type(tracking).__name__}", issue_key=key
        )
    value = tracking.get("timeSpentSeconds")
    if value is None:
        value = fields.get("timespent")
    if value is None:
        return 0
    try:
        seconds = int(value)
    except (TypeError, ValueError) as exc:
        raise DataError(f"Issue {key} has a non-numeric time spent: {value!r}", issue_key=key) from exc
    if seconds < 0:
        raise DataError(f"Issue {key} has a negative time spent: {seconds}", issue_key=key)
    return seconds


def map_issue(raw: dict[str, Any]) -> IssueModel:
    """Map one raw Jira issue into an :class:`IssueModel`.

    Raises
    ------
    DataError
        If the record has no ``fields`` block or no status name, or its assignee,
        time tracking or time spent is malformed.
    """
    if not isinstance(raw, dict):
        raise DataError(f"Issue record must be a mapping, got {type(raw).__name__}")
    key = raw.get("key")
    fields = raw.get("fields")
    if not isinstance(fields, dict):
        raise DataError(f"Issue {key or raw.get('id')} has no fields", issue_key=key)
    status = _status_name(fields.get("status"))
    if status is None:
        raise DataError(f"Issue {key or raw.get('id')} has no status", issue_key=key)
    return IssueModel(
        id=str(raw.get("id") or key or ""),
        key=key,
        status=status,
        assignee=_map_assignee(fields.get("assignee"), key),
        time_spent_seconds=_time_spent_seconds(fields, key),
    )


def coerce_issues(issues: Iterable[IssueModel | dict[str, Any]]) -> list[IssueModel]:
    """Accept already-mapped models or raw Jira records, failing on any bad record."""
    out: list[IssueModel] = []
    for issue in issues:
        if isinstance(issue, IssueModel):
            out.append(issue)
        else:
            out.append(map_issue(issue))
    return out


def map_project(raw: Any) -> ProjectModel:
    # jira.Project resources and plain dicts are both accepted
    if not isinstance(raw, dict):
        raw = getattr(raw, "raw", None) or {
            "id": getattr(raw, "id", None),
            "key": getattr(raw, "key", None),
            "name": getattr(raw, "name", None),
        }
    return ProjectModel(
        id=str(raw.get("id") or ""),
        key=str(raw.get("key") or ""),
        name=str(raw.get("name") or raw.get("key") or ""),
    )


def map_board(raw: dict[str, Any]) -> BoardModel:
    location = raw.get("location") or {}
    return BoardModel(
        id=int(raw["id"]),
        name=raw.get("name"),
        location_name=location.get("name") or location.get("displayName"),
    )


def map_sprint(raw: dict[str, Any]) -> SprintModel:
    return SprintModel(
        id=int(raw["id"]),
        name=raw.get("name") or f"Sprint {raw['id']}",
        start_date=to_local(parse_dt(raw.get("startDate"))),
        end_date=to_local(parse_dt(raw.get("endDate"))),
        goal=raw.get("goal") or None,
    )


def issues_to_dataframe(issues: Iterable[IssueModel]) -> pd.DataFrame:
    rows = []
    for i in issues:
        rows.append(
            {
                "id": i.id,
                "key": i.key,
                "status": i.status,
                "assignee": i.assignee.display_name if i.assignee else UNASSIGNED_LABEL,
                "account_id": i.assignee.account_id if i.assignee else None,
                "avatar_url": i.assignee.avatar_url if i.assignee else None,
                "time_spent_seconds": i.time_spent_seconds,
            }
        )
    return pd.DataFrame(
        rows,
        columns=["id", "key", "status", "assignee", "account_id", "avatar_url", "time_spent_seconds"],
    )
