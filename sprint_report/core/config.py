"""Central configuration, constants, and shared column definitions."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

# =============================================================================
# Jira Connection Settings
# =============================================================================
JIRA_DEFAULT_SERVER = "https://your-domain.atlassian.net"
TIMEZONE = "America/Sao_Paulo"

# =============================================================================
# Workflow Status Configuration
# Labels are compared case-insensitively against the raw Jira status name.
# =============================================================================
# Terminal-cancellation status: issues in this state never reach any report
CANCELLED_STATUS = "CANCELADO"
DONE_STATUS = "DONE"
IN_PROGRESS_STATUS = "IN PROGRESS"
BLOCKED_STATUS = "BLOCKED"

# =============================================================================
# Report Labels
# =============================================================================
UNASSIGNED_LABEL = "Unassigned"
ALL_ASSIGNEES = "All"
EMPTY_TABLE_MESSAGE = "No data available"
NO_ACTIVE_SPRINT_MESSAGE = "This project has no active sprint"
REPORT_TITLE = "Sprint Overview Summary Report"

SECONDS_PER_HOUR = 3600

# =============================================================================
# Jira Fetch Configuration
# =============================================================================
SPRINT_ISSUE_FIELDS: Sequence[str] = (
    "summary",
    "status",
    "assignee",
    "timetracking",
)
AGILE_PAGE_SIZE = 100

# =============================================================================
# Table Column Sets (overridable through columns.yaml)
# =============================================================================
ASSIGNEE_TABLE_COLUMNS: Sequence[str] = (
    "assignee",
    "total_cards",
    "done_cards",
    "in_progress_cards",
    "time_spent_hours",
)

STATUS_TABLE_COLUMNS: Sequence[str] = (
    "status",
    "count",
)

# =============================================================================
# PDF Export
# =============================================================================
EXPORT_PAGE_SIZE_INCHES: tuple[float, float] = (8.27, 11.69)  # A4 portrait
EXPORT_FILE_NAME = "report.pdf"


@dataclass(slots=True)
class AppSettings:
    max_table_rows: int = 1000
    client_cache_ttl: float = 300.0
    log_level: str = "INFO"


SETTINGS = AppSettings()
