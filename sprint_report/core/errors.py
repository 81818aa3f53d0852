"""Error taxonomy shared by the Jira service and the report view model."""

from __future__ import annotations


class ReportError(Exception):
    """Base class for every error the report surfaces to the user."""

    code = "report_error"


class FetchError(ReportError):
    """Network or HTTP failure while reaching Jira. Retry-eligible."""

    code = "fetch_error"

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class NoActiveSprintError(ReportError):
    """The project answered correctly but has no active sprint."""

    code = "no_active_sprint"

    def __init__(self, project_id: str):
        super().__init__(f"Project {project_id} has no active sprint")
        self.project_id = project_id


class DataError(ReportError):
    """An issue record is missing fields the aggregators rely on."""

    code = "data_error"

    def __init__(self, message: str, issue_key: str | None = None):
        super().__init__(message)
        self.issue_key = issue_key
