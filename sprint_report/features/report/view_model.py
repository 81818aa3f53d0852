"""Report view model: selection state, snapshot, and derived summaries (no Streamlit)."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import asdict, dataclass
from enum import Enum

from sprint_report.analytics.aggregations.assignee import filter_assignee_rows, group_by_assignee
from sprint_report.analytics.aggregations.status import count_by_status, sprint_progress
from sprint_report.analytics.filters import filter_active
from sprint_report.core.config import ALL_ASSIGNEES, REPORT_TITLE
from sprint_report.core.errors import DataError, FetchError, NoActiveSprintError, ReportError
from sprint_report.core.models import (
    AssigneeSummary,
    CurrentWork,
    ProjectModel,
    SprintProgress,
    StatusSummary,
)
from sprint_report.core.service import ReportService
from sprint_report.visual.column_metadata import assignee_columns, status_columns
from sprint_report.visual.table_model import TableModel

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], Awaitable[CurrentWork]]


class ReportState(str, Enum):
    EMPTY = "empty"
    LOADING = "loading"
    READY = "ready"
    NO_ACTIVE_SPRINT = "no_active_sprint"
    FAILED = "failed"


@dataclass(slots=True)
class ReportRegion:
    """Everything the export renders: the title and exactly the two summary tables."""

    title: str
    subtitle: str
    assignee_table: TableModel
    status_table: TableModel

    @property
    def tables(self) -> tuple[TableModel, TableModel]:
        return (self.assignee_table, self.status_table)


class ReportViewModel:
    """Holds the current project selection and the last applied snapshot.

    Every fetch is tagged with the selection generation active when it was
    dispatched; a result is applied only if that generation is still the
    current one, so the newest selection always wins.
    """

    def __init__(self, service: ReportService | None = None, *, fetcher: Fetcher | None = None):
        if fetcher is None and service is None:
            raise ValueError("ReportViewModel needs a service or a fetcher")
        self.service = service
        self._fetcher = fetcher
        self.state = ReportState.EMPTY
        self.project_id: str | None = None
        self.current_work: CurrentWork | None = None
        self.error_code: str | None = None
        self.error_message: str | None = None
        self.assignee_filter: str = ALL_ASSIGNEES
        self.projects: list[ProjectModel] = []
        self.projects_error: str | None = None
        self.progress = SprintProgress()
        self.total_cards = 0
        self._generation = 0
        self._assignee_rows: list[AssigneeSummary] = []
        self._status_rows: list[StatusSummary] = []

    # ------------------ Projects ------------------
    def load_projects(self) -> list[ProjectModel]:
        if self.service is None:
            return self.projects
        try:
            self.projects = self.service.get_projects()
            self.projects_error = None
        except FetchError as exc:
            logger.error("Failed to fetch projects: %s", exc)
            self.projects = []
            self.projects_error = str(exc)
        return self.projects

    # ------------------ Selection / transitions ------------------
    def select_project(self, project_id: str) -> int:
        """Enter LOADING for ``project_id`` and return the token of this selection."""
        self._generation += 1
        self.project_id = project_id
        self.state = ReportState.LOADING
        self.assignee_filter = ALL_ASSIGNEES
        self._clear_snapshot()
        self.error_code = None
        self.error_message = None
        return self._generation

    def clear_selection(self) -> None:
        """Drop the selection and its snapshot; outstanding fetches become stale."""
        self._generation += 1
        self.project_id = None
        self.state = ReportState.EMPTY
        self.assignee_filter = ALL_ASSIGNEES
        self._clear_snapshot()
        self.error_code = None
        self.error_message = None

    def is_current(self, token: int) -> bool:
        return token == self._generation

    def apply_result(self, token: int, work: CurrentWork) -> bool:
        if not self.is_current(token):
            logger.debug("Discarding stale result for project %s", work.project_id)
            return False
        try:
            active = filter_active(work.issues)
            assignee_rows = group_by_assignee(active)
            status_rows = count_by_status(active)
            progress = sprint_progress(active)
        except DataError as exc:
            return self._fail(exc)
        self.current_work = work
        self.total_cards = len(active)
        self._assignee_rows = assignee_rows
        self._status_rows = status_rows
        self.progress = progress
        self.state = ReportState.READY
        return True

    def apply_failure(self, token: int, exc: ReportError) -> bool:
        if not self.is_current(token):
            logger.debug("Discarding stale failure for project %s: %s", self.project_id, exc)
            return False
        if isinstance(exc, NoActiveSprintError):
            logger.info("Project %s has no active sprint", self.project_id)
            self._clear_snapshot()
            self.state = ReportState.NO_ACTIVE_SPRINT
            self.error_code = exc.code
            self.error_message = None
            return True
        return self._fail(exc)

    def _fail(self, exc: ReportError) -> bool:
        logger.error("Report for project %s failed (%s): %s", self.project_id, exc.code, exc)
        self._clear_snapshot()
        self.state = ReportState.FAILED
        self.error_code = exc.code
        self.error_message = str(exc)
        return True

    def _clear_snapshot(self) -> None:
        self.current_work = None
        self.total_cards = 0
        self._assignee_rows = []
        self._status_rows = []
        self.progress = SprintProgress()

    async def _fetch(self, project_id: str, fetcher: Fetcher | None = None) -> CurrentWork:
        fetcher = fetcher or self._fetcher
        if fetcher is not None:
            return await fetcher(project_id)
        return await asyncio.to_thread(self.service.fetch_current_work, project_id)

    async def load_project(self, project_id: str, fetcher: Fetcher | None = None) -> bool:
        """Select ``project_id`` and fetch its current work.

        Returns True if this call's outcome was applied, False if a newer
        selection superseded it while the fetch was outstanding.
        """
        token = self.select_project(project_id)
        try:
            work = await self._fetch(project_id, fetcher)
        except ReportError as exc:
            return self.apply_failure(token, exc)
        except Exception as exc:
            logger.exception("Unexpected error fetching project %s", project_id)
            return self.apply_failure(token, FetchError(f"Unexpected error while fetching: {exc}"))
        try:
            return self.apply_result(token, work)
        except Exception as exc:
            logger.exception("Unexpected error building the report of project %s", project_id)
            return self.apply_failure(token, DataError(f"Unexpected error while building the report: {exc}"))

    # ------------------ Derived views ------------------
    def set_assignee_filter(self, assignee: str | None) -> None:
        self.assignee_filter = assignee or ALL_ASSIGNEES

    @property
    def assignee_options(self) -> list[str]:
        return [ALL_ASSIGNEES, *[row.assignee for row in self._assignee_rows]]

    @property
    def assignee_rows(self) -> list[AssigneeSummary]:
        return filter_assignee_rows(self._assignee_rows, self.assignee_filter, ALL_ASSIGNEES)

    @property
    def status_rows(self) -> list[StatusSummary]:
        return list(self._status_rows)

    def assignee_table(self) -> TableModel:
        return TableModel(
            assignee_columns(),
            [asdict(row) for row in self.assignee_rows],
            title="Sprint Task Planning",
        )

    def status_table(self) -> TableModel:
        return TableModel(
            status_columns(),
            [asdict(row) for row in self.status_rows],
            title="Cards by Status",
        )

    def widget_key(self, name: str) -> str:
        # Changes with every selection, so sort state never outlives its snapshot
        return f"report_{name}_{self.project_id}_{self._generation}"

    def export_region(self) -> ReportRegion | None:
        if self.state is not ReportState.READY or self.current_work is None:
            return None
        sprint = self.current_work.active_sprint
        return ReportRegion(
            title=REPORT_TITLE,
            subtitle=f"{sprint.name} ({self.total_cards} cards)",
            assignee_table=self.assignee_table(),
            status_table=self.status_table(),
        )
