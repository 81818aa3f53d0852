"""ReportService: fetches projects and the current sprint work of a project."""

from __future__ import annotations

import logging
from collections.abc import Callable

from .config import SPRINT_ISSUE_FIELDS
from .errors import NoActiveSprintError
from .jira_client import JiraAPI
from .mappers import map_board, map_issue, map_project, map_sprint
from .models import CurrentWork, ProjectModel

ProgressCallback = Callable[[str, int | None, int | None], None]

logger = logging.getLogger(__name__)


class ReportService:
    def __init__(self, api: JiraAPI):
        self.api = api

    def get_projects(self) -> list[ProjectModel]:
        """Fetch all projects, sorted alphabetically by name for display."""
        projects = [map_project(p) for p in self.api.projects()]
        return sorted(projects, key=lambda p: p.name.casefold())

    def fetch_current_work(
        self,
        project_id: str,
        *,
        progress: ProgressCallback | None = None,
    ) -> CurrentWork:
        """Fetch the active sprint of ``project_id`` and its issues.

        The first board of the project that has an active sprint is used.

        Raises
        ------
        NoActiveSprintError
            If no board of the project has an active sprint.
        FetchError
            On any network or HTTP failure.
        DataError
            If an issue record is malformed.
        """
        if hasattr(self.api, "clear_cache"):
            self.api.clear_cache()
        if progress:
            progress(f"Looking up boards for {project_id}", None, None)
        boards = self.api.boards_for_project(project_id)
        for idx, raw_board in enumerate(boards, start=1):
            if progress:
                progress("Looking for an active sprint", idx, len(boards))
            sprints = self.api.active_sprints(raw_board["id"])
            if not sprints:
                continue
            board = map_board(raw_board)
            sprint = map_sprint(sprints[0])
            if progress:
                progress(f"Loading issues of {sprint.name}", None, None)
            raw_issues = self.api.sprint_issues(sprint.id, fields=list(SPRINT_ISSUE_FIELDS))
            issues = [map_issue(r) for r in raw_issues]
            logger.debug("Fetched %s issues for sprint %s on board %s", len(issues), sprint.id, board.id)
            return CurrentWork(project_id=project_id, board=board, active_sprint=sprint, issues=issues)
        raise NoActiveSprintError(project_id)
