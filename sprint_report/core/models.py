"""Domain data models for projects, sprints, issues, and report summaries."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(slots=True, frozen=True)
class ProjectModel:
    id: str
    key: str
    name: str


@dataclass(slots=True, frozen=True)
class AssigneeModel:
    account_id: str | None
    display_name: str
    avatar_url: str | None = None


@dataclass(slots=True, frozen=True)
class IssueModel:
    id: str
    key: str | None
    status: str
    assignee: AssigneeModel | None
    time_spent_seconds: int = 0


@dataclass(slots=True, frozen=True)
class BoardModel:
    id: int
    name: str | None = None
    location_name: str | None = None


@dataclass(slots=True, frozen=True)
class SprintModel:
    id: int
    name: str
    start_date: datetime | None = None
    end_date: datetime | None = None
    goal: str | None = None


@dataclass(slots=True)
class CurrentWork:
    """Snapshot of the active sprint of one project."""

    project_id: str
    board: BoardModel
    active_sprint: SprintModel
    issues: list[IssueModel] = field(default_factory=list)


@dataclass(slots=True)
class AssigneeSummary:
    assignee: str
    account_id: str | None
    avatar_url: str | None
    total_cards: int = 0
    done_cards: int = 0
    in_progress_cards: int = 0
    time_spent_hours: int = 0


@dataclass(slots=True)
class StatusSummary:
    status: str
    count: int = 0


@dataclass(slots=True)
class SprintProgress:
    """Percentages of active (non-cancelled) issues per progress bucket."""

    completed: float = 0.0
    blocked: float = 0.0
    in_progress: float = 0.0
