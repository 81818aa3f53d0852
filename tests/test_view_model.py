import asyncio

import pytest

from sprint_report.core.errors import DataError, FetchError, NoActiveSprintError
from sprint_report.core.mappers import map_issue
from sprint_report.core.models import BoardModel, CurrentWork, IssueModel, ProjectModel, SprintModel
from sprint_report.features.report import ReportState, ReportViewModel
from tests.conftest import make_issue


def _work(project_id, issues):
    return CurrentWork(
        project_id=project_id,
        board=BoardModel(id=1, name="Board", location_name=project_id),
        active_sprint=SprintModel(id=10, name=f"{project_id} Sprint 1"),
        issues=[map_issue(i) if isinstance(i, dict) else i for i in issues],
    )


SAMPLE = [
    make_issue(1, "Done", "Alice", 3600),
    make_issue(2, "In Progress", "Bob", 1800),
    make_issue(3, "Blocked", "Alice"),
    make_issue(4, "CANCELADO", "Carol"),
]


class StaticFetcher:
    def __init__(self, results):
        self.results = results
        self.calls = []

    async def __call__(self, project_id):
        self.calls.append(project_id)
        result = self.results[project_id]
        if isinstance(result, Exception):
            raise result
        return result


def test_requires_service_or_fetcher():
    with pytest.raises(ValueError):
        ReportViewModel()


def test_initial_state_is_empty():
    vm = ReportViewModel(fetcher=StaticFetcher({}))
    assert vm.state is ReportState.EMPTY
    assert vm.export_region() is None


def test_load_ready_recomputes_summaries():
    vm = ReportViewModel(fetcher=StaticFetcher({"P1": _work("P1", SAMPLE)}))
    assert asyncio.run(vm.load_project("P1")) is True
    assert vm.state is ReportState.READY
    assert vm.total_cards == 3
    assert [r.assignee for r in vm.assignee_rows] == ["Alice", "Bob"]
    assert [(r.status, r.count) for r in vm.status_rows] == [("Done", 1), ("In Progress", 1), ("Blocked", 1)]
    assert vm.assignee_options == ["All", "Alice", "Bob"]
    assert vm.progress.completed == pytest.approx(33.3)


def test_assignee_filter_only_affects_assignee_rows():
    vm = ReportViewModel(fetcher=StaticFetcher({"P1": _work("P1", SAMPLE)}))
    asyncio.run(vm.load_project("P1"))
    vm.set_assignee_filter("Bob")
    assert [r.assignee for r in vm.assignee_rows] == ["Bob"]
    assert len(vm.status_rows) == 3
    vm.set_assignee_filter("All")
    assert len(vm.assignee_rows) == 2
    vm.set_assignee_filter(None)
    assert vm.assignee_filter == "All"


def test_select_project_clears_previous_snapshot():
    vm = ReportViewModel(fetcher=StaticFetcher({"P1": _work("P1", SAMPLE)}))
    asyncio.run(vm.load_project("P1"))
    vm.set_assignee_filter("Bob")
    vm.select_project("P2")
    assert vm.state is ReportState.LOADING
    assert vm.current_work is None
    assert vm.assignee_rows == [] and vm.status_rows == []
    assert vm.assignee_filter == "All"
    assert vm.error_code is None


def test_no_active_sprint_is_distinct_state():
    vm = ReportViewModel(fetcher=StaticFetcher({"P1": NoActiveSprintError("P1")}))
    asyncio.run(vm.load_project("P1"))
    assert vm.state is ReportState.NO_ACTIVE_SPRINT
    assert vm.error_code == "no_active_sprint"
    assert vm.current_work is None


def test_fetch_error_moves_to_failed_and_retry_recovers():
    fetcher = StaticFetcher({"P1": FetchError("boom", status_code=502)})
    vm = ReportViewModel(fetcher=fetcher)
    asyncio.run(vm.load_project("P1"))
    assert vm.state is ReportState.FAILED
    assert vm.error_code == "fetch_error"
    assert "boom" in vm.error_message
    fetcher.results["P1"] = _work("P1", SAMPLE)
    asyncio.run(vm.load_project("P1"))
    assert vm.state is ReportState.READY
    assert vm.error_code is None


def test_data_error_from_fetch_or_aggregation():
    vm = ReportViewModel(fetcher=StaticFetcher({"P1": DataError("Issue SPR-9 has no status")}))
    asyncio.run(vm.load_project("P1"))
    assert vm.state is ReportState.FAILED
    assert vm.error_code == "data_error"

    bad = _work("P2", [])
    bad.issues = [make_issue(1, "Done"), {"id": "2"}]
    vm = ReportViewModel(fetcher=StaticFetcher({"P2": bad}))
    asyncio.run(vm.load_project("P2"))
    assert vm.state is ReportState.FAILED
    assert vm.error_code == "data_error"
    assert vm.current_work is None


def test_stale_result_is_discarded():
    vm = ReportViewModel(fetcher=StaticFetcher({}))
    first = vm.select_project("P1")
    second = vm.select_project("P2")
    assert vm.apply_result(first, _work("P1", SAMPLE)) is False
    assert vm.state is ReportState.LOADING
    assert vm.apply_failure(first, FetchError("late")) is False
    assert vm.state is ReportState.LOADING
    assert vm.apply_result(second, _work("P2", [make_issue(9, "Done", "Zoe")])) is True
    assert [r.assignee for r in vm.assignee_rows] == ["Zoe"]


def test_newest_selection_wins_when_older_fetch_resolves_last():
    async def scenario():
        release_slow = asyncio.Event()

        async def fetcher(project_id):
            if project_id == "SLOW":
                await release_slow.wait()
                return _work("SLOW", SAMPLE)
            return _work("FAST", [make_issue(7, "Done", "Fay")])

        vm = ReportViewModel(fetcher=fetcher)
        slow = asyncio.create_task(vm.load_project("SLOW"))
        await asyncio.sleep(0)
        assert vm.state is ReportState.LOADING
        applied_fast = await vm.load_project("FAST")
        release_slow.set()
        applied_slow = await slow
        return vm, applied_fast, applied_slow

    vm, applied_fast, applied_slow = asyncio.run(scenario())
    assert applied_fast is True
    assert applied_slow is False
    assert vm.project_id == "FAST"
    assert vm.state is ReportState.READY
    assert [r.assignee for r in vm.assignee_rows] == ["Fay"]


def test_default_fetch_uses_service_in_thread():
    class Service:
        def fetch_current_work(self, project_id):
            return _work(project_id, SAMPLE)

    vm = ReportViewModel(Service())
    asyncio.run(vm.load_project("P1"))
    assert vm.state is ReportState.READY


def test_load_projects_sorted_and_errors_recorded():
    class Service:
        def __init__(self, fail=False):
            self.fail = fail

        def get_projects(self):
            if self.fail:
                raise FetchError("down")
            return [ProjectModel("1", "A", "Apollo"), ProjectModel("2", "B", "Borealis")]

    vm = ReportViewModel(Service())
    assert [p.name for p in vm.load_projects()] == ["Apollo", "Borealis"]
    failing = ReportViewModel(Service(fail=True))
    assert failing.load_projects() == []
    assert failing.projects_error == "down"


def test_export_region_holds_exactly_the_two_tables():
    issues = [IssueModel(id="1", key="K-1", status="Done", assignee=None, time_spent_seconds=0)]
    vm = ReportViewModel(fetcher=StaticFetcher({"P1": _work("P1", issues)}))
    asyncio.run(vm.load_project("P1"))
    region = vm.export_region()
    assert len(region.tables) == 2
    assert region.assignee_table.rows[0]["assignee"] == "Unassigned"
    assert region.status_table.rows[0] == {"status": "Done", "count": 1}
    assert "P1 Sprint 1" in region.subtitle


def test_malformed_assignee_or_time_tracking_fails_with_data_error():
    for field, value in (("assignee", "bob"), ("timetracking", 3600)):
        raw = make_issue(1, "Done")
        raw["fields"][field] = value
        work = _work("P1", [])
        work.issues = [raw]
        vm = ReportViewModel(fetcher=StaticFetcher({"P1": work}))
        assert asyncio.run(vm.load_project("P1")) is True
        assert vm.state is ReportState.FAILED
        assert vm.error_code == "data_error"
        assert "SPR-1" in vm.error_message


def test_unexpected_fetch_error_moves_to_failed():
    vm = ReportViewModel(fetcher=StaticFetcher({"P1": RuntimeError("socket closed")}))
    assert asyncio.run(vm.load_project("P1")) is True
    assert vm.state is ReportState.FAILED
    assert vm.error_code == "fetch_error"
    assert "socket closed" in vm.error_message


def test_unexpected_aggregation_error_becomes_data_error(monkeypatch):
    def broken(issues):
        raise KeyError("status")

    monkeypatch.setattr("sprint_report.features.report.view_model.count_by_status", broken)
    vm = ReportViewModel(fetcher=StaticFetcher({"P1": _work("P1", SAMPLE)}))
    asyncio.run(vm.load_project("P1"))
    assert vm.state is ReportState.FAILED
    assert vm.error_code == "data_error"
    assert vm.current_work is None


def test_clear_selection_returns_to_empty_and_drops_late_results():
    vm = ReportViewModel(fetcher=StaticFetcher({"P1": _work("P1", SAMPLE)}))
    asyncio.run(vm.load_project("P1"))
    token = vm.select_project("P2")
    vm.clear_selection()
    assert vm.state is ReportState.EMPTY
    assert vm.project_id is None
    assert vm.export_region() is None
    assert vm.apply_result(token, _work("P2", SAMPLE)) is False
    assert vm.state is ReportState.EMPTY
    assert vm.assignee_rows == []


def test_widget_keys_change_with_every_selection():
    vm = ReportViewModel(fetcher=StaticFetcher({"P1": _work("P1", SAMPLE), "P2": _work("P2", SAMPLE)}))
    asyncio.run(vm.load_project("P1"))
    first = vm.widget_key("assignee_table")
    asyncio.run(vm.load_project("P2"))
    second = vm.widget_key("assignee_table")
    asyncio.run(vm.load_project("P1"))
    assert len({first, second, vm.widget_key("assignee_table")}) == 3
    assert vm.widget_key("assignee_table") != vm.widget_key("status_table")
