"""Sprint report page: project selector, sprint details, summaries, and PDF export."""

from __future__ import annotations

import asyncio

import streamlit as st

from sprint_report.app import register_page
from sprint_report.core.config import EXPORT_FILE_NAME, NO_ACTIVE_SPRINT_MESSAGE, REPORT_TITLE
from sprint_report.core.service import ReportService
from sprint_report.features.report import ReportState, ReportViewModel
from sprint_report.visual.charts import progress_doughnut
from sprint_report.visual.export import region_signature, render_pdf
from sprint_report.visual.progress import ProgressReporter
from sprint_report.visual.tables import render_sortable_table

VM_KEY = "report_view_model"
PDF_KEY = "report_pdf"


def _view_model(service: ReportService) -> ReportViewModel:
    vm = st.session_state.get(VM_KEY)
    if vm is None or vm.service is not service:
        vm = ReportViewModel(service)
        vm.load_projects()
        st.session_state[VM_KEY] = vm
    return vm


def _load(vm: ReportViewModel, service: ReportService, project_id: str) -> None:
    reporter = ProgressReporter(f"Loading the active sprint of {project_id}")

    async def fetch(pid: str):
        return service.fetch_current_work(pid, progress=reporter.callback)

    asyncio.run(vm.load_project(project_id, fetcher=fetch))
    reporter.complete()


def _pdf_bytes(region) -> bytes:
    # Reruns with an unchanged region reuse the last document
    signature = region_signature(region)
    cached = st.session_state.get(PDF_KEY)
    if cached is None or cached[0] != signature:
        cached = (signature, render_pdf(region))
        st.session_state[PDF_KEY] = cached
    return cached[1]


def _render_sprint_details(vm: ReportViewModel) -> None:
    work = vm.current_work
    sprint = work.active_sprint
    details, progress_col = st.columns(2)
    with details:
        st.subheader("Sprint Details")
        st.write(f"Sprint: {sprint.name}")
        if work.board.location_name:
            st.write(f"Board: {work.board.location_name}")
        if sprint.start_date:
            st.write(f"Start Date: {sprint.start_date:%Y-%m-%d}")
        if sprint.end_date:
            st.write(f"End Date: {sprint.end_date:%Y-%m-%d}")
        st.write(f"Total Cards: {vm.total_cards}")
    with progress_col:
        st.subheader("Sprint Progress")
        st.write(f"Completed: {vm.progress.completed}%")
        st.write(f"Blocked: {vm.progress.blocked}%")
        st.write(f"In Progress: {vm.progress.in_progress}%")
        chart = progress_doughnut(vm.progress)
        if chart is not None:
            st.altair_chart(chart, use_container_width=False)


@register_page("Sprint Report")
def sprint_report_page():
    st.title(REPORT_TITLE)
    service: ReportService | None = st.session_state.get("report_service")
    if service is None:
        st.warning("Initialize connection on Setup page first.")
        return
    vm = _view_model(service)

    if vm.projects_error:
        st.error(f"Error fetching projects: {vm.projects_error}")
        if st.button("Retry", key="report_projects_retry"):
            vm.load_projects()
            st.rerun()
        return

    names = {p.id: p.name for p in vm.projects}
    options = [None, *names]
    current = options.index(vm.project_id) if vm.project_id in names else 0
    selected = st.selectbox(
        "Select Project",
        options,
        index=current,
        format_func=lambda pid: "(none)" if pid is None else names[pid],
    )
    if selected is None:
        if vm.project_id is not None:
            vm.clear_selection()
    elif selected != vm.project_id:
        _load(vm, service, selected)

    if vm.state is ReportState.EMPTY:
        st.info("Select a project to build its sprint report.")
        return
    if vm.state is ReportState.NO_ACTIVE_SPRINT:
        st.info(NO_ACTIVE_SPRINT_MESSAGE)
        return
    if vm.state is ReportState.FAILED:
        if vm.error_code == "data_error":
            st.error(f"Failed to generate the report: {vm.error_message}")
        else:
            st.error(f"Error fetching sprint data: {vm.error_message}")
        if st.button("Retry", key="report_retry"):
            _load(vm, service, vm.project_id)
            st.rerun()
        return
    if vm.state is ReportState.LOADING:
        st.info("Loading…")
        return

    _render_sprint_details(vm)

    chosen = st.selectbox("Assignee", vm.assignee_options, key=vm.widget_key("assignee_filter"))
    vm.set_assignee_filter(chosen)

    # Report region: exactly the two summary tables
    region = vm.export_region()
    with st.container(border=True):
        render_sortable_table(region.assignee_table, key=vm.widget_key("assignee_table"))
        render_sortable_table(region.status_table, key=vm.widget_key("status_table"))

    st.download_button(
        "Export to PDF",
        data=_pdf_bytes(region),
        file_name=EXPORT_FILE_NAME,
        mime="application/pdf",
        type="primary",
    )
