"""Sprint report feature module: view model and export boundary."""

from sprint_report.features.report.view_model import ReportRegion, ReportState, ReportViewModel

__all__ = [
    "ReportRegion",
    "ReportState",
    "ReportViewModel",
]
