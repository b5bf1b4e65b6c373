"""Report engine orchestration."""

from .lint import LintReport, lint_workbook
from .report import ReportData, RunOverrides, assemble_report, build_report, write_report

__all__ = [
    "LintReport",
    "ReportData",
    "RunOverrides",
    "assemble_report",
    "build_report",
    "lint_workbook",
    "write_report",
]
