"""Lint pipeline for monitoring workbooks."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from ..exceptions import DataQualityError
from ..validators import ValidationIssue
from .report import RunOverrides, build_report


@dataclass
class LintReport:
    """Summary from linting a workbook against a report configuration."""

    workbook_path: Path
    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def error_count(self) -> int:
        return sum(1 for issue in self.issues if issue.is_error())

    @property
    def warning_count(self) -> int:
        return sum(1 for issue in self.issues if not issue.is_error())

    @property
    def has_errors(self) -> bool:
        return self.error_count > 0

    def as_dict(self) -> dict:
        return {
            "workbook": str(self.workbook_path),
            "issues": [issue.as_dict() for issue in self.issues],
            "summary": {
                "errors": self.error_count,
                "warnings": self.warning_count,
            },
        }


def lint_workbook(
    workbook_path: Path,
    config_dir: Path,
    *,
    overrides: Optional[RunOverrides] = None,
) -> LintReport:
    """Run the report pipeline and collect issues instead of writing output.

    A data-quality failure stops the run, so at most one error is reported;
    configuration and workbook errors propagate.
    """

    workbook_path = Path(workbook_path)
    try:
        report = build_report(workbook_path, config_dir, overrides=overrides)
    except DataQualityError as exc:
        issue = ValidationIssue(
            code="E_DATA_QUALITY",
            severity="error",
            message=exc.message,
            location=exc.location,
        )
        return LintReport(workbook_path=workbook_path, issues=[issue])

    return LintReport(workbook_path=workbook_path, issues=list(report.issues))
