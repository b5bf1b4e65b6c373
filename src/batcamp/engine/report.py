"""Single parameterized report run over a monitoring workbook."""

from __future__ import annotations

import calendar
import json
import logging
from dataclasses import asdict, dataclass, field
from datetime import date
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd
from pydantic import ValidationError

from ..aggregation import (
    FiscalCalendar,
    monthly_aggregates,
    species_monthly,
    survey_series,
    yearly_peaks,
)
from ..config import ConfigBundle, ConfigFiles, load_config_bundle
from ..config.loader import format_validation_errors
from ..exceptions import ConfigError
from ..monitoring import load_monitoring_records, survey_totals
from ..trees import OBSERVATION_COLUMNS, density_summary, load_tree_locations, reshape_tree_surveys
from ..trees.density import SUMMARY_COLUMNS
from ..validators import ValidationIssue
from ..weather import OVERLAY_COLUMNS, load_weather, weather_overlay
from ..workbook import SheetNames, Workbook, load_workbook

logger = logging.getLogger(__name__)

REPORT_FILENAME = "report.json"


@dataclass
class RunOverrides:
    """Per-run values that replace the configuration files."""

    start: Optional[date] = None
    end: Optional[date] = None
    year_label: Optional[str] = None
    site: Optional[str] = None
    exclude_absent: Optional[bool] = None


@dataclass
class ReportData:
    """Every table a renderer needs for one reporting period."""

    config: ConfigBundle
    workbook_path: Path
    monthly: pd.DataFrame
    species_monthly: pd.DataFrame
    survey_series: pd.DataFrame
    yearly_peaks: pd.DataFrame
    weather_overlay: pd.DataFrame
    tree_observations: pd.DataFrame
    density_summary: pd.DataFrame
    issues: List[ValidationIssue] = field(default_factory=list)
    excluded_species: List[str] = field(default_factory=list)

    @property
    def error_count(self) -> int:
        return sum(1 for issue in self.issues if issue.is_error())

    @property
    def warning_count(self) -> int:
        return sum(1 for issue in self.issues if not issue.is_error())

    def tables(self) -> Dict[str, pd.DataFrame]:
        return {
            "monthly": self.monthly,
            "species_monthly": self.species_monthly,
            "survey_series": self.survey_series,
            "yearly_peaks": self.yearly_peaks,
            "weather_overlay": self.weather_overlay,
            "tree_observations": self.tree_observations,
            "density_summary": self.density_summary,
        }

    def as_dict(self) -> dict:
        report = self.config.report
        return {
            "workbook": str(self.workbook_path),
            "year_label": report.year_label,
            "site": report.site,
            "window": {
                "start": report.window.start.isoformat(),
                "end": report.window.end.isoformat(),
            },
            "excluded_species": list(self.excluded_species),
            "rows": {name: int(len(frame)) for name, frame in self.tables().items()},
            "issues": [issue.as_dict() for issue in self.issues],
            "summary": {
                "errors": self.error_count,
                "warnings": self.warning_count,
            },
        }


def build_report(
    workbook_path: Path,
    config_dir: Path,
    *,
    overrides: Optional[RunOverrides] = None,
) -> ReportData:
    """Load, normalize and aggregate one reporting period."""

    config_dir = Path(config_dir)
    config = load_config_bundle(config_dir)
    if overrides is not None:
        try:
            config = config.with_overrides(**asdict(overrides))
        except ValidationError as exc:
            raise ConfigError(
                config_dir / ConfigFiles.REPORT,
                f"invalid run override: {format_validation_errors(exc)}",
            ) from exc
    workbook = load_workbook(Path(workbook_path))
    return assemble_report(workbook, config)


def assemble_report(workbook: Workbook, config: ConfigBundle) -> ReportData:
    report = config.report
    window = report.window
    issues: List[ValidationIssue] = []

    monitoring = load_monitoring_records(workbook.sheet(SheetNames.MONITORING), config)
    period_totals = survey_totals(monitoring.surveyed)
    history_totals = survey_totals(monitoring.history)

    for species in monitoring.excluded_species:
        issues.append(
            ValidationIssue(
                code="W_SPECIES_EXCLUDED",
                severity="warning",
                message=f"{species} has no recorded animals in the reporting window and was excluded",
                location=f"{SheetNames.MONITORING}:col {species.lower()}",
            )
        )

    monthly = monthly_aggregates(period_totals, config.scaling)
    issues.extend(_unsurveyed_months(period_totals, config))

    weather_table = pd.DataFrame(columns=OVERLAY_COLUMNS)
    if SheetNames.WEATHER in workbook.sheets:
        clip = config.counts.weather.clip_to_window
        weather = load_weather(
            workbook.sheet(SheetNames.WEATHER),
            report.cutoffs.weather_year,
            window=window if clip else None,
        )
        abundance = period_totals if clip else history_totals
        abundance = abundance[
            pd.to_datetime(abundance["date"]).dt.year >= report.cutoffs.weather_year
        ]
        weather_table = weather_overlay(abundance, weather)
    else:
        issues.append(_missing_sheet(SheetNames.WEATHER))

    observations = pd.DataFrame(columns=OBSERVATION_COLUMNS)
    summary = pd.DataFrame(columns=SUMMARY_COLUMNS)
    if SheetNames.SURVEYS in workbook.sheets and SheetNames.TREES in workbook.sheets:
        locations = load_tree_locations(workbook.sheet(SheetNames.TREES))
        result = reshape_tree_surveys(
            workbook.sheet(SheetNames.SURVEYS),
            locations,
            config.counts,
            window,
        )
        observations = result.observations
        summary = density_summary(observations)
        issues.extend(result.issues)
    else:
        for name in (SheetNames.SURVEYS, SheetNames.TREES):
            if name not in workbook.sheets:
                issues.append(_missing_sheet(name))

    logger.info(
        "report %s for %s: %d surveys, %d tree observations",
        report.year_label,
        report.site,
        len(period_totals),
        len(observations),
    )

    return ReportData(
        config=config,
        workbook_path=workbook.path,
        monthly=monthly,
        species_monthly=species_monthly(monitoring.records),
        survey_series=survey_series(period_totals, config.scaling),
        yearly_peaks=yearly_peaks(history_totals, report.cutoffs.yearly_year),
        weather_overlay=weather_table,
        tree_observations=observations,
        density_summary=summary,
        issues=sorted(issues, key=lambda issue: (issue.severity, issue.code, issue.location)),
        excluded_species=monitoring.excluded_species,
    )


def write_report(report: ReportData, out_dir: Path) -> Dict[str, Path]:
    """Write each table as CSV plus a ``report.json`` run summary."""

    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    written: Dict[str, Path] = {}
    for name, frame in report.tables().items():
        path = out_dir / f"{name}.csv"
        frame.to_csv(path, index=False, date_format="%Y-%m-%d")
        written[name] = path

    summary_path = out_dir / REPORT_FILENAME
    summary_path.write_text(
        json.dumps(report.as_dict(), indent=2, sort_keys=True) + "\n", encoding="utf-8"
    )
    written["report"] = summary_path
    return written


def _unsurveyed_months(totals: pd.DataFrame, config: ConfigBundle) -> List[ValidationIssue]:
    surveyed = [stamp.date() for stamp in pd.to_datetime(totals["date"])]
    issues: List[ValidationIssue] = []
    for year, month in FiscalCalendar(config.report.window).missing(surveyed):
        issues.append(
            ValidationIssue(
                code="W_MONTH_NO_SURVEYS",
                severity="warning",
                message=f"no monitoring surveys in {calendar.month_abbr[month]} {year}",
                location=f"{SheetNames.MONITORING}:{year:04d}-{month:02d}",
            )
        )
    return issues


def _missing_sheet(name: str) -> ValidationIssue:
    return ValidationIssue(
        code="W_SHEET_MISSING",
        severity="warning",
        message=f"sheet '{name}' not found; its tables are empty",
        location=f"workbook:{name}",
    )

