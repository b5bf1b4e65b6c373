"""Monitoring-sheet loading and derived abundance."""

from .loader import (
    compute_ratio,
    exclude_absent_species,
    load_monitoring_records,
    read_monitoring_rows,
    select_window,
    survey_totals,
)
from .models import SPECIES, MonitoringData, SurveyRecord

__all__ = [
    "SPECIES",
    "MonitoringData",
    "SurveyRecord",
    "compute_ratio",
    "exclude_absent_species",
    "load_monitoring_records",
    "read_monitoring_rows",
    "select_window",
    "survey_totals",
]
