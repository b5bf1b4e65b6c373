"""Normalization of the monitoring sheet into survey records."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from ..config import ConfigBundle, ReportWindow
from ..exceptions import DataQualityError
from ..normalization import parse_count, parse_day_first_date, parse_flag, parse_int
from ..workbook import SheetNames
from .models import SPECIES, MonitoringData, SurveyRecord

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = [
    "date",
    "location",
    "ghff",
    "lrff",
    "trees_occupied",
    "include",
]

SPECIES_COLUMNS = {"GHFF": "ghff", "LRFF": "lrff"}

TOTAL_COLUMNS = [
    "date",
    "site",
    "ghff",
    "lrff",
    "total",
    "trees_occupied",
    "ratio",
]


def read_monitoring_rows(frame: pd.DataFrame, config: ConfigBundle) -> List[SurveyRecord]:
    """Read included rows for the configured site, across all years.

    Rows before ``cutoffs.record_year`` are dropped. Counts are only parsed for
    rows that survive the include/site filters.
    """

    for column in REQUIRED_COLUMNS:
        if column not in frame.columns:
            raise DataQualityError(
                sheet=SheetNames.MONITORING, row=None, column=column, message="column required"
            )

    site = config.report.site.lower()
    estimates = config.counts.range_estimates
    cutoff = config.report.cutoffs.record_year
    sheet = SheetNames.MONITORING

    records: List[SurveyRecord] = []
    for index, raw in enumerate(frame.to_dict(orient="records"), start=2):
        if not parse_flag(raw["include"], sheet=sheet, row=index, column="include"):
            continue
        location = str(raw["location"] if raw["location"] is not None else "").strip()
        if location.lower() != site:
            continue

        observed = parse_day_first_date(raw["date"], sheet=sheet, row=index)
        if observed.year < cutoff:
            continue

        trees = parse_int(raw["trees_occupied"], sheet=sheet, row=index, column="trees_occupied")
        trees = trees or 0
        if trees < 0:
            raise DataQualityError(
                sheet=sheet,
                row=index,
                column="trees_occupied",
                message=f"trees_occupied must be >= 0, got {trees}",
            )

        for species in SPECIES:
            column = SPECIES_COLUMNS[species]
            count = parse_count(raw[column], estimates, sheet=sheet, row=index, column=column)
            records.append(
                SurveyRecord(
                    row_number=index,
                    date=observed,
                    site=location,
                    species=species,
                    count=count,
                    trees_occupied=trees,
                )
            )

    logger.info("read %d monitoring records for site %s", len(records), config.report.site)
    return records


def select_window(records: Iterable[SurveyRecord], window: ReportWindow) -> List[SurveyRecord]:
    return [record for record in records if window.contains(record.date)]


def exclude_absent_species(
    records: Sequence[SurveyRecord],
) -> Tuple[List[SurveyRecord], List[str]]:
    """Drop species with no animals recorded across *records*."""

    totals = {species: 0 for species in SPECIES}
    for record in records:
        totals[record.species] += record.count
    absent = [species for species in SPECIES if totals[species] == 0]
    kept = [record for record in records if record.species not in absent]
    return kept, absent


def load_monitoring_records(
    frame: pd.DataFrame,
    config: ConfigBundle,
    *,
    window: Optional[ReportWindow] = None,
) -> MonitoringData:
    """Load history and reporting-period records from the monitoring sheet."""

    window = window or config.report.window
    history = read_monitoring_rows(frame, config)
    surveyed = select_window(history, window)
    records = surveyed

    excluded: List[str] = []
    if config.report.species.exclude_absent:
        records, excluded = exclude_absent_species(surveyed)
        for species in excluded:
            logger.info("excluding %s: no animals recorded in reporting window", species)

    return MonitoringData(
        history=history,
        surveyed=surveyed,
        records=records,
        excluded_species=excluded,
    )


def survey_totals(records: Iterable[SurveyRecord]) -> pd.DataFrame:
    """Total abundance and animals-per-tree ratio for each survey row."""

    rows: Dict[int, dict] = {}
    for record in records:
        row = rows.setdefault(
            record.row_number,
            {
                "date": record.date,
                "site": record.site,
                "ghff": 0,
                "lrff": 0,
                "trees_occupied": record.trees_occupied,
            },
        )
        row[SPECIES_COLUMNS[record.species]] += record.count

    if not rows:
        return pd.DataFrame(columns=TOTAL_COLUMNS)

    totals = pd.DataFrame([rows[key] for key in sorted(rows)])
    totals["date"] = pd.to_datetime(totals["date"])
    totals["total"] = totals["ghff"] + totals["lrff"]
    totals["ratio"] = compute_ratio(totals["total"], totals["trees_occupied"])
    totals = totals.sort_values(["date"], kind="stable").reset_index(drop=True)
    return totals[TOTAL_COLUMNS]


def compute_ratio(total: pd.Series, trees: pd.Series) -> pd.Series:
    """Animals per occupied tree; zero when no trees are occupied."""

    ratio = total.astype(float).div(trees.astype(float))
    return ratio.replace([np.inf, -np.inf], np.nan).fillna(0.0)
