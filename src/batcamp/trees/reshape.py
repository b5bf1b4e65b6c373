"""Reshape the wide tree-survey sheet into per-tree observations."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, List, Optional

import numpy as np
import pandas as pd

from ..aggregation.fiscal import FiscalCalendar
from ..config import CountsConfig, ReportWindow
from ..exceptions import DataQualityError
from ..normalization import is_blank, parse_count, parse_day_first_date, parse_float
from ..validators import ValidationIssue
from ..workbook import SheetNames, normalize_column
from .density import assign_density_class

logger = logging.getLogger(__name__)

LOCATION_ALIASES = {
    "tree": "tree_id",
    "tree_no": "tree_id",
    "tree_number": "tree_id",
    "lat": "latitude",
    "lon": "longitude",
    "long": "longitude",
    "lng": "longitude",
}

OBSERVATION_COLUMNS = [
    "survey_id",
    "date",
    "year",
    "month",
    "date_label",
    "tree_id",
    "count",
    "latitude",
    "longitude",
    "density_class",
    "placeholder",
]


@dataclass
class MeltedSurveys:
    observations: pd.DataFrame
    survey_dates: List[date]
    tree_ids: List[str]


@dataclass
class TreeSurveyResult:
    observations: pd.DataFrame
    issues: List[ValidationIssue] = field(default_factory=list)


def tree_key(value: object) -> str:
    """Canonical tree identifier for both column headers and location rows."""

    if isinstance(value, (float, np.floating)) and float(value).is_integer():
        return str(int(value))
    return normalize_column(value)


def tree_columns(frame: pd.DataFrame, id_columns: List[str]) -> List[str]:
    id_set = {normalize_column(column) for column in id_columns}
    return [
        column
        for column in frame.columns
        if normalize_column(column) not in id_set
        and not normalize_column(column).startswith("unnamed")
    ]


def load_tree_locations(frame: pd.DataFrame) -> pd.DataFrame:
    """Tree coordinates keyed by canonical tree id."""

    sheet = SheetNames.TREES
    frame = frame.rename(columns=LOCATION_ALIASES)
    for column in ("tree_id", "latitude", "longitude"):
        if column not in frame.columns:
            raise DataQualityError(sheet=sheet, row=None, column=column, message="column required")

    rows: List[dict] = []
    seen: Dict[str, int] = {}
    for index, raw in enumerate(frame.to_dict(orient="records"), start=2):
        if is_blank(raw["tree_id"]):
            continue
        key = tree_key(raw["tree_id"])
        if key in seen:
            raise DataQualityError(
                sheet=sheet,
                row=index,
                column="tree_id",
                message=f"duplicate tree id {key} (first seen at row {seen[key]})",
            )
        seen[key] = index
        rows.append(
            {
                "tree_id": key,
                "latitude": parse_float(raw["latitude"], sheet=sheet, row=index, column="latitude"),
                "longitude": parse_float(raw["longitude"], sheet=sheet, row=index, column="longitude"),
            }
        )
    locations = pd.DataFrame(rows, columns=["tree_id", "latitude", "longitude"])
    locations[["latitude", "longitude"]] = locations[["latitude", "longitude"]].astype(float)
    return locations


def melt_surveys(
    frame: pd.DataFrame,
    config: CountsConfig,
    *,
    window: Optional[ReportWindow] = None,
) -> MeltedSurveys:
    """Wide survey rows to long ``(survey_id, date, tree_id, count)`` rows.

    Blank cells and the not-surveyed sentinel are dropped.
    """

    sheet = SheetNames.SURVEYS
    for column in ("survey_id", "date"):
        if column not in frame.columns:
            raise DataQualityError(sheet=sheet, row=None, column=column, message="column required")

    trees = tree_columns(frame, config.trees.id_columns)
    _check_unique_trees(trees)
    wide = frame.assign(source_row=range(2, len(frame) + 2))
    wide = wide[~wide["survey_id"].map(is_blank).astype(bool)].copy()
    _check_unique_surveys(wide)
    wide["date"] = [
        parse_day_first_date(value, sheet=sheet, row=row)
        for value, row in zip(wide["date"], wide["source_row"])
    ]
    if window is not None:
        wide = wide[wide["date"].map(window.contains).astype(bool)]

    long = wide.melt(
        id_vars=["survey_id", "date", "source_row"],
        value_vars=trees,
        var_name="tree_column",
        value_name="raw_count",
    )
    long = long[~long["raw_count"].map(is_blank).astype(bool)].copy()
    long["count"] = [
        parse_count(
            raw.raw_count,
            config.range_estimates,
            sheet=sheet,
            row=raw.source_row,
            column=str(raw.tree_column),
        )
        for raw in long.itertuples(index=False)
    ]
    long = long[long["count"] != config.sentinel].assign(
        tree_id=lambda df: df["tree_column"].map(tree_key),
        survey_id=lambda df: df["survey_id"].map(_survey_key),
        placeholder=False,
    )

    return MeltedSurveys(
        observations=long[["survey_id", "date", "tree_id", "count", "placeholder"]].reset_index(drop=True),
        survey_dates=list(wide["date"]),
        tree_ids=[tree_key(column) for column in trees],
    )


def placeholder_rows(
    surveyed: List[date],
    tree_ids: List[str],
    window: ReportWindow,
    day: int,
) -> pd.DataFrame:
    """All-zero observations for each window month with no survey.

    Placeholders are dated on *day* of the month, kept inside the window.
    """

    rows: List[dict] = []
    for year, month in FiscalCalendar(window).missing(surveyed):
        when = min(max(date(year, month, day), window.start), window.end - timedelta(days=1))
        survey_id = f"placeholder-{year:04d}-{month:02d}"
        for tree_id in tree_ids:
            rows.append(
                {
                    "survey_id": survey_id,
                    "date": when,
                    "tree_id": tree_id,
                    "count": 0,
                    "placeholder": True,
                }
            )
    return pd.DataFrame(rows, columns=["survey_id", "date", "tree_id", "count", "placeholder"])


def reshape_tree_surveys(
    surveys: pd.DataFrame,
    locations: pd.DataFrame,
    config: CountsConfig,
    window: ReportWindow,
) -> TreeSurveyResult:
    """Long, located, density-classed tree observations for a reporting window."""

    issues: List[ValidationIssue] = []
    melted = melt_surveys(surveys, config, window=window)
    long = melted.observations

    if config.trees.fill_missing_months:
        filler = placeholder_rows(melted.survey_dates, melted.tree_ids, window, config.trees.placeholder_day)
        for survey_id in filler["survey_id"].unique():
            logger.info("generated placeholder survey %s", survey_id)
            issues.append(
                ValidationIssue(
                    code="W_MONTH_PLACEHOLDER",
                    severity="warning",
                    message="no tree survey this month; zero-count placeholder generated",
                    location=f"{SheetNames.SURVEYS}:{survey_id}",
                )
            )
        if not filler.empty:
            long = pd.concat([long, filler], ignore_index=True)

    located = long.merge(locations, on="tree_id", how="left")
    unknown = sorted(set(located.loc[located["latitude"].isna(), "tree_id"]) - set(locations["tree_id"]))
    for tree_id in unknown:
        logger.warning("tree %s has no location", tree_id)
        issues.append(
            ValidationIssue(
                code="W_TREE_LOCATION_MISSING",
                severity="warning",
                message=f"tree {tree_id} not found in trees sheet; coordinates left empty",
                location=f"{SheetNames.SURVEYS}:col {tree_id}",
            )
        )

    observations = _derive_fields(located)
    logger.info("reshaped %d tree observations", len(observations))
    return TreeSurveyResult(observations=observations, issues=issues)


def _derive_fields(frame: pd.DataFrame) -> pd.DataFrame:
    frame = frame.copy()
    dates = pd.to_datetime(frame["date"])
    frame["date"] = dates
    frame["year"] = dates.dt.year.astype(int)
    frame["month"] = dates.dt.month.astype(int)
    frame["date_label"] = dates.dt.strftime("%d %b %Y")
    frame["count"] = frame["count"].astype(int)
    frame["placeholder"] = frame["placeholder"].astype(bool)
    frame["density_class"] = assign_density_class(frame["count"])
    frame = frame.sort_values(["date", "survey_id", "tree_id"], kind="stable")
    return frame[OBSERVATION_COLUMNS].reset_index(drop=True)


def _check_unique_trees(columns: List[str]) -> None:
    seen: Dict[str, str] = {}
    for column in columns:
        key = tree_key(column)
        if key in seen:
            raise DataQualityError(
                sheet=SheetNames.SURVEYS,
                row=None,
                column=str(column),
                message=f"tree {key} appears in more than one column",
            )
        seen[key] = str(column)


def _check_unique_surveys(wide: pd.DataFrame) -> None:
    seen: Dict[str, int] = {}
    for value, row in zip(wide["survey_id"], wide["source_row"]):
        key = _survey_key(value)
        if key in seen:
            raise DataQualityError(
                sheet=SheetNames.SURVEYS,
                row=int(row),
                column="survey_id",
                message=f"duplicate survey id {key} (first seen at row {seen[key]})",
            )
        seen[key] = int(row)


def _survey_key(value: object) -> str:
    if isinstance(value, (float, np.floating)) and float(value).is_integer():
        return str(int(value))
    return str(value).strip()
