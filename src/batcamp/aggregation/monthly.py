"""Monthly and per-survey summaries of abundance and tree occupancy."""

from __future__ import annotations

from typing import Iterable, List, Sequence

import numpy as np
import pandas as pd

from ..config import ScalingConfig
from ..monitoring.models import SPECIES, SurveyRecord
from .fiscal import MONTH_COLUMNS, month_frame

METRICS = ("count", "trees", "ratio")

METRIC_SOURCES = {
    "count": "total",
    "trees": "trees_occupied",
    "ratio": "ratio",
}

MONTHLY_COLUMNS = MONTH_COLUMNS + [
    "metric",
    "n",
    "mean",
    "sem",
    "scale",
    "scaled_mean",
    "scaled_sem",
]

SPECIES_MONTHLY_COLUMNS = MONTH_COLUMNS + ["species", "n", "mean", "sem"]

SURVEY_SERIES_COLUMNS = [
    "date",
    "total",
    "trees_occupied",
    "ratio",
    "scale",
    "trees_scaled",
    "ratio_scaled",
]


def summarize_by_month(dates: pd.Series, values: pd.Series) -> pd.DataFrame:
    """Mean and standard error per fiscal month, backfilled to twelve rows.

    Standard error is the sample standard deviation over ``sqrt(n)``; it is
    missing for months with fewer than two observations. Months without
    observations keep ``n == 0`` and missing mean/sem.
    """

    frame = pd.DataFrame(
        {
            "month": pd.to_datetime(dates).dt.month.astype(int),
            "value": values.astype(float),
        }
    )
    grouped = frame.groupby("month")["value"].agg(["count", "mean", "std"]).reset_index()
    grouped = grouped.rename(columns={"count": "n"})
    grouped["sem"] = grouped["std"] / np.sqrt(grouped["n"])
    grouped.loc[grouped["n"] < 2, "sem"] = np.nan

    summary = month_frame().merge(grouped[["month", "n", "mean", "sem"]], on="month", how="left")
    summary["n"] = summary["n"].fillna(0).astype(int)
    return summary


def monthly_aggregates(totals: pd.DataFrame, scaling: ScalingConfig) -> pd.DataFrame:
    """Twelve fiscal-month rows for each of count, trees and ratio.

    ``mean``/``sem`` are always the true values; ``scaled_*`` multiply the
    trees and ratio series by ``scaling.monthly`` for a shared count axis.
    """

    parts: List[pd.DataFrame] = []
    for metric in METRICS:
        source = METRIC_SOURCES[metric]
        summary = summarize_by_month(totals["date"], totals[source])
        scale = 1.0 if metric == "count" else float(scaling.monthly)
        summary["metric"] = metric
        summary["scale"] = scale
        summary["scaled_mean"] = summary["mean"] * scale
        summary["scaled_sem"] = summary["sem"] * scale
        parts.append(summary)

    result = pd.concat(parts, ignore_index=True)
    return result[MONTHLY_COLUMNS]


def species_monthly(
    records: Iterable[SurveyRecord], species: Sequence[str] = SPECIES
) -> pd.DataFrame:
    """Per-species monthly mean counts for each species present in *records*."""

    frame = pd.DataFrame(
        [(record.date, record.species, record.count) for record in records],
        columns=["date", "species", "count"],
    )
    parts: List[pd.DataFrame] = []
    for name in species:
        subset = frame[frame["species"] == name]
        if subset.empty:
            continue
        summary = summarize_by_month(subset["date"], subset["count"])
        summary["species"] = name
        parts.append(summary)

    if not parts:
        return pd.DataFrame(columns=SPECIES_MONTHLY_COLUMNS)
    return pd.concat(parts, ignore_index=True)[SPECIES_MONTHLY_COLUMNS]


def survey_series(totals: pd.DataFrame, scaling: ScalingConfig) -> pd.DataFrame:
    """Per-survey values with trees and ratio scaled by ``scaling.per_survey``."""

    scale = float(scaling.per_survey)
    series = totals.sort_values("date", kind="stable").reset_index(drop=True)
    series = series[["date", "total", "trees_occupied", "ratio"]].copy()
    series["scale"] = scale
    series["trees_scaled"] = series["trees_occupied"].astype(float) * scale
    series["ratio_scaled"] = series["ratio"].astype(float) * scale
    return series[SURVEY_SERIES_COLUMNS]
