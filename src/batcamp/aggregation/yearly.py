"""Yearly mean and peak abundance."""

from __future__ import annotations

import pandas as pd

YEARLY_COLUMNS = ["year", "n", "mean", "peak", "peak_above_mean"]


def yearly_peaks(totals: pd.DataFrame, cutoff_year: int) -> pd.DataFrame:
    """One row per calendar year from *cutoff_year* with at least one survey.

    ``peak`` is the largest single-survey total for the year and is always
    reported as an independent value. ``peak_above_mean`` is ``peak - mean``
    for renderers that stack the peak bar on top of the mean bar.
    """

    if totals.empty:
        return pd.DataFrame(columns=YEARLY_COLUMNS)

    frame = pd.DataFrame(
        {
            "year": pd.to_datetime(totals["date"]).dt.year.astype(int),
            "total": totals["total"].astype(float),
        }
    )
    frame = frame[frame["year"] >= cutoff_year]
    grouped = (
        frame.groupby("year")["total"]
        .agg(n="count", mean="mean", peak="max")
        .reset_index()
    )
    grouped["peak_above_mean"] = grouped["peak"] - grouped["mean"]
    return grouped[YEARLY_COLUMNS]
