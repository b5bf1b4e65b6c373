"""Ordinal density classes for per-tree bat counts."""

from __future__ import annotations

from typing import List

import numpy as np
import pandas as pd

from ..aggregation.fiscal import MONTH_COLUMNS, month_frame

DENSITY_BINS = [0, 50, 100, 200, 400, np.inf]

DENSITY_LABELS = ["<50", "50-100", "100-200", "200-400", ">400"]

# Legend order, densest first.
DENSITY_ORDER: List[str] = list(reversed(DENSITY_LABELS))

SUMMARY_COLUMNS = MONTH_COLUMNS + ["density_class", "trees"]


def assign_density_class(counts: pd.Series) -> pd.Series:
    classes = pd.cut(
        counts.astype(float),
        bins=DENSITY_BINS,
        right=False,
        labels=DENSITY_LABELS,
    )
    return classes.cat.reorder_categories(DENSITY_ORDER, ordered=True)


def density_summary(observations: pd.DataFrame) -> pd.DataFrame:
    """Number of observed trees per density class for every fiscal month.

    Placeholder observations are not counted.
    """

    observed = observations[~observations["placeholder"].astype(bool)]
    counts = (
        observed.groupby(["month", "density_class"], observed=False)
        .size()
        .rename("trees")
        .reset_index()
    )

    grid = month_frame().merge(
        pd.DataFrame({"density_class": DENSITY_ORDER}), how="cross"
    )
    summary = grid.merge(
        counts.astype({"density_class": str, "month": int}),
        on=["month", "density_class"],
        how="left",
    )
    summary["trees"] = summary["trees"].fillna(0).astype(int)
    return summary[SUMMARY_COLUMNS]
