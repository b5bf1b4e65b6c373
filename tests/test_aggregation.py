"""Tests for monthly, per-survey and yearly aggregation."""

from __future__ import annotations

import math
from datetime import date

import pandas as pd
import pytest

from batcamp.aggregation import (
    FISCAL_MONTHS,
    FiscalCalendar,
    fiscal_order,
    monthly_aggregates,
    species_monthly,
    survey_series,
    yearly_peaks,
)
from batcamp.config import ReportWindow, ScalingConfig
from batcamp.monitoring import read_monitoring_rows, survey_totals


def _totals(config, monitoring_frame, rows) -> pd.DataFrame:
    return survey_totals(read_monitoring_rows(monitoring_frame(rows), config))


def _row(monthly: pd.DataFrame, metric: str, month: int) -> pd.Series:
    match = monthly[(monthly["metric"] == metric) & (monthly["month"] == month)]
    assert len(match) == 1
    return match.iloc[0]


def test_fiscal_order_starts_in_december() -> None:
    assert FISCAL_MONTHS[0] == 12
    assert FISCAL_MONTHS[-1] == 11
    assert fiscal_order(12) == 1
    assert fiscal_order(1) == 2
    assert fiscal_order(11) == 12


def test_fiscal_calendar_missing_months() -> None:
    window = ReportWindow(start=date(2023, 12, 1), end=date(2024, 12, 1))
    calendar = FiscalCalendar(window)
    assert len(calendar.months()) == 12
    assert calendar.months()[0] == (2023, 12)
    missing = calendar.missing([date(2023, 12, 5), date(2024, 1, 9)])
    assert (2023, 12) not in missing
    assert (2024, 2) in missing
    assert len(missing) == 10


def test_december_scenario(config, monitoring_frame, december_rows) -> None:
    totals = _totals(config, monitoring_frame, december_rows)
    monthly = monthly_aggregates(totals, ScalingConfig())

    count = _row(monthly, "count", 12)
    trees = _row(monthly, "trees", 12)
    ratio = _row(monthly, "ratio", 12)
    assert count["mean"] == 200
    assert trees["mean"] == 20
    assert trees["scaled_mean"] == 800
    assert ratio["mean"] == pytest.approx(10.0)
    assert ratio["scaled_mean"] == pytest.approx(400.0)
    assert count["scaled_mean"] == 200
    assert count["n"] == 3
    assert count["sem"] == pytest.approx(100 / math.sqrt(3))


def test_every_metric_has_twelve_months(config, monitoring_frame, december_rows) -> None:
    totals = _totals(config, monitoring_frame, december_rows)
    monthly = monthly_aggregates(totals, ScalingConfig())
    assert len(monthly) == 36
    for metric in ("count", "trees", "ratio"):
        subset = monthly[monthly["metric"] == metric]
        assert list(subset["month"]) == list(FISCAL_MONTHS)
        assert list(subset["fiscal_order"]) == list(range(1, 13))


def test_unsurveyed_months_have_missing_values(config, monitoring_frame) -> None:
    rows = [
        [f"10/{month:02d}/{2023 if month == 12 else 2024}", "Maclean", 100 * month, 0, month, "Y"]
        for month in (12, 1, 2, 3, 4, 5, 10, 11)
    ]
    monthly = monthly_aggregates(_totals(config, monitoring_frame, rows), ScalingConfig())
    for month in (6, 7, 8, 9):
        for metric in ("count", "trees", "ratio"):
            row = _row(monthly, metric, month)
            assert row["n"] == 0
            assert pd.isna(row["mean"])
            assert pd.isna(row["sem"])


def test_single_observation_month_has_no_sem(config, monitoring_frame) -> None:
    rows = [["10/01/2024", "Maclean", 100, 0, 10, "Y"]]
    monthly = monthly_aggregates(_totals(config, monitoring_frame, rows), ScalingConfig())
    january = _row(monthly, "count", 1)
    assert january["mean"] == 100
    assert pd.isna(january["sem"])


def test_monthly_aggregates_of_empty_input() -> None:
    monthly = monthly_aggregates(survey_totals([]), ScalingConfig())
    assert len(monthly) == 36
    assert monthly["mean"].isna().all()
    assert (monthly["n"] == 0).all()


def test_species_monthly(config, monitoring_frame) -> None:
    rows = [
        ["05/12/2023", "Maclean", 100, 10, 10, "Y"],
        ["12/12/2023", "Maclean", 300, 30, 20, "Y"],
    ]
    records = read_monitoring_rows(monitoring_frame(rows), config)
    table = species_monthly(records)
    assert len(table) == 24
    dec = table[(table["month"] == 12)].set_index("species")
    assert dec.loc["GHFF", "mean"] == 200
    assert dec.loc["LRFF", "mean"] == 20


def test_survey_series_keeps_true_values(config, monitoring_frame, december_rows) -> None:
    totals = _totals(config, monitoring_frame, december_rows)
    series = survey_series(totals, ScalingConfig(per_survey=50))
    assert list(series["trees_occupied"]) == [10, 20, 30]
    assert list(series["trees_scaled"]) == [500.0, 1000.0, 1500.0]
    assert list(series["ratio_scaled"]) == [500.0, 500.0, 500.0]
    assert (series["scale"] == 50).all()


def test_yearly_peaks(config, monitoring_frame) -> None:
    rows = [
        ["05/12/2000", "Maclean", 999, 0, 10, "Y"],
        ["05/03/2002", "Maclean", 100, 0, 10, "Y"],
        ["05/06/2002", "Maclean", 300, 0, 10, "Y"],
        ["05/03/2003", "Maclean", 50, 0, 10, "Y"],
    ]
    peaks = yearly_peaks(_totals(config, monitoring_frame, rows), cutoff_year=2001)
    assert list(peaks["year"]) == [2002, 2003]
    row_2002 = peaks.iloc[0]
    assert row_2002["mean"] == 200
    assert row_2002["peak"] == 300
    assert row_2002["peak_above_mean"] == 100
    assert (peaks["peak"] >= peaks["mean"]).all()
    assert (peaks["peak_above_mean"] >= 0).all()


def test_yearly_peaks_empty() -> None:
    peaks = yearly_peaks(survey_totals([]), cutoff_year=2001)
    assert peaks.empty
    assert list(peaks.columns) == ["year", "n", "mean", "peak", "peak_above_mean"]
