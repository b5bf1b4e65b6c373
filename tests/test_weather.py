"""Tests for weather loading and overlay alignment."""

from __future__ import annotations

from datetime import date

import pandas as pd
import pytest

from batcamp.config import ReportWindow
from batcamp.exceptions import DataQualityError
from batcamp.weather import load_weather, weather_overlay
from batcamp.workbook import normalize_columns


def _weather(rows) -> pd.DataFrame:
    return normalize_columns(
        pd.DataFrame(rows, columns=["Year", "Month", "Day", "Min Temp", "Max Temp"])
    )


def test_load_weather_indexes_by_date() -> None:
    frame = _weather(
        [
            [2024, 1, 2, 18.0, 30.0],
            [2023, 12, 31, 17.5, 29.0],
            [1999, 6, 1, 5.0, 15.0],
        ]
    )
    weather = load_weather(frame, min_year=2000)
    assert list(weather.index) == [pd.Timestamp("2023-12-31"), pd.Timestamp("2024-01-02")]
    assert weather.loc[pd.Timestamp("2024-01-02"), "max_temp"] == 30.0


def test_load_weather_accepts_short_aliases() -> None:
    frame = normalize_columns(
        pd.DataFrame([[2024, 1, 2, 18.0, 30.0]], columns=["Year", "Month", "Day", "Min", "Max"])
    )
    weather = load_weather(frame, min_year=2000)
    assert list(weather.columns) == ["min_temp", "max_temp"]


def test_duplicate_dates_are_fatal() -> None:
    frame = _weather(
        [
            [2024, 1, 2, 18.0, 30.0],
            [2024, 1, 2, 19.0, 31.0],
        ]
    )
    with pytest.raises(DataQualityError) as exc:
        load_weather(frame, min_year=2000)
    assert exc.value.row == 3
    assert "2024-01-02" in str(exc.value)


def test_invalid_calendar_date() -> None:
    frame = _weather([[2023, 2, 30, 18.0, 30.0]])
    with pytest.raises(DataQualityError):
        load_weather(frame, min_year=2000)


def test_window_clipping() -> None:
    frame = _weather(
        [
            [2023, 11, 30, 18.0, 30.0],
            [2023, 12, 1, 18.0, 30.0],
        ]
    )
    window = ReportWindow(start=date(2023, 12, 1), end=date(2024, 12, 1))
    weather = load_weather(frame, min_year=2000, window=window)
    assert len(weather) == 1


def test_overlay_is_outer_join_on_date() -> None:
    weather = load_weather(
        _weather(
            [
                [2023, 12, 5, 18.0, 31.0],
                [2023, 12, 6, 19.0, 33.0],
            ]
        ),
        min_year=2000,
    )
    totals = pd.DataFrame(
        {
            "date": pd.to_datetime(["2023-12-05", "2023-12-12"]),
            "total": [100, 200],
        }
    )
    overlay = weather_overlay(totals, weather)
    assert list(overlay.columns) == ["date", "total", "min_temp", "max_temp"]
    assert len(overlay) == 3
    first = overlay.iloc[0]
    assert first["total"] == 100
    assert first["max_temp"] == 31.0
    assert pd.isna(overlay.iloc[1]["total"])
    assert pd.isna(overlay.iloc[2]["min_temp"])
