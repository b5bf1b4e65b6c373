"""Daily weather records and their alignment with survey totals."""

from __future__ import annotations

import logging
from datetime import date
from typing import Dict, List, Optional

import pandas as pd

from ..config import ReportWindow
from ..exceptions import DataQualityError
from ..normalization import is_blank, parse_float, parse_int
from ..workbook import SheetNames

logger = logging.getLogger(__name__)

COLUMN_ALIASES: Dict[str, str] = {
    "min": "min_temp",
    "mintemp": "min_temp",
    "min_temperature": "min_temp",
    "max": "max_temp",
    "maxtemp": "max_temp",
    "max_temperature": "max_temp",
}

REQUIRED_COLUMNS = ["year", "month", "day", "min_temp", "max_temp"]

WEATHER_COLUMNS = ["min_temp", "max_temp"]

OVERLAY_COLUMNS = ["date", "total", "min_temp", "max_temp"]


def load_weather(
    frame: pd.DataFrame,
    min_year: int,
    *,
    window: Optional[ReportWindow] = None,
) -> pd.DataFrame:
    """Build a date-indexed min/max temperature series.

    Rows before *min_year*, and outside *window* when one is given, are
    dropped. Two retained rows on the same date are a data-quality error.
    """

    sheet = SheetNames.WEATHER
    frame = frame.rename(columns=COLUMN_ALIASES)
    for column in REQUIRED_COLUMNS:
        if column not in frame.columns:
            raise DataQualityError(sheet=sheet, row=None, column=column, message="column required")

    rows: List[dict] = []
    seen: Dict[date, int] = {}
    for index, raw in enumerate(frame.to_dict(orient="records"), start=2):
        if all(is_blank(raw[column]) for column in ("year", "month", "day")):
            continue
        year = _required_int(raw, "year", index)
        if year < min_year:
            continue
        month = _required_int(raw, "month", index)
        day = _required_int(raw, "day", index)
        try:
            when = date(year, month, day)
        except ValueError:
            raise DataQualityError(
                sheet=sheet,
                row=index,
                column="day",
                message=f"invalid date {year}-{month}-{day}",
            ) from None
        if window is not None and not window.contains(when):
            continue

        if when in seen:
            raise DataQualityError(
                sheet=sheet,
                row=index,
                column="date",
                message=f"duplicate weather date {when.isoformat()} (first seen at row {seen[when]})",
            )
        seen[when] = index
        rows.append(
            {
                "date": when,
                "min_temp": parse_float(raw["min_temp"], sheet=sheet, row=index, column="min_temp"),
                "max_temp": parse_float(raw["max_temp"], sheet=sheet, row=index, column="max_temp"),
            }
        )

    logger.info("read %d weather days from %d", len(rows), min_year)
    weather = pd.DataFrame(rows, columns=["date"] + WEATHER_COLUMNS)
    weather["date"] = pd.to_datetime(weather["date"])
    weather[WEATHER_COLUMNS] = weather[WEATHER_COLUMNS].astype(float)
    return weather.set_index("date").sort_index()


def weather_overlay(totals: pd.DataFrame, weather: pd.DataFrame) -> pd.DataFrame:
    """Outer-join survey totals and weather on exact date.

    Surveys sharing a date are averaged first; dates present on only one side
    keep missing values on the other.
    """

    abundance = (
        pd.DataFrame(
            {
                "date": pd.to_datetime(totals["date"]),
                "total": totals["total"].astype(float),
            }
        )
        .groupby("date", as_index=False)["total"]
        .mean()
    )
    temps = weather.reset_index()
    overlay = abundance.merge(temps, on="date", how="outer")
    overlay = overlay.sort_values("date").reset_index(drop=True)
    return overlay[OVERLAY_COLUMNS]


def _required_int(raw: dict, column: str, row: int) -> int:
    value = parse_int(raw[column], sheet=SheetNames.WEATHER, row=row, column=column)
    if value is None:
        raise DataQualityError(
            sheet=SheetNames.WEATHER, row=row, column=column, message="value required"
        )
    return value
