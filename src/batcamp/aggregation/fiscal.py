"""Fiscal-year month calendar (December through November)."""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date
from typing import List, Tuple

import pandas as pd

from ..config import ReportWindow

FISCAL_MONTHS: Tuple[int, ...] = (12, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11)

MONTH_COLUMNS = ["fiscal_order", "month", "month_name"]


def fiscal_order(month: int) -> int:
    """Position of a calendar month in the fiscal year, 1 for December."""

    return FISCAL_MONTHS.index(month) + 1


def month_frame() -> pd.DataFrame:
    """All twelve fiscal months in display order."""

    return pd.DataFrame(
        {
            "fiscal_order": range(1, 13),
            "month": list(FISCAL_MONTHS),
            "month_name": [calendar.month_abbr[month] for month in FISCAL_MONTHS],
        }
    )


@dataclass(frozen=True)
class FiscalCalendar:
    """Calendar months covered by a reporting window."""

    window: ReportWindow

    def months(self) -> List[Tuple[int, int]]:
        """``(year, month)`` pairs whose first day falls in the window.

        A window that starts mid-month still includes that month.
        """

        result: List[Tuple[int, int]] = []
        year, month = self.window.start.year, self.window.start.month
        while date(year, month, 1) < self.window.end:
            result.append((year, month))
            month += 1
            if month > 12:
                year, month = year + 1, 1
        return result

    def missing(self, surveyed: List[date]) -> List[Tuple[int, int]]:
        seen = {(when.year, when.month) for when in surveyed}
        return [key for key in self.months() if key not in seen]
