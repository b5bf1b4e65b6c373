"""Cell-level parsing shared by the sheet loaders.

Spreadsheet cells arrive as whatever pandas/openpyxl produced: ints, floats
(including NaN for blanks), strings, ``datetime`` or ``Timestamp`` values.
Each parser accepts all of these and raises :class:`DataQualityError` with the
sheet/row/column of the offending cell when a value cannot be interpreted.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime
from typing import Mapping, Optional

import numpy as np
import pandas as pd

from .exceptions import DataQualityError


DEFAULT_RANGE_ESTIMATES: Mapping[str, int] = {"800-1000": 900, "200-250": 225}

DAY_FIRST_FORMATS = (
    "%d/%m/%Y",
    "%d/%m/%y",
    "%d-%m-%Y",
    "%d.%m.%Y",
    "%Y-%m-%d",
    "%Y-%m-%d %H:%M:%S",
)

TRUE_FLAGS = {"true", "t", "yes", "y", "1", "x"}
FALSE_FLAGS = {"false", "f", "no", "n", "0"}

_RANGE_SEPARATOR = re.compile(r"\s*[-–—]\s*")


def is_blank(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (float, np.floating)):
        return math.isnan(value)
    return value is pd.NaT


def parse_count(
    value: object,
    estimates: Mapping[str, int] = DEFAULT_RANGE_ESTIMATES,
    *,
    sheet: str = "monitoring",
    row: Optional[int] = None,
    column: str = "count",
) -> int:
    """Return a non-negative animal count for a cell.

    Blank cells count as zero. Known textual ranges map to their configured
    point estimate; any other text is a data-quality error.
    """

    if is_blank(value):
        return 0

    def fail(message: str) -> DataQualityError:
        return DataQualityError(sheet=sheet, row=row, column=column, message=message)

    if isinstance(value, (bool, np.bool_)):
        raise fail(f"invalid count {value!r}")

    if isinstance(value, (int, np.integer)):
        number = int(value)
    elif isinstance(value, (float, np.floating)):
        if not float(value).is_integer():
            raise fail(f"count must be a whole number, got {value!r}")
        number = int(value)
    else:
        text = _RANGE_SEPARATOR.sub("-", str(value).strip())
        if text in estimates:
            return int(estimates[text])
        try:
            number = int(text)
        except ValueError:
            try:
                as_float = float(text)
            except ValueError:
                raise fail(f"unparseable count '{value}'") from None
            if not as_float.is_integer():
                raise fail(f"count must be a whole number, got '{value}'") from None
            number = int(as_float)

    if number < 0:
        raise fail(f"count must be >= 0, got {number}")
    return number


def parse_int(
    value: object, *, sheet: str, row: Optional[int], column: str
) -> Optional[int]:
    """Parse an integer cell, returning ``None`` for blanks."""

    if is_blank(value):
        return None
    try:
        number = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        raise DataQualityError(
            sheet=sheet, row=row, column=column, message=f"invalid integer '{value}'"
        ) from None
    if not number.is_integer():
        raise DataQualityError(
            sheet=sheet, row=row, column=column, message=f"invalid integer '{value}'"
        )
    return int(number)


def parse_float(
    value: object, *, sheet: str, row: Optional[int], column: str
) -> Optional[float]:
    if is_blank(value):
        return None
    try:
        return float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        raise DataQualityError(
            sheet=sheet, row=row, column=column, message=f"invalid number '{value}'"
        ) from None


def parse_flag(value: object, *, sheet: str, row: Optional[int], column: str) -> bool:
    if is_blank(value):
        return False
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if isinstance(value, (int, float, np.integer, np.floating)) and float(value) in (0, 1):
        return bool(value)
    lowered = str(value).strip().lower()
    if lowered in TRUE_FLAGS:
        return True
    if lowered in FALSE_FLAGS:
        return False
    raise DataQualityError(
        sheet=sheet, row=row, column=column, message=f"invalid flag '{value}'"
    )


def parse_day_first_date(
    value: object, *, sheet: str, row: Optional[int], column: str = "date"
) -> date:
    """Parse a survey date; text is always read day/month/year."""

    if is_blank(value):
        raise DataQualityError(sheet=sheet, row=row, column=column, message="date required")
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    for fmt in DAY_FIRST_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise DataQualityError(
        sheet=sheet, row=row, column=column, message=f"invalid date '{value}'"
    )
