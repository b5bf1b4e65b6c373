"""Reading the monitoring workbook into raw data frames."""

from __future__ import annotations

import logging
import re
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Dict

import pandas as pd

from .exceptions import WorkbookError

logger = logging.getLogger(__name__)


class SheetNames:
    """Canonical sheet names in the monitoring workbook."""

    MONITORING = "monitoring"
    SURVEYS = "surveys"
    TREES = "trees"
    WEATHER = "weather"

    ALL = (MONITORING, SURVEYS, TREES, WEATHER)


@dataclass
class Workbook:
    """Raw sheets keyed by canonical name, with normalized column names."""

    path: Path
    sheets: Dict[str, pd.DataFrame]

    def sheet(self, name: str) -> pd.DataFrame:
        try:
            return self.sheets[name]
        except KeyError:
            raise WorkbookError(self.path, f"sheet '{name}' not found") from None


def normalize_column(name: object) -> str:
    """Lowercase a header and collapse spaces and dashes to underscores."""

    text = str(name).strip().lower()
    text = re.sub(r"[\s\-]+", "_", text)
    return text.strip("_")


def normalize_columns(frame: pd.DataFrame) -> pd.DataFrame:
    return frame.rename(columns={column: normalize_column(column) for column in frame.columns})


def load_workbook(path: Path) -> Workbook:
    """Load the named sheets from an ``.xlsx`` file or a directory of CSVs.

    Sheets that are absent are simply left out; callers that need one get a
    :class:`WorkbookError` from :meth:`Workbook.sheet`.
    """

    path = Path(path)
    if not path.exists():
        raise WorkbookError(path, "workbook not found")

    if path.is_dir():
        sheets = _read_csv_directory(path)
    else:
        sheets = _read_excel(path)

    normalized = {name: normalize_columns(frame) for name, frame in sheets.items()}
    for name, frame in normalized.items():
        logger.info("read sheet %s: %d rows", name, len(frame))
    return Workbook(path=path, sheets=normalized)


def _read_excel(path: Path) -> Dict[str, pd.DataFrame]:
    try:
        raw = pd.read_excel(path, sheet_name=None, engine="openpyxl")
    except (OSError, ValueError, zipfile.BadZipFile) as exc:
        raise WorkbookError(path, f"failed to read workbook: {exc}") from exc

    sheets: Dict[str, pd.DataFrame] = {}
    for sheet_name, frame in raw.items():
        key = normalize_column(sheet_name)
        if key in SheetNames.ALL:
            sheets[key] = frame
    return sheets


def _read_csv_directory(path: Path) -> Dict[str, pd.DataFrame]:
    sheets: Dict[str, pd.DataFrame] = {}
    for name in SheetNames.ALL:
        csv_path = path / f"{name}.csv"
        if not csv_path.exists():
            continue
        try:
            sheets[name] = pd.read_csv(csv_path, dtype=object, keep_default_na=True)
        except (OSError, ValueError) as exc:
            raise WorkbookError(csv_path, f"failed to read CSV: {exc}") from exc
    return sheets
