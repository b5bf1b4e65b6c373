"""Custom exception hierarchy for batcamp."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class BatcampError(Exception):
    """Base error for the batcamp package."""


class ConfigError(BatcampError):
    """Raised when a configuration file fails validation."""

    def __init__(self, path: Path, message: str):
        self.path = Path(path)
        self.message = message
        super().__init__(f"{self.path.name}: {self.message}")


class WorkbookError(BatcampError):
    """Raised when the input workbook or one of its sheets cannot be read."""

    def __init__(self, path: Path, message: str):
        self.path = Path(path)
        self.message = message
        super().__init__(f"{self.message} ({self.path})")


class DataQualityError(BatcampError):
    """Raised when a cell value cannot be interpreted.

    The location names the sheet, spreadsheet row and column so an analyst
    can correct the source workbook.
    """

    def __init__(
        self,
        sheet: str,
        row: Optional[int],
        column: str,
        message: str,
    ):
        self.sheet = sheet
        self.row = row
        self.column = column
        self.message = message
        super().__init__(f"{self.location}: {self.message}")

    @property
    def location(self) -> str:
        if self.row is None:
            return f"{self.sheet}:col {self.column}"
        return f"{self.sheet}:row {self.row},col {self.column}"
