"""Data models for monitoring records."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List, Literal

Species = Literal["GHFF", "LRFF"]

SPECIES: tuple[Species, ...] = ("GHFF", "LRFF")


@dataclass(frozen=True)
class SurveyRecord:
    """One species count from one included monitoring survey row."""

    row_number: int
    date: date
    site: str
    species: Species
    count: int
    trees_occupied: int


@dataclass
class MonitoringData:
    """Monitoring records at three levels of filtering.

    ``history`` holds every included row from the record cutoff. ``surveyed``
    is the reporting-window subset with all species kept, and ``records``
    drops any species excluded by the absent-species policy. Survey-level
    tables come from ``surveyed`` so an empty camp still counts as surveyed.
    """

    history: List[SurveyRecord]
    surveyed: List[SurveyRecord]
    records: List[SurveyRecord]
    excluded_species: List[str] = field(default_factory=list)
