"""Pydantic models describing configuration files."""

from __future__ import annotations

from datetime import date
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


MAX_WINDOW_MONTHS = 12


class ReportWindow(BaseModel):
    """Half-open ``[start, end)`` reporting period of at most one year.

    Monthly tables are keyed by calendar month, so a window may not touch the
    same calendar month twice.
    """

    start: date
    end: date

    @model_validator(mode="after")
    def ensure_order(self) -> "ReportWindow":
        if self.end <= self.start:
            raise ValueError("end must be after start")
        if self.month_span() > MAX_WINDOW_MONTHS:
            raise ValueError(
                f"window spans {self.month_span()} calendar months; "
                f"at most {MAX_WINDOW_MONTHS} allowed"
            )
        return self

    def month_span(self) -> int:
        """Number of calendar months with at least one day in the window."""

        months = (self.end.year - self.start.year) * 12 + self.end.month - self.start.month
        return months if self.end.day == 1 else months + 1

    def contains(self, when: date) -> bool:
        return self.start <= when < self.end


class CutoffConfig(BaseModel):
    record_year: int = 2000
    yearly_year: int = 2001
    weather_year: int = 2000


class SpeciesPolicy(BaseModel):
    exclude_absent: bool = False


class ReportConfig(BaseModel):
    year_label: str
    site: str
    window: ReportWindow
    cutoffs: CutoffConfig = Field(default_factory=CutoffConfig)
    species: SpeciesPolicy = Field(default_factory=SpeciesPolicy)

    @field_validator("site")
    @classmethod
    def ensure_site(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("site must not be empty")
        return value


class TreeSurveyConfig(BaseModel):
    id_columns: List[str] = Field(default_factory=lambda: ["survey_id", "date"])
    fill_missing_months: bool = True
    placeholder_day: int = 15

    @model_validator(mode="after")
    def check_fields(self) -> "TreeSurveyConfig":
        if not 1 <= self.placeholder_day <= 28:
            raise ValueError("placeholder_day must be within 1..28")
        if "survey_id" not in self.id_columns or "date" not in self.id_columns:
            raise ValueError("id_columns must include survey_id and date")
        return self


class WeatherConfig(BaseModel):
    clip_to_window: bool = False


class CountsConfig(BaseModel):
    range_estimates: Dict[str, int] = Field(
        default_factory=lambda: {"800-1000": 900, "200-250": 225}
    )
    sentinel: int = 999
    trees: TreeSurveyConfig = Field(default_factory=TreeSurveyConfig)
    weather: WeatherConfig = Field(default_factory=WeatherConfig)

    @model_validator(mode="after")
    def check_estimates(self) -> "CountsConfig":
        for text, value in self.range_estimates.items():
            if value < 0:
                raise ValueError(f"range_estimates[{text}] must be >= 0")
        return self


class ScalingConfig(BaseModel):
    monthly: float = 40
    per_survey: float = 50

    @model_validator(mode="after")
    def ensure_positive(self) -> "ScalingConfig":
        if self.monthly <= 0 or self.per_survey <= 0:
            raise ValueError("scaling factors must be positive")
        return self


class ConfigBundle(BaseModel):
    report: ReportConfig
    counts: CountsConfig = Field(default_factory=CountsConfig)
    scaling: ScalingConfig = Field(default_factory=ScalingConfig)

    def with_overrides(
        self,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        year_label: Optional[str] = None,
        site: Optional[str] = None,
        exclude_absent: Optional[bool] = None,
    ) -> "ConfigBundle":
        """Return a validated copy with per-run values replaced."""

        data = self.model_dump()
        report = data["report"]
        if start is not None:
            report["window"]["start"] = start
        if end is not None:
            report["window"]["end"] = end
        if year_label is not None:
            report["year_label"] = year_label
        if site is not None:
            report["site"] = site
        if exclude_absent is not None:
            report["species"]["exclude_absent"] = exclude_absent
        return ConfigBundle.model_validate(data)
