"""Monthly, per-survey and yearly aggregation."""

from .fiscal import FISCAL_MONTHS, FiscalCalendar, fiscal_order, month_frame
from .monthly import (
    METRICS,
    MONTHLY_COLUMNS,
    monthly_aggregates,
    species_monthly,
    summarize_by_month,
    survey_series,
)
from .yearly import YEARLY_COLUMNS, yearly_peaks

__all__ = [
    "FISCAL_MONTHS",
    "FiscalCalendar",
    "METRICS",
    "MONTHLY_COLUMNS",
    "YEARLY_COLUMNS",
    "fiscal_order",
    "month_frame",
    "monthly_aggregates",
    "species_monthly",
    "summarize_by_month",
    "survey_series",
    "yearly_peaks",
]
