"""
Fiscal year and quarter resolution for a configurable fiscal-year start month.

Works on calendar dates only; holidays and weekends play no part.
"""

import math

import pendulum
from pendulum import Date

from .exceptions import InvalidArgumentError
from .models import FiscalPeriod

DEFAULT_FISCAL_YEAR_START_MONTH = 4  # April, UK


def resolve_fiscal_period(
    day: Date,
    fiscal_year_start_month: int = DEFAULT_FISCAL_YEAR_START_MONTH
) -> FiscalPeriod:
    """
    Map a calendar date to its fiscal year and quarter.

    Example (April start):
        2024-04-01 -> FY2024/25 Q1, quarter 2024-04-01..2024-06-30,
        fiscal year ends 2025-03-31

    Raises:
        InvalidArgumentError: If the start month is outside 1-12
    """
    if isinstance(fiscal_year_start_month, bool) or fiscal_year_start_month not in range(1, 13):
        raise InvalidArgumentError(
            f"Fiscal year start month must be between 1 and 12, got {fiscal_year_start_month}"
        )

    if day.month >= fiscal_year_start_month:
        fiscal_year = day.year
    else:
        fiscal_year = day.year - 1

    months_into_year = (day.month - fiscal_year_start_month + 12) % 12
    quarter = math.ceil((months_into_year + 1) / 3)

    fiscal_year_start = pendulum.date(fiscal_year, fiscal_year_start_month, 1)
    quarter_start = fiscal_year_start.add(months=(quarter - 1) * 3)
    # Last day of the quarter's third month
    quarter_end = quarter_start.add(months=3).subtract(days=1)
    fiscal_year_end = fiscal_year_start.add(years=1).subtract(days=1)

    return FiscalPeriod(
        date=day,
        fiscal_year=fiscal_year,
        quarter=quarter,
        quarter_start=quarter_start,
        quarter_end=quarter_end,
        fiscal_year_end=fiscal_year_end,
    )
