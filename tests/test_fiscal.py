"""
Tests for fiscal period resolution.
"""

import pytest

from baworkflow.domain.exceptions import InvalidArgumentError
from baworkflow.domain.fiscal import resolve_fiscal_period
from baworkflow.domain.models import parse_date


class TestResolveFiscalPeriod:
    """Tests for resolve_fiscal_period."""

    def test_first_day_of_uk_fiscal_year(self):
        """April 1st opens Q1 of the fiscal year that starts in that calendar year."""
        period = resolve_fiscal_period(parse_date("2024-04-01"), 4)

        assert period.to_dict() == {
            "date": "2024-04-01",
            "fiscalYear": "FY2024/25",
            "quarter": "Q1",
            "quarterStart": "2024-04-01",
            "quarterEnd": "2024-06-30",
            "fiscalYearEnd": "2025-03-31",
        }

    def test_date_before_start_month_belongs_to_previous_year(self):
        """January falls in Q4 of the fiscal year that began the previous April."""
        period = resolve_fiscal_period(parse_date("2025-01-15"))

        assert period.fiscal_year == 2024
        assert period.quarter_label == "Q4"
        assert period.quarter_start == parse_date("2025-01-01")
        assert period.quarter_end == parse_date("2025-03-31")

    def test_quarter_end_handles_short_months(self):
        """Quarter end is the last day of the third month, including February."""
        period = resolve_fiscal_period(parse_date("2024-01-10"), fiscal_year_start_month=12)

        assert period.quarter == 1
        assert period.quarter_start == parse_date("2023-12-01")
        assert period.quarter_end == parse_date("2024-02-29")
        assert period.fiscal_year_end == parse_date("2024-11-30")

    def test_calendar_year_fiscal_year(self):
        """A January start makes the fiscal year match the calendar year."""
        period = resolve_fiscal_period(parse_date("2024-08-20"), fiscal_year_start_month=1)

        assert period.fiscal_year_label == "FY2024/25"
        assert period.quarter == 3
        assert period.fiscal_year_end == parse_date("2024-12-31")

    @pytest.mark.parametrize("month", range(1, 13))
    def test_quarter_always_between_one_and_four(self, month):
        """Every month maps onto one of four quarters containing the date."""
        day = parse_date(f"2024-{month:02d}-15")
        period = resolve_fiscal_period(day, fiscal_year_start_month=7)

        assert 1 <= period.quarter <= 4
        assert period.quarter_start <= day <= period.quarter_end

    @pytest.mark.parametrize("month", [0, 13, -1])
    def test_invalid_start_month_rejected(self, month):
        """Start months outside 1-12 are invalid."""
        with pytest.raises(InvalidArgumentError, match="between 1 and 12"):
            resolve_fiscal_period(parse_date("2024-04-01"), month)
