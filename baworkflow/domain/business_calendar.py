"""
Working-day calendar and working-day arithmetic.

Pure domain logic: the holiday table is injected at construction and never
mutated, so a single ``BusinessCalendar`` can be shared freely.
"""

import logging
from typing import Iterable, Iterator, Tuple

from pendulum import Date

from .exceptions import InvalidArgumentError
from .models import WorkingDayRange, parse_date

logger = logging.getLogger(__name__)


# England & Wales bank holidays
UK_BANK_HOLIDAYS: Tuple[str, ...] = (
    # 2024
    "2024-01-01", "2024-03-29", "2024-04-01", "2024-05-06", "2024-05-27",
    "2024-08-26", "2024-12-25", "2024-12-26",
    # 2025
    "2025-01-01", "2025-04-18", "2025-04-21", "2025-05-05", "2025-05-26",
    "2025-08-25", "2025-12-25", "2025-12-26",
    # 2026
    "2026-01-01", "2026-04-03", "2026-04-06", "2026-05-04", "2026-05-25",
    "2026-08-31", "2026-12-25", "2026-12-28",
)

WEEKEND_DAYS = (5, 6)  # Saturday, Sunday


class BusinessCalendar:
    """
    Decides which days are working days and walks the calendar in working-day steps.

    A working day is a weekday that is not listed in the holiday set.
    """

    def __init__(self, holidays: Iterable = UK_BANK_HOLIDAYS, region: str = "UK"):
        """
        Initialize the calendar.

        Args:
            holidays: Holiday dates as ISO strings or date objects
            region: Name of the region the holiday table belongs to
        """
        self.region = region
        self._holidays = frozenset(parse_date(day) for day in holidays)

    @property
    def holidays(self) -> frozenset:
        return self._holidays

    def is_holiday(self, day: Date) -> bool:
        return day in self._holidays

    def is_working_day(self, day: Date) -> bool:
        """Check if a given date is neither a weekend day nor a holiday."""
        return day.weekday() not in WEEKEND_DAYS and not self.is_holiday(day)

    def iter_days(self, start: Date, end: Date) -> Iterator[Date]:
        """Yield every calendar day in [start, end]."""
        current = start
        while current <= end:
            yield current
            current = current.add(days=1)

    def count_working_days(self, start: Date, end: Date) -> int:
        """
        Count working days in the inclusive range [start, end].

        A reversed range (start after end) is empty and counts as 0.
        """
        if start > end:
            logger.debug("Reversed range %s..%s counts no working days", start, end)
            return 0

        return sum(1 for day in self.iter_days(start, end) if self.is_working_day(day))

    def working_day_range(self, start: Date, end: Date) -> WorkingDayRange:
        return WorkingDayRange(
            start=start,
            end=end,
            count=self.count_working_days(start, end),
        )

    def add_working_days(self, start: Date, days: int) -> Date:
        """
        Move forward until ``days`` working days have been passed.

        The start date itself is never counted, so ``days=0`` returns start
        and ``days=1`` returns the next working day after start.
        """
        return self._step_working_days(start, days, step=1)

    def subtract_working_days(self, start: Date, days: int) -> Date:
        """Move backward until ``days`` working days have been passed."""
        return self._step_working_days(start, days, step=-1)

    def _step_working_days(self, start: Date, days: int, step: int) -> Date:
        if isinstance(days, bool) or not isinstance(days, int):
            raise InvalidArgumentError(f"Working-day count must be an integer, got {days!r}")
        if days < 0:
            raise InvalidArgumentError(f"Working-day count must not be negative, got {days}")

        current = start
        counted = 0

        while counted < days:
            current = current.add(days=step)
            if self.is_working_day(current):
                counted += 1

        return current
