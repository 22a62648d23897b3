"""
Domain models for calendar, sprint, fiscal and timezone calculations.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Tuple

import pendulum
from pendulum import Date

from .exceptions import InvalidArgumentError


def parse_date(value: str) -> Date:
    """
    Parse an ISO calendar date (YYYY-MM-DD) into a pendulum Date.

    Raises:
        InvalidArgumentError: If the string is not a valid calendar date
    """
    if isinstance(value, date):
        return pendulum.date(value.year, value.month, value.day)

    try:
        parsed = pendulum.from_format(str(value).strip(), "YYYY-MM-DD")
    except ValueError as exc:
        raise InvalidArgumentError(
            f"Invalid date '{value}': expected YYYY-MM-DD"
        ) from exc

    return pendulum.date(parsed.year, parsed.month, parsed.day)


def format_date(value: Date) -> str:
    """Render a date the way the tool server returns it."""
    return value.isoformat()


@dataclass(frozen=True)
class WorkingDayRange:
    """
    Working days counted over an inclusive date range.

    Recomputed on every query; never cached.
    """
    start: Date
    end: Date
    count: int

    def to_dict(self) -> dict:
        return {
            "startDate": format_date(self.start),
            "endDate": format_date(self.end),
            "workingDays": self.count,
        }


@dataclass(frozen=True)
class Sprint:
    """
    A single fixed-length sprint window.

    Invariant: start is not after end.
    """
    number: int
    start: Date
    end: Date
    working_days: int

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"Sprint start {self.start} must not be after end {self.end}")

    def to_dict(self) -> dict:
        return {
            "sprintNumber": self.number,
            "startDate": format_date(self.start),
            "endDate": format_date(self.end),
            "workingDays": self.working_days,
        }


@dataclass(frozen=True)
class ReleaseProjection:
    """Velocity-driven projection of a release date."""
    release_date: Date
    sprints_needed: int
    weeks_needed: int
    working_days_needed: int

    def to_dict(self) -> dict:
        return {
            "estimatedReleaseDate": format_date(self.release_date),
            "sprintsNeeded": self.sprints_needed,
            "weeksNeeded": self.weeks_needed,
            "workingDaysNeeded": self.working_days_needed,
        }


@dataclass(frozen=True)
class FiscalPeriod:
    """
    Fiscal year and quarter a calendar date falls into.

    ``fiscal_year`` is the calendar year in which the fiscal year began.
    """
    date: Date
    fiscal_year: int
    quarter: int
    quarter_start: Date
    quarter_end: Date
    fiscal_year_end: Date

    @property
    def fiscal_year_label(self) -> str:
        """Label spanning both calendar years, e.g. FY2024/25."""
        return f"FY{self.fiscal_year}/{str(self.fiscal_year + 1)[-2:]}"

    @property
    def quarter_label(self) -> str:
        return f"Q{self.quarter}"

    def to_dict(self) -> dict:
        return {
            "date": format_date(self.date),
            "fiscalYear": self.fiscal_year_label,
            "quarter": self.quarter_label,
            "quarterStart": format_date(self.quarter_start),
            "quarterEnd": format_date(self.quarter_end),
            "fiscalYearEnd": format_date(self.fiscal_year_end),
        }


@dataclass(frozen=True)
class WallClockTime:
    """
    A wall-clock time of day with minute resolution.

    Invariant: 0 <= hour <= 23 and 0 <= minute <= 59.
    """
    hour: int
    minute: int = 0

    def __post_init__(self):
        if not 0 <= self.hour <= 23:
            raise InvalidArgumentError(f"Hour must be between 0 and 23, got {self.hour}")
        if not 0 <= self.minute <= 59:
            raise InvalidArgumentError(f"Minute must be between 0 and 59, got {self.minute}")

    @classmethod
    def parse(cls, value: str) -> "WallClockTime":
        """
        Parse a 24-hour "HH:MM" string.

        Raises:
            InvalidArgumentError: If the string is not a valid time
        """
        parts = str(value).strip().split(":")
        if len(parts) != 2 or not all(part.isdigit() for part in parts):
            raise InvalidArgumentError(f"Invalid time '{value}': expected HH:MM")
        return cls(hour=int(parts[0]), minute=int(parts[1]))

    @property
    def minute_of_day(self) -> int:
        return self.hour * 60 + self.minute

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


@dataclass(frozen=True)
class ConvertedTime:
    """Result of a timezone conversion, with the calendar-day shift it caused."""
    time: WallClockTime
    day_offset: int = 0

    @property
    def note(self) -> str:
        if self.day_offset > 0:
            return "Next day"
        if self.day_offset < 0:
            return "Previous day"
        return "Same day"


@dataclass(frozen=True)
class Participant:
    """
    A meeting participant and the hours they can attend, in their own timezone.

    ``available_hours`` is an inclusive (start_hour, end_hour) pair.
    """
    name: str
    timezone: str
    available_hours: Tuple[int, int] = (9, 17)

    def __post_init__(self):
        if len(self.available_hours) != 2:
            raise InvalidArgumentError(
                f"availableHours for {self.name} must contain exactly two hours"
            )
        start_hour, end_hour = self.available_hours
        if start_hour > end_hour:
            raise InvalidArgumentError(
                f"availableHours for {self.name} must start before they end, "
                f"got {start_hour}-{end_hour}"
            )

    def is_available_at(self, hour: int) -> bool:
        start_hour, end_hour = self.available_hours
        return start_hour <= hour <= end_hour


@dataclass(frozen=True)
class ParticipantSlot:
    """How a candidate meeting time looks to a single participant."""
    name: str
    time: WallClockTime
    timezone: str
    suitable: bool

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "time": str(self.time),
            "timezone": self.timezone,
            "suitable": self.suitable,
        }


@dataclass
class MeetingSuggestion:
    """
    A candidate meeting time that works for every participant.
    """
    base_time: WallClockTime
    base_timezone: str
    participants: List[ParticipantSlot] = field(default_factory=list)

    def format_display(self) -> str:
        """
        Format the suggestion for display.
        Format: HH:MM GMT | Alice 09:00 EST, Bob 14:00 GMT
        """
        local_times = ", ".join(
            f"{slot.name} {slot.time} {slot.timezone}" for slot in self.participants
        )
        return f"{self.base_time} {self.base_timezone} | {local_times}"

    def to_dict(self) -> dict:
        return {
            "baseTime": str(self.base_time),
            "baseTimezone": self.base_timezone,
            "participants": [slot.to_dict() for slot in self.participants],
        }
