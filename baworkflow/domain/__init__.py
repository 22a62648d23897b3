"""
Domain layer - Pure business logic without external dependencies.
"""

from .business_calendar import BusinessCalendar, UK_BANK_HOLIDAYS
from .exceptions import (
    InvalidArgumentError,
    NotFoundError,
    ToolkitError,
    UnsupportedOperationError,
)
from .fiscal import resolve_fiscal_period
from .meeting_finder import MeetingTimeFinder
from .models import (
    ConvertedTime,
    FiscalPeriod,
    MeetingSuggestion,
    Participant,
    ReleaseProjection,
    Sprint,
    WallClockTime,
    WorkingDayRange,
)
from .sprint_planner import SprintPlanner
from .timezones import DEFAULT_UTC_OFFSETS, TimezoneConverter

__all__ = [
    "BusinessCalendar",
    "UK_BANK_HOLIDAYS",
    "ToolkitError",
    "InvalidArgumentError",
    "NotFoundError",
    "UnsupportedOperationError",
    "resolve_fiscal_period",
    "MeetingTimeFinder",
    "ConvertedTime",
    "FiscalPeriod",
    "MeetingSuggestion",
    "Participant",
    "ReleaseProjection",
    "Sprint",
    "WallClockTime",
    "WorkingDayRange",
    "SprintPlanner",
    "DEFAULT_UTC_OFFSETS",
    "TimezoneConverter",
]
