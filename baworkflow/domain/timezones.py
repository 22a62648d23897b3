"""
Fixed-offset timezone conversion for wall-clock times.

Offsets are hours from UTC and may be fractional (IST is +5.5). Daylight
saving is not modelled: summer variants are listed as separate names.
"""

import logging
from types import MappingProxyType
from typing import List, Mapping

from .models import ConvertedTime, WallClockTime

logger = logging.getLogger(__name__)


DEFAULT_UTC_OFFSETS: Mapping[str, float] = MappingProxyType({
    "UTC": 0,
    "GMT": 0,
    "BST": 1,
    "EST": -5,
    "EDT": -4,
    "CST": -6,
    "CDT": -5,
    "MST": -7,
    "MDT": -6,
    "PST": -8,
    "PDT": -7,
    "AEST": 10,
    "AEDT": 11,
    "IST": 5.5,
    "CET": 1,
    "CEST": 2,
    "MYT": 8,
})

MINUTES_PER_DAY = 24 * 60


class TimezoneConverter:
    """
    Converts wall-clock times between named fixed-offset timezones.

    Unknown timezone names resolve to UTC.
    """

    def __init__(self, offsets: Mapping[str, float] = DEFAULT_UTC_OFFSETS):
        self._offsets = MappingProxyType(
            {name.upper(): float(offset) for name, offset in offsets.items()}
        )

    @property
    def known_timezones(self) -> List[str]:
        return sorted(self._offsets)

    def offset_for(self, timezone: str) -> float:
        """Get the UTC offset in hours for a timezone name."""
        offset = self._offsets.get(timezone.upper())
        if offset is None:
            logger.warning("Unknown timezone '%s', treating it as UTC", timezone)
            return 0.0
        return offset

    def convert(self, time: WallClockTime, from_tz: str, to_tz: str) -> ConvertedTime:
        """
        Convert a wall-clock time from one timezone to another.

        The time is normalised to UTC, shifted to the target offset and then
        reduced to a single day; ``day_offset`` records how many calendar days
        that reduction moved.
        """
        shift_minutes = round((self.offset_for(to_tz) - self.offset_for(from_tz)) * 60)
        target_minutes = time.minute_of_day + shift_minutes

        day_offset, minute_of_day = divmod(target_minutes, MINUTES_PER_DAY)
        hour, minute = divmod(minute_of_day, 60)

        return ConvertedTime(
            time=WallClockTime(hour=hour, minute=minute),
            day_offset=day_offset,
        )
