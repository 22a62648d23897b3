"""
Cross-timezone meeting-time search.

This is a fixed-grid search, not an interval solver: each whole hour of the
base timezone's business window is converted into every participant's
timezone and kept only when it suits all of them.
"""

import logging
from typing import List, Optional, Sequence

from .models import MeetingSuggestion, Participant, ParticipantSlot, WallClockTime
from .timezones import TimezoneConverter

logger = logging.getLogger(__name__)

DEFAULT_BASE_TIMEZONE = "GMT"
DEFAULT_CANDIDATE_HOURS = tuple(range(8, 19))  # 08:00 .. 18:00


class MeetingTimeFinder:
    """
    Finds whole-hour meeting times that work for every participant.

    A candidate works for a participant when, converted into their timezone,
    its hour lies inside their available hours and it falls on the same
    calendar day as the base time.
    """

    def __init__(
        self,
        converter: TimezoneConverter,
        base_timezone: str = DEFAULT_BASE_TIMEZONE,
        candidate_hours: Sequence[int] = DEFAULT_CANDIDATE_HOURS
    ):
        self.converter = converter
        self.base_timezone = base_timezone
        self.candidate_hours = tuple(candidate_hours)

    def find(
        self,
        participants: Sequence[Participant],
        duration_hours: Optional[float] = None
    ) -> List[MeetingSuggestion]:
        """
        Evaluate every candidate hour against all participants.

        Args:
            participants: People who must attend
            duration_hours: Requested meeting length; accepted but not used
                to narrow the search

        Returns:
            Suggestions in candidate-hour order
        """
        if not participants:
            return []

        if duration_hours is not None:
            logger.debug("Meeting duration %s h is advisory and does not narrow the search", duration_hours)

        suggestions: List[MeetingSuggestion] = []

        for hour in self.candidate_hours:
            base_time = WallClockTime(hour=hour, minute=0)
            slots = [self._slot_for(base_time, participant) for participant in participants]

            if all(slot.suitable for slot in slots):
                suggestions.append(
                    MeetingSuggestion(
                        base_time=base_time,
                        base_timezone=self.base_timezone,
                        participants=slots,
                    )
                )

        return suggestions

    def _slot_for(self, base_time: WallClockTime, participant: Participant) -> ParticipantSlot:
        converted = self.converter.convert(base_time, self.base_timezone, participant.timezone)

        return ParticipantSlot(
            name=participant.name,
            time=converted.time,
            timezone=participant.timezone,
            suitable=converted.day_offset == 0 and participant.is_available_at(converted.time.hour),
        )
