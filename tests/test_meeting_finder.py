"""
Tests for the meeting-time finder.
"""

import pytest

from baworkflow.domain.exceptions import InvalidArgumentError
from baworkflow.domain.meeting_finder import MeetingTimeFinder
from baworkflow.domain.models import Participant


@pytest.fixture
def finder(converter) -> MeetingTimeFinder:
    return MeetingTimeFinder(converter)


class TestMeetingTimeFinder:
    """Tests for MeetingTimeFinder.find."""

    def test_london_and_new_york_overlap(self, finder):
        """Only hours inside both working days are suggested."""
        participants = [
            Participant("Alice", "GMT", (9, 17)),
            Participant("Bob", "EST", (9, 17)),
        ]

        suggestions = finder.find(participants)
        base_hours = [suggestion.base_time.hour for suggestion in suggestions]

        assert base_hours == [14, 15, 16, 17]
        assert 8 not in base_hours

    def test_suggestion_lists_local_times(self, finder):
        """Each suggestion carries every participant's local time."""
        participants = [
            Participant("Alice", "GMT", (9, 17)),
            Participant("Bob", "EST", (9, 17)),
        ]

        first = finder.find(participants)[0]

        assert first.to_dict() == {
            "baseTime": "14:00",
            "baseTimezone": "GMT",
            "participants": [
                {"name": "Alice", "time": "14:00", "timezone": "GMT", "suitable": True},
                {"name": "Bob", "time": "09:00", "timezone": "EST", "suitable": True},
            ],
        }
        assert first.format_display() == "14:00 GMT | Alice 14:00 GMT, Bob 09:00 EST"

    def test_no_overlap(self, finder):
        """London and Sydney office hours never meet inside the search window."""
        participants = [
            Participant("Alice", "GMT", (9, 17)),
            Participant("Chloe", "AEST", (9, 17)),
        ]

        assert finder.find(participants) == []

    def test_next_day_slots_are_unsuitable(self, finder):
        """A time that lands on another calendar day never counts."""
        # 14:00 GMT is midnight in AEST, which is the next day
        suggestions = finder.find([Participant("Chloe", "AEST", (0, 23))])

        assert [s.base_time.hour for s in suggestions] == [8, 9, 10, 11, 12, 13]

    def test_empty_participants(self, finder):
        """No participants, no suggestions."""
        assert finder.find([]) == []

    def test_duration_does_not_narrow_search(self, finder):
        """Duration is accepted but does not change the result."""
        participants = [Participant("Alice", "GMT", (9, 17))]

        assert finder.find(participants, duration_hours=2) == finder.find(participants)

    def test_custom_window_and_base(self, converter):
        """Candidate hours and the base timezone can be configured."""
        finder = MeetingTimeFinder(converter, base_timezone="EST", candidate_hours=range(0, 24))

        suggestions = finder.find([Participant("Bob", "EST", (9, 10))])

        assert [str(s.base_time) for s in suggestions] == ["09:00", "10:00"]
        assert suggestions[0].base_timezone == "EST"


class TestParticipant:
    """Tests for Participant validation."""

    def test_inclusive_availability(self):
        """Both ends of the available hours are inclusive."""
        participant = Participant("Alice", "GMT", (9, 17))

        assert participant.is_available_at(9)
        assert participant.is_available_at(17)
        assert not participant.is_available_at(18)

    def test_reversed_hours_rejected(self):
        """Availability must not end before it starts."""
        with pytest.raises(InvalidArgumentError, match="must start before they end"):
            Participant("Alice", "GMT", (17, 9))

    def test_wrong_length_rejected(self):
        """Availability is exactly a start and an end hour."""
        with pytest.raises(InvalidArgumentError, match="exactly two hours"):
            Participant("Alice", "GMT", (9, 12, 17))
