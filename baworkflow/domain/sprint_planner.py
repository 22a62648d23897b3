"""
Sprint windowing and velocity-driven release projection.
"""

import math
from typing import List

from pendulum import Date

from .business_calendar import BusinessCalendar
from .exceptions import InvalidArgumentError
from .models import ReleaseProjection, Sprint


class SprintPlanner:
    """
    Lays out consecutive sprints and projects delivery dates.

    Algorithm for sprint windows:
    1. Sprint end = start + (length_weeks * 7 - 1) days
    2. Count working days inside the window
    3. Next sprint starts the calendar day after the previous one ends

    Usage:
        planner = SprintPlanner(calendar)
        sprints = planner.schedule_sprints(start, length_weeks=2, count=6)
    """

    def __init__(self, calendar: BusinessCalendar):
        self.calendar = calendar

    def schedule_sprints(
        self,
        first_start: Date,
        length_weeks: int,
        count: int
    ) -> List[Sprint]:
        """
        Partition time into contiguous, non-overlapping sprints.

        Args:
            first_start: Start date of sprint 1
            length_weeks: Length of every sprint in weeks
            count: Number of sprints to generate

        Returns:
            Sprints numbered from 1, in chronological order

        Raises:
            InvalidArgumentError: If length_weeks or count is not positive
        """
        _require_positive("Sprint length", length_weeks)
        _require_positive("Number of sprints", count)

        sprints: List[Sprint] = []
        current_start = first_start

        for number in range(1, count + 1):
            sprint_end = current_start.add(days=length_weeks * 7 - 1)

            sprints.append(
                Sprint(
                    number=number,
                    start=current_start,
                    end=sprint_end,
                    working_days=self.calendar.count_working_days(current_start, sprint_end),
                )
            )

            current_start = sprint_end.add(days=1)

        return sprints

    def project_release(
        self,
        start: Date,
        points_remaining: float,
        velocity: float,
        sprint_length_weeks: int
    ) -> ReleaseProjection:
        """
        Project when the remaining backlog will be delivered.

        The release date advances in whole sprints of calendar time; the
        working-day count between start and release is reported alongside.

        Raises:
            InvalidArgumentError: If velocity or sprint length is not positive,
                or points_remaining is negative
        """
        if velocity <= 0:
            raise InvalidArgumentError(f"Team velocity must be greater than zero, got {velocity}")
        if points_remaining < 0:
            raise InvalidArgumentError(
                f"Story points remaining must not be negative, got {points_remaining}"
            )
        _require_positive("Sprint length", sprint_length_weeks)

        sprints_needed = math.ceil(points_remaining / velocity)
        weeks_needed = sprints_needed * sprint_length_weeks
        release_date = start.add(weeks=weeks_needed)

        return ReleaseProjection(
            release_date=release_date,
            sprints_needed=sprints_needed,
            weeks_needed=weeks_needed,
            working_days_needed=self.calendar.count_working_days(start, release_date),
        )


def _require_positive(label: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(f"{label} must be a whole number, got {value!r}")
    if value <= 0:
        raise InvalidArgumentError(f"{label} must be greater than zero, got {value}")
