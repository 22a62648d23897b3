"""
Velocity statistics and estimation conversions.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from .exceptions import InvalidArgumentError, NotFoundError

HOURS_PER_WORKING_DAY = 8
WORKING_DAYS_PER_WEEK = 5


@dataclass
class VelocityReport:
    """Historical velocity statistics with a capacity-adjusted forecast."""
    history: List[float]
    average: float
    adjusted: float
    min: float
    max: float

    @property
    def range(self) -> float:
        return self.max - self.min

    def to_dict(self) -> dict:
        return {
            "historicalVelocity": self.history,
            "averageVelocity": round(self.average, 1),
            "adjustedVelocity": round(self.adjusted, 1),
            "min": self.min,
            "max": self.max,
            "range": self.range,
        }


@dataclass
class HoursEstimate:
    """Story points expressed as effort hours."""
    story_points: float
    point_to_hour_ratio: float
    overhead_factor: float
    base_hours: float
    overhead_hours: float

    @property
    def total_hours(self) -> float:
        return self.base_hours + self.overhead_hours

    @property
    def working_days(self) -> float:
        return self.total_hours / HOURS_PER_WORKING_DAY

    def to_dict(self) -> dict:
        return {
            "storyPoints": self.story_points,
            "pointToHourRatio": self.point_to_hour_ratio,
            "baseHours": round(self.base_hours, 1),
            "overheadHours": round(self.overhead_hours, 1),
            "overheadPercentage": round(self.overhead_factor * 100, 1),
            "totalHours": round(self.total_hours, 1),
            "workingDays": round(self.working_days, 1),
        }


@dataclass
class EstimationConversion:
    original_value: Any
    original_system: str
    converted_value: Any
    converted_system: str

    def to_dict(self) -> dict:
        return {
            "originalValue": self.original_value,
            "originalSystem": self.original_system,
            "convertedValue": self.converted_value,
            "convertedSystem": self.converted_system,
        }


def calculate_velocity(
    completed_points: Sequence[float],
    days_off: float = 0,
    team_size: int = 5,
    sprint_length: int = 2,
    adjustment_factor: float = 1.0
) -> VelocityReport:
    """
    Calculate average velocity and a forecast adjusted for lost capacity.

    Each team day off removes a proportional share of a sprint's working
    days (sprint_length weeks of five days each). ``team_size`` is recorded
    by callers for context only.

    Raises:
        InvalidArgumentError: If there is no history or the sprint length is not positive
    """
    if not completed_points:
        raise InvalidArgumentError("completedPoints must contain at least one sprint")
    if sprint_length <= 0:
        raise InvalidArgumentError(f"Sprint length must be greater than zero, got {sprint_length}")

    points = list(completed_points)
    average = sum(points) / len(points)

    working_days_in_sprint = sprint_length * WORKING_DAYS_PER_WEEK
    holiday_impact = days_off / working_days_in_sprint
    adjusted = average * adjustment_factor * (1 - holiday_impact)

    return VelocityReport(
        history=points,
        average=average,
        adjusted=adjusted,
        min=min(points),
        max=max(points),
    )


def points_to_hours(
    story_points: float,
    point_to_hour_ratio: float = 4,
    overhead_factor: float = 0.2
) -> HoursEstimate:
    """Convert story points to hours, adding a proportional overhead."""
    if point_to_hour_ratio <= 0:
        raise InvalidArgumentError(
            f"pointToHourRatio must be greater than zero, got {point_to_hour_ratio}"
        )
    if overhead_factor < 0:
        raise InvalidArgumentError(f"overheadFactor must not be negative, got {overhead_factor}")

    base_hours = story_points * point_to_hour_ratio

    return HoursEstimate(
        story_points=story_points,
        point_to_hour_ratio=point_to_hour_ratio,
        overhead_factor=overhead_factor,
        base_hours=base_hours,
        overhead_hours=base_hours * overhead_factor,
    )


ESTIMATION_TABLES: Dict[str, Dict[Any, Any]] = {
    "tshirt_to_points": {"XS": 1, "S": 2, "M": 3, "L": 5, "XL": 8, "XXL": 13},
    "points_to_tshirt": {1: "XS", 2: "S", 3: "M", 5: "L", 8: "XL", 13: "XXL"},
    "tshirt_to_hours": {"XS": 4, "S": 8, "M": 12, "L": 20, "XL": 32, "XXL": 52},
    "points_to_hours": {1: 4, 2: 8, 3: 12, 5: 20, 8: 32, 13: 52},
}


def convert_estimation(value: Any, from_system: str, to_system: str) -> EstimationConversion:
    """
    Convert an estimate between T-shirt sizes, story points and hours.

    Raises:
        InvalidArgumentError: If the pair of systems has no conversion table
        NotFoundError: If the value is not in the source system's scale
    """
    table = ESTIMATION_TABLES.get(f"{from_system}_to_{to_system}")
    if table is None:
        raise InvalidArgumentError(f"Conversion from {from_system} to {to_system} not supported")

    converted = table.get(_normalise_estimate(value, from_system))
    if converted is None:
        raise NotFoundError(f"Value {value} not found in {from_system} system")

    return EstimationConversion(
        original_value=value,
        original_system=from_system,
        converted_value=converted,
        converted_system=to_system,
    )


def _normalise_estimate(value: Any, system: str) -> Any:
    if system == "tshirt":
        return str(value).strip().upper()
    if system == "points":
        try:
            number = float(value)
        except (TypeError, ValueError):
            return value
        return int(number) if number.is_integer() else number
    return value
