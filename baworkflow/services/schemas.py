"""
Argument schemas for the registered tools.

Field names are snake_case in Python and camelCase on the wire; the JSON
schema published by ``tools/list`` is generated from these models.
"""

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ToolArguments(BaseModel):
    """Base class for tool arguments: camelCase aliases, unknown keys ignored."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class WorkingDaysArgs(ToolArguments):
    start_date: str = Field(description="Start date in YYYY-MM-DD format")
    end_date: str = Field(description="End date in YYYY-MM-DD format")


class AddWorkingDaysArgs(ToolArguments):
    start_date: str = Field(description="Start date in YYYY-MM-DD format")
    days_to_add: int = Field(ge=0, description="Number of working days to add")


class SubtractWorkingDaysArgs(ToolArguments):
    start_date: str = Field(description="Start date in YYYY-MM-DD format")
    days_to_subtract: int = Field(ge=0, description="Number of working days to subtract")


class SprintDatesArgs(ToolArguments):
    sprint_start: str = Field(description="Sprint 1 start date in YYYY-MM-DD format")
    sprint_length: Optional[int] = Field(
        default=None, gt=0, description="Length of each sprint in weeks (typically 2)"
    )
    number_of_sprints: int = Field(gt=0, description="Number of sprints to calculate")


class ReleaseDateArgs(ToolArguments):
    start_date: str = Field(description="Start date in YYYY-MM-DD format")
    story_points_remaining: float = Field(description="Total story points remaining in backlog")
    team_velocity: float = Field(description="Average team velocity (points per sprint)")
    sprint_length: Optional[int] = Field(
        default=None, gt=0, description="Sprint length in weeks (typically 2)"
    )


class FiscalQuarterArgs(ToolArguments):
    date: str = Field(description="Date in YYYY-MM-DD format")
    fiscal_year_start: Optional[int] = Field(
        default=None, ge=1, le=12, description="Fiscal year start month (1-12, default: 4 for April)"
    )


class ConvertTimezoneArgs(ToolArguments):
    time: str = Field(description="Time in HH:MM format (24-hour)")
    from_timezone: str = Field(description="Source timezone (e.g., GMT, EST, PST, AEST, IST, CET, MYT)")
    to_timezone: str = Field(description="Target timezone (e.g., GMT, EST, PST, AEST, IST, CET, MYT)")


class ParticipantArgs(ToolArguments):
    name: str
    timezone: str
    available_hours: List[int] = Field(default_factory=lambda: [9, 17], min_length=2, max_length=2)


class FindMeetingTimeArgs(ToolArguments):
    participants: List[ParticipantArgs] = Field(
        description="Participants with name, timezone, and available hours"
    )
    duration: Optional[float] = Field(default=None, description="Meeting duration in hours")


class CapacityAdjustmentsArgs(ToolArguments):
    days_off: float = Field(default=0, description="Total team days off this sprint")
    team_size: int = Field(default=5, description="Team size (default: 5)")
    sprint_length: int = Field(default=2, description="Sprint length in weeks (default: 2)")
    adjustment_factor: float = Field(default=1.0, description="Adjustment factor for team changes")


class VelocityArgs(ToolArguments):
    completed_points: List[float] = Field(
        min_length=1, description="Completed story points per sprint (e.g., [28, 32, 25, 30])"
    )
    capacity_adjustments: CapacityAdjustmentsArgs = Field(default_factory=CapacityAdjustmentsArgs)


class PointsToHoursArgs(ToolArguments):
    story_points: float = Field(description="Story points to convert")
    point_to_hour_ratio: Optional[float] = Field(default=None, gt=0, description="Hours per story point")
    overhead_factor: Optional[float] = Field(
        default=None, description="Overhead as decimal (0.2 for 20% overhead)"
    )


EstimationSystem = Literal["tshirt", "points", "hours"]


class ConvertEstimationArgs(ToolArguments):
    value: Union[int, float, str] = Field(description='Value to convert (e.g., "L", 5, 20)')
    from_system: EstimationSystem
    to_system: EstimationSystem


class RequirementArgs(ToolArguments):
    id: str
    priority: str = Field(description="Must, Should, Could or Won't")
    points: float = 0
    depends_on: List[str] = Field(default_factory=list)


class MoscowPriorityArgs(ToolArguments):
    requirements: List[RequirementArgs]


class MoscowCapacityArgs(ToolArguments):
    requirements: List[RequirementArgs]
    available_capacity: float = Field(description="Available capacity in story points")


class MoscowDependencyArgs(ToolArguments):
    requirements: List[RequirementArgs]


class AcceptanceCriterionArgs(ToolArguments):
    precondition: str
    action: str
    outcome: str


class UserStoryArgs(ToolArguments):
    role: str = Field(description='User role (e.g., "Care Home Manager")')
    feature: str = Field(description="Feature or functionality requested")
    business_value: str = Field(description="Business value or benefit")
    placement: str = Field(description='Where on the page (e.g., "Header", "Sidebar")')
    visual_type: str = Field(description='Visual type (e.g., "button", "dropdown", "modal")')
    behavior: str = Field(description="Expected behavior when user interacts with the feature")
    extra_info: str = Field(default="", description="Technical details, dependencies, API calls")
    acceptance_criteria: Union[str, List[AcceptanceCriterionArgs]] = Field(
        description="Given/When/Then text or a list of criteria objects"
    )


class RequirementIdsArgs(ToolArguments):
    prefix: str = Field(description="ID prefix (e.g., REQ, US, AC, TC)")
    start_number: int = Field(description="Starting number")
    count: int = Field(ge=0, description="How many IDs to generate")
    padding: int = Field(default=3, ge=0, description="Number of digits with zero padding")


TextOperation = Literal[
    "word_count",
    "char_count",
    "remove_duplicates",
    "sort_lines",
    "extract_emails",
    "extract_urls",
    "to_uppercase",
    "to_lowercase",
    "to_title_case",
    "trim_whitespace",
    "add_line_numbers",
]


class TextOptionsArgs(ToolArguments):
    reverse: bool = False


class TextUtilitiesArgs(ToolArguments):
    operation: TextOperation
    text: str
    options: TextOptionsArgs = Field(default_factory=TextOptionsArgs)
