"""
Tool registry and dispatch for the BA workflow toolkit.

The service maps an operation name plus a JSON-like argument object onto the
domain layer, validates the arguments against a pydantic schema and renders
the result (or a typed failure) for the caller. Domain collaborators are
injected so tests can swap the holiday table or the offset table.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Type, Union

from pydantic import BaseModel, ValidationError

from ..config import AppConfig
from ..domain import estimation, moscow, text_tools
from ..domain.business_calendar import BusinessCalendar
from ..domain.exceptions import (
    InvalidArgumentError,
    ToolkitError,
    UnsupportedOperationError,
)
from ..domain.fiscal import resolve_fiscal_period
from ..domain.meeting_finder import MeetingTimeFinder
from ..domain.models import (
    MeetingSuggestion,
    Participant,
    WallClockTime,
    format_date,
    parse_date,
)
from ..domain.sprint_planner import SprintPlanner
from ..domain.timezones import TimezoneConverter
from . import schemas

logger = logging.getLogger(__name__)

ToolPayload = Union[Dict[str, Any], str]


@dataclass(frozen=True)
class ToolDefinition:
    """A named, schema-described operation."""
    name: str
    description: str
    arguments_model: Type[BaseModel]
    handler: Callable[[Any], ToolPayload]

    def describe(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.arguments_model.model_json_schema(by_alias=True),
        }


@dataclass(frozen=True)
class ToolResult:
    """Rendered outcome of a tool call; failures carry an error code."""
    text: str
    is_error: bool = False
    error_code: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "content": [{"type": "text", "text": self.text}],
            "isError": self.is_error,
        }


class ToolkitService:
    """
    Registry of calculation tools backed by the domain layer.

    Usage:
        service = ToolkitService.from_config(AppConfig())
        result = service.call_tool("calculate_working_days", {
            "startDate": "2024-12-23", "endDate": "2024-12-27",
        })
    """

    def __init__(
        self,
        calendar: BusinessCalendar,
        converter: TimezoneConverter,
        meeting_finder: Optional[MeetingTimeFinder] = None,
        config: Optional[AppConfig] = None,
    ) -> None:
        self._config = config or AppConfig()
        self._calendar = calendar
        self._planner = SprintPlanner(calendar)
        self._converter = converter
        self._meeting_finder = meeting_finder or MeetingTimeFinder(converter)
        self._tools: Dict[str, ToolDefinition] = {tool.name: tool for tool in self._build_tools()}

    @classmethod
    def from_config(cls, config: AppConfig) -> "ToolkitService":
        """Wire the domain collaborators from application configuration."""
        converter = TimezoneConverter(offsets=config.timezones)
        return cls(
            calendar=BusinessCalendar(holidays=config.holidays, region=config.holiday_region),
            converter=converter,
            meeting_finder=MeetingTimeFinder(
                converter,
                base_timezone=config.meeting.base_timezone,
                candidate_hours=config.meeting.candidate_hours(),
            ),
            config=config,
        )

    @property
    def tool_names(self) -> List[str]:
        return list(self._tools)

    def list_tools(self) -> List[dict]:
        """Describe every registered tool with its JSON input schema."""
        return [tool.describe() for tool in self._tools.values()]

    def invoke(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> ToolPayload:
        """
        Validate arguments and run a tool, returning its raw payload.

        Raises:
            UnsupportedOperationError: If no tool has this name
            InvalidArgumentError: If the arguments do not match the schema
            ToolkitError: For any other domain failure
        """
        tool = self._tools.get(name)
        if tool is None:
            raise UnsupportedOperationError(f"Unknown tool: {name}")

        try:
            args = tool.arguments_model.model_validate(dict(arguments or {}))
        except ValidationError as exc:
            raise InvalidArgumentError(_describe_validation_error(exc)) from exc

        logger.debug("Calling tool %s with %s", name, args)
        return tool.handler(args)

    def call_tool(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> ToolResult:
        """
        Run a tool and render its result; failures never propagate.
        """
        try:
            payload = self.invoke(name, arguments)
        except ToolkitError as exc:
            logger.info("Tool %s failed: %s", name, exc)
            return ToolResult(text=f"Error: {exc}", is_error=True, error_code=exc.code)
        except Exception as exc:
            logger.exception("Unexpected failure in tool %s", name)
            return ToolResult(text=f"Error: {exc}", is_error=True, error_code="internal_error")

        return ToolResult(text=render_payload(payload))

    def _build_tools(self) -> List[ToolDefinition]:
        return [
            ToolDefinition(
                "calculate_working_days",
                "Calculate the number of working days between two dates "
                f"(excluding weekends and {self._calendar.region} bank holidays)",
                schemas.WorkingDaysArgs,
                self._working_days,
            ),
            ToolDefinition(
                "add_working_days",
                "Add a specified number of working days to a date "
                f"(excluding weekends and {self._calendar.region} bank holidays)",
                schemas.AddWorkingDaysArgs,
                self._add_working_days,
            ),
            ToolDefinition(
                "subtract_working_days",
                "Subtract a specified number of working days from a date "
                f"(excluding weekends and {self._calendar.region} bank holidays)",
                schemas.SubtractWorkingDaysArgs,
                self._subtract_working_days,
            ),
            ToolDefinition(
                "calculate_sprint_dates",
                "Calculate start and end dates for multiple sprints, including working days per sprint",
                schemas.SprintDatesArgs,
                self._sprint_dates,
            ),
            ToolDefinition(
                "calculate_release_date",
                "Calculate estimated release date based on story points remaining, "
                "team velocity, and sprint length",
                schemas.ReleaseDateArgs,
                self._release_date,
            ),
            ToolDefinition(
                "calculate_fiscal_quarter",
                "Calculate fiscal quarter, fiscal year, and quarter dates "
                "(UK fiscal year starts April 1 by default)",
                schemas.FiscalQuarterArgs,
                self._fiscal_quarter,
            ),
            ToolDefinition(
                "convert_timezone",
                "Convert a time from one timezone to another",
                schemas.ConvertTimezoneArgs,
                self._convert_timezone,
            ),
            ToolDefinition(
                "find_meeting_time",
                "Find suitable meeting times that work across multiple timezones",
                schemas.FindMeetingTimeArgs,
                self._find_meeting_time,
            ),
            ToolDefinition(
                "calculate_velocity",
                "Calculate team velocity and adjusted capacity based on historical sprint data",
                schemas.VelocityArgs,
                self._velocity,
            ),
            ToolDefinition(
                "convert_points_to_hours",
                "Convert story points to hours with configurable ratio and overhead factor",
                schemas.PointsToHoursArgs,
                self._points_to_hours,
            ),
            ToolDefinition(
                "convert_estimation",
                "Convert between estimation systems: T-shirt (XS/S/M/L/XL/XXL), story points and hours",
                schemas.ConvertEstimationArgs,
                self._convert_estimation,
            ),
            ToolDefinition(
                "calculate_moscow_priority",
                "Calculate MoSCoW priority breakdown showing counts, story points, and percentages",
                schemas.MoscowPriorityArgs,
                self._moscow_priority,
            ),
            ToolDefinition(
                "plan_moscow_capacity",
                "Plan sprint capacity based on MoSCoW priorities - shows what fits in available capacity",
                schemas.MoscowCapacityArgs,
                self._moscow_capacity,
            ),
            ToolDefinition(
                "validate_moscow_dependencies",
                "Validate MoSCoW dependencies - finds issues like Must-haves depending on "
                "Could-haves or Won't items",
                schemas.MoscowDependencyArgs,
                self._moscow_dependencies,
            ),
            ToolDefinition(
                "format_user_story",
                "Format a user story following the standard BA template with requirement, "
                "placement, behavior, and acceptance criteria",
                schemas.UserStoryArgs,
                self._user_story,
            ),
            ToolDefinition(
                "generate_requirement_ids",
                "Generate a sequence of requirement IDs with consistent format (e.g., REQ-001, REQ-002)",
                schemas.RequirementIdsArgs,
                self._requirement_ids,
            ),
            ToolDefinition(
                "text_utilities",
                "Perform text operations: " + ", ".join(text_tools.TEXT_OPERATIONS),
                schemas.TextUtilitiesArgs,
                self._text_utilities,
            ),
        ]

    def _working_days(self, args: schemas.WorkingDaysArgs) -> ToolPayload:
        start = parse_date(args.start_date)
        end = parse_date(args.end_date)
        return self._calendar.working_day_range(start, end).to_dict()

    def _add_working_days(self, args: schemas.AddWorkingDaysArgs) -> ToolPayload:
        start = parse_date(args.start_date)
        result = self._calendar.add_working_days(start, args.days_to_add)
        return {
            "startDate": format_date(start),
            "daysAdded": args.days_to_add,
            "resultDate": format_date(result),
        }

    def _subtract_working_days(self, args: schemas.SubtractWorkingDaysArgs) -> ToolPayload:
        start = parse_date(args.start_date)
        result = self._calendar.subtract_working_days(start, args.days_to_subtract)
        return {
            "startDate": format_date(start),
            "daysSubtracted": args.days_to_subtract,
            "resultDate": format_date(result),
        }

    def _sprint_dates(self, args: schemas.SprintDatesArgs) -> ToolPayload:
        length = _or_default(args.sprint_length, self._config.default_sprint_length)
        sprints = self._planner.schedule_sprints(
            parse_date(args.sprint_start), length, args.number_of_sprints
        )
        return {
            "sprintLength": f"{length} weeks",
            "sprints": [sprint.to_dict() for sprint in sprints],
        }

    def _release_date(self, args: schemas.ReleaseDateArgs) -> ToolPayload:
        projection = self._planner.project_release(
            parse_date(args.start_date),
            args.story_points_remaining,
            args.team_velocity,
            _or_default(args.sprint_length, self._config.default_sprint_length),
        )
        return projection.to_dict()

    def _fiscal_quarter(self, args: schemas.FiscalQuarterArgs) -> ToolPayload:
        start_month = _or_default(args.fiscal_year_start, self._config.fiscal_year_start_month)
        return resolve_fiscal_period(parse_date(args.date), start_month).to_dict()

    def _convert_timezone(self, args: schemas.ConvertTimezoneArgs) -> ToolPayload:
        original = WallClockTime.parse(args.time)
        converted = self._converter.convert(original, args.from_timezone, args.to_timezone)
        return {
            "originalTime": str(original),
            "originalTimezone": args.from_timezone,
            "convertedTime": str(converted.time),
            "convertedTimezone": args.to_timezone,
            "dayOffset": converted.day_offset,
            "note": converted.note,
        }

    def find_meetings(
        self,
        participants: List[Mapping[str, Any]],
        duration: Optional[float] = None
    ) -> List[MeetingSuggestion]:
        """Validate participant objects and return the raw meeting suggestions."""
        try:
            args = schemas.FindMeetingTimeArgs.model_validate(
                {"participants": participants, "duration": duration}
            )
        except ValidationError as exc:
            raise InvalidArgumentError(_describe_validation_error(exc)) from exc
        return self._suggest_meetings(args)

    def _suggest_meetings(self, args: schemas.FindMeetingTimeArgs) -> List[MeetingSuggestion]:
        participants = [
            Participant(
                name=participant.name,
                timezone=participant.timezone,
                available_hours=tuple(participant.available_hours),
            )
            for participant in args.participants
        ]
        return self._meeting_finder.find(participants, duration_hours=args.duration)

    def _find_meeting_time(self, args: schemas.FindMeetingTimeArgs) -> ToolPayload:
        suggestions = self._suggest_meetings(args)
        return {
            "suitableTimes": [suggestion.to_dict() for suggestion in suggestions],
            "totalSuggestions": len(suggestions),
        }

    def _velocity(self, args: schemas.VelocityArgs) -> ToolPayload:
        adjustments = args.capacity_adjustments
        report = estimation.calculate_velocity(
            args.completed_points,
            days_off=adjustments.days_off,
            team_size=adjustments.team_size,
            sprint_length=adjustments.sprint_length,
            adjustment_factor=adjustments.adjustment_factor,
        )
        return report.to_dict()

    def _points_to_hours(self, args: schemas.PointsToHoursArgs) -> ToolPayload:
        estimate = estimation.points_to_hours(
            args.story_points,
            point_to_hour_ratio=_or_default(args.point_to_hour_ratio, self._config.point_to_hour_ratio),
            overhead_factor=_or_default(args.overhead_factor, self._config.overhead_factor),
        )
        return estimate.to_dict()

    def _convert_estimation(self, args: schemas.ConvertEstimationArgs) -> ToolPayload:
        return estimation.convert_estimation(args.value, args.from_system, args.to_system).to_dict()

    def _moscow_priority(self, args: schemas.MoscowPriorityArgs) -> ToolPayload:
        return moscow.summarize_priorities(_requirements(args.requirements)).to_dict()

    def _moscow_capacity(self, args: schemas.MoscowCapacityArgs) -> ToolPayload:
        plan = moscow.plan_capacity(_requirements(args.requirements), args.available_capacity)
        return plan.to_dict()

    def _moscow_dependencies(self, args: schemas.MoscowDependencyArgs) -> ToolPayload:
        return moscow.validate_dependencies(_requirements(args.requirements)).to_dict()

    def _user_story(self, args: schemas.UserStoryArgs) -> ToolPayload:
        criteria = args.acceptance_criteria
        if not isinstance(criteria, str):
            criteria = [
                text_tools.AcceptanceCriterion(
                    precondition=criterion.precondition,
                    action=criterion.action,
                    outcome=criterion.outcome,
                )
                for criterion in criteria
            ]
        return text_tools.format_user_story(
            role=args.role,
            feature=args.feature,
            business_value=args.business_value,
            placement=args.placement,
            visual_type=args.visual_type,
            behavior=args.behavior,
            acceptance_criteria=criteria,
            extra_info=args.extra_info,
        )

    def _requirement_ids(self, args: schemas.RequirementIdsArgs) -> ToolPayload:
        return {
            "prefix": args.prefix,
            "startNumber": args.start_number,
            "count": args.count,
            "ids": text_tools.generate_requirement_ids(
                args.prefix, args.start_number, args.count, args.padding
            ),
        }

    def _text_utilities(self, args: schemas.TextUtilitiesArgs) -> ToolPayload:
        result = text_tools.perform_text_operation(
            args.operation, args.text, reverse=args.options.reverse
        )
        if isinstance(result, int):
            return {"operation": args.operation, "result": result}
        return result


def render_payload(payload: ToolPayload) -> str:
    """Render a tool payload as the text the caller receives."""
    if isinstance(payload, str):
        return payload
    return json.dumps(payload, indent=2)


def _or_default(value, default):
    """Use the configured default only when the argument was omitted."""
    return default if value is None else value


def _requirements(items: List[schemas.RequirementArgs]) -> List[moscow.Requirement]:
    return [
        moscow.Requirement(
            id=item.id,
            priority=item.priority,
            points=item.points,
            depends_on=list(item.depends_on),
        )
        for item in items
    ]


def _describe_validation_error(exc: ValidationError) -> str:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "arguments"
        problems.append(f"{location}: {error['msg']}")
    return "Invalid arguments - " + "; ".join(problems)
