"""
Tests for the ToolkitService registry and dispatch layer.
"""

import json

import pytest

from baworkflow.config import AppConfig
from baworkflow.domain.business_calendar import BusinessCalendar
from baworkflow.domain.exceptions import InvalidArgumentError, UnsupportedOperationError
from baworkflow.domain.timezones import TimezoneConverter
from baworkflow.services.toolkit import ToolkitService

TOOL_NAMES = [
    "calculate_working_days",
    "add_working_days",
    "subtract_working_days",
    "calculate_sprint_dates",
    "calculate_release_date",
    "calculate_fiscal_quarter",
    "convert_timezone",
    "find_meeting_time",
    "calculate_velocity",
    "convert_points_to_hours",
    "convert_estimation",
    "calculate_moscow_priority",
    "plan_moscow_capacity",
    "validate_moscow_dependencies",
    "format_user_story",
    "generate_requirement_ids",
    "text_utilities",
]


def call_json(service: ToolkitService, name: str, arguments: dict) -> dict:
    result = service.call_tool(name, arguments)
    assert not result.is_error, result.text
    return json.loads(result.text)


class TestRegistry:
    """Tests for tool listing."""

    def test_all_tools_registered(self, service):
        """Every tool is registered in a stable order."""
        assert service.tool_names == TOOL_NAMES

    def test_input_schema_uses_camel_case(self, service):
        """Published schemas use the wire field names."""
        tools = {tool["name"]: tool for tool in service.list_tools()}
        schema = tools["calculate_working_days"]["inputSchema"]

        assert set(schema["properties"]) == {"startDate", "endDate"}
        assert set(schema["required"]) == {"startDate", "endDate"}
        assert "UK bank holidays" in tools["calculate_working_days"]["description"]


class TestInvoke:
    """Tests for ToolkitService.invoke."""

    def test_unknown_tool(self, service):
        """Unknown names are unsupported."""
        with pytest.raises(UnsupportedOperationError, match="Unknown tool: nope"):
            service.invoke("nope", {})

    def test_schema_violation(self, service):
        """Missing arguments become an invalid-argument error naming the field."""
        with pytest.raises(InvalidArgumentError, match="endDate"):
            service.invoke("calculate_working_days", {"startDate": "2024-01-01"})

    def test_snake_case_names_accepted(self, service):
        """Python field names work as well as the wire names."""
        result = service.invoke("calculate_working_days", {
            "start_date": "2024-12-23", "end_date": "2024-12-27",
        })

        assert result["workingDays"] == 3


class TestCallTool:
    """Tests for rendered tool results."""

    def test_working_days(self, service):
        """Results are rendered as indented JSON."""
        result = service.call_tool("calculate_working_days", {
            "startDate": "2024-12-23", "endDate": "2024-12-27",
        })

        assert result.text == json.dumps(
            {"startDate": "2024-12-23", "endDate": "2024-12-27", "workingDays": 3}, indent=2
        )
        assert result.to_dict() == {
            "content": [{"type": "text", "text": result.text}],
            "isError": False,
        }

    def test_add_and_subtract(self, service):
        """Working-day stepping reports the count it moved."""
        added = call_json(service, "add_working_days", {"startDate": "2024-12-24", "daysToAdd": 1})
        subtracted = call_json(service, "subtract_working_days", {
            "startDate": "2024-04-02", "daysToSubtract": 1,
        })

        assert added == {"startDate": "2024-12-24", "daysAdded": 1, "resultDate": "2024-12-27"}
        assert subtracted == {
            "startDate": "2024-04-02", "daysSubtracted": 1, "resultDate": "2024-03-28",
        }

    def test_sprint_dates_default_length(self, service):
        """Sprint length falls back to the configured default."""
        data = call_json(service, "calculate_sprint_dates", {
            "sprintStart": "2024-01-01", "numberOfSprints": 2,
        })

        assert data["sprintLength"] == "2 weeks"
        assert [s["endDate"] for s in data["sprints"]] == ["2024-01-14", "2024-01-28"]

    def test_release_date(self, service):
        """Release projection is returned with wire names."""
        data = call_json(service, "calculate_release_date", {
            "startDate": "2024-01-01", "storyPointsRemaining": 100, "teamVelocity": 30,
        })

        assert data["estimatedReleaseDate"] == "2024-02-26"
        assert data["sprintsNeeded"] == 4

    def test_fiscal_quarter(self, service):
        """Fiscal start month defaults to April."""
        data = call_json(service, "calculate_fiscal_quarter", {"date": "2024-04-01"})

        assert data["fiscalYear"] == "FY2024/25"
        assert data["quarter"] == "Q1"
        assert data["quarterEnd"] == "2024-06-30"

    def test_convert_timezone(self, service):
        """Conversions report the day offset and a note."""
        data = call_json(service, "convert_timezone", {
            "time": "22:00", "fromTimezone": "GMT", "toTimezone": "AEST",
        })

        assert data == {
            "originalTime": "22:00",
            "originalTimezone": "GMT",
            "convertedTime": "08:00",
            "convertedTimezone": "AEST",
            "dayOffset": 1,
            "note": "Next day",
        }

    def test_find_meeting_time(self, service):
        """Suggestions are counted and default availability is 9-17."""
        data = call_json(service, "find_meeting_time", {
            "participants": [
                {"name": "Alice", "timezone": "GMT"},
                {"name": "Bob", "timezone": "EST", "availableHours": [9, 17]},
            ],
            "duration": 1,
        })

        assert data["totalSuggestions"] == 4
        assert data["suitableTimes"][0]["baseTime"] == "14:00"

    def test_velocity(self, service):
        """Capacity adjustments are optional."""
        data = call_json(service, "calculate_velocity", {
            "completedPoints": [30, 25, 35],
            "capacityAdjustments": {"daysOff": 2},
        })

        assert data["averageVelocity"] == 30.0
        assert data["adjustedVelocity"] == 24.0

    def test_points_to_hours_uses_config(self):
        """Configured ratio and overhead apply when arguments are omitted."""
        config = AppConfig.from_mapping(
            {"point_to_hour_ratio": 6, "overhead_factor": 0}, environ={}
        )
        service = ToolkitService.from_config(config)

        data = call_json(service, "convert_points_to_hours", {"storyPoints": 2})

        assert data["totalHours"] == 12.0

    def test_explicit_arguments_win_over_config(self):
        """Given values are used even when the configuration differs."""
        config = AppConfig.from_mapping(
            {"default_sprint_length": 3, "fiscal_year_start_month": 7}, environ={}
        )
        service = ToolkitService.from_config(config)

        sprints = call_json(service, "calculate_sprint_dates", {
            "sprintStart": "2024-01-01", "sprintLength": 1, "numberOfSprints": 1,
        })
        defaulted = call_json(service, "calculate_sprint_dates", {
            "sprintStart": "2024-01-01", "numberOfSprints": 1,
        })
        fiscal = call_json(service, "calculate_fiscal_quarter", {
            "date": "2024-04-01", "fiscalYearStart": 1,
        })

        assert sprints["sprintLength"] == "1 weeks"
        assert sprints["sprints"][0]["endDate"] == "2024-01-07"
        assert defaulted["sprintLength"] == "3 weeks"
        assert fiscal["quarter"] == "Q2"

    def test_points_to_hours_explicit_zero_overhead(self, service):
        """An explicit zero overhead is not replaced by the default."""
        data = call_json(service, "convert_points_to_hours", {
            "storyPoints": 2, "overheadFactor": 0,
        })

        assert data["overheadHours"] == 0

    def test_convert_estimation_not_found(self, service):
        """Values off the scale are reported as errors."""
        result = service.call_tool("convert_estimation", {
            "value": 4, "fromSystem": "points", "toSystem": "tshirt",
        })

        assert result.is_error
        assert result.error_code == "not_found"
        assert result.text == "Error: Value 4 not found in points system"

    def test_moscow_tools(self, service):
        """MoSCoW tools accept dependsOn lists."""
        requirements = [
            {"id": "R1", "priority": "Must", "points": 5, "dependsOn": ["R2"]},
            {"id": "R2", "priority": "Could", "points": 3},
        ]

        summary = call_json(service, "calculate_moscow_priority", {"requirements": requirements})
        plan = call_json(service, "plan_moscow_capacity", {
            "requirements": requirements, "availableCapacity": 5,
        })
        report = call_json(service, "validate_moscow_dependencies", {"requirements": requirements})

        assert summary["totalPoints"] == 8
        assert plan["committed"]["items"] == [requirements[0]]
        assert plan["remainingCapacity"] == 0
        assert report["valid"] is False
        assert report["issues"][0]["dependencyPriority"] == "Could"

    def test_user_story_is_plain_text(self, service):
        """The user story tool returns markdown rather than JSON."""
        result = service.call_tool("format_user_story", {
            "role": "Manager",
            "feature": "a report",
            "businessValue": "I save time",
            "placement": "the sidebar",
            "visualType": "a link",
            "behavior": "Opens the report.",
            "acceptanceCriteria": [
                {"precondition": "I am logged in", "action": "I click", "outcome": "it opens"},
            ],
        })

        assert not result.is_error
        assert result.text.startswith("**Requirement**\nAs a Manager,")
        assert "Given that I am logged in," in result.text

    def test_requirement_ids(self, service):
        """IDs are returned with the request echo."""
        data = call_json(service, "generate_requirement_ids", {
            "prefix": "REQ", "startNumber": 7, "count": 2,
        })

        assert data == {"prefix": "REQ", "startNumber": 7, "count": 2, "ids": ["REQ-007", "REQ-008"]}

    def test_text_utilities(self, service):
        """Counts are wrapped in JSON, text results are returned as-is."""
        count = call_json(service, "text_utilities", {"operation": "word_count", "text": "a b c"})
        lines = service.call_tool("text_utilities", {
            "operation": "sort_lines", "text": "a\nc\nb", "options": {"reverse": True},
        })

        assert count == {"operation": "word_count", "result": 3}
        assert lines.text == "c\nb\na"

    @pytest.mark.parametrize("name,arguments,code", [
        ("nope", {}, "unsupported"),
        ("calculate_working_days", {"startDate": "2024-13-01", "endDate": "2024-12-01"}, "invalid_argument"),
        ("calculate_release_date", {"startDate": "2024-01-01", "storyPointsRemaining": 10, "teamVelocity": 0}, "invalid_argument"),
        ("add_working_days", {"startDate": "2024-01-01", "daysToAdd": -1}, "invalid_argument"),
        ("text_utilities", {"operation": "shout", "text": "x"}, "invalid_argument"),
        ("calculate_sprint_dates", {"sprintStart": "2024-01-01", "sprintLength": 0, "numberOfSprints": 2}, "invalid_argument"),
        ("calculate_sprint_dates", {"sprintStart": "2024-01-01", "numberOfSprints": 0}, "invalid_argument"),
        ("calculate_release_date", {"startDate": "2024-01-01", "storyPointsRemaining": 10, "teamVelocity": 5, "sprintLength": 0}, "invalid_argument"),
        ("calculate_fiscal_quarter", {"date": "2024-04-01", "fiscalYearStart": 0}, "invalid_argument"),
        ("calculate_fiscal_quarter", {"date": "2024-04-01", "fiscalYearStart": 13}, "invalid_argument"),
        ("convert_points_to_hours", {"storyPoints": 2, "pointToHourRatio": 0}, "invalid_argument"),
    ])
    def test_failures_become_error_results(self, service, name, arguments, code):
        """Failures never escape call_tool."""
        result = service.call_tool(name, arguments)

        assert result.is_error
        assert result.error_code == code
        assert result.text.startswith("Error: ")
        assert result.to_dict()["isError"] is True

    def test_unexpected_failure_is_contained(self, service, monkeypatch):
        """Bugs surface as internal errors rather than exceptions."""
        def explode(*args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr("baworkflow.services.toolkit.resolve_fiscal_period", explode)

        result = service.call_tool("calculate_fiscal_quarter", {"date": "2024-04-01"})

        assert result.is_error
        assert result.error_code == "internal_error"
        assert result.text == "Error: boom"


class TestFindMeetings:
    """Tests for ToolkitService.find_meetings."""

    def test_injected_collaborators(self):
        """A custom calendar and offset table are honoured."""
        service = ToolkitService(
            calendar=BusinessCalendar(holidays=[], region="Nowhere"),
            converter=TimezoneConverter({"HOME": 0, "AWAY": 3}),
        )

        suggestions = service.find_meetings([
            {"name": "A", "timezone": "HOME", "availableHours": [9, 12]},
            {"name": "B", "timezone": "AWAY", "availableHours": [9, 12]},
        ])

        assert [str(s.base_time) for s in suggestions] == ["09:00"]
        assert service.invoke("calculate_working_days", {
            "startDate": "2024-12-25", "endDate": "2024-12-25",
        })["workingDays"] == 1

    def test_invalid_participant(self, service):
        """Bad participant objects are invalid arguments."""
        with pytest.raises(InvalidArgumentError, match="availableHours"):
            service.find_meetings([{"name": "A", "timezone": "GMT", "availableHours": [9]}])
