"""
Shared fixtures.
"""

import pytest

from baworkflow.config import AppConfig
from baworkflow.domain.business_calendar import BusinessCalendar
from baworkflow.domain.timezones import TimezoneConverter
from baworkflow.services.toolkit import ToolkitService


@pytest.fixture
def calendar() -> BusinessCalendar:
    """Calendar with the built-in UK bank holidays."""
    return BusinessCalendar()


@pytest.fixture
def converter() -> TimezoneConverter:
    return TimezoneConverter()


@pytest.fixture
def service() -> ToolkitService:
    """Toolkit wired with default configuration and no environment overrides."""
    return ToolkitService.from_config(AppConfig.from_mapping({}, environ={}))
