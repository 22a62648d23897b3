"""
Configuration management using Pydantic models loaded from YAML.
"""

import os
from datetime import date
from pathlib import Path
from typing import Dict, List, Mapping, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.business_calendar import UK_BANK_HOLIDAYS
from .domain.fiscal import DEFAULT_FISCAL_YEAR_START_MONTH
from .domain.meeting_finder import DEFAULT_BASE_TIMEZONE
from .domain.timezones import DEFAULT_UTC_OFFSETS


# Environment variable -> config field
ENV_OVERRIDES = {
    "FISCAL_YEAR_START_MONTH": "fiscal_year_start_month",
    "DEFAULT_SPRINT_LENGTH": "default_sprint_length",
    "POINT_TO_HOUR_RATIO": "point_to_hour_ratio",
    "OVERHEAD_FACTOR": "overhead_factor",
}


class MeetingConfig(BaseModel):
    """Search window for the meeting-time finder."""
    base_timezone: str = DEFAULT_BASE_TIMEZONE
    start_hour: int = 8
    end_hour: int = 18

    @field_validator("start_hour", "end_hour")
    @classmethod
    def validate_hour(cls, v: int) -> int:
        """Validate hour is between 0 and 23."""
        if not 0 <= v <= 23:
            raise ValueError(f"Hour must be between 0 and 23, got {v}")
        return v

    @model_validator(mode="after")
    def validate_hours_order(self) -> "MeetingConfig":
        """Ensure the search window does not close before it opens."""
        if self.end_hour < self.start_hour:
            raise ValueError("end_hour must not be earlier than start_hour")
        return self

    def candidate_hours(self) -> List[int]:
        """Whole hours searched, inclusive of both ends."""
        return list(range(self.start_hour, self.end_hour + 1))


class AppConfig(BaseModel):
    """Application configuration."""
    fiscal_year_start_month: int = DEFAULT_FISCAL_YEAR_START_MONTH
    default_sprint_length: int = 2
    point_to_hour_ratio: float = 4.0
    overhead_factor: float = 0.2
    holiday_region: str = "UK"
    holidays: List[date] = Field(
        default_factory=lambda: [date.fromisoformat(day) for day in UK_BANK_HOLIDAYS]
    )
    timezones: Dict[str, float] = Field(default_factory=lambda: dict(DEFAULT_UTC_OFFSETS))
    meeting: MeetingConfig = Field(default_factory=MeetingConfig)

    @field_validator("fiscal_year_start_month")
    @classmethod
    def validate_fiscal_month(cls, value: int) -> int:
        if not 1 <= value <= 12:
            raise ValueError(f"fiscal_year_start_month must be between 1 and 12, got {value}")
        return value

    @field_validator("default_sprint_length")
    @classmethod
    def validate_sprint_length(cls, value: int) -> int:
        """Ensure sprint length is positive."""
        if value <= 0:
            raise ValueError("default_sprint_length must be greater than zero")
        return value

    @field_validator("point_to_hour_ratio")
    @classmethod
    def validate_ratio(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("point_to_hour_ratio must be greater than zero")
        return value

    @field_validator("overhead_factor")
    @classmethod
    def validate_overhead(cls, value: float) -> float:
        if value < 0:
            raise ValueError("overhead_factor must not be negative")
        return value

    @field_validator("holidays")
    @classmethod
    def validate_holidays(cls, value: List[date]) -> List[date]:
        """Sort holidays and drop duplicates."""
        return sorted(set(value))

    @field_validator("timezones")
    @classmethod
    def validate_timezones(cls, value: Dict[str, float]) -> Dict[str, float]:
        """Ensure offsets are real UTC offsets and names are unique ignoring case."""
        seen: set[str] = set()
        for name, offset in value.items():
            if not -12 <= offset <= 14:
                raise ValueError(f"UTC offset for {name} must be between -12 and +14, got {offset}")
            key = name.upper()
            if key in seen:
                raise ValueError(f"Duplicate timezone name detected: {name}")
            seen.add(key)
        return value

    @classmethod
    def load_from_yaml(
        cls,
        config_path: Path,
        environ: Optional[Mapping[str, str]] = None
    ) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file
            environ: Environment to read overrides from (defaults to os.environ)

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls.from_mapping(data, environ=environ)

    @classmethod
    def from_mapping(
        cls,
        data: Mapping,
        environ: Optional[Mapping[str, str]] = None
    ) -> "AppConfig":
        """Build a config from plain data, applying environment overrides on top."""
        merged = dict(data)
        merged.update(_env_overrides(os.environ if environ is None else environ))
        return cls(**merged)

    @classmethod
    def from_sources(
        cls,
        config_path: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None
    ) -> "AppConfig":
        """
        Load the effective configuration.

        An explicitly given file must exist; the default file is optional and
        built-in defaults are used without it.
        """
        if config_path is not None:
            return cls.load_from_yaml(config_path, environ=environ)

        default_path = get_default_config_path()
        if default_path.exists():
            return cls.load_from_yaml(default_path, environ=environ)

        return cls.from_mapping({}, environ=environ)


def _env_overrides(environ: Mapping[str, str]) -> Dict[str, str]:
    """Collect config overrides from environment variables."""
    overrides: Dict[str, str] = {}
    for env_var, field_name in ENV_OVERRIDES.items():
        value = environ.get(env_var)
        if value:
            overrides[field_name] = value
    return overrides


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
