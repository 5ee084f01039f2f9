"""
Configuration for the holiday window service.
Uses .env for configuration and wires sources, resolver and builder.
"""

import logging
import os
from enum import Enum
from typing import Union

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from .builder import DEFAULT_MARGIN_DAYS, HolidaySetBuilder, absorbed_names
from .resolver import DEFAULT_WEEKEND_LIMIT, HolidayWindowResolver
from .sources import BaiduCalendarSource, YamlCalendarSource

# Load .env file (only relevant in production)
load_dotenv()

logger = logging.getLogger(__name__)


class SourceKind(str, Enum):
    """Where calendar data comes from."""
    BAIDU = "baidu"
    FILE = "file"


class Settings(BaseModel):
    """Service settings."""
    source: SourceKind = SourceKind.BAIDU
    calendar_file: str = "holidays.yaml"
    http_timeout: float = Field(default=10.0, gt=0)
    margin_days: int = Field(default=DEFAULT_MARGIN_DAYS, ge=0, le=92)
    weekend_limit: int = Field(default=DEFAULT_WEEKEND_LIMIT, ge=1)
    absorbed_names: list[str] = Field(default_factory=lambda: ["除夕"])
    log_level: str = "INFO"

    @field_validator("absorbed_names", mode="before")
    @classmethod
    def split_names(cls, v: object) -> object:
        if isinstance(v, str):
            return [name.strip() for name in v.split(",") if name.strip()]
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Invalid log level: {v}")
        return level


ENV_VARS = {
    "source": "HOLIDAY_SOURCE",
    "calendar_file": "HOLIDAY_CALENDAR_FILE",
    "http_timeout": "HOLIDAY_HTTP_TIMEOUT",
    "margin_days": "HOLIDAY_MARGIN_DAYS",
    "weekend_limit": "HOLIDAY_WEEKEND_LIMIT",
    "absorbed_names": "HOLIDAY_ABSORBED_NAMES",
    "log_level": "HOLIDAY_LOG_LEVEL",
}


def load_settings() -> Settings:
    """Read settings from the environment.

    Raises:
        ValueError: A variable is set to an invalid value
    """
    values = {}
    for name, env_var in ENV_VARS.items():
        value = os.getenv(env_var)
        if value is not None and value.strip():
            values[name] = value.strip()

    try:
        return Settings.model_validate(values)
    except ValidationError as e:
        raise ValueError(f"Invalid holiday configuration: {e}") from e


def create_source(settings: Settings) -> Union[BaiduCalendarSource, YamlCalendarSource]:
    """Create the configured calendar source."""
    if settings.source is SourceKind.FILE:
        logger.info("Using calendar file %s", settings.calendar_file)
        return YamlCalendarSource(settings.calendar_file)
    return BaiduCalendarSource(timeout=settings.http_timeout)


def create_builder(
    settings: Settings, source: Union[BaiduCalendarSource, YamlCalendarSource]
) -> HolidaySetBuilder:
    """Wire resolver and builder from settings."""
    return HolidaySetBuilder(
        provider=source,
        resolver=HolidayWindowResolver(weekend_limit=settings.weekend_limit),
        is_absorbed=absorbed_names(settings.absorbed_names),
        margin_days=settings.margin_days,
    )
