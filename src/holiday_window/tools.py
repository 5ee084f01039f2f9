"""
MCP tool implementations for the holiday window service.
This module contains the business logic for all MCP tools.
"""

import logging
from datetime import date as Date
from typing import Annotated, Dict, List

from pydantic import Field

from .calendar import HolidayAnchor
from .config import create_builder, create_source, load_settings
from .errors import HolidayResolutionError

logger = logging.getLogger(__name__)

# Initialize source and builder
settings = load_settings()
source = create_source(settings)
builder = create_builder(settings, source)


def get_holidays(
    start_year: Annotated[
        int,
        Field(
            description="First year to resolve, inclusive. Example: 2024",
            ge=1900,
            le=2100,
        ),
    ],
    end_year: Annotated[
        int,
        Field(
            description="Last year to resolve, inclusive. Must not be before start_year. Example: 2025",
            ge=1900,
            le=2100,
        ),
    ],
) -> Dict[str, object]:
    """Resolve the statutory holidays of a year range. For each holiday returns its rest dates (the full contiguous days off) and its make-up workdays (weekend days on which work is mandated in exchange). Holidays are grouped by year; anchors that could not be resolved are listed under failures."""
    try:
        result = builder.build_years(source, start_year, end_year)
    except ValueError as e:
        logger.error("Invalid year range: %s", e)
        return {"error": f"Invalid year range: {e}"}
    except HolidayResolutionError as e:
        logger.error("Failed to fetch holidays: %s", e)
        return {"error": f"Failed to fetch holidays: {e}"}
    except Exception as e:
        logger.error("Unexpected error resolving holidays: %s", e)
        return {"error": f"Unexpected error: {e}"}

    holidays: Dict[str, List[Dict[str, object]]] = {
        str(year): [h.to_dict() for h in year_holidays]
        for year, year_holidays in result.by_year().items()
    }
    return {
        "holidays": holidays,
        "failures": [failure.to_dict() for failure in result.failures],
    }


def resolve_holiday(
    date: Annotated[
        str,
        Field(
            description="ISO 8601 date of a day off belonging to the holiday. Format: YYYY-MM-DD. Example: 2025-10-01"
        ),
    ],
    name: Annotated[
        str,
        Field(description="Optional holiday name to include in the result", default=""),
    ] = "",
) -> Dict[str, object]:
    """Resolve a single holiday from one of its days off. Returns all days off of the holiday and the make-up workdays attributed to it."""
    try:
        anchor_date = Date.fromisoformat(date)
    except ValueError as e:
        logger.error("Invalid date format: %s", e)
        return {"error": f"Invalid date format: {e}"}

    anchor = HolidayAnchor(year=anchor_date.year, date=anchor_date, name=name)
    try:
        return builder.resolve_anchor(anchor).to_dict()
    except HolidayResolutionError as e:
        logger.error("Failed to resolve %s: %s", anchor_date, e)
        return {"error": f"{type(e).__name__}: {e}"}
    except Exception as e:
        logger.error("Unexpected error resolving %s: %s", anchor_date, e)
        return {"error": f"Unexpected error: {e}"}


__all__ = [
    "get_holidays",
    "resolve_holiday",
]
