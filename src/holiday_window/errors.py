"""
Errors raised while resolving holiday windows.
"""

from datetime import date
from typing import Optional


class HolidayResolutionError(Exception):
    """Base class for failures that are fatal to a single holiday anchor."""

    def __init__(self, message: str, anchor_date: Optional[date] = None):
        super().__init__(message)
        self.anchor_date = anchor_date


class AnchorNotFoundError(HolidayResolutionError, LookupError):
    """Anchor date is missing from the calendar window or is not a rest day."""


class WindowIntegrityError(HolidayResolutionError, ValueError):
    """Calendar window is not ordered and gap-free."""


class ProviderError(HolidayResolutionError, ConnectionError):
    """Calendar data source failed to return usable data."""
