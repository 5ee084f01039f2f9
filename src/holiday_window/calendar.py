"""
Calendar data model for holiday window resolution.
Per-day calendar statuses, holiday anchors and resolved holidays.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator, model_validator


class DayStatus(str, Enum):
    """Status of a day in the source calendar."""
    WORKDAY = "workday"
    REST = "rest"
    MAKEUP_WORKDAY = "makeup_workday"


@dataclass(slots=True, frozen=True)
class CalendarDay:
    """One day of a calendar window."""

    date: date
    status: DayStatus

    def is_weekend(self) -> bool:
        """Saturday or Sunday."""
        return self.date.isoweekday() >= 6


class HolidayAnchor(BaseModel):
    """A nominal holiday occurrence as listed by the anchor source."""
    model_config = ConfigDict(frozen=True)

    year: int
    date: date
    name: str


class Holiday(BaseModel):
    """A named holiday with its rest run and make-up workdays."""
    model_config = ConfigDict(frozen=True)

    year: int
    anchor_date: date
    name: str
    rest_dates: tuple[date, ...]
    makeup_dates: tuple[date, ...] = ()

    @field_validator("rest_dates", "makeup_dates")
    @classmethod
    def validate_ascending(cls, v: tuple[date, ...]) -> tuple[date, ...]:
        if any(later <= earlier for earlier, later in zip(v, v[1:])):
            raise ValueError("dates must be strictly ascending")
        return v

    @model_validator(mode="after")
    def validate_window(self) -> "Holiday":
        if self.anchor_date not in self.rest_dates:
            raise ValueError(f"anchor date {self.anchor_date} must be a rest date")
        if (self.rest_dates[-1] - self.rest_dates[0]).days != len(self.rest_dates) - 1:
            raise ValueError("rest dates must be contiguous")
        overlap = set(self.rest_dates) & set(self.makeup_dates)
        if overlap:
            raise ValueError(f"make-up dates overlap rest dates: {sorted(overlap)}")
        return self

    @property
    def first_rest_date(self) -> date:
        return self.rest_dates[0]

    @property
    def last_rest_date(self) -> date:
        return self.rest_dates[-1]

    def to_dict(self) -> dict[str, object]:
        """Serialize to dictionary for API responses."""
        return {
            "year": self.year,
            "name": self.name,
            "date": self.anchor_date.isoformat(),
            "rest_days": len(self.rest_dates),
            "makeup_days": len(self.makeup_dates),
            "rest_dates": [d.isoformat() for d in self.rest_dates],
            "makeup_dates": [d.isoformat() for d in self.makeup_dates],
        }


def month_start(d: date) -> date:
    """First day of the month containing d."""
    return d.replace(day=1)


def month_end(d: date) -> date:
    """Last day of the month containing d."""
    next_month = (d.replace(day=28) + timedelta(days=4)).replace(day=1)
    return next_month - timedelta(days=1)
