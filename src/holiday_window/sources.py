"""
Calendar data sources for holiday window resolution.
Provides the yearly holiday anchors and the per-day calendar windows.
"""

import logging
import time
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

import pandas as pd
import requests
import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from .calendar import CalendarDay, DayStatus, HolidayAnchor, month_end, month_start
from .errors import ProviderError

logger = logging.getLogger(__name__)

BAIDU_API_URL = "https://sp0.baidu.com/8aQDcjqpAAV3otqbppnN2DJv/api.php"
HOLIDAY_RESOURCE_ID = "39042"
CALENDAR_RESOURCE_ID = "39043"

BAIDU_STATUS = {
    "1": DayStatus.REST,
    "2": DayStatus.MAKEUP_WORKDAY,
}


class CalendarWindowProvider(Protocol):
    """Protocol for sources of per-day calendar windows."""

    def fetch(self, center_month: date, margin_days: int) -> List[CalendarDay]: ...

    """Return ordered, gap-free days covering center_month's month plus margin_days on each side."""


class AnchorSource(Protocol):
    """Protocol for sources of nominal holiday dates."""

    def fetch_anchors(self, start_year: int, end_year: int) -> List[HolidayAnchor]: ...

    """Return holiday anchors for the inclusive year range, ordered by date."""


def _parse_date(value: Any) -> Optional[date]:
    """Parses Baidu's unpadded "2021-1-1" dates."""
    if not isinstance(value, str):
        return None
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError:
        return None


class BaiduCalendarSource:
    """Holiday anchors and calendar windows from Baidu's calendar API."""

    def __init__(
        self,
        base_url: str = BAIDU_API_URL,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self.session = session or requests.Session()

    def _get(self, query: str, resource_id: str) -> Dict[str, Any]:
        """Query the API and return the decoded JSON payload."""
        # Cache-busting timestamps in milliseconds
        ts = int(time.time() * 1000)
        params = {
            "query": query,
            "resource_id": resource_id,
            "t": ts,
            "ie": "utf8",
            "oe": "utf8",
            "format": "json",
            "tn": "wisetpl",
            "_": ts,
        }

        logger.debug("Fetching %s (resource %s)", query, resource_id)
        try:
            response = self.session.get(
                self.base_url, params=params, timeout=self.timeout
            )
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            raise ProviderError(f"Query {query!r} failed: {e}") from e

        if not isinstance(payload, dict):
            raise ProviderError(f"Query {query!r} returned unexpected payload")
        return payload

    @staticmethod
    def _first_data(payload: Dict[str, Any], key: str, query: str) -> List[Any]:
        """Extracts payload["data"][0][key]."""
        data = payload.get("data")
        if not data or not isinstance(data, list) or not isinstance(data[0], dict):
            raise ProviderError(f"Query {query!r} returned no data")

        items = data[0].get(key)
        if not items or not isinstance(items, list):
            raise ProviderError(f"Query {query!r} returned no {key} entries")
        return items

    def fetch_anchors(self, start_year: int, end_year: int) -> List[HolidayAnchor]:
        """Fetch the statutory holiday list for the year range."""
        if start_year > end_year:
            raise ValueError(
                f"start_year ({start_year}) must not be after end_year ({end_year})"
            )

        query = "法定节假日"
        years = self._first_data(self._get(query, HOLIDAY_RESOURCE_ID), "holiday", query)

        anchors: List[HolidayAnchor] = []
        for entry in years:
            if not isinstance(entry, dict):
                continue

            try:
                year = int(entry.get("year"))
            except (TypeError, ValueError):
                logger.warning("Skipping holiday list without year: %s", entry)
                continue

            if year < start_year or year > end_year:
                continue

            items = entry.get("list")
            if not items:
                logger.warning("No holidays listed for %d", year)
                continue

            for index, item in enumerate(items):
                if not isinstance(item, dict):
                    logger.warning("Holiday %d of %d is empty", index, year)
                    continue

                holiday_date = _parse_date(item.get("date"))
                if holiday_date is None:
                    logger.warning("Holiday %d of %d has no valid date: %s", index, year, item)
                    continue

                anchors.append(
                    HolidayAnchor(year=year, date=holiday_date, name=item.get("name") or "")
                )

        anchors.sort(key=lambda a: a.date)
        return anchors

    def _fetch_month(self, month: date) -> List[CalendarDay]:
        """Fetch the calendar page for a month (about 90 days around it)."""
        query = f"{month.year}年{month.month}月"
        almanac = self._first_data(self._get(query, CALENDAR_RESOURCE_ID), "almanac", query)

        days: List[CalendarDay] = []
        for index, entry in enumerate(almanac):
            if not isinstance(entry, dict):
                raise ProviderError(f"Calendar entry {index} of {query!r} is empty")
            try:
                day = date(int(entry["year"]), int(entry["month"]), int(entry["day"]))
            except (KeyError, TypeError, ValueError) as e:
                raise ProviderError(
                    f"Calendar entry {index} of {query!r} has no valid date: {entry}"
                ) from e

            status = BAIDU_STATUS.get(str(entry.get("status", "")), DayStatus.WORKDAY)
            days.append(CalendarDay(day, status))

        return days

    def fetch(self, center_month: date, margin_days: int) -> List[CalendarDay]:
        """Fetch a calendar window around center_month.

        Adjacent months are merged in when the page for center_month does
        not reach margin_days past either end of the month.
        """
        start = month_start(center_month) - timedelta(days=margin_days)
        end = month_end(center_month) + timedelta(days=margin_days)

        days = {day.date: day for day in self._fetch_month(center_month)}

        if min(days) > start:
            previous_month = month_start(center_month) - timedelta(days=1)
            for day in self._fetch_month(previous_month):
                days.setdefault(day.date, day)

        if max(days) < end:
            next_month = month_end(center_month) + timedelta(days=1)
            for day in self._fetch_month(next_month):
                days.setdefault(day.date, day)

        if min(days) > start or max(days) < end:
            logger.warning(
                "Calendar for %s covers %s..%s, wanted %s..%s",
                center_month.strftime("%Y-%m"),
                min(days),
                max(days),
                start,
                end,
            )

        first, last = min(days), max(days)
        if (last - first).days + 1 != len(days):
            raise ProviderError(
                f"Calendar for {center_month.strftime('%Y-%m')} has gaps: "
                f"{len(days)} days between {first} and {last}"
            )

        return [days[d] for d in sorted(days)]


class CalendarFile(BaseModel):
    """Root model for a locally maintained holiday calendar."""
    holidays: list[HolidayAnchor] = Field(default_factory=list)
    rest: list[date] = Field(default_factory=list)
    makeup: list[date] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_disjoint(self) -> "CalendarFile":
        both = set(self.rest) & set(self.makeup)
        if both:
            raise ValueError(f"dates listed as both rest and makeup: {sorted(both)}")
        return self


class YamlCalendarSource:
    """Holiday anchors and calendar windows from a YAML file.

    Days listed under ``rest`` are rest days, days under ``makeup`` are
    make-up workdays and every other day is a workday.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def load(self) -> CalendarFile:
        """Load calendar from YAML."""
        try:
            with open(self.path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ProviderError(f"Cannot read calendar file {self.path}: {e}") from e
        except yaml.YAMLError as e:
            raise ProviderError(f"Invalid YAML in {self.path}: {e}") from e

        try:
            return CalendarFile.model_validate(data or {})
        except ValidationError as e:
            raise ProviderError(f"Invalid calendar file {self.path}: {e}") from e

    def fetch_anchors(self, start_year: int, end_year: int) -> List[HolidayAnchor]:
        if start_year > end_year:
            raise ValueError(
                f"start_year ({start_year}) must not be after end_year ({end_year})"
            )
        calendar = self.load()
        anchors = [a for a in calendar.holidays if start_year <= a.year <= end_year]
        return sorted(anchors, key=lambda a: a.date)

    def fetch(self, center_month: date, margin_days: int) -> List[CalendarDay]:
        calendar = self.load()

        period = pd.Timestamp(center_month).to_period("M")
        index = pd.date_range(
            period.start_time - pd.Timedelta(days=margin_days),
            period.end_time.normalize() + pd.Timedelta(days=margin_days),
            freq="D",
        )

        statuses = pd.Series(DayStatus.WORKDAY, index=index, dtype=object)
        statuses[index.isin(pd.to_datetime(calendar.rest))] = DayStatus.REST
        statuses[index.isin(pd.to_datetime(calendar.makeup))] = DayStatus.MAKEUP_WORKDAY

        if (statuses == DayStatus.WORKDAY).all():
            raise ProviderError(
                f"{self.path} has no calendar data for {period}"
            )

        return [CalendarDay(ts.date(), DayStatus(status)) for ts, status in statuses.items()]
