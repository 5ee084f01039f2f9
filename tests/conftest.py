"""
Pytest fixtures for holiday window tests.
"""

from datetime import date, timedelta
from pathlib import Path
from typing import Iterable, List, Set, Tuple

import pytest

from holiday_window.calendar import (
    CalendarDay,
    DayStatus,
    HolidayAnchor,
    month_end,
    month_start,
)
from holiday_window.errors import ProviderError

STATUS_CODES = {
    "W": DayStatus.WORKDAY,
    "R": DayStatus.REST,
    "M": DayStatus.MAKEUP_WORKDAY,
}


def make_window(start: date, codes: str) -> List[CalendarDay]:
    """Build a gap-free window from status codes (W=workday, R=rest, M=makeup)."""
    return [
        CalendarDay(start + timedelta(days=i), STATUS_CODES[code])
        for i, code in enumerate(codes)
    ]


def date_range(start: date, end: date) -> List[date]:
    """All dates from start to end, inclusive."""
    return [start + timedelta(days=i) for i in range((end - start).days + 1)]


class InMemoryCalendarSource:
    """In-memory calendar source for testing without HTTP or file I/O.

    Implements both CalendarWindowProvider and AnchorSource. Days listed as
    rest or makeup get that status, all others are workdays.
    """

    def __init__(
        self,
        rest: Iterable[date] = (),
        makeup: Iterable[date] = (),
        anchors: Iterable[HolidayAnchor] = (),
    ):
        self.rest: Set[date] = set(rest)
        self.makeup: Set[date] = set(makeup)
        self.anchors: List[HolidayAnchor] = list(anchors)
        self.failing_months: Set[date] = set()
        self.calls: List[Tuple[date, int]] = []

    def fetch(self, center_month: date, margin_days: int) -> List[CalendarDay]:
        self.calls.append((center_month, margin_days))
        if month_start(center_month) in self.failing_months:
            raise ProviderError(f"No calendar data for {center_month:%Y-%m}")

        start = month_start(center_month) - timedelta(days=margin_days)
        end = month_end(center_month) + timedelta(days=margin_days)
        return [CalendarDay(d, self.status_of(d)) for d in date_range(start, end)]

    def fetch_anchors(self, start_year: int, end_year: int) -> List[HolidayAnchor]:
        return sorted(
            (a for a in self.anchors if start_year <= a.year <= end_year),
            key=lambda a: a.date,
        )

    def status_of(self, d: date) -> DayStatus:
        if d in self.rest:
            return DayStatus.REST
        if d in self.makeup:
            return DayStatus.MAKEUP_WORKDAY
        return DayStatus.WORKDAY


# Statutory holidays of 2021 as published: (name, rest run, make-up days)
HOLIDAYS_2021 = [
    ("元旦节", (date(2021, 1, 1), date(2021, 1, 3)), []),
    (
        "春节",
        (date(2021, 2, 11), date(2021, 2, 17)),
        [date(2021, 2, 7), date(2021, 2, 20)],
    ),
    ("清明节", (date(2021, 4, 3), date(2021, 4, 5)), []),
    (
        "劳动节",
        (date(2021, 5, 1), date(2021, 5, 5)),
        [date(2021, 4, 25), date(2021, 5, 8)],
    ),
    ("端午节", (date(2021, 6, 12), date(2021, 6, 14)), []),
    ("中秋节", (date(2021, 9, 19), date(2021, 9, 21)), [date(2021, 9, 18)]),
    (
        "国庆节",
        (date(2021, 10, 1), date(2021, 10, 7)),
        [date(2021, 9, 26), date(2021, 10, 9)],
    ),
]

# Anchors as listed by the holiday API, including the absorbed eve
ANCHORS_2021 = [
    HolidayAnchor(year=2021, date=date(2021, 1, 1), name="元旦节"),
    HolidayAnchor(year=2021, date=date(2021, 2, 11), name="除夕"),
    HolidayAnchor(year=2021, date=date(2021, 2, 12), name="春节"),
    HolidayAnchor(year=2021, date=date(2021, 4, 4), name="清明节"),
    HolidayAnchor(year=2021, date=date(2021, 5, 1), name="劳动节"),
    HolidayAnchor(year=2021, date=date(2021, 6, 14), name="端午节"),
    HolidayAnchor(year=2021, date=date(2021, 9, 21), name="中秋节"),
    HolidayAnchor(year=2021, date=date(2021, 10, 1), name="国庆节"),
]


@pytest.fixture
def calendar_2021() -> InMemoryCalendarSource:
    """Fixture providing the 2021 statutory holiday calendar.

    Returns:
        InMemoryCalendarSource: Source with all 2021 rest runs, make-up
            workdays and holiday anchors
    """
    rest: List[date] = []
    makeup: List[date] = []
    for _, (first, last), makeup_days in HOLIDAYS_2021:
        rest.extend(date_range(first, last))
        makeup.extend(makeup_days)
    return InMemoryCalendarSource(rest=rest, makeup=makeup, anchors=ANCHORS_2021)


@pytest.fixture
def calendar_file(tmp_path: Path) -> Path:
    """Fixture providing a YAML calendar for autumn 2021.

    Returns:
        Path: Path of the temporary calendar file
    """
    path = tmp_path / "holidays.yaml"
    path.write_text(
        """\
holidays:
  - year: 2021
    date: 2021-09-21
    name: 中秋节
  - year: 2021
    date: 2021-10-01
    name: 国庆节
  - year: 2022
    date: 2022-01-01
    name: 元旦节
rest:
  - 2021-09-19
  - 2021-09-20
  - 2021-09-21
  - 2021-10-01
  - 2021-10-02
  - 2021-10-03
  - 2021-10-04
  - 2021-10-05
  - 2021-10-06
  - 2021-10-07
  - 2022-01-01
  - 2022-01-02
  - 2022-01-03
makeup:
  - 2021-09-18
  - 2021-09-26
  - 2021-10-09
""",
        encoding="utf-8",
    )
    return path
