"""
Holiday window resolution.

Given an anchor date known to fall inside a holiday and a gap-free calendar
window around it, work out the holiday's contiguous rest run and the make-up
workdays that belong to it.

The window is scanned away from the anchor in both directions. Each scan
first follows the rest run while it stays unbroken, then keeps collecting
make-up workdays until either another holiday's rest day shows up or
``weekend_limit`` weekend days have passed. When another holiday is found, the
make-up workdays collected between the two are split between them by
day-distance.
"""

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Sequence

from .calendar import CalendarDay, DayStatus
from .errors import AnchorNotFoundError, WindowIntegrityError

logger = logging.getLogger(__name__)

# Two full weekends without reaching another holiday.
DEFAULT_WEEKEND_LIMIT = 4


@dataclass(slots=True, frozen=True)
class ResolvedWindow:
    """Rest run and make-up workdays of one holiday, both ascending."""

    rest_dates: tuple[date, ...]
    makeup_dates: tuple[date, ...]


def locate_anchor(window: Sequence[CalendarDay], anchor_date: date) -> int:
    """Returns the index of anchor_date in a gap-free window.

    The index is computed from the day offset to the first entry and checked
    against the entry found there.

    Raises:
        AnchorNotFoundError: anchor_date is not in the window.
        WindowIntegrityError: anchor_date is in the window, but not at its
            computed offset, so the window has gaps or is out of order.
    """
    if not window:
        raise AnchorNotFoundError(
            f"Calendar window is empty, cannot locate {anchor_date}", anchor_date
        )

    offset = (anchor_date - window[0].date).days
    if 0 <= offset < len(window) and window[offset].date == anchor_date:
        return offset

    for index, day in enumerate(window):
        if day.date == anchor_date:
            raise WindowIntegrityError(
                f"{anchor_date} found at index {index}, expected {offset}: "
                "calendar window is not contiguous",
                anchor_date,
            )

    raise AnchorNotFoundError(
        f"{anchor_date} not found in calendar window "
        f"{window[0].date}..{window[-1].date}",
        anchor_date,
    )


class HolidayWindowResolver:
    """Resolves rest runs and make-up workdays around holiday anchors."""

    def __init__(self, weekend_limit: int = DEFAULT_WEEKEND_LIMIT):
        if weekend_limit < 1:
            raise ValueError(f"weekend_limit must be positive, got {weekend_limit}")
        self.weekend_limit = weekend_limit

    def resolve(
        self, window: Sequence[CalendarDay], anchor_date: date
    ) -> ResolvedWindow:
        """Resolve the holiday containing anchor_date.

        Args:
            window: Ordered, gap-free calendar days containing anchor_date
            anchor_date: A rest day of the holiday to resolve

        Returns:
            ResolvedWindow: The rest run including anchor_date and the
            make-up workdays attributed to this holiday

        Raises:
            AnchorNotFoundError: anchor_date is missing or not a rest day
            WindowIntegrityError: the window is not gap-free
        """
        index = locate_anchor(window, anchor_date)
        status = window[index].status
        if status is not DayStatus.REST:
            raise AnchorNotFoundError(
                f"{anchor_date} is marked {status.value}, not a rest day",
                anchor_date,
            )

        before_rest, before_makeup = self._scan(
            window, range(index - 1, -1, -1), anchor_date
        )
        after_rest, after_makeup = self._scan(
            window, range(index + 1, len(window)), anchor_date
        )

        rest_dates = sorted({anchor_date, *before_rest, *after_rest})
        makeup_dates = sorted(before_makeup + after_makeup)
        logger.debug(
            "Resolved %s: %d rest days, %d make-up days",
            anchor_date,
            len(rest_dates),
            len(makeup_dates),
        )
        return ResolvedWindow(tuple(rest_dates), tuple(makeup_dates))

    def _scan(
        self, window: Sequence[CalendarDay], indices: range, anchor_date: date
    ) -> tuple[list[date], list[date]]:
        """Walk away from the anchor in one direction."""
        rest: list[date] = []
        makeup: list[date] = []
        contiguous = True
        weekend_days = 0
        step = timedelta(days=indices.step)

        for i in indices:
            day = window[i]
            previous = window[i - indices.step].date
            if day.date - previous != step:
                raise WindowIntegrityError(
                    f"{day.date} follows {previous} at index {i}: "
                    "calendar window is not contiguous",
                    anchor_date,
                )

            if contiguous:
                if day.status is DayStatus.REST:
                    rest.append(day.date)
                    continue
                contiguous = False
                if day.status is DayStatus.MAKEUP_WORKDAY:
                    makeup.append(day.date)
                continue

            if day.status is DayStatus.REST:
                # Another holiday starts here
                own_edge = rest[-1] if rest else anchor_date
                self._disambiguate(makeup, own_edge, day.date)
                break

            if day.status is DayStatus.MAKEUP_WORKDAY:
                makeup.append(day.date)

            if day.is_weekend():
                weekend_days += 1
                if weekend_days >= self.weekend_limit:
                    break

        return rest, makeup

    @staticmethod
    def _disambiguate(makeup: list[date], own_edge: date, boundary: date) -> None:
        """Drop make-up days that belong to the neighbouring holiday.

        Walks from the make-up day nearest the neighbour back toward the
        anchor. Ties go to the chronologically later holiday.
        """
        i = len(makeup) - 1
        while i >= 0:
            makeup_date = makeup[i]
            dist_own = abs((makeup_date - own_edge).days)
            dist_other = abs((makeup_date - boundary).days)

            if dist_own > dist_other:
                del makeup[i]
            elif dist_own == dist_other:
                if makeup_date < own_edge:
                    break
                del makeup[i]
            else:
                break
            i -= 1
