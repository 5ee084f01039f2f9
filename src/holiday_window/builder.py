"""
Builds the resolved holidays for a list of holiday anchors.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional

from pydantic import ValidationError

from .calendar import Holiday, HolidayAnchor, month_start
from .errors import HolidayResolutionError, WindowIntegrityError
from .resolver import HolidayWindowResolver
from .sources import AnchorSource, CalendarWindowProvider

logger = logging.getLogger(__name__)

# Two weekends on either side of the anchor month, plus slack
DEFAULT_MARGIN_DAYS = 14

AbsorbedPredicate = Callable[[HolidayAnchor], bool]


def absorbed_names(names: Iterable[str]) -> AbsorbedPredicate:
    """Predicate matching anchors whose trimmed name is one of names.

    Such anchors (e.g. New Year's Eve "除夕") fall inside the rest run of the
    following holiday and are not reported on their own.
    """
    excluded = frozenset(name.strip() for name in names)

    def is_absorbed(anchor: HolidayAnchor) -> bool:
        return anchor.name.strip() in excluded

    return is_absorbed


@dataclass(slots=True, frozen=True)
class AnchorFailure:
    """An anchor that could not be resolved."""

    anchor: HolidayAnchor
    kind: str
    message: str

    def to_dict(self) -> dict[str, object]:
        return {
            "year": self.anchor.year,
            "name": self.anchor.name,
            "date": self.anchor.date.isoformat(),
            "error": self.kind,
            "message": self.message,
        }


@dataclass(slots=True)
class BuildResult:
    """Resolved holidays and failed anchors of one build run."""

    holidays: List[Holiday] = field(default_factory=list)
    failures: List[AnchorFailure] = field(default_factory=list)

    def by_year(self) -> Dict[int, List[Holiday]]:
        """Group holidays by their nominal year."""
        grouped: Dict[int, List[Holiday]] = {}
        for holiday in self.holidays:
            grouped.setdefault(holiday.year, []).append(holiday)
        return grouped


class HolidaySetBuilder:
    """Resolves each holiday anchor against its own calendar window."""

    def __init__(
        self,
        provider: CalendarWindowProvider,
        resolver: Optional[HolidayWindowResolver] = None,
        is_absorbed: Optional[AbsorbedPredicate] = None,
        margin_days: int = DEFAULT_MARGIN_DAYS,
    ):
        self.provider = provider
        self.resolver = resolver or HolidayWindowResolver()
        self.is_absorbed = is_absorbed or absorbed_names(["除夕"])
        self.margin_days = margin_days

    def resolve_anchor(self, anchor: HolidayAnchor) -> Holiday:
        """Resolve a single anchor.

        Raises:
            HolidayResolutionError: The window could not be fetched or the
                anchor could not be resolved in it.
        """
        window = self.provider.fetch(month_start(anchor.date), self.margin_days)
        resolved = self.resolver.resolve(window, anchor.date)
        try:
            holiday = Holiday(
                year=anchor.year,
                anchor_date=anchor.date,
                name=anchor.name.strip(),
                rest_dates=resolved.rest_dates,
                makeup_dates=resolved.makeup_dates,
            )
        except ValidationError as e:
            raise WindowIntegrityError(
                f"Resolved window for {anchor.date} is inconsistent: {e}",
                anchor.date,
            ) from e

        logger.debug(
            "%s: %s..%s",
            holiday.name,
            holiday.first_rest_date,
            holiday.last_rest_date,
        )
        return holiday

    def build(self, anchors: Iterable[HolidayAnchor]) -> BuildResult:
        """Resolve all anchors, collecting failures instead of stopping.

        Args:
            anchors: Holiday anchors in any order

        Returns:
            BuildResult: Holidays ordered by anchor date, and the failed anchors
        """
        result = BuildResult()

        for anchor in sorted(anchors, key=lambda a: a.date):
            if not anchor.name.strip():
                logger.warning("Skipping unnamed holiday on %s", anchor.date)
                continue

            if self.is_absorbed(anchor):
                logger.debug("Skipping %s on %s", anchor.name, anchor.date)
                continue

            try:
                holiday = self.resolve_anchor(anchor)
            except HolidayResolutionError as e:
                logger.error(
                    "Failed to resolve %s on %s: %s", anchor.name, anchor.date, e
                )
                result.failures.append(
                    AnchorFailure(anchor=anchor, kind=type(e).__name__, message=str(e))
                )
                continue

            result.holidays.append(holiday)

        return result

    def build_years(
        self, source: AnchorSource, start_year: int, end_year: int
    ) -> BuildResult:
        """Fetch the anchors of a year range and build them."""
        if start_year > end_year:
            raise ValueError(
                f"start_year ({start_year}) must not be after end_year ({end_year})"
            )
        return self.build(source.fetch_anchors(start_year, end_year))
