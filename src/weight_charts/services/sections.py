"""Period-specific chart section controllers.

Each controller owns one point sequence and its selection and scroll
state. ``process_entries`` rebuilds everything from a raw entry log and
resets the view to the most recent point; nothing is patched incrementally.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta, tzinfo
from typing import ClassVar

from weight_charts.domain.entries import (
    DEFAULT_UNIT,
    FIXED_POINT_SCALE,
    ChartPoint,
    RawEntry,
    WeightRange,
)
from weight_charts.domain.periods import TimePeriod
from weight_charts.services.aggregation import (
    latest_entry_per_day,
    monthly_average_points,
    start_of_day,
    start_of_month,
)
from weight_charts.services.operation_log import reduce_operation_log
from weight_charts.services.outliers import filter_outliers_before
from weight_charts.services.point_store import EMPTY_RANGE, PointStore

EMPTY_WEIGHT_DISPLAY = f"-- {DEFAULT_UNIT}"

WEEKDAY_LETTERS = ["", "Su", "Mo", "Tu", "We", "Th", "Fr", "Sa"]
MONTH_LETTERS = ["", "J", "F", "M", "A", "M", "J", "J", "A", "S", "O", "N", "D"]

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(frozen=True)
class SectionSnapshot:
    """Points computed for a section, ready to be applied."""

    points: tuple[ChartPoint, ...]


@dataclass
class SectionController:
    """Shared behaviour of the chart sections."""

    period: ClassVar[TimePeriod]
    visible_domain: ClassVar[timedelta]
    window_padding: ClassVar[timedelta]
    window_threshold: ClassVar[int]
    outlier_exemption: ClassVar[timedelta] = timedelta(days=7)

    tz: tzinfo = UTC
    clock: Callable[[], datetime] = _utcnow
    selected_date: datetime | None = field(default=None, init=False)
    selected_point: ChartPoint | None = field(default=None, init=False)
    scroll_position: datetime | None = field(default=None, init=False)
    weight_range: WeightRange = field(default=EMPTY_RANGE, init=False)
    _store: PointStore = field(default_factory=PointStore, init=False, repr=False)

    @property
    def chart_points(self) -> list[ChartPoint]:
        return list(self._store.points)

    @property
    def has_data(self) -> bool:
        return bool(self._store)

    def build(self, entries: Sequence[RawEntry]) -> SectionSnapshot:
        """Compute this section's points from a raw entry log."""
        now = self.clock()
        current = reduce_operation_log(entries)
        points = self._aggregate(current, now)
        filtered = filter_outliers_before(points, now - self.outlier_exemption)
        return SectionSnapshot(points=tuple(filtered))

    def apply(self, snapshot: SectionSnapshot) -> None:
        """Replace the section state with a computed snapshot."""
        self._store = PointStore(snapshot.points)
        self.weight_range = self._store.weight_range()
        self.clear_selection()
        self.scroll_position = None
        self.scroll_to_latest()

    def process_entries(self, entries: Sequence[RawEntry]) -> None:
        """Rebuild the section from an entry log and show the latest point."""
        self.apply(self.build(entries))
        _logger.debug(
            "%s section processed %s entries into %s points",
            self.period.value,
            len(entries),
            len(self._store),
        )

    def select_point_at_date(self, date: datetime | None) -> None:
        """Select the point closest to ``date``; ``None`` clears the selection."""
        if date is None:
            self.clear_selection()
            return
        self.selected_date = self._selected_date_for(date)
        self.selected_point = self._store.nearest(self._lookup_key(date))

    def clear_selection(self) -> None:
        self.selected_point = None
        self.selected_date = None

    def scroll_to(self, position: datetime) -> None:
        self.scroll_position = position

    def scroll_to_latest(self) -> None:
        """Center the viewport on the most recent point and select it."""
        latest = self._store.last
        if latest is None:
            return
        self.scroll_position = latest.date
        self.select_point_at_date(latest.date)

    def visible_domain_length(self) -> timedelta:
        return self.visible_domain

    def get_visible_points(self) -> list[ChartPoint]:
        """Return the points around the current scroll position."""
        return self._store.visible(
            self.scroll_position,
            self.visible_domain_length(),
            self.window_padding,
            self.window_threshold,
        )

    def nearest_point(self, at: datetime) -> ChartPoint | None:
        return self._store.nearest(at)

    def interpolated_weight(self, at: datetime) -> float | None:
        return self._store.interpolate(at)

    def format_date(self, date: datetime) -> str:
        local = date.astimezone(self.tz)
        return f"{local:%b} {local.day}, {local.year}"

    def format_weekday(self, date: datetime) -> str:
        """Two-letter weekday abbreviation."""
        weekday = date.astimezone(self.tz).isoweekday() % 7 + 1
        return WEEKDAY_LETTERS[weekday]

    def weight_display_value(self) -> str:
        point = self.selected_point or self._store.last
        if point is None:
            return EMPTY_WEIGHT_DISPLAY
        return _format_weight(point.weight, point.unit)

    def weight_display_label(self) -> str:
        if self.selected_point is not None:
            return "Selected Weight"
        if self.has_data:
            return "Latest Weight"
        return "Weight"

    def bmi_display_value(self) -> str | None:
        """BMI of the displayed point, or ``None`` when it has none."""
        point = self.selected_point or self._store.last
        if point is None or point.source_entry.bmi is None:
            return None
        return f"{point.source_entry.bmi / FIXED_POINT_SCALE:.1f}"

    def _aggregate(self, entries: list[RawEntry], now: datetime) -> list[ChartPoint]:
        return latest_entry_per_day(entries, self.tz, now)

    def _selected_date_for(self, date: datetime) -> datetime:
        return date

    def _lookup_key(self, date: datetime) -> datetime:
        return date


@dataclass
class WeekSection(SectionController):
    """Seven-day view of the latest entry per day."""

    period: ClassVar[TimePeriod] = TimePeriod.WEEK
    visible_domain: ClassVar[timedelta] = timedelta(days=7)
    window_padding: ClassVar[timedelta] = timedelta(days=3)
    window_threshold: ClassVar[int] = 50

    def weight_display_value(self) -> str:
        if self.selected_point is not None:
            return _format_weight(self.selected_point.weight, self.selected_point.unit)
        first = self._store.first
        if first is None:
            return EMPTY_WEIGHT_DISPLAY
        weights = [point.weight for point in self._store.points]
        return _format_weight(sum(weights) / len(weights), first.unit)

    def weight_display_label(self) -> str:
        if self.selected_point is not None:
            return "Selected Weight"
        if not self.has_data:
            return "Weight"
        week_ago = self.clock() - timedelta(days=7)
        recent = self._store.between(week_ago, datetime.max.replace(tzinfo=UTC))
        if len(recent) >= len(self._store) // 2:
            return "Average This Week"
        return "Average Weight"

    def _selected_date_for(self, date: datetime) -> datetime:
        return start_of_day(date, self.tz)

    def _lookup_key(self, date: datetime) -> datetime:
        return start_of_day(date, self.tz)


@dataclass
class MonthSection(SectionController):
    """Thirty-day view of the latest entry per day."""

    period: ClassVar[TimePeriod] = TimePeriod.MONTH
    visible_domain: ClassVar[timedelta] = timedelta(days=30)
    window_padding: ClassVar[timedelta] = timedelta(days=30)
    window_threshold: ClassVar[int] = 100

    def format_weekday(self, date: datetime) -> str:
        """Day and month label, e.g. ``05 Jan``."""
        return f"{date.astimezone(self.tz):%d %b}"


@dataclass
class YearSection(SectionController):
    """Year view of monthly averages."""

    period: ClassVar[TimePeriod] = TimePeriod.YEAR
    visible_domain: ClassVar[timedelta] = timedelta(days=365)
    window_padding: ClassVar[timedelta] = timedelta(days=180)
    window_threshold: ClassVar[int] = 100
    outlier_exemption: ClassVar[timedelta] = timedelta(days=90)

    def format_date(self, date: datetime) -> str:
        return f"{date.astimezone(self.tz):%b %Y}"

    def format_month(self, date: datetime) -> str:
        return f"{date.astimezone(self.tz):%b}"

    def format_month_letter(self, date: datetime) -> str:
        """Single-letter month label for compact axes."""
        return MONTH_LETTERS[date.astimezone(self.tz).month]

    def weight_display_label(self) -> str:
        if self.selected_point is not None:
            return "Selected Month Avg"
        if self.has_data:
            return "Latest Month Avg"
        return "Weight"

    def _aggregate(self, entries: list[RawEntry], now: datetime) -> list[ChartPoint]:
        return monthly_average_points(entries, self.tz, now)

    def _lookup_key(self, date: datetime) -> datetime:
        return start_of_month(date, self.tz)


@dataclass
class TotalSection(YearSection):
    """Whole-history view of monthly averages, never windowed."""

    period: ClassVar[TimePeriod] = TimePeriod.TOTAL

    def visible_domain_length(self) -> timedelta:
        first = self._store.first
        last = self._store.last
        if first is None or last is None or last.date == first.date:
            return self.visible_domain
        return last.date - first.date

    def get_visible_points(self) -> list[ChartPoint]:
        return self.chart_points


SECTION_TYPES: dict[TimePeriod, type[SectionController]] = {
    TimePeriod.WEEK: WeekSection,
    TimePeriod.MONTH: MonthSection,
    TimePeriod.YEAR: YearSection,
    TimePeriod.TOTAL: TotalSection,
}


def build_sections(
    tz: tzinfo = UTC, clock: Callable[[], datetime] = _utcnow
) -> dict[TimePeriod, SectionController]:
    """Create one controller per time period."""
    return {period: cls(tz=tz, clock=clock) for period, cls in SECTION_TYPES.items()}


def _format_weight(weight: float, unit: str) -> str:
    return f"{weight:.1f} {unit}"
