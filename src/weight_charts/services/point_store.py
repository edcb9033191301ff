"""Sorted chart point storage with range and lookup queries."""

from bisect import bisect_left, bisect_right
from collections.abc import Iterable
from datetime import datetime, timedelta

from weight_charts.domain.entries import ChartPoint, WeightRange

RANGE_PADDING_RATIO = 0.1
EMPTY_RANGE = WeightRange(min=0.0, max=100.0)


class PointStore:
    """Ascending sequence of chart points indexed by date.

    Range queries and lookups bisect the date index instead of scanning.
    """

    def __init__(self, points: Iterable[ChartPoint] = ()) -> None:
        self._points = tuple(sorted(points, key=lambda point: point.date))
        self._dates = [point.date for point in self._points]

    def __len__(self) -> int:
        return len(self._points)

    def __bool__(self) -> bool:
        return bool(self._points)

    @property
    def points(self) -> tuple[ChartPoint, ...]:
        return self._points

    @property
    def first(self) -> ChartPoint | None:
        return self._points[0] if self._points else None

    @property
    def last(self) -> ChartPoint | None:
        return self._points[-1] if self._points else None

    def between(self, start: datetime, end: datetime) -> list[ChartPoint]:
        """Return points dated within ``[start, end]``."""
        if end < start:
            return []
        low = bisect_left(self._dates, start)
        high = bisect_right(self._dates, end)
        return list(self._points[low:high])

    def nearest(self, at: datetime) -> ChartPoint | None:
        """Return the point closest to ``at``; ties go to the earlier point."""
        if not self._points:
            return None
        index = bisect_left(self._dates, at)
        if index == 0:
            return self._points[0]
        if index == len(self._points):
            return self._points[-1]
        before = self._points[index - 1]
        after = self._points[index]
        if after.date - at < at - before.date:
            return after
        return before

    def interpolate(self, at: datetime) -> float | None:
        """Return the linearly interpolated weight at ``at``.

        Dates outside the series clamp to the nearest endpoint.
        """
        if not self._points:
            return None
        if at <= self._dates[0]:
            return self._points[0].weight
        if at >= self._dates[-1]:
            return self._points[-1].weight

        index = bisect_left(self._dates, at)
        after = self._points[index]
        if after.date == at:
            return after.weight
        before = self._points[index - 1]
        span = (after.date - before.date).total_seconds()
        if span <= 0:
            return before.weight
        ratio = (at - before.date).total_seconds() / span
        ratio = min(max(ratio, 0.0), 1.0)
        return before.weight + ratio * (after.weight - before.weight)

    def visible(
        self,
        center: datetime | None,
        domain: timedelta,
        padding: timedelta,
        threshold: int,
    ) -> list[ChartPoint]:
        """Return the points to render around a viewport center.

        Small series, or a missing center, render in full. Otherwise the
        viewport of width ``domain`` is widened by ``padding`` on each side.
        """
        if len(self._points) < threshold or center is None:
            return list(self._points)
        half = domain / 2
        return self.between(center - half - padding, center + half + padding)

    def weight_range(self) -> WeightRange:
        """Axis range with 10% padding on each side, floored at zero."""
        if not self._points:
            return EMPTY_RANGE
        weights = [point.weight for point in self._points]
        low = min(weights)
        high = max(weights)
        padding = (high - low) * RANGE_PADDING_RATIO
        return WeightRange(min=max(0.0, low - padding), max=high + padding)
