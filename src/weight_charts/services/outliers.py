"""Outlier detection for chronological weight series."""

import logging
from collections.abc import Sequence
from datetime import datetime

from weight_charts.domain.entries import ChartPoint

MIN_PLAUSIBLE_WEIGHT = 2.0
MAX_PLAUSIBLE_WEIGHT = 200.0
IQR_MULTIPLIER = 1.5
MAX_RELATIVE_JUMP = 0.5
MIN_POINTS_FOR_FILTERING = 3

_logger = logging.getLogger(__name__)


def filter_outliers(points: Sequence[ChartPoint]) -> list[ChartPoint]:
    """Remove implausible weights from a chronologically sorted series.

    Applies, in order, an absolute plausibility bound, an IQR fence over
    what remains, and a filter for jumps of more than 50% from the last
    kept point. Series shorter than three points are returned unchanged.
    """
    if len(points) < MIN_POINTS_FOR_FILTERING:
        return list(points)

    plausible = [
        point
        for point in points
        if MIN_PLAUSIBLE_WEIGHT <= point.weight <= MAX_PLAUSIBLE_WEIGHT
    ]
    within_fence = _filter_iqr(plausible)
    steady = _filter_jumps(within_fence)

    removed = len(points) - len(steady)
    if removed:
        _logger.debug(
            "Outlier filtering: %s points, %s after bounds, %s after iqr, "
            "%s after jumps",
            len(points),
            len(plausible),
            len(within_fence),
            len(steady),
        )
    return steady


def filter_outliers_before(
    points: Sequence[ChartPoint], cutoff: datetime
) -> list[ChartPoint]:
    """Filter outliers among points older than ``cutoff`` only.

    Points at or after the cutoff are kept as they are and merged back in
    chronological order.
    """
    recent = [point for point in points if point.date >= cutoff]
    older = [point for point in points if point.date < cutoff]
    merged = filter_outliers(older) + recent
    return sorted(merged, key=lambda point: point.date)


def _filter_iqr(points: list[ChartPoint]) -> list[ChartPoint]:
    if not points:
        return []
    weights = sorted(point.weight for point in points)
    count = len(weights)
    q1 = weights[count // 4]
    q3 = weights[(count * 3) // 4]
    iqr = q3 - q1
    lower = q1 - IQR_MULTIPLIER * iqr
    upper = q3 + IQR_MULTIPLIER * iqr
    return [point for point in points if lower <= point.weight <= upper]


def _filter_jumps(points: list[ChartPoint]) -> list[ChartPoint]:
    kept: list[ChartPoint] = []
    for point in points:
        if not kept:
            kept.append(point)
            continue
        baseline = kept[-1].weight
        change = abs(point.weight - baseline) / baseline
        if change <= MAX_RELATIVE_JUMP:
            kept.append(point)
        else:
            _logger.debug(
                "Dropped jump %.1f -> %.1f (%.0f%%)",
                baseline,
                point.weight,
                change * 100,
            )
    return kept
