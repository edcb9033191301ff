"""Tests for the sorted point store."""

from datetime import UTC, datetime, timedelta

import pytest

from weight_charts.services.point_store import EMPTY_RANGE, PointStore
from tests.conftest import make_point

START = datetime(2024, 1, 1, tzinfo=UTC)


def _store(weights: list[float], step: timedelta = timedelta(days=1)) -> PointStore:
    return PointStore(
        make_point(START + step * offset, weight)
        for offset, weight in enumerate(weights)
    )


def test_points_are_sorted_on_construction() -> None:
    late = make_point(START + timedelta(days=2), 71.0)
    early = make_point(START, 70.0)

    store = PointStore([late, early])

    assert store.points == (early, late)
    assert store.first is early
    assert store.last is late
    assert len(store) == 2


def test_empty_store() -> None:
    store = PointStore()

    assert not store
    assert store.first is None
    assert store.nearest(START) is None
    assert store.interpolate(START) is None
    assert store.weight_range() == EMPTY_RANGE


def test_between_is_inclusive() -> None:
    store = _store([70.0, 71.0, 72.0, 73.0])

    window = store.between(START + timedelta(days=1), START + timedelta(days=2))

    assert [point.weight for point in window] == [71.0, 72.0]
    assert store.between(START + timedelta(days=3), START) == []


def test_nearest_prefers_closer_then_earlier() -> None:
    store = _store([70.0, 72.0])

    assert store.nearest(START + timedelta(hours=6)).weight == 70.0
    assert store.nearest(START + timedelta(hours=18)).weight == 72.0
    assert store.nearest(START + timedelta(hours=12)).weight == 70.0
    assert store.nearest(START - timedelta(days=5)).weight == 70.0
    assert store.nearest(START + timedelta(days=5)).weight == 72.0


def test_interpolation_between_points() -> None:
    store = _store([70.0, 72.0])

    assert store.interpolate(START + timedelta(hours=12)) == pytest.approx(71.0)
    assert store.interpolate(START + timedelta(days=1)) == 72.0


def test_interpolation_clamps_to_endpoints() -> None:
    store = _store([70.0, 72.0, 74.0])

    assert store.interpolate(START - timedelta(days=10)) == 70.0
    assert store.interpolate(START + timedelta(days=30)) == 74.0


def test_visible_returns_everything_below_threshold() -> None:
    store = _store([70.0] * 10)

    visible = store.visible(
        START, timedelta(days=7), timedelta(days=3), threshold=50
    )

    assert len(visible) == 10


def test_visible_windows_large_series() -> None:
    store = _store([70.0 + (i % 5) / 10 for i in range(1200)])
    center = START + timedelta(days=600)

    visible = store.visible(
        center, timedelta(days=7), timedelta(days=3), threshold=50
    )

    low = center - timedelta(days=3.5) - timedelta(days=3)
    high = center + timedelta(days=3.5) + timedelta(days=3)
    assert visible
    assert all(low <= point.date <= high for point in visible)
    assert len(visible) == 13


def test_visible_without_center_returns_everything() -> None:
    store = _store([70.0] * 60)

    assert len(store.visible(None, timedelta(days=7), timedelta(days=3), 50)) == 60


def test_weight_range_pads_by_ten_percent() -> None:
    store = _store([70.0, 80.0])

    weight_range = store.weight_range()

    assert weight_range.min == pytest.approx(69.0)
    assert weight_range.max == pytest.approx(81.0)


def test_weight_range_is_floored_at_zero() -> None:
    store = _store([1.0, 100.0])

    assert store.weight_range().min == 0.0
