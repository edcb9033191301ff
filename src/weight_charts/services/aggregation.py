"""Bucketing of current entries into daily and monthly chart points."""

import logging
from collections.abc import Container, Iterable, Sequence
from datetime import UTC, date, datetime, time, timedelta, tzinfo

from weight_charts.domain.entries import (
    FIXED_POINT_SCALE,
    ChartPoint,
    OperationType,
    RawEntry,
)
from weight_charts.services.timestamps import (
    format_entry_timestamp,
    parse_entry_timestamp,
)

FALLBACK_WINDOW = timedelta(days=30)
AGGREGATED_SOURCE = "aggregated"

_EARLIEST = datetime.min.replace(tzinfo=UTC)

_logger = logging.getLogger(__name__)


def valid_entries(entries: Iterable[RawEntry]) -> list[RawEntry]:
    """Return create operations that carry a weight."""
    return [entry for entry in entries if entry.is_create and entry.weight > 0]


def fallback_date(index: int, total: int, now: datetime) -> datetime:
    """Spread the index-th of ``total`` undated entries over the last 30 days."""
    start = now - FALLBACK_WINDOW
    ratio = index / max(total - 1, 1)
    return start + FALLBACK_WINDOW * ratio


def resolve_entry_dates(
    entries: Sequence[RawEntry], now: datetime
) -> list[tuple[RawEntry, datetime]]:
    """Pair each entry with its instant, assigning fallbacks to bad timestamps."""
    parsed = [parse_entry_timestamp(entry.entry_timestamp) for entry in entries]
    failures = sum(1 for instant in parsed if instant is None)
    if failures:
        _logger.debug(
            "Assigning fallback dates to %s of %s entries", failures, len(entries)
        )

    resolved: list[tuple[RawEntry, datetime]] = []
    failure_index = 0
    for entry, instant in zip(entries, parsed, strict=True):
        if instant is None:
            instant = fallback_date(failure_index, failures, now)
            failure_index += 1
        resolved.append((entry, instant))
    return resolved


def start_of_day(moment: datetime, tz: tzinfo) -> datetime:
    """Midnight of the calendar day containing ``moment`` in ``tz``."""
    return _midnight(moment.astimezone(tz).date(), tz)


def start_of_month(moment: datetime, tz: tzinfo) -> datetime:
    """Midnight of the first day of the month containing ``moment`` in ``tz``."""
    local = moment.astimezone(tz)
    return datetime(local.year, local.month, 1, tzinfo=tz)


def latest_entry_per_day(
    entries: Sequence[RawEntry], tz: tzinfo, now: datetime
) -> list[ChartPoint]:
    """Keep the most recently written entry of every calendar day.

    Recency is decided by the server timestamp, then by the entry's own
    instant. Points are dated at the day's midnight in ``tz``.

    Entries with a fallback date never compete for a day: each one takes
    the first day from its fallback date up to ``now`` without a point, or
    the closest earlier free day when the window is full.
    """
    latest: dict[date, tuple[RawEntry, datetime]] = {}
    undated: list[tuple[RawEntry, datetime]] = []
    for entry, instant in resolve_entry_dates(valid_entries(entries), now):
        if parse_entry_timestamp(entry.entry_timestamp) is None:
            undated.append((entry, instant))
            continue
        day = instant.astimezone(tz).date()
        existing = latest.get(day)
        if existing is None or _recency(entry, instant) > _recency(*existing):
            latest[day] = (entry, instant)

    last_day = now.astimezone(tz).date()
    for entry, instant in undated:
        day = _free_day(instant.astimezone(tz).date(), latest, last_day)
        latest[day] = (entry, instant)

    points = [
        ChartPoint.from_entry(entry, _midnight(day, tz))
        for day, (entry, _) in latest.items()
    ]
    return sorted(points, key=lambda point: point.date)


def monthly_average_points(
    entries: Sequence[RawEntry], tz: tzinfo, now: datetime
) -> list[ChartPoint]:
    """Average each calendar month into one point dated at its first day."""
    months: dict[tuple[int, int], list[RawEntry]] = {}
    for entry, instant in resolve_entry_dates(valid_entries(entries), now):
        local = instant.astimezone(tz)
        months.setdefault((local.year, local.month), []).append(entry)

    points: list[ChartPoint] = []
    for (year, month), members in months.items():
        month_start = datetime(year, month, 1, tzinfo=tz)
        average = sum(member.weight for member in members) / len(members)
        representative = RawEntry(
            operation_type=OperationType.CREATE,
            entry_timestamp=format_entry_timestamp(month_start),
            server_timestamp="",
            weight=round(average),
            unit=members[0].unit,
            source=AGGREGATED_SOURCE,
            bmi=next((m.bmi for m in members if m.bmi is not None), None),
        )
        points.append(
            ChartPoint(
                date=month_start,
                weight=average / FIXED_POINT_SCALE,
                source_entry=representative,
            )
        )
        _logger.debug(
            "Month %04d-%02d: %s entries, avg %.1f",
            year,
            month,
            len(members),
            average / FIXED_POINT_SCALE,
        )
    return sorted(points, key=lambda point: point.date)


def _midnight(day: date, tz: tzinfo) -> datetime:
    return datetime.combine(day, time.min, tzinfo=tz)


def _free_day(preferred: date, taken: Container[date], last_day: date) -> date:
    day = preferred
    while day <= last_day:
        if day not in taken:
            return day
        day += timedelta(days=1)
    day = preferred - timedelta(days=1)
    while day in taken:
        day -= timedelta(days=1)
    return day


def _recency(entry: RawEntry, instant: datetime) -> tuple[datetime, datetime]:
    server = parse_entry_timestamp(entry.server_timestamp) or _EARLIEST
    return server, instant
