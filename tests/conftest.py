"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import httpx
import pytest

from weight_charts.config import Settings
from weight_charts.containers import AppContainer
from weight_charts.domain.entries import ChartPoint, OperationType, RawEntry
from weight_charts.services.cache import InMemoryEntryLogCache
from weight_charts.services.charts import ChartService, EntrySource
from weight_charts.services.sections import build_sections
from weight_charts.services.timestamps import format_entry_timestamp

FIXED_NOW = datetime(2024, 6, 15, 12, 0, tzinfo=UTC)


def fixed_clock() -> datetime:
    return FIXED_NOW


def make_entry(
    entry_timestamp: str | datetime,
    weight: int = 700,
    operation_type: OperationType = OperationType.CREATE,
    server_timestamp: str | datetime = "",
    unit: str | None = "kg",
    bmi: float | None = None,
    source: str = "scale",
) -> RawEntry:
    """Build a raw entry; datetimes are rendered in the vendor format."""
    if isinstance(entry_timestamp, datetime):
        entry_timestamp = format_entry_timestamp(entry_timestamp)
    if isinstance(server_timestamp, datetime):
        server_timestamp = format_entry_timestamp(server_timestamp)
    return RawEntry(
        operation_type=operation_type,
        entry_timestamp=entry_timestamp,
        server_timestamp=server_timestamp,
        weight=weight,
        unit=unit,
        source=source,
        bmi=bmi,
    )


def make_point(date: datetime, weight: float) -> ChartPoint:
    return ChartPoint.from_entry(make_entry(date, weight=round(weight * 10)), date)


def daily_entries(
    start: datetime, weights: list[int], hour: int = 7
) -> list[RawEntry]:
    """One create per day starting at ``start``."""
    return [
        make_entry(start + timedelta(days=offset, hours=hour), weight=weight)
        for offset, weight in enumerate(weights)
    ]


@dataclass
class FakeEntrySource(EntrySource):
    """Entry source that serves a fixed log and counts fetches."""

    entries: list[RawEntry] = field(default_factory=list)
    calls: int = 0

    async def fetch_entries(self) -> list[RawEntry]:
        self.calls += 1
        return list(self.entries)


@dataclass
class FailingEntrySource(EntrySource):
    """Entry source whose upstream is unreachable."""

    async def fetch_entries(self) -> list[RawEntry]:
        raise httpx.ConnectError("upstream unreachable")


@pytest.fixture
def settings() -> Settings:
    return Settings(
        entry_source="sample",
        sample_days=60,
        sample_seed=7,
        entries_cache_ttl_seconds=300,
        chart_timezone="UTC",
    )


@pytest.fixture
def entry_source() -> FakeEntrySource:
    start = FIXED_NOW.replace(hour=0) - timedelta(days=59)
    return FakeEntrySource(entries=daily_entries(start, [800 - i for i in range(60)]))


@pytest.fixture
def chart_service(entry_source: FakeEntrySource) -> ChartService:
    return ChartService(
        entry_source=entry_source,
        sections=build_sections(clock=fixed_clock),
        cache=InMemoryEntryLogCache(clock=fixed_clock),
    )


@pytest.fixture
def container(
    settings: Settings, entry_source: FakeEntrySource, chart_service: ChartService
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        entry_source=entry_source,
        chart_service=chart_service,
        close_resources=close_resources,
    )
