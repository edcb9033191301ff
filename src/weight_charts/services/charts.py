"""Chart service wiring the entry source to the section controllers."""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol

from weight_charts.domain.entries import RawEntry
from weight_charts.domain.periods import TimePeriod
from weight_charts.services.cache import EntryLogCache
from weight_charts.services.sections import SectionController, SectionSnapshot

_logger = logging.getLogger(__name__)


class EntrySource(Protocol):
    """Supplier of the raw entry operation log."""

    async def fetch_entries(self) -> list[RawEntry]:
        """Return every operation recorded for the account."""


@dataclass(frozen=True)
class RefreshResult:
    """Outcome of a chart refresh."""

    generation: int
    entries: int
    applied: bool


@dataclass
class ChartService:
    """Rebuilds every chart section from the current entry log.

    Each refresh takes a new generation number. Section snapshots are
    computed off the event loop and only applied if no newer refresh has
    started in the meantime.
    """

    entry_source: EntrySource
    sections: dict[TimePeriod, SectionController]
    cache: EntryLogCache
    cache_ttl_seconds: int = 300
    _generation: int = field(default=0, init=False)

    @property
    def generation(self) -> int:
        return self._generation

    def section(self, period: TimePeriod) -> SectionController:
        """Return the controller for a period."""
        return self.sections[period]

    async def _load_entries(self, generation: int, *, force: bool) -> list[RawEntry]:
        """Return the entry log, from cache unless ``force`` is set."""
        if not force:
            cached = self.cache.get()
            if cached is not None:
                return cached
        entries = await self.entry_source.fetch_entries()
        # A superseded fetch must not overwrite a newer cached log.
        if generation == self._generation:
            self.cache.set(entries, ttl_seconds=self.cache_ttl_seconds)
        return entries

    async def refresh(self, *, force: bool = False) -> RefreshResult:
        """Fetch the entry log and rebuild all sections."""
        self._generation += 1
        generation = self._generation
        entries = await self._load_entries(generation, force=force)
        snapshots = await asyncio.to_thread(self._build_all, entries)
        if generation != self._generation:
            _logger.warning(
                "Discarding stale chart refresh: generation=%s current=%s",
                generation,
                self._generation,
            )
            return RefreshResult(
                generation=generation, entries=len(entries), applied=False
            )
        self._apply_all(snapshots)
        _logger.info(
            "Charts refreshed: generation=%s entries=%s points=%s",
            generation,
            len(entries),
            {period.value: len(snap.points) for period, snap in snapshots.items()},
        )
        return RefreshResult(generation=generation, entries=len(entries), applied=True)

    def process_entries(self, entries: Sequence[RawEntry]) -> None:
        """Synchronously rebuild all sections from an entry log."""
        self._generation += 1
        self._apply_all(self._build_all(entries))

    def _build_all(
        self, entries: Sequence[RawEntry]
    ) -> dict[TimePeriod, SectionSnapshot]:
        return {
            period: section.build(entries)
            for period, section in self.sections.items()
        }

    def _apply_all(self, snapshots: dict[TimePeriod, SectionSnapshot]) -> None:
        for period, snapshot in snapshots.items():
            self.sections[period].apply(snapshot)
