"""Synthetic entry log used for demos and local development."""

import random
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from weight_charts.domain.entries import OperationType, RawEntry
from weight_charts.services.charts import EntrySource
from weight_charts.services.timestamps import format_entry_timestamp

SAMPLE_HEIGHT_M = 1.75


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class SampleEntrySource(EntrySource):
    """Random-walk weight history with one morning weigh-in per day.

    Every tenth day also has an evening weigh-in, and every 25th day a
    reading that was logged and then deleted.
    """

    days: int = 1000
    start_weight_kg: float = 82.0
    unit: str = "kg"
    seed: int | None = None
    clock: Callable[[], datetime] = _utcnow

    async def fetch_entries(self) -> list[RawEntry]:
        """Return the generated operation log."""
        return self.generate()

    def generate(self) -> list[RawEntry]:
        """Build the operation log, oldest first."""
        rng = random.Random(self.seed)
        today = self.clock().astimezone(UTC).replace(
            hour=0, minute=0, second=0, microsecond=0
        )
        weight = self.start_weight_kg
        entries: list[RawEntry] = []
        for offset in range(self.days - 1, -1, -1):
            day = today - timedelta(days=offset)
            weight = max(40.0, weight + rng.uniform(-0.4, 0.35))
            morning = day + timedelta(hours=7, minutes=rng.randint(0, 59))
            entries.append(self._create(morning, weight))
            if offset % 10 == 0:
                evening = day + timedelta(hours=21, minutes=rng.randint(0, 59))
                entries.append(self._create(evening, weight + rng.uniform(0.3, 1.0)))
            if offset % 25 == 0:
                mistaken = day + timedelta(hours=12)
                created = self._create(mistaken, weight * 1.8)
                entries.append(created)
                entries.append(
                    RawEntry(
                        operation_type=OperationType.DELETE,
                        entry_timestamp=created.entry_timestamp,
                        server_timestamp=format_entry_timestamp(
                            mistaken + timedelta(minutes=5)
                        ),
                        weight=created.weight,
                        unit=self.unit,
                        source="manual",
                    )
                )
        return entries

    def _create(self, moment: datetime, weight_kg: float) -> RawEntry:
        return RawEntry(
            operation_type=OperationType.CREATE,
            entry_timestamp=format_entry_timestamp(moment),
            server_timestamp=format_entry_timestamp(moment + timedelta(seconds=30)),
            weight=round(weight_kg * 10),
            unit=self.unit,
            source="sample",
            bmi=round(weight_kg / SAMPLE_HEIGHT_M**2 * 10),
        )
