"""Short-lived cache for fetched entry logs."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol

from weight_charts.domain.entries import RawEntry


class EntryLogCache(Protocol):
    """Cache interface for the most recently fetched entry log."""

    def get(self) -> list[RawEntry] | None:
        """Return the cached log if present and not expired."""

    def set(self, entries: list[RawEntry], ttl_seconds: int) -> None:
        """Store a log with a TTL in seconds."""

    def clear(self) -> None:
        """Drop the cached log."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class InMemoryEntryLogCache(EntryLogCache):
    """Process-local entry log cache."""

    clock: Callable[[], datetime] = _utcnow
    _entries: list[RawEntry] | None = field(default=None, init=False)
    _expires_at: datetime | None = field(default=None, init=False)

    def get(self) -> list[RawEntry] | None:
        """Return the cached log unless it has expired."""
        if self._entries is None or self._expires_at is None:
            return None
        if self.clock() >= self._expires_at:
            self.clear()
            return None
        return list(self._entries)

    def set(self, entries: list[RawEntry], ttl_seconds: int) -> None:
        """Store a copy of the log until the TTL elapses."""
        self._entries = list(entries)
        self._expires_at = self.clock() + timedelta(seconds=ttl_seconds)

    def clear(self) -> None:
        self._entries = None
        self._expires_at = None
