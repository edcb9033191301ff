"""Timestamp parsing for entry log records."""

import re
from datetime import UTC, datetime
from functools import lru_cache

# Tried in order; the first pattern that matches wins.
_PATTERNS = (
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M:%S.%f%z",
    "%Y-%m-%d %H:%M:%S%z",
    "%Y-%m-%d %H:%M:%S.%f",
    "%Y-%m-%d %H:%M:%S",
)

# strptime's %f takes at most six digits.
_LONG_FRACTION = re.compile(r"(\.\d{6})\d+")


@lru_cache(maxsize=8192)
def parse_entry_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO-8601-like timestamp into a UTC instant.

    Naive timestamps are read as UTC. Returns ``None`` when no known
    pattern matches.
    """
    if not value:
        return None
    candidate = _LONG_FRACTION.sub(r"\1", value.strip())
    for pattern in _PATTERNS:
        try:
            parsed = datetime.strptime(candidate, pattern)
        except ValueError:
            continue
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=UTC)
        return parsed.astimezone(UTC)
    return None


def format_entry_timestamp(value: datetime) -> str:
    """Format an instant the way the entry log writes timestamps."""
    return value.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")
