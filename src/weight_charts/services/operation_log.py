"""Reduction of the create/delete entry log into current entries."""

import logging
from collections.abc import Iterable
from datetime import UTC, datetime

from weight_charts.domain.entries import RawEntry
from weight_charts.services.timestamps import parse_entry_timestamp

_logger = logging.getLogger(__name__)

_EARLIEST = datetime.min.replace(tzinfo=UTC)


def group_by_timestamp(entries: Iterable[RawEntry]) -> dict[str, list[RawEntry]]:
    """Group operations by entry timestamp, keeping first-seen order."""
    groups: dict[str, list[RawEntry]] = {}
    for entry in entries:
        groups.setdefault(entry.entry_timestamp, []).append(entry)
    return groups


def reduce_operation_log(entries: Iterable[RawEntry]) -> list[RawEntry]:
    """Return the current entries described by an operation log.

    A delete anywhere in a timestamp's history removes that entry for
    good. Otherwise its create operation is kept; when several creates
    share a timestamp the one with the latest server timestamp wins.
    """
    current: list[RawEntry] = []
    deleted = 0
    for group in group_by_timestamp(entries).values():
        if any(entry.is_delete for entry in group):
            deleted += 1
            continue
        creates = [entry for entry in group if entry.is_create]
        if not creates:
            continue
        current.append(_latest_create(creates))
    if deleted:
        _logger.debug("Dropped %s deleted entries from the operation log", deleted)
    return current


def _latest_create(creates: list[RawEntry]) -> RawEntry:
    # max() keeps the first of equal keys, so full ties resolve to log order.
    return max(creates, key=_server_instant)


def _server_instant(entry: RawEntry) -> datetime:
    return parse_entry_timestamp(entry.server_timestamp) or _EARLIEST
