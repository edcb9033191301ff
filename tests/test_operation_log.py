"""Tests for operation log reduction."""

from weight_charts.domain.entries import OperationType
from weight_charts.services.operation_log import (
    group_by_timestamp,
    reduce_operation_log,
)
from tests.conftest import make_entry

TS = "2024-01-01T08:00:00Z"


def test_create_then_delete_is_removed() -> None:
    entries = [
        make_entry(TS, weight=700),
        make_entry(TS, weight=700, operation_type=OperationType.DELETE),
    ]

    assert reduce_operation_log(entries) == []


def test_delete_before_create_still_removes() -> None:
    entries = [
        make_entry(TS, operation_type=OperationType.DELETE),
        make_entry(TS, weight=710),
        make_entry("2024-01-02T08:00:00Z", weight=720),
    ]

    current = reduce_operation_log(entries)

    assert [entry.entry_timestamp for entry in current] == ["2024-01-02T08:00:00Z"]


def test_delete_only_and_other_only_groups_are_absent() -> None:
    entries = [
        make_entry(TS, operation_type=OperationType.DELETE),
        make_entry("2024-01-02T08:00:00Z", operation_type=OperationType.OTHER),
    ]

    assert reduce_operation_log(entries) == []


def test_other_operations_are_ignored_next_to_creates() -> None:
    create = make_entry(TS, weight=700)
    entries = [make_entry(TS, operation_type=OperationType.OTHER), create]

    assert reduce_operation_log(entries) == [create]


def test_one_entry_per_timestamp_latest_server_timestamp_wins() -> None:
    older = make_entry(TS, weight=700, server_timestamp="2024-01-01T08:00:05Z")
    newer = make_entry(TS, weight=705, server_timestamp="2024-01-01T09:00:00Z")
    undated = make_entry(TS, weight=710, server_timestamp="garbage")

    current = reduce_operation_log([older, newer, undated])

    assert current == [newer]


def test_full_tie_keeps_first_in_log_order() -> None:
    first = make_entry(TS, weight=700, server_timestamp="2024-01-01T08:00:05Z")
    second = make_entry(TS, weight=705, server_timestamp="2024-01-01T08:00:05Z")

    assert reduce_operation_log([first, second]) == [first]


def test_reduction_is_idempotent() -> None:
    entries = [
        make_entry(TS, weight=700),
        make_entry("2024-01-02T08:00:00Z", weight=710),
        make_entry("2024-01-02T08:00:00Z", operation_type=OperationType.DELETE),
        make_entry("2024-01-03T08:00:00Z", weight=720),
    ]

    once = reduce_operation_log(entries)

    assert reduce_operation_log(once) == once
    assert len(once) == 2


def test_group_by_timestamp_keeps_first_seen_order() -> None:
    entries = [
        make_entry("b"),
        make_entry("a"),
        make_entry("b", operation_type=OperationType.DELETE),
    ]

    groups = group_by_timestamp(entries)

    assert list(groups) == ["b", "a"]
    assert len(groups["b"]) == 2


def test_operation_type_from_raw() -> None:
    assert OperationType.from_raw("CREATE") is OperationType.CREATE
    assert OperationType.from_raw(" delete ") is OperationType.DELETE
    assert OperationType.from_raw("update") is OperationType.OTHER
    assert OperationType.from_raw(None) is OperationType.OTHER
