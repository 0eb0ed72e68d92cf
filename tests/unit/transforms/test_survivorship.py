"""Unit tests for survivorship selection."""

from __future__ import annotations

from datetime import date

from transforms.survivorship import select_survivors


def test_select_survivors_keeps_latest_ordering_value() -> None:
    """The record with the most recent ordering value should survive."""
    rows = [("a", date(2024, 1, 1)), ("a", date(2024, 3, 1)), ("a", date(2024, 2, 1))]

    survivors = select_survivors(rows, key_of=lambda row: row[0], order_of=lambda row: row[1])

    assert survivors == [("a", date(2024, 3, 1))]


def test_select_survivors_drops_null_keys() -> None:
    """Records without a key should be discarded."""
    rows = [(None, 1), ("b", 2)]

    survivors = select_survivors(rows, key_of=lambda row: row[0], order_of=lambda row: row[1])

    assert survivors == [("b", 2)]


def test_select_survivors_ranks_null_ordering_lowest() -> None:
    """A present ordering value should outrank a missing one."""
    rows = [("a", None, "first"), ("a", date(2020, 1, 1), "second")]

    survivors = select_survivors(rows, key_of=lambda row: row[0], order_of=lambda row: row[1])

    assert survivors[0][2] == "second"


def test_select_survivors_breaks_ties_by_input_order() -> None:
    """Equal ordering values should keep the earliest record."""
    rows = [("a", 5, "first"), ("a", 5, "second")]

    survivors = select_survivors(rows, key_of=lambda row: row[0], order_of=lambda row: row[1])

    assert survivors[0][2] == "first"


def test_select_survivors_without_ordering_keeps_first_seen() -> None:
    """Entities without an ordering field should keep the first record."""
    rows = [("x", "Germany"), ("y", "France"), ("x", "Spain")]

    survivors = select_survivors(rows, key_of=lambda row: row[0])

    assert survivors == [("x", "Germany"), ("y", "France")]


def test_select_survivors_returns_empty_for_empty_batch() -> None:
    """An empty batch should yield no survivors."""
    survivors = select_survivors([], key_of=lambda row: row)

    assert survivors == []
