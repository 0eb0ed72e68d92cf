"""Survivorship selection transform.

This module collapses duplicate raw records into one survivor per
natural key. It is the first rule stage of every entity pipeline.
"""

from __future__ import annotations

from typing import Any, Callable, Hashable, Iterable, TypeVar

RecordT = TypeVar("RecordT")


def select_survivors(
    records: Iterable[RecordT],
    key_of: Callable[[RecordT], Hashable | None],
    order_of: Callable[[RecordT], Any] | None = None,
) -> list[RecordT]:
    """Select one record per natural key.

    Records whose key is ``None`` are dropped. Among records sharing a key
    the one with the greatest ordering value wins; ``None`` ordering values
    rank below any present value, and ties keep the earliest record seen.
    Without ``order_of`` the first record in input order survives.

    Args:
        records: Raw records in input order.
        key_of: Natural key extractor.
        order_of: Optional ordering field extractor.

    Returns:
        Survivors ordered by first appearance of their key.
    """
    survivors: dict[Hashable, RecordT] = {}
    for record in records:
        key = key_of(record)
        if key is None:
            continue
        if key not in survivors:
            survivors[key] = record
            continue
        if order_of is not None and _ranks_higher(order_of(record), order_of(survivors[key])):
            survivors[key] = record
    return list(survivors.values())


def _ranks_higher(candidate: Any, current: Any) -> bool:
    """Return whether candidate strictly outranks current.

    Args:
        candidate: Ordering value of the challenger.
        current: Ordering value of the retained record.

    Returns:
        True when candidate should replace current.
    """
    if candidate is None:
        return False
    if current is None:
        return True
    return bool(candidate > current)
