"""Temporal validity interval derivation.

This module closes the validity interval of every version of a
slowly-changing record at the day before its successor starts.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Callable, Hashable, Iterable, TypeVar

VersionT = TypeVar("VersionT")


def derive_validity_intervals(
    versions: Iterable[VersionT],
    group_of: Callable[[VersionT], Hashable],
    start_of: Callable[[VersionT], date | None],
    end_of: Callable[[VersionT], date | None],
) -> list[tuple[VersionT, date | None]]:
    """Derive an end date for every version.

    Versions are grouped by ``group_of`` and ordered by start date, with
    missing start dates first and ties kept in input order. Each version
    ends the day before the next one starts; the latest version keeps its
    own raw end date, which may be None for an open interval.

    Args:
        versions: Deduplicated versions in input order.
        group_of: Business key shared by versions of one record.
        start_of: Version start date extractor.
        end_of: Raw version end date extractor.

    Returns:
        ``(version, end_date)`` pairs in input order.
    """
    indexed_versions = list(enumerate(versions))
    partitions: dict[Hashable, list[tuple[int, VersionT]]] = {}
    for index, version in indexed_versions:
        partitions.setdefault(group_of(version), []).append((index, version))
    end_dates: dict[int, date | None] = {}
    for partition in partitions.values():
        ordered = sorted(partition, key=lambda item: _start_sort_key(start_of(item[1])))
        for position, (index, version) in enumerate(ordered):
            if position + 1 < len(ordered):
                next_start = start_of(ordered[position + 1][1])
                end_dates[index] = _day_before(next_start, end_of(version))
            else:
                end_dates[index] = end_of(version)
    return [(version, end_dates[index]) for index, version in indexed_versions]


def _start_sort_key(start: date | None) -> tuple[int, date]:
    if start is None:
        return (0, date.min)
    return (1, start)


def _day_before(next_start: date | None, fallback: date | None) -> date | None:
    """Return the day before the successor start, or the raw end date."""
    if next_start is None:
        return fallback
    return next_start - timedelta(days=1)
