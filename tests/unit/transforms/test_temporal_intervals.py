"""Unit tests for validity interval derivation."""

from __future__ import annotations

from datetime import date

from transforms.temporal_intervals import derive_validity_intervals


def _derive(versions):
    return derive_validity_intervals(
        versions,
        group_of=lambda version: version[0],
        start_of=lambda version: version[1],
        end_of=lambda version: version[2],
    )


def test_derive_validity_intervals_closes_each_version_before_successor() -> None:
    """Each version should end the day before the next one starts."""
    versions = [
        ("helmet", date(2013, 7, 1), None),
        ("helmet", date(2011, 7, 1), date(2007, 12, 28)),
        ("helmet", date(2012, 7, 1), date(2008, 12, 27)),
    ]

    intervals = _derive(versions)

    assert [end for _, end in intervals] == [None, date(2012, 6, 30), date(2013, 6, 30)]


def test_derive_validity_intervals_keeps_raw_end_of_latest_version() -> None:
    """The most recent version should keep its raw end date."""
    versions = [("frame", date(2003, 7, 1), date(2020, 1, 1))]

    intervals = _derive(versions)

    assert intervals[0][1] == date(2020, 1, 1)


def test_derive_validity_intervals_isolates_groups() -> None:
    """Versions of different keys should never close each other."""
    versions = [("a", date(2020, 1, 1), None), ("b", date(2021, 1, 1), None)]

    intervals = _derive(versions)

    assert [end for _, end in intervals] == [None, None]


def test_derive_validity_intervals_orders_missing_start_first() -> None:
    """A version without a start date should precede dated versions."""
    versions = [("a", date(2020, 1, 10), None), ("a", None, None)]

    intervals = _derive(versions)

    assert intervals[1][1] == date(2020, 1, 9)


def test_derive_validity_intervals_preserves_input_order() -> None:
    """Results should come back in the order versions were given."""
    versions = [("a", date(2021, 1, 1), None), ("a", date(2020, 1, 1), None)]

    intervals = _derive(versions)

    assert [version for version, _ in intervals] == versions
