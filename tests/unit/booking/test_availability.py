"""
Unit tests for half-open date range overlap.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from homestay.booking.availability import ranges_overlap


def day(n: int) -> datetime:
    return datetime(2025, 3, n, tzinfo=timezone.utc)


EXISTING = (day(10), day(15))


@pytest.mark.unit
@pytest.mark.parametrize(
    ("start", "end"),
    [
        (day(12), day(18)),  # starts inside
        (day(8), day(12)),  # ends inside
        (day(8), day(20)),  # covers
        (day(11), day(13)),  # inside
        (day(10), day(15)),  # identical
    ],
)
def test_overlapping_shapes(start: datetime, end: datetime) -> None:
    assert ranges_overlap(start, end, *EXISTING)
    assert ranges_overlap(*EXISTING, start, end)


@pytest.mark.unit
def test_back_to_back_stays_do_not_overlap() -> None:
    assert not ranges_overlap(day(15), day(20), *EXISTING)
    assert not ranges_overlap(day(5), day(10), *EXISTING)


@pytest.mark.unit
def test_disjoint_ranges_do_not_overlap() -> None:
    assert not ranges_overlap(day(1), day(3), *EXISTING)
