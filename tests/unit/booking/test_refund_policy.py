"""
Unit tests for the cancellation refund tiers.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from homestay.booking.refund_policy import NO_REFUND, refund_fraction, refund_tier

NOW = datetime(2025, 2, 1, 12, 0, tzinfo=timezone.utc)


@pytest.mark.unit
@pytest.mark.parametrize(
    ("hours_before", "expected"),
    [
        (72, 1.0),
        (30, 0.5),
        (10, 0.0),
        (48, 0.5),
        (24, 0.0),
        (-5, 0.0),
    ],
)
def test_refund_fraction_by_notice(hours_before: float, expected: float) -> None:
    """Thresholds are strict: exactly 48h is partial and exactly 24h gets nothing."""
    check_in = NOW + timedelta(hours=hours_before)

    assert refund_fraction(check_in, NOW) == expected


@pytest.mark.unit
def test_just_over_48_hours_is_full_refund() -> None:
    check_in = NOW + timedelta(hours=48, seconds=1)

    assert refund_tier(check_in, NOW).name == "full"


@pytest.mark.unit
def test_cancel_after_check_in_gets_no_refund() -> None:
    assert refund_tier(NOW - timedelta(days=1), NOW) is NO_REFUND


@pytest.mark.unit
def test_naive_check_in_is_treated_as_utc() -> None:
    check_in = (NOW + timedelta(hours=72)).replace(tzinfo=None)

    assert refund_fraction(check_in, NOW) == 1.0
