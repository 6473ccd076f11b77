"""
Unit tests for night counting and price composition.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from homestay.booking.pricing import calculate_price, count_nights


@pytest.mark.unit
def test_price_breakdown_for_five_nights_with_cleaning_fee() -> None:
    """100/night for 5 nights plus a 50 cleaning fee."""
    price = calculate_price(100, 5, 50)

    assert price.subtotal == 500
    assert price.service_fee == pytest.approx(70)
    assert price.taxes == pytest.approx(25)
    assert price.cleaning_fee == 50
    assert price.total_price == pytest.approx(645)


@pytest.mark.unit
def test_missing_cleaning_fee_counts_as_zero() -> None:
    price = calculate_price(100, 2, None)

    assert price.cleaning_fee == 0
    assert price.total_price == pytest.approx(238)


@pytest.mark.unit
def test_price_is_deterministic() -> None:
    assert calculate_price(3000, 28, 30) == calculate_price(3000, 28, 30)


@pytest.mark.unit
def test_twenty_eight_night_stay_totals() -> None:
    price = calculate_price(3000, 28, 150)

    assert price.subtotal == 84000
    assert price.service_fee == pytest.approx(11760)
    assert price.taxes == pytest.approx(4200)
    assert price.total_price == pytest.approx(100110)


@pytest.mark.unit
def test_count_nights_whole_days() -> None:
    check_in = datetime(2025, 3, 1, tzinfo=timezone.utc)
    assert count_nights(check_in, check_in + timedelta(days=28)) == 28


@pytest.mark.unit
def test_count_nights_rounds_partial_days_up() -> None:
    check_in = datetime(2025, 3, 1, 15, tzinfo=timezone.utc)
    check_out = datetime(2025, 3, 3, 11, tzinfo=timezone.utc)

    assert count_nights(check_in, check_out) == 2
    assert count_nights(check_in, check_in + timedelta(hours=1)) == 1
