"""
Date-range overlap rules shared by booking creation and search.

Ranges are half-open: ``[check_in, check_out)``. A stay that ends on the
morning another one starts does not overlap it.

The single comparison ``a.start < b.end and b.start < a.end`` covers every
overlap shape: the new range starting inside an existing one, ending inside
it, or swallowing it whole.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import and_
from sqlalchemy.sql.elements import ColumnElement

from homestay.booking.status import BLOCKING_STATUSES
from homestay.models.bookings import Booking


def ranges_overlap(
    start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime
) -> bool:
    return start_a < end_b and start_b < end_a


def overlapping_booking_clause(check_in: datetime, check_out: datetime) -> ColumnElement[Any]:
    """
    SQL predicate matching bookings that still hold dates inside the range.

    Args:
        check_in: Requested range start
        check_out: Requested range end (exclusive)

    Returns:
        ColumnElement: WHERE clause over the bookings table
    """
    return and_(
        Booking.status.in_([status.value for status in BLOCKING_STATUSES]),
        Booking.check_in < check_out,
        Booking.check_out > check_in,
    )
