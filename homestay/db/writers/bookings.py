from typing import Any

import structlog
from sqlalchemy.engine import Connection

from homestay.db._rows import insert_row, update_row
from homestay.models.bookings import Booking

logger = structlog.get_logger(__name__)

# Raised by PostgreSQL when two active bookings on a listing overlap
OVERLAP_CONSTRAINT = "bookings_no_overlap"


def insert_booking(conn: Connection, values: dict[str, Any]) -> str:
    """
    Insert a booking row.

    Must run inside the transaction that checked for overlaps, after the
    listing row was locked.

    Args:
        conn: Active database connection (within transaction)
        values: Complete booking column values

    Returns:
        str: New booking id
    """
    booking_id = insert_row(conn, Booking, values)
    logger.info(
        "booking_inserted",
        booking_id=booking_id,
        listing_id=values.get("listing_id"),
        booking_code=values.get("booking_code"),
    )
    return booking_id


def update_booking(conn: Connection, booking_id: str, values: dict[str, Any]) -> int:
    return update_row(conn, Booking, booking_id, values)
