from datetime import datetime
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.engine import Connection

from homestay.booking.availability import overlapping_booking_clause
from homestay.booking.status import BookingStatus
from homestay.db._rows import count_rows, fetch_all, fetch_one
from homestay.models.bookings import Booking

# Which column ties a booking to the user listing it
PARTY_COLUMNS = {
    "guest": Booking.guest_id,
    "host": Booking.host_id,
}


def get_booking(
    conn: Connection, booking_id: str, for_update: bool = False
) -> Optional[dict[str, Any]]:
    """
    Fetch a booking row by id.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        booking_id (str): Booking id.
        for_update (bool): Lock the row for a status change.

    Returns:
        Optional[dict[str, Any]]: Booking row or None if not found.
    """
    stmt = select(Booking).where(Booking.id == booking_id)
    if for_update:
        stmt = stmt.with_for_update()
    return fetch_one(conn, stmt)


def find_overlapping_booking(
    conn: Connection, listing_id: str, check_in: datetime, check_out: datetime
) -> Optional[dict[str, Any]]:
    """
    Find one active booking on the listing that overlaps [check_in, check_out).

    Args:
        conn (Connection): Connection inside the create transaction.
        listing_id (str): Listing being booked.
        check_in (datetime): Requested start (UTC).
        check_out (datetime): Requested end, exclusive (UTC).

    Returns:
        Optional[dict[str, Any]]: The first clashing booking, or None when free.
    """
    stmt = (
        select(Booking.id, Booking.booking_code, Booking.check_in, Booking.check_out)
        .where(Booking.listing_id == listing_id, overlapping_booking_clause(check_in, check_out))
        .limit(1)
    )
    return fetch_one(conn, stmt)


def list_bookings_for_party(
    conn: Connection,
    party: str,
    user_id: str,
    status: Optional[str],
    offset: int,
    limit: int,
) -> tuple[list[dict[str, Any]], int]:
    """
    Page through a guest's or host's bookings, newest first.

    Args:
        conn: Active database connection
        party: "guest" or "host"
        user_id: The guest or host
        status: Optional status filter
        offset: Rows to skip
        limit: Page size

    Returns:
        tuple: (rows for the page, total matching rows)
    """
    stmt = select(Booking).where(PARTY_COLUMNS[party] == user_id)
    if status:
        stmt = stmt.where(Booking.status == status)

    total = count_rows(conn, stmt)
    rows = fetch_all(
        conn,
        stmt.order_by(Booking.created_at.desc(), Booking.id).offset(offset).limit(limit),
    )
    return rows, total


def list_completed_host_bookings(
    conn: Connection, host_id: str, start: datetime, end: datetime
) -> list[dict[str, Any]]:
    """Completed bookings for a host with check-out in [start, end)."""
    stmt = select(Booking).where(
        Booking.host_id == host_id,
        Booking.status == BookingStatus.COMPLETED.value,
        Booking.check_out >= start,
        Booking.check_out < end,
    )
    return fetch_all(conn, stmt)

