from datetime import datetime
from typing import Any, Iterable, Optional

from sqlalchemy import or_, select
from sqlalchemy.engine import Connection
from sqlalchemy.sql.elements import ColumnElement

from homestay.booking.availability import overlapping_booking_clause
from homestay.db._rows import count_rows, fetch_all, fetch_one
from homestay.models.bookings import Booking
from homestay.models.listings import Listing

LISTING_SUMMARY_COLUMNS = (
    Listing.id,
    Listing.title,
    Listing.property_type,
    Listing.city,
    Listing.area,
    Listing.photos,
    Listing.monthly_price,
)

SORT_COLUMNS = {
    "created_at": Listing.created_at,
    "price": Listing.monthly_price,
    "rating": Listing.average_rating,
    "views": Listing.view_count,
}


def get_listing(
    conn: Connection, listing_id: str, for_update: bool = False
) -> Optional[dict[str, Any]]:
    """
    Fetch a listing row by id.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        listing_id (str): Listing id.
        for_update (bool): Lock the row until the surrounding transaction ends.
            Booking creation uses this to serialize creates per listing.

    Returns:
        Optional[dict[str, Any]]: Listing row or None if not found.
    """
    stmt = select(Listing).where(Listing.id == listing_id)
    if for_update:
        stmt = stmt.with_for_update()
    return fetch_one(conn, stmt)


def get_listing_summaries(
    conn: Connection, listing_ids: Iterable[str]
) -> dict[str, dict[str, Any]]:
    ids = {listing_id for listing_id in listing_ids if listing_id}
    if not ids:
        return {}
    rows = fetch_all(conn, select(*LISTING_SUMMARY_COLUMNS).where(Listing.id.in_(ids)))
    return {row["id"]: row for row in rows}


def bookable_clause() -> ColumnElement[Any]:
    return Listing.is_active.is_(True) & (Listing.status == "active")


def text_match_clause(query: str) -> ColumnElement[Any]:
    pattern = f"%{query}%"
    return or_(
        Listing.title.ilike(pattern),
        Listing.description.ilike(pattern),
        Listing.city.ilike(pattern),
        Listing.area.ilike(pattern),
        Listing.district.ilike(pattern),
    )


def available_between_clause(check_in: datetime, check_out: datetime) -> ColumnElement[Any]:
    """Listings with no blocking booking overlapping [check_in, check_out)."""
    taken = select(Booking.listing_id).where(overlapping_booking_clause(check_in, check_out))
    return Listing.id.not_in(taken)


def search_listings(
    conn: Connection,
    clauses: list[ColumnElement[Any]],
    offset: int,
    limit: int,
    sort_by: str = "created_at",
    descending: bool = True,
) -> tuple[list[dict[str, Any]], int]:
    """
    Page through listings matching all given clauses.

    Args:
        conn: Active database connection
        clauses: WHERE clauses, AND-ed together
        offset: Rows to skip
        limit: Page size
        sort_by: Key of SORT_COLUMNS (unknown keys fall back to created_at)
        descending: Sort direction

    Returns:
        tuple: (rows for the page, total matching rows)
    """
    column = SORT_COLUMNS.get(sort_by, Listing.created_at)
    order = column.desc() if descending else column.asc()

    stmt = select(Listing).where(*clauses)
    total = count_rows(conn, stmt)
    rows = fetch_all(conn, stmt.order_by(order, Listing.id).offset(offset).limit(limit))
    return rows, total
