from typing import Any, Optional

from sqlalchemy import func, select
from sqlalchemy.engine import Connection

from homestay.db._rows import count_rows, fetch_all, fetch_one
from homestay.models.reviews import Review


def get_review(conn: Connection, review_id: str) -> Optional[dict[str, Any]]:
    return fetch_one(conn, select(Review).where(Review.id == review_id))


def find_booking_review(
    conn: Connection, booking_id: str, reviewer_id: str
) -> Optional[dict[str, Any]]:
    stmt = select(Review).where(Review.booking_id == booking_id, Review.reviewer_id == reviewer_id)
    return fetch_one(conn, stmt)


def list_reviews(
    conn: Connection, column: str, value: str, offset: int, limit: int
) -> tuple[list[dict[str, Any]], int]:
    """
    Page through reviews filtered on one id column, newest first.

    Args:
        conn: Active database connection
        column: listing_id, reviewer_id or reviewee_id
        value: Id to match
        offset: Rows to skip
        limit: Page size

    Returns:
        tuple: (rows for the page, total matching rows)
    """
    stmt = select(Review).where(getattr(Review, column) == value)
    total = count_rows(conn, stmt)
    rows = fetch_all(
        conn, stmt.order_by(Review.created_at.desc(), Review.id).offset(offset).limit(limit)
    )
    return rows, total


def listing_rating(conn: Connection, listing_id: str) -> tuple[float, int]:
    """Average overall rating and review count for a listing (0.0, 0 when unreviewed)."""
    average, count = conn.execute(
        select(func.avg(Review.overall), func.count(Review.id)).where(
            Review.listing_id == listing_id
        )
    ).one()
    return float(average or 0.0), count
