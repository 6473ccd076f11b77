from typing import Any

import structlog
from sqlalchemy import update
from sqlalchemy.engine import Connection

from homestay.db._rows import insert_row, update_row
from homestay.models.listings import Listing

logger = structlog.get_logger(__name__)


def insert_listing(conn: Connection, host_id: str, values: dict[str, Any]) -> str:
    """
    Insert a new listing for a host. Listings always start as inactive drafts.

    Args:
        conn: Active database connection (within transaction)
        host_id: Owner of the listing
        values: Listing attributes

    Returns:
        str: New listing id
    """
    listing_id = insert_row(
        conn, Listing, {**values, "host_id": host_id, "status": "draft", "is_active": False}
    )
    logger.info("listing_inserted", listing_id=listing_id, host_id=host_id)
    return listing_id


def update_listing(conn: Connection, listing_id: str, values: dict[str, Any]) -> int:
    return update_row(conn, Listing, listing_id, values)


def increment_view_count(conn: Connection, listing_id: str) -> None:
    conn.execute(
        update(Listing)
        .where(Listing.id == listing_id)
        .values(view_count=Listing.view_count + 1)
    )


def set_rating(conn: Connection, listing_id: str, average: float, count: int) -> None:
    update_row(conn, Listing, listing_id, {"average_rating": average, "review_count": count})
