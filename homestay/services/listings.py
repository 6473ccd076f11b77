"""Listing management for hosts and public listing reads."""

from typing import Any, Optional

import structlog
from sqlalchemy.engine import Connection, Engine

from homestay.db.readers.listings import (
    bookable_clause,
    get_listing,
    search_listings,
    text_match_clause,
)
from homestay.db.readers.users import get_user, get_user_summaries
from homestay.db.writers.listings import increment_view_count, insert_listing, update_listing
from homestay.errors import ForbiddenError, NotFoundError, ValidationError
from homestay.models.listings import Listing
from homestay.schemas.listings import ListingCreatePayload, ListingUpdatePayload
from homestay.utils.datetime import utc_now
from homestay.utils.pagination import page_offset, paginated

logger = structlog.get_logger(__name__)

DELETED = "deleted"


def _with_host(conn: Connection, listings: list[dict[str, Any]]) -> list[dict[str, Any]]:
    hosts = get_user_summaries(conn, (listing["host_id"] for listing in listings))
    for listing in listings:
        listing["host"] = hosts.get(listing["host_id"])
    return listings


def create_listing(engine: Engine, host_id: str, payload: ListingCreatePayload) -> dict[str, Any]:
    """
    Create a draft listing owned by the user.

    Raises:
        ForbiddenError: If the user has not become a host
    """
    with engine.begin() as conn:
        host = get_user(conn, host_id)
        if host is None or not host["is_host"]:
            raise ForbiddenError("Only hosts can create properties")
        listing_id = insert_listing(conn, host_id, payload.model_dump())
        listing = _with_host(conn, [get_listing(conn, listing_id)])[0]

    return listing


def get_listing_details(
    engine: Engine, listing_id: str, viewer_id: Optional[str] = None
) -> dict[str, Any]:
    """
    Fetch a listing; views by anyone but its host are counted.

    Drafts, inactive and deleted listings are only visible to their host.
    """
    with engine.begin() as conn:
        listing = get_listing(conn, listing_id)
        if listing is None or (
            listing["host_id"] != viewer_id
            and (listing["status"] != "active" or not listing["is_active"])
        ):
            raise NotFoundError("Property not found")

        if viewer_id != listing["host_id"]:
            increment_view_count(conn, listing_id)
            listing["view_count"] += 1

        return _with_host(conn, [listing])[0]


def list_listings(
    engine: Engine,
    page: int = 1,
    limit: int = 20,
    search: Optional[str] = None,
    city: Optional[str] = None,
    property_type: Optional[str] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    bedrooms: Optional[int] = None,
    bathrooms: Optional[float] = None,
    min_guests: Optional[int] = None,
    sort_by: str = "created_at",
    sort_order: str = "desc",
) -> dict[str, Any]:
    """Bookable listings matching the given filters, paginated."""
    offset = page_offset(page, limit)

    clauses = [bookable_clause()]
    if search:
        clauses.append(text_match_clause(search))
    if city:
        clauses.append(Listing.city == city)
    if property_type:
        clauses.append(Listing.property_type == property_type)
    if min_price is not None:
        clauses.append(Listing.monthly_price >= min_price)
    if max_price is not None:
        clauses.append(Listing.monthly_price <= max_price)
    if bedrooms is not None:
        clauses.append(Listing.bedrooms == bedrooms)
    if bathrooms is not None:
        clauses.append(Listing.bathrooms == bathrooms)
    if min_guests is not None:
        clauses.append(Listing.max_guests >= min_guests)

    with engine.connect() as conn:
        rows, total = search_listings(
            conn, clauses, offset, limit, sort_by=sort_by, descending=sort_order != "asc"
        )
        _with_host(conn, rows)
    return paginated(rows, page, limit, total)


def list_host_listings(
    engine: Engine, host_id: str, status: Optional[str] = None, page: int = 1, limit: int = 20
) -> dict[str, Any]:
    """All of a host's listings, including drafts; deleted ones only when asked for."""
    offset = page_offset(page, limit)
    clauses = [Listing.host_id == host_id]
    if status:
        clauses.append(Listing.status == status)
    else:
        clauses.append(Listing.status != DELETED)

    with engine.connect() as conn:
        rows, total = search_listings(conn, clauses, offset, limit)
    return paginated(rows, page, limit, total)


def _owned_listing(conn: Connection, listing_id: str, host_id: str, action: str) -> dict[str, Any]:
    listing = get_listing(conn, listing_id, for_update=True)
    if listing is None or listing["status"] == DELETED:
        raise NotFoundError("Property not found")
    if listing["host_id"] != host_id:
        raise ForbiddenError(f"You can only {action} your own properties")
    return listing


def modify_listing(
    engine: Engine, listing_id: str, host_id: str, payload: ListingUpdatePayload
) -> dict[str, Any]:
    """
    Apply a host's changes to their listing.

    Setting ``status`` without ``is_active`` keeps the two in step, so
    publishing a listing (status ``active``) also makes it bookable.

    Raises:
        NotFoundError: Unknown or deleted listing
        ForbiddenError: Listing belongs to another host
        ValidationError: Resulting min_nights exceeds max_nights
    """
    changes = payload.model_dump(exclude_unset=True)
    if "status" in changes and "is_active" not in changes:
        changes["is_active"] = changes["status"] == "active"

    with engine.begin() as conn:
        listing = _owned_listing(conn, listing_id, host_id, "update")

        merged = {**listing, **changes}
        if merged["max_nights"] is not None and merged["min_nights"] > merged["max_nights"]:
            raise ValidationError("min_nights cannot exceed max_nights")

        if changes:
            update_listing(conn, listing_id, changes)
        updated = _with_host(conn, [get_listing(conn, listing_id)])[0]

    logger.info("listing_updated", listing_id=listing_id, fields=sorted(changes))
    return updated


def delete_listing(engine: Engine, listing_id: str, host_id: str) -> dict[str, str]:
    """Soft-delete a listing. Existing bookings are left untouched."""
    with engine.begin() as conn:
        _owned_listing(conn, listing_id, host_id, "delete")
        update_listing(
            conn, listing_id, {"status": DELETED, "is_active": False, "deleted_at": utc_now()}
        )

    logger.info("listing_deleted", listing_id=listing_id, host_id=host_id)
    return {"message": "Property deleted successfully"}
