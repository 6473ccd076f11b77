"""Property search with location, price, capacity and availability filters."""

from datetime import datetime
from typing import Any, Optional

from sqlalchemy.engine import Engine

from homestay.db.readers.listings import (
    available_between_clause,
    bookable_clause,
    search_listings,
    text_match_clause,
)
from homestay.db.readers.users import get_user_summaries
from homestay.errors import ValidationError
from homestay.models.listings import Listing
from homestay.utils.datetime import as_utc
from homestay.utils.pagination import page_offset, paginated

MIN_QUERY_LENGTH = 2


def search_properties(
    engine: Engine,
    q: Optional[str] = None,
    city: Optional[str] = None,
    area: Optional[str] = None,
    district: Optional[str] = None,
    property_type: Optional[str] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    bedrooms: Optional[int] = None,
    bathrooms: Optional[float] = None,
    min_guests: Optional[int] = None,
    max_guests: Optional[int] = None,
    check_in: Optional[datetime] = None,
    check_out: Optional[datetime] = None,
    sort_by: str = "created_at",
    sort_order: str = "desc",
    page: int = 1,
    limit: int = 20,
) -> dict[str, Any]:
    """
    Search bookable listings.

    Location filters are case-insensitive substring matches; room filters
    are minimums. When both check_in and check_out are given, listings with
    an active booking overlapping [check_in, check_out) are excluded, using
    the same overlap rule booking creation enforces.

    Raises:
        ValidationError: Bad paging, or check_out not after check_in
    """
    offset = page_offset(page, limit)

    clauses = [bookable_clause()]
    if q and len(q) >= MIN_QUERY_LENGTH:
        clauses.append(text_match_clause(q))
    if city:
        clauses.append(Listing.city.ilike(f"%{city}%"))
    if area:
        clauses.append(Listing.area.ilike(f"%{area}%"))
    if district:
        clauses.append(Listing.district.ilike(f"%{district}%"))
    if property_type:
        clauses.append(Listing.property_type == property_type)
    if min_price is not None:
        clauses.append(Listing.monthly_price >= min_price)
    if max_price is not None:
        clauses.append(Listing.monthly_price <= max_price)
    if bedrooms is not None:
        clauses.append(Listing.bedrooms >= bedrooms)
    if bathrooms is not None:
        clauses.append(Listing.bathrooms >= bathrooms)
    if min_guests is not None:
        clauses.append(Listing.max_guests >= min_guests)
    if max_guests is not None:
        clauses.append(Listing.max_guests <= max_guests)

    if check_in is not None and check_out is not None:
        start, end = as_utc(check_in), as_utc(check_out)
        if start >= end:
            raise ValidationError("Check-out date must be after check-in date")
        clauses.append(available_between_clause(start, end))

    with engine.connect() as conn:
        rows, total = search_listings(
            conn, clauses, offset, limit, sort_by=sort_by, descending=sort_order != "asc"
        )
        hosts = get_user_summaries(conn, (row["host_id"] for row in rows))
    for row in rows:
        row["host"] = hosts.get(row["host_id"])

    return paginated(rows, page, limit, total)
