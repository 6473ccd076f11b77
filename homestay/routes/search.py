from datetime import datetime
from typing import Any, Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.engine import Engine

from homestay.dependencies import get_db_engine
from homestay.errors import DomainError
from homestay.services.search import search_properties

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get("/search/properties")
def search(
    q: Optional[str] = None,
    city: Optional[str] = None,
    area: Optional[str] = None,
    district: Optional[str] = None,
    property_type: Optional[str] = Query(None, alias="propertyType"),
    min_price: Optional[float] = Query(None, alias="minPrice"),
    max_price: Optional[float] = Query(None, alias="maxPrice"),
    bedrooms: Optional[int] = None,
    bathrooms: Optional[float] = None,
    min_guests: Optional[int] = Query(None, alias="minGuests"),
    max_guests: Optional[int] = Query(None, alias="maxGuests"),
    check_in: Optional[datetime] = Query(None, alias="checkIn"),
    check_out: Optional[datetime] = Query(None, alias="checkOut"),
    sort_by: str = Query("created_at", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
    page: int = Query(1),
    limit: int = Query(20),
    db: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """
    Search bookable listings.

    When checkIn and checkOut are both given, listings with an active
    booking overlapping that range are left out.
    """
    try:
        return search_properties(
            db,
            q=q,
            city=city,
            area=area,
            district=district,
            property_type=property_type,
            min_price=min_price,
            max_price=max_price,
            bedrooms=bedrooms,
            bathrooms=bathrooms,
            min_guests=min_guests,
            max_guests=max_guests,
            check_in=check_in,
            check_out=check_out,
            sort_by=sort_by,
            sort_order=sort_order,
            page=page,
            limit=limit,
        )
    except DomainError:
        raise
    except Exception as e:
        logger.exception("property_search_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")
