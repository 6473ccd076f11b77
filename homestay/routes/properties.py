from typing import Any, Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.engine import Engine

from homestay.dependencies import get_current_user, get_db_engine, get_optional_user
from homestay.errors import DomainError
from homestay.schemas.listings import ListingCreatePayload, ListingUpdatePayload
from homestay.services.listings import (
    create_listing,
    delete_listing,
    get_listing_details,
    list_host_listings,
    list_listings,
    modify_listing,
)

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post("/properties", status_code=status.HTTP_201_CREATED)
def create(
    payload: ListingCreatePayload,
    user: dict[str, Any] = Depends(get_current_user),
    db: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """
    Create a listing as a draft.

    The host publishes it later by setting its status to active.
    """
    try:
        return create_listing(db, user["id"], payload)
    except DomainError:
        raise
    except Exception as e:
        logger.exception("property_creation_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/properties")
def list_all(
    page: int = Query(1),
    limit: int = Query(20),
    search: Optional[str] = None,
    city: Optional[str] = None,
    property_type: Optional[str] = Query(None, alias="propertyType"),
    min_price: Optional[float] = Query(None, alias="minPrice"),
    max_price: Optional[float] = Query(None, alias="maxPrice"),
    bedrooms: Optional[int] = None,
    bathrooms: Optional[float] = None,
    guests: Optional[int] = None,
    sort_by: str = Query("created_at", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
    db: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    try:
        return list_listings(
            db,
            page=page,
            limit=limit,
            search=search,
            city=city,
            property_type=property_type,
            min_price=min_price,
            max_price=max_price,
            bedrooms=bedrooms,
            bathrooms=bathrooms,
            min_guests=guests,
            sort_by=sort_by,
            sort_order=sort_order,
        )
    except DomainError:
        raise
    except Exception as e:
        logger.exception("property_list_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


# Declared before /properties/{listing_id} so the literal path wins
@router.get("/properties/host/my-properties")
def my_properties(
    status_filter: Optional[str] = Query(None, alias="status"),
    page: int = Query(1),
    limit: int = Query(20),
    user: dict[str, Any] = Depends(get_current_user),
    db: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    try:
        return list_host_listings(db, user["id"], status=status_filter, page=page, limit=limit)
    except DomainError:
        raise
    except Exception as e:
        logger.exception("host_properties_fetch_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/properties/{listing_id}")
def get_one(
    listing_id: str,
    user: Optional[dict[str, Any]] = Depends(get_optional_user),
    db: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    try:
        return get_listing_details(db, listing_id, viewer_id=user["id"] if user else None)
    except DomainError:
        raise
    except Exception as e:
        logger.exception("property_fetch_failed", listing_id=listing_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.patch("/properties/{listing_id}")
def update(
    listing_id: str,
    payload: ListingUpdatePayload,
    user: dict[str, Any] = Depends(get_current_user),
    db: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    try:
        return modify_listing(db, listing_id, user["id"], payload)
    except DomainError:
        raise
    except Exception as e:
        logger.exception("property_update_failed", listing_id=listing_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/properties/{listing_id}")
def delete(
    listing_id: str,
    user: dict[str, Any] = Depends(get_current_user),
    db: Engine = Depends(get_db_engine),
) -> dict[str, str]:
    try:
        return delete_listing(db, listing_id, user["id"])
    except DomainError:
        raise
    except Exception as e:
        logger.exception("property_delete_failed", listing_id=listing_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")
