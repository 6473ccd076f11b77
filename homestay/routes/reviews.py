from typing import Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.engine import Engine

from homestay.dependencies import get_current_user, get_db_engine
from homestay.errors import DomainError
from homestay.schemas.reviews import ReviewCreatePayload, ReviewUpdatePayload
from homestay.services.reviews import (
    create_review,
    find_review,
    get_listing_reviews,
    get_user_reviews,
    modify_review,
    remove_review,
)

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post("/reviews", status_code=status.HTTP_201_CREATED)
def create(
    payload: ReviewCreatePayload,
    user: dict[str, Any] = Depends(get_current_user),
    db: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """
    Review a completed stay, a listing or another user.

    Reviews tied to a booking require the booking to be COMPLETED and the
    reviewer to be its guest; one review per booking.
    """
    try:
        return create_review(db, user["id"], payload)
    except DomainError:
        raise
    except Exception as e:
        logger.exception("review_creation_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/reviews/listing/{listing_id}")
def for_listing(
    listing_id: str,
    page: int = Query(1),
    limit: int = Query(20),
    db: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    try:
        return get_listing_reviews(db, listing_id, page=page, limit=limit)
    except DomainError:
        raise
    except Exception as e:
        logger.exception("listing_reviews_fetch_failed", listing_id=listing_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/reviews/user/{user_id}")
def for_user(
    user_id: str,
    review_type: str = Query("received", alias="type", pattern="^(received|given)$"),
    page: int = Query(1),
    limit: int = Query(20),
    db: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    try:
        return get_user_reviews(
            db, user_id, received=review_type == "received", page=page, limit=limit
        )
    except DomainError:
        raise
    except Exception as e:
        logger.exception("user_reviews_fetch_failed", user_id=user_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/reviews/{review_id}")
def get_one(review_id: str, db: Engine = Depends(get_db_engine)) -> dict[str, Any]:
    try:
        return find_review(db, review_id)
    except DomainError:
        raise
    except Exception as e:
        logger.exception("review_fetch_failed", review_id=review_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.patch("/reviews/{review_id}")
def update(
    review_id: str,
    payload: ReviewUpdatePayload,
    user: dict[str, Any] = Depends(get_current_user),
    db: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    try:
        return modify_review(db, review_id, user["id"], payload)
    except DomainError:
        raise
    except Exception as e:
        logger.exception("review_update_failed", review_id=review_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/reviews/{review_id}")
def delete(
    review_id: str,
    user: dict[str, Any] = Depends(get_current_user),
    db: Engine = Depends(get_db_engine),
) -> dict[str, str]:
    try:
        return remove_review(db, review_id, user["id"])
    except DomainError:
        raise
    except Exception as e:
        logger.exception("review_delete_failed", review_id=review_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")
