"""Reviews of listings and users, with listing rating upkeep."""

from typing import Any, Optional

import structlog
from sqlalchemy.engine import Connection, Engine

from homestay.booking.status import BookingStatus
from homestay.db.readers.bookings import get_booking
from homestay.db.readers.listings import get_listing, get_listing_summaries
from homestay.db.readers.reviews import (
    find_booking_review,
    get_review,
    list_reviews,
    listing_rating,
)
from homestay.db.readers.users import get_user, get_user_summaries
from homestay.db.writers.listings import set_rating
from homestay.db.writers.reviews import delete_review, insert_review, update_review
from homestay.errors import NotFoundError, ValidationError
from homestay.schemas.reviews import ReviewCreatePayload, ReviewUpdatePayload
from homestay.utils.pagination import page_offset, paginated

logger = structlog.get_logger(__name__)


def _refresh_listing_rating(conn: Connection, listing_id: Optional[str]) -> None:
    if not listing_id:
        return
    average, count = listing_rating(conn, listing_id)
    set_rating(conn, listing_id, average, count)


def _with_parties(conn: Connection, reviews: list[dict[str, Any]]) -> list[dict[str, Any]]:
    users = get_user_summaries(
        conn, [r["reviewer_id"] for r in reviews] + [r["reviewee_id"] for r in reviews]
    )
    listings = get_listing_summaries(conn, (r["listing_id"] for r in reviews))
    for review in reviews:
        review["reviewer"] = users.get(review["reviewer_id"])
        review["reviewee"] = users.get(review["reviewee_id"])
        review["listing"] = listings.get(review["listing_id"])
    return reviews


def create_review(engine: Engine, reviewer_id: str, payload: ReviewCreatePayload) -> dict[str, Any]:
    """
    Store a review and refresh the reviewed listing's rating.

    A review tied to a booking must come from that booking's guest after the
    stay is COMPLETED, once per booking. Its listing defaults to the booking's.

    Raises:
        ValidationError: Booking not completed by this guest, duplicate review,
            or reviewing oneself
        NotFoundError: Unknown listing or reviewee
    """
    values = payload.model_dump()

    with engine.begin() as conn:
        if payload.booking_id:
            booking = get_booking(conn, payload.booking_id)
            if (
                booking is None
                or booking["guest_id"] != reviewer_id
                or booking["status"] != BookingStatus.COMPLETED.value
            ):
                raise ValidationError("Booking not found or not completed")
            if find_booking_review(conn, payload.booking_id, reviewer_id):
                raise ValidationError("Review already exists for this booking")
            values["listing_id"] = values["listing_id"] or booking["listing_id"]

        if values["listing_id"] and get_listing(conn, values["listing_id"]) is None:
            raise NotFoundError("Property not found")
        if payload.reviewee_id:
            if payload.reviewee_id == reviewer_id:
                raise ValidationError("You cannot review yourself")
            if get_user(conn, payload.reviewee_id) is None:
                raise NotFoundError("User not found")

        review_id = insert_review(conn, {**values, "reviewer_id": reviewer_id})
        _refresh_listing_rating(conn, values["listing_id"])
        review = _with_parties(conn, [get_review(conn, review_id)])[0]

    logger.info(
        "review_created",
        review_id=review_id,
        listing_id=values["listing_id"],
        overall=payload.overall,
    )
    return review


def get_listing_reviews(
    engine: Engine, listing_id: str, page: int = 1, limit: int = 20
) -> dict[str, Any]:
    offset = page_offset(page, limit)
    with engine.connect() as conn:
        rows, total = list_reviews(conn, "listing_id", listing_id, offset, limit)
        _with_parties(conn, rows)
    return paginated(rows, page, limit, total)


def get_user_reviews(
    engine: Engine, user_id: str, received: bool = True, page: int = 1, limit: int = 20
) -> dict[str, Any]:
    """Reviews a user received (default) or wrote."""
    offset = page_offset(page, limit)
    column = "reviewee_id" if received else "reviewer_id"
    with engine.connect() as conn:
        rows, total = list_reviews(conn, column, user_id, offset, limit)
        _with_parties(conn, rows)
    return paginated(rows, page, limit, total)


def find_review(engine: Engine, review_id: str) -> dict[str, Any]:
    with engine.connect() as conn:
        review = get_review(conn, review_id)
        if review is None:
            raise NotFoundError("Review not found")
        return _with_parties(conn, [review])[0]


def _own_review(conn: Connection, review_id: str, user_id: str) -> dict[str, Any]:
    review = get_review(conn, review_id)
    if review is None or review["reviewer_id"] != user_id:
        raise NotFoundError("Review not found or not authorized")
    return review


def modify_review(
    engine: Engine, review_id: str, user_id: str, payload: ReviewUpdatePayload
) -> dict[str, Any]:
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    with engine.begin() as conn:
        review = _own_review(conn, review_id, user_id)
        if changes:
            update_review(conn, review_id, changes)
            _refresh_listing_rating(conn, review["listing_id"])
        return _with_parties(conn, [get_review(conn, review_id)])[0]


def remove_review(engine: Engine, review_id: str, user_id: str) -> dict[str, str]:
    with engine.begin() as conn:
        review = _own_review(conn, review_id, user_id)
        delete_review(conn, review_id)
        _refresh_listing_rating(conn, review["listing_id"])

    logger.info("review_deleted", review_id=review_id)
    return {"message": "Review deleted successfully"}
