"""
Booking engine orchestration.

Creation runs the request checks, the overlap query and the insert inside a
single transaction that first locks the listing row, so two concurrent
requests for the same listing cannot both pass the overlap check. Every
status change, cancellation included, goes through :func:`transition_booking`.
"""

from datetime import datetime
from typing import Any, Optional

import structlog
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import IntegrityError

from homestay.booking.codes import generate_booking_code
from homestay.booking.pricing import calculate_price, count_nights
from homestay.booking.refund_policy import refund_fraction
from homestay.booking.status import (
    TRANSITION_TIMESTAMPS,
    BookingStatus,
    PaymentStatus,
    resolve_role,
    validate_transition,
)
from homestay.db.readers.bookings import (
    find_overlapping_booking,
    get_booking,
    list_bookings_for_party,
)
from homestay.db.readers.listings import get_listing, get_listing_summaries
from homestay.db.readers.users import get_user_summaries
from homestay.db.writers.bookings import OVERLAP_CONSTRAINT, insert_booking, update_booking
from homestay.errors import (
    ConflictError,
    DomainError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from homestay.metrics import (
    booking_create_duration,
    booking_transitions,
    bookings_created,
    bookings_rejected,
)
from homestay.schemas.bookings import BookingCreatePayload
from homestay.utils.datetime import as_utc, utc_now
from homestay.utils.pagination import page_offset, paginated

logger = structlog.get_logger(__name__)

NOT_AVAILABLE_MESSAGE = "Property is not available for booking"
DATES_TAKEN_MESSAGE = "Property is not available for selected dates"


def _attach_summaries(conn: Connection, bookings: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Add listing, host and guest summaries to booking rows in place."""
    listings = get_listing_summaries(conn, (b["listing_id"] for b in bookings))
    users = get_user_summaries(
        conn, [b["host_id"] for b in bookings] + [b["guest_id"] for b in bookings]
    )
    for booking in bookings:
        booking["listing"] = listings.get(booking["listing_id"])
        booking["host"] = users.get(booking["host_id"])
        booking["guest"] = users.get(booking["guest_id"])
    return bookings


def validate_booking_request(
    listing: Optional[dict[str, Any]],
    guest_id: str,
    payload: BookingCreatePayload,
    now: datetime,
) -> int:
    """
    Run the create-time checks in order, failing on the first one.

    Args:
        listing: Listing row (None when it does not exist)
        guest_id: Requesting user
        payload: Booking request (dates already UTC)
        now: Reference time for the past-date check

    Returns:
        int: Number of nights

    Raises:
        ValidationError: On the first failed check
    """
    if listing is None or not listing["is_active"] or listing["status"] != "active":
        raise ValidationError(NOT_AVAILABLE_MESSAGE)

    if listing["host_id"] == guest_id:
        raise ValidationError("You cannot book your own property")

    check_in = as_utc(payload.check_in)
    check_out = as_utc(payload.check_out)

    if check_in >= check_out:
        raise ValidationError("Check-out date must be after check-in date")

    if check_in < now:
        raise ValidationError("Check-in date cannot be in the past")

    nights = count_nights(check_in, check_out)
    if nights < listing["min_nights"]:
        raise ValidationError(f"Minimum stay is {listing['min_nights']} nights")
    if listing["max_nights"] is not None and nights > listing["max_nights"]:
        raise ValidationError(f"Maximum stay is {listing['max_nights']} nights")

    guests = payload.adults + payload.children
    if guests > listing["max_guests"]:
        raise ValidationError(
            f"Property can accommodate maximum {listing['max_guests']} guests"
        )

    return nights


def _create_in_transaction(
    engine: Engine, guest_id: str, payload: BookingCreatePayload, now: datetime
) -> dict[str, Any]:
    check_in = as_utc(payload.check_in)
    check_out = as_utc(payload.check_out)

    with engine.begin() as conn:
        # Lock the listing first: concurrent creates for it queue up here
        listing = get_listing(conn, payload.listing_id, for_update=True)
        nights = validate_booking_request(listing, guest_id, payload, now)

        clash = find_overlapping_booking(conn, listing["id"], check_in, check_out)
        if clash is not None:
            logger.info(
                "booking_dates_taken",
                listing_id=listing["id"],
                clashing_booking_id=clash["id"],
            )
            raise ConflictError(DATES_TAKEN_MESSAGE)

        price = calculate_price(listing["monthly_price"], nights, listing["cleaning_fee"])

        booking_id = insert_booking(
            conn,
            {
                "booking_code": generate_booking_code(),
                "listing_id": listing["id"],
                "guest_id": guest_id,
                "host_id": listing["host_id"],
                "check_in": check_in,
                "check_out": check_out,
                "adults": payload.adults,
                "children": payload.children,
                "infants": payload.infants,
                "pets": payload.pets,
                "guests": payload.adults + payload.children,
                "nightly_rate": price.nightly_rate,
                "total_nights": price.nights,
                "subtotal": price.subtotal,
                "cleaning_fee": price.cleaning_fee,
                "service_fee": price.service_fee,
                "taxes": price.taxes,
                "total_price": price.total_price,
                "total_amount": price.total_price,
                "security_deposit": listing["security_deposit"],
                "guest_message": payload.guest_message,
                "special_requests": payload.special_requests,
                "arrival_time": payload.arrival_time,
                "guest_phone": payload.guest_phone,
                "guest_email": payload.guest_email,
                "status": BookingStatus.PENDING.value,
                "payment_status": PaymentStatus.PENDING.value,
            },
        )

        booking = get_booking(conn, booking_id)
        return _attach_summaries(conn, [booking])[0]


def create_booking(
    engine: Engine,
    guest_id: str,
    payload: BookingCreatePayload,
    now: Optional[datetime] = None,
) -> dict[str, Any]:
    """
    Create a PENDING booking for a guest.

    Args:
        engine: SQLAlchemy engine
        guest_id: Requesting user
        payload: Validated booking request
        now: Reference time for the past-date check (defaults to current UTC time)

    Returns:
        dict: Booking row with listing, host and guest summaries

    Raises:
        ValidationError: Listing unavailable, own listing, bad dates, night or guest bounds
        ConflictError: Dates overlap an active booking on the listing
    """
    now = as_utc(now) if now is not None else utc_now()

    try:
        with booking_create_duration.time():
            booking = _create_in_transaction(engine, guest_id, payload, now)
    except IntegrityError as e:
        if OVERLAP_CONSTRAINT not in str(e.orig):
            raise
        bookings_rejected.labels(reason=ConflictError.kind).inc()
        logger.info("booking_rejected", listing_id=payload.listing_id, reason="exclusion")
        raise ConflictError(DATES_TAKEN_MESSAGE) from e
    except DomainError as e:
        bookings_rejected.labels(reason=e.kind).inc()
        logger.info(
            "booking_rejected",
            listing_id=payload.listing_id,
            guest_id=guest_id,
            reason=e.kind,
            detail=e.message,
        )
        raise

    bookings_created.inc()
    logger.info(
        "booking_created",
        booking_id=booking["id"],
        booking_code=booking["booking_code"],
        listing_id=booking["listing_id"],
        nights=booking["total_nights"],
        total_price=booking["total_price"],
    )
    return booking


def get_user_bookings(
    engine: Engine, user_id: str, status: Optional[str] = None, page: int = 1, limit: int = 20
) -> dict[str, Any]:
    """Bookings where the user is the guest, newest first."""
    return _list_bookings(engine, "guest", user_id, status, page, limit)


def get_host_bookings(
    engine: Engine, user_id: str, status: Optional[str] = None, page: int = 1, limit: int = 20
) -> dict[str, Any]:
    """Bookings on the host's listings, newest first."""
    return _list_bookings(engine, "host", user_id, status, page, limit)


def _list_bookings(
    engine: Engine, party: str, user_id: str, status: Optional[str], page: int, limit: int
) -> dict[str, Any]:
    offset = page_offset(page, limit)
    with engine.connect() as conn:
        rows, total = list_bookings_for_party(conn, party, user_id, status, offset, limit)
        _attach_summaries(conn, rows)
    return paginated(rows, page, limit, total)


def find_booking(engine: Engine, booking_id: str, user_id: str) -> dict[str, Any]:
    """
    Fetch one booking visible to the user.

    Raises:
        NotFoundError: If the booking does not exist
        ForbiddenError: If the user is neither its guest nor its host
    """
    with engine.connect() as conn:
        booking = get_booking(conn, booking_id)
        if booking is None:
            raise NotFoundError("Booking not found")
        if user_id not in (booking["guest_id"], booking["host_id"]):
            raise ForbiddenError("You do not have access to this booking")
        return _attach_summaries(conn, [booking])[0]


def transition_booking(
    engine: Engine,
    booking_id: str,
    user_id: str,
    target: str,
    host_message: Optional[str] = None,
    cancel_reason: Optional[str] = None,
    now: Optional[datetime] = None,
) -> dict[str, Any]:
    """
    Move a booking to a new status on behalf of its host or guest.

    Cancellation also computes the refund fraction from the time left
    until check-in and records it on the booking.

    Args:
        engine: SQLAlchemy engine
        booking_id: Booking to change
        user_id: Acting user
        target: Requested status
        host_message: Optional message stored verbatim
        cancel_reason: Reason recorded when cancelling
        now: Transition time (defaults to current UTC time)

    Returns:
        dict: Updated booking; cancellations add refund_amount (fraction)
            and refund_value (fraction of total_price)

    Raises:
        NotFoundError: Booking does not exist
        ForbiddenError: User is not a party, or a guest asked for a host-only move
        InvalidTransitionError: Move not allowed from the current status
    """
    now = as_utc(now) if now is not None else utc_now()

    with engine.begin() as conn:
        booking = get_booking(conn, booking_id, for_update=True)
        if booking is None:
            raise NotFoundError("Booking not found")

        role = resolve_role(booking, user_id)
        new_status = validate_transition(booking["status"], role, target)

        changes: dict[str, Any] = {
            "status": new_status.value,
            TRANSITION_TIMESTAMPS[new_status]: now,
        }
        if host_message is not None:
            changes["host_message"] = host_message

        fraction: Optional[float] = None
        if new_status is BookingStatus.CANCELLED:
            fraction = refund_fraction(booking["check_in"], now)
            changes.update(
                cancelled_by=user_id, cancel_reason=cancel_reason, refund_fraction=fraction
            )

        update_booking(conn, booking_id, changes)
        updated = _attach_summaries(conn, [get_booking(conn, booking_id)])[0]

    booking_transitions.labels(
        from_status=booking["status"], to_status=new_status.value, role=role.value
    ).inc()
    logger.info(
        "booking_status_changed",
        booking_id=booking_id,
        from_status=booking["status"],
        to_status=new_status.value,
        role=role.value,
    )

    if fraction is not None:
        updated["refund_amount"] = fraction
        updated["refund_value"] = fraction * updated["total_price"]
    return updated


def cancel_booking(
    engine: Engine,
    booking_id: str,
    user_id: str,
    cancel_reason: Optional[str] = None,
    now: Optional[datetime] = None,
) -> dict[str, Any]:
    """Cancel a PENDING or CONFIRMED booking as its guest or host."""
    return transition_booking(
        engine,
        booking_id,
        user_id,
        BookingStatus.CANCELLED.value,
        cancel_reason=cancel_reason,
        now=now,
    )
