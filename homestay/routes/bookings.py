from typing import Any, Optional

import structlog
from fastapi import APIRouter, BackgroundTasks, Body, Depends, HTTPException, Query, status
from sqlalchemy.engine import Engine

from homestay.booking.status import BookingStatus
from homestay.dependencies import get_current_user, get_db_engine
from homestay.errors import DomainError
from homestay.schemas.bookings import (
    BookingCancelPayload,
    BookingCreatePayload,
    BookingStatusPayload,
)
from homestay.services.bookings import (
    cancel_booking,
    create_booking,
    find_booking,
    get_host_bookings,
    get_user_bookings,
    transition_booking,
)
from homestay.services.notifications import dispatch_booking_notification

logger = structlog.get_logger(__name__)
router = APIRouter()

# Status changes that notify the other party
STATUS_EVENTS = {
    BookingStatus.CONFIRMED.value: "booking_confirmed",
    BookingStatus.CANCELLED.value: "booking_cancelled",
    BookingStatus.COMPLETED.value: "booking_completed",
}


@router.post("/bookings", status_code=status.HTTP_201_CREATED)
def create(
    payload: BookingCreatePayload,
    background_tasks: BackgroundTasks,
    user: dict[str, Any] = Depends(get_current_user),
    db: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """
    Request a booking as a guest.

    Args:
        payload: Listing, dates, guest counts and optional contact details
        background_tasks: FastAPI background task runner
        user: Authenticated guest
        db: Database engine

    Returns:
        dict: The PENDING booking with listing and host summaries
    """
    try:
        booking = create_booking(db, user["id"], payload)

        background_tasks.add_task(
            dispatch_booking_notification,
            db,
            booking["id"],
            "booking_created",
            actor_id=user["id"],
        )
        return booking

    except DomainError:
        raise
    except Exception as e:
        logger.exception("booking_creation_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/bookings/user/my-bookings")
def my_bookings(
    status_filter: Optional[str] = Query(None, alias="status"),
    page: int = Query(1),
    limit: int = Query(20),
    user: dict[str, Any] = Depends(get_current_user),
    db: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """Bookings the user made as a guest, newest first."""
    try:
        return get_user_bookings(db, user["id"], status=status_filter, page=page, limit=limit)
    except DomainError:
        raise
    except Exception as e:
        logger.exception("guest_bookings_fetch_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/bookings/host/my-bookings")
def host_bookings(
    status_filter: Optional[str] = Query(None, alias="status"),
    page: int = Query(1),
    limit: int = Query(20),
    user: dict[str, Any] = Depends(get_current_user),
    db: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """Bookings on the user's listings, newest first."""
    try:
        return get_host_bookings(db, user["id"], status=status_filter, page=page, limit=limit)
    except DomainError:
        raise
    except Exception as e:
        logger.exception("host_bookings_fetch_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/bookings/{booking_id}")
def get_one(
    booking_id: str,
    user: dict[str, Any] = Depends(get_current_user),
    db: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    try:
        return find_booking(db, booking_id, user["id"])
    except DomainError:
        raise
    except Exception as e:
        logger.exception("booking_fetch_failed", booking_id=booking_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.patch("/bookings/{booking_id}/status")
def update_status(
    booking_id: str,
    payload: BookingStatusPayload,
    background_tasks: BackgroundTasks,
    user: dict[str, Any] = Depends(get_current_user),
    db: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """
    Move a booking through its lifecycle.

    Hosts confirm, check in, complete or cancel; guests may only cancel.
    Cancelling here applies the same refund policy as the cancel endpoint.

    Returns:
        dict: The updated booking
    """
    try:
        booking = transition_booking(
            db,
            booking_id,
            user["id"],
            payload.status,
            host_message=payload.host_message,
            cancel_reason=payload.cancel_reason,
        )

        event = STATUS_EVENTS.get(booking["status"])
        if event:
            background_tasks.add_task(
                dispatch_booking_notification, db, booking_id, event, actor_id=user["id"]
            )
        return booking

    except DomainError:
        raise
    except Exception as e:
        logger.exception("booking_status_update_failed", booking_id=booking_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/bookings/{booking_id}/cancel")
def cancel(
    booking_id: str,
    background_tasks: BackgroundTasks,
    payload: Optional[BookingCancelPayload] = Body(None),
    user: dict[str, Any] = Depends(get_current_user),
    db: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """
    Cancel a PENDING or CONFIRMED booking as its guest or host.

    Returns:
        dict: The cancelled booking plus refund_amount (fraction of the
            total refunded) and refund_value
    """
    try:
        booking = cancel_booking(
            db,
            booking_id,
            user["id"],
            cancel_reason=payload.cancel_reason if payload else None,
        )

        background_tasks.add_task(
            dispatch_booking_notification,
            db,
            booking_id,
            "booking_cancelled",
            actor_id=user["id"],
        )
        return booking

    except DomainError:
        raise
    except Exception as e:
        logger.exception("booking_cancel_failed", booking_id=booking_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")
