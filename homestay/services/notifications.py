"""In-app notifications, push tokens and booking event notifications."""

from typing import Any, Optional

import requests
import structlog
from sqlalchemy.engine import Engine

from homestay.config import PUSH_ENABLED
from homestay.db.readers.bookings import get_booking
from homestay.db.readers.listings import get_listing
from homestay.db.readers.notifications import (
    count_unread,
    get_push_token,
    get_user_notification,
    list_active_push_tokens,
    list_notifications,
)
from homestay.db.readers.users import get_user
from homestay.db.writers.notifications import (
    deactivate_push_tokens,
    delete_notification,
    insert_notification,
    insert_push_token,
    mark_all_read,
    mark_read,
    update_push_token,
)
from homestay.errors import NotFoundError, ValidationError
from homestay.network.push import send_push
from homestay.utils.pagination import page_offset, paginated

logger = structlog.get_logger(__name__)

BOOKING_NOTIFICATION_TYPE = "booking"


def create_notification(
    engine: Engine,
    user_id: str,
    type_: str,
    title: str,
    message: str,
    data: Optional[dict[str, Any]] = None,
    related_id: Optional[str] = None,
) -> dict[str, Any]:
    """
    Store a notification for a user and push it to their active devices.

    Args:
        engine: SQLAlchemy engine
        user_id: Recipient
        type_: Notification category (booking, message, review, system)
        title: Short title
        message: Body text
        data: Opaque JSON payload for the client
        related_id: Id of the entity the notification is about

    Returns:
        dict: Id of the stored notification
    """
    with engine.begin() as conn:
        notification_id = insert_notification(
            conn, user_id, type_, title, message, data=data, related_id=related_id
        )

    logger.info(
        "notification_created", notification_id=notification_id, user_id=user_id, type=type_
    )
    deliver_push(engine, user_id, title, message, data)
    return {"id": notification_id}


def deliver_push(
    engine: Engine,
    user_id: str,
    title: str,
    message: str,
    data: Optional[dict[str, Any]] = None,
) -> int:
    """
    Push a message to every active device of a user.

    Tokens the push service rejects are deactivated. Delivery failures are
    logged and never raised.

    Returns:
        int: Number of devices the message was delivered to
    """
    with engine.connect() as conn:
        tokens = list_active_push_tokens(conn, user_id)

    if not tokens:
        logger.debug("push_skipped_no_tokens", user_id=user_id)
        return 0

    if not PUSH_ENABLED:
        logger.info("push_disabled", user_id=user_id, devices=len(tokens), title=title)
        return 0

    delivered = 0
    for token in tokens:
        try:
            send_push(token["device_token"], title, message, data)
            delivered += 1
        except requests.RequestException as e:
            logger.warning(
                "push_token_deactivated",
                user_id=user_id,
                token_id=token["id"],
                platform=token["platform"],
                error=str(e),
            )
            with engine.begin() as conn:
                update_push_token(conn, token["id"], {"is_active": False})

    return delivered


def _booking_templates(
    booking: dict[str, Any], listing_title: str, guest_name: str, actor_id: Optional[str]
) -> dict[str, dict[str, str]]:
    # The party who did not cancel hears about a cancellation
    cancelled_recipient = (
        booking["host_id"] if actor_id == booking["guest_id"] else booking["guest_id"]
    )
    return {
        "booking_created": {
            "title": "New Booking Request",
            "message": f"{guest_name} has requested to book {listing_title}",
            "recipient_id": booking["host_id"],
        },
        "booking_confirmed": {
            "title": "Booking Confirmed",
            "message": f"Your booking for {listing_title} has been confirmed",
            "recipient_id": booking["guest_id"],
        },
        "booking_cancelled": {
            "title": "Booking Cancelled",
            "message": f"Booking for {listing_title} has been cancelled",
            "recipient_id": cancelled_recipient,
        },
        "booking_completed": {
            "title": "How was your stay?",
            "message": f"Your stay at {listing_title} is complete. Leave a review!",
            "recipient_id": booking["guest_id"],
        },
    }


def create_booking_notification(
    engine: Engine, booking_id: str, event: str, actor_id: Optional[str] = None
) -> dict[str, Any]:
    """
    Notify the right party about a booking event.

    Args:
        engine: SQLAlchemy engine
        booking_id: Booking the event is about
        event: booking_created, booking_confirmed, booking_cancelled or booking_completed
        actor_id: User who triggered the event

    Returns:
        dict: Id of the stored notification

    Raises:
        NotFoundError: If the booking no longer exists
        ValidationError: If the event has no template
    """
    with engine.connect() as conn:
        booking = get_booking(conn, booking_id)
        if booking is None:
            raise NotFoundError("Booking not found")
        listing = get_listing(conn, booking["listing_id"])
        guest = get_user(conn, booking["guest_id"])

    listing_title = listing["title"] if listing else "your listing"
    guest_name = (guest or {}).get("first_name") or "A guest"

    template = _booking_templates(booking, listing_title, guest_name, actor_id).get(event)
    if template is None:
        raise ValidationError(f"Invalid notification type: {event}")

    return create_notification(
        engine,
        template["recipient_id"],
        BOOKING_NOTIFICATION_TYPE,
        template["title"],
        template["message"],
        data={"booking_id": booking_id, "type": event},
        related_id=booking_id,
    )


def dispatch_booking_notification(
    engine: Engine, booking_id: str, event: str, actor_id: Optional[str] = None
) -> None:
    """Background-task entry point: failures are logged, never propagated."""
    try:
        create_booking_notification(engine, booking_id, event, actor_id=actor_id)
    except Exception as e:
        logger.exception(
            "booking_notification_failed",
            booking_id=booking_id,
            notification_event=event,
            error=str(e),
        )


def get_notifications(
    engine: Engine,
    user_id: str,
    page: int = 1,
    limit: int = 20,
    type_: Optional[str] = None,
    is_read: Optional[bool] = None,
) -> dict[str, Any]:
    offset = page_offset(page, limit)
    with engine.connect() as conn:
        rows, total = list_notifications(
            conn, user_id, offset, limit, type_=type_, is_read=is_read
        )
        unread = count_unread(conn, user_id)

    result = paginated(rows, page, limit, total)
    result["unread_count"] = unread
    return result


def mark_as_read(engine: Engine, notification_id: str, user_id: str) -> dict[str, Any]:
    with engine.begin() as conn:
        if get_user_notification(conn, notification_id, user_id) is None:
            raise NotFoundError("Notification not found")
        mark_read(conn, notification_id)
        return get_user_notification(conn, notification_id, user_id)


def mark_all_as_read(engine: Engine, user_id: str) -> dict[str, Any]:
    with engine.begin() as conn:
        updated = mark_all_read(conn, user_id)
    return {"updated": updated}


def remove_notification(engine: Engine, notification_id: str, user_id: str) -> None:
    with engine.begin() as conn:
        if get_user_notification(conn, notification_id, user_id) is None:
            raise NotFoundError("Notification not found")
        delete_notification(conn, notification_id)


def register_push_token(
    engine: Engine, user_id: str, device_token: str, platform: str = "mobile"
) -> dict[str, Any]:
    """
    Register a device for push delivery, reactivating it if already known.

    Returns:
        dict: token_id and whether the token was newly created
    """
    with engine.begin() as conn:
        existing = get_push_token(conn, user_id, device_token)
        if existing:
            update_push_token(conn, existing["id"], {"platform": platform, "is_active": True})
            return {"token_id": existing["id"], "created": False}
        token_id = insert_push_token(conn, user_id, device_token, platform)

    logger.info("push_token_registered", user_id=user_id, platform=platform)
    return {"token_id": token_id, "created": True}


def remove_push_token(engine: Engine, user_id: str, device_token: str) -> dict[str, Any]:
    with engine.begin() as conn:
        removed = deactivate_push_tokens(conn, user_id, device_token)
    return {"removed": removed}
