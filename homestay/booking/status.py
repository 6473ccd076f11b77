"""
Booking status state machine.

All status changes, including cancellation, go through
:func:`validate_transition`, so the allowed moves live in one table instead
of being re-checked ad hoc by each endpoint.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping

from homestay.errors import ForbiddenError, InvalidTransitionError


class BookingStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    REFUNDED = "REFUNDED"
    PARTIALLY_REFUNDED = "PARTIALLY_REFUNDED"
    FAILED = "FAILED"


class Role(str, Enum):
    HOST = "host"
    GUEST = "guest"


# Statuses that hold the listing's dates
BLOCKING_STATUSES: frozenset[BookingStatus] = frozenset(
    {BookingStatus.PENDING, BookingStatus.CONFIRMED, BookingStatus.IN_PROGRESS}
)

# (current status, role) -> statuses that role may move the booking to.
# COMPLETED and CANCELLED are terminal and have no entries.
TRANSITIONS: dict[tuple[BookingStatus, Role], frozenset[BookingStatus]] = {
    (BookingStatus.PENDING, Role.HOST): frozenset(
        {BookingStatus.CONFIRMED, BookingStatus.CANCELLED}
    ),
    (BookingStatus.PENDING, Role.GUEST): frozenset({BookingStatus.CANCELLED}),
    (BookingStatus.CONFIRMED, Role.HOST): frozenset(
        {BookingStatus.IN_PROGRESS, BookingStatus.CANCELLED}
    ),
    (BookingStatus.CONFIRMED, Role.GUEST): frozenset({BookingStatus.CANCELLED}),
    (BookingStatus.IN_PROGRESS, Role.HOST): frozenset({BookingStatus.COMPLETED}),
    (BookingStatus.IN_PROGRESS, Role.GUEST): frozenset(),
}

# Column stamped with the transition time for each target status
TRANSITION_TIMESTAMPS: dict[BookingStatus, str] = {
    BookingStatus.CONFIRMED: "confirmed_at",
    BookingStatus.IN_PROGRESS: "actual_check_in",
    BookingStatus.COMPLETED: "completed_at",
    BookingStatus.CANCELLED: "cancelled_at",
}


def resolve_role(booking: Mapping[str, Any], user_id: str) -> Role:
    """
    Work out whether the acting user is the booking's host or guest.

    Args:
        booking: Booking row (needs host_id and guest_id)
        user_id: Acting user

    Returns:
        Role: HOST or GUEST

    Raises:
        ForbiddenError: If the user is neither party on the booking
    """
    if booking["host_id"] == user_id:
        return Role.HOST
    if booking["guest_id"] == user_id:
        return Role.GUEST
    raise ForbiddenError("You do not have access to this booking")


def allowed_targets(current: BookingStatus, role: Role) -> frozenset[BookingStatus]:
    return TRANSITIONS.get((current, role), frozenset())


def validate_transition(current: str, role: Role, target: str) -> BookingStatus:
    """
    Check a requested status change against the transition table.

    Args:
        current: Booking's current status value
        role: Role of the acting user
        target: Requested status value

    Returns:
        BookingStatus: The validated target status

    Raises:
        ForbiddenError: A guest asked for a move only the host may make
        InvalidTransitionError: The move is not allowed for anyone from here
    """
    current_status = BookingStatus(current)
    try:
        target_status = BookingStatus(target)
    except ValueError:
        raise InvalidTransitionError(current_status.value, str(target)) from None

    if target_status in allowed_targets(current_status, role):
        return target_status

    if role is Role.GUEST and target_status in allowed_targets(current_status, Role.HOST):
        raise ForbiddenError(
            f"Only the host can move a booking from {current_status.value} "
            f"to {target_status.value}"
        )

    raise InvalidTransitionError(current_status.value, target_status.value)
