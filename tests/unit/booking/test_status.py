"""
Unit tests for the booking status state machine.
"""

from __future__ import annotations

import pytest

from homestay.booking.status import (
    BookingStatus,
    Role,
    allowed_targets,
    resolve_role,
    validate_transition,
)
from homestay.errors import ForbiddenError, InvalidTransitionError

BOOKING = {"host_id": "host-1", "guest_id": "guest-1"}


@pytest.mark.unit
@pytest.mark.parametrize(
    ("current", "role", "target"),
    [
        ("PENDING", Role.HOST, "CONFIRMED"),
        ("PENDING", Role.HOST, "CANCELLED"),
        ("PENDING", Role.GUEST, "CANCELLED"),
        ("CONFIRMED", Role.HOST, "IN_PROGRESS"),
        ("CONFIRMED", Role.HOST, "CANCELLED"),
        ("CONFIRMED", Role.GUEST, "CANCELLED"),
        ("IN_PROGRESS", Role.HOST, "COMPLETED"),
    ],
)
def test_allowed_transitions(current: str, role: Role, target: str) -> None:
    assert validate_transition(current, role, target) is BookingStatus(target)


@pytest.mark.unit
@pytest.mark.parametrize(
    ("current", "target"),
    [
        ("COMPLETED", "CANCELLED"),
        ("CANCELLED", "CONFIRMED"),
        ("IN_PROGRESS", "CANCELLED"),
        ("PENDING", "COMPLETED"),
        ("PENDING", "IN_PROGRESS"),
        ("CONFIRMED", "PENDING"),
    ],
)
def test_disallowed_transitions_for_host(current: str, target: str) -> None:
    with pytest.raises(InvalidTransitionError) as exc_info:
        validate_transition(current, Role.HOST, target)

    assert exc_info.value.message == f"Cannot transition from {current} to {target}"


@pytest.mark.unit
def test_guest_cannot_confirm() -> None:
    with pytest.raises(ForbiddenError):
        validate_transition("PENDING", Role.GUEST, "CONFIRMED")


@pytest.mark.unit
def test_guest_cannot_complete() -> None:
    with pytest.raises(ForbiddenError):
        validate_transition("IN_PROGRESS", Role.GUEST, "COMPLETED")


@pytest.mark.unit
def test_unknown_target_status_is_invalid_transition() -> None:
    with pytest.raises(InvalidTransitionError):
        validate_transition("PENDING", Role.HOST, "ARCHIVED")


@pytest.mark.unit
def test_terminal_statuses_have_no_targets() -> None:
    for role in Role:
        assert allowed_targets(BookingStatus.COMPLETED, role) == frozenset()
        assert allowed_targets(BookingStatus.CANCELLED, role) == frozenset()


@pytest.mark.unit
def test_only_pending_and_confirmed_bookings_can_be_cancelled() -> None:
    for role in Role:
        cancellable = {
            status
            for status in BookingStatus
            if BookingStatus.CANCELLED in allowed_targets(status, role)
        }
        assert cancellable == {BookingStatus.PENDING, BookingStatus.CONFIRMED}


@pytest.mark.unit
def test_resolve_role() -> None:
    assert resolve_role(BOOKING, "host-1") is Role.HOST
    assert resolve_role(BOOKING, "guest-1") is Role.GUEST

    with pytest.raises(ForbiddenError):
        resolve_role(BOOKING, "stranger")
