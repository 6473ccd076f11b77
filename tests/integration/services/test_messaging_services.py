"""
Integration tests for conversations, messages, notifications and push delivery.
"""

from __future__ import annotations

from typing import Any, Callable
from unittest.mock import MagicMock, patch

import pytest
import requests
from sqlalchemy.engine import Engine

from conftest import NOW
from homestay.errors import NotFoundError, ValidationError
from homestay.schemas.bookings import BookingCreatePayload
from homestay.services.bookings import cancel_booking, create_booking
from homestay.services.messages import (
    get_conversations,
    get_messages,
    remove_message,
    send_message,
    start_conversation,
)
from homestay.services.notifications import (
    create_booking_notification,
    create_notification,
    deliver_push,
    dispatch_booking_notification,
    get_notifications,
    mark_all_as_read,
    mark_as_read,
    register_push_token,
    remove_notification,
    remove_push_token,
)


@pytest.fixture
def booking(engine: Engine, listing_id: str, guest_id: str) -> dict[str, Any]:
    return create_booking(
        engine,
        guest_id,
        BookingCreatePayload(listing_id=listing_id, check_in="2025-03-01", check_out="2025-03-04"),
        now=NOW,
    )


@pytest.mark.integration
def test_conversation_is_reused_between_the_same_users(
    engine: Engine, guest_id: str, host_id: str
) -> None:
    first = start_conversation(engine, guest_id, host_id, initial_message="Is parking free?")
    second = start_conversation(engine, host_id, guest_id)

    assert first["is_new"] is True
    assert second == {"conversation_id": first["conversation_id"], "is_new": False}


@pytest.mark.integration
def test_cannot_message_yourself_or_unknown_users(engine: Engine, guest_id: str) -> None:
    with pytest.raises(ValidationError):
        start_conversation(engine, guest_id, guest_id)
    with pytest.raises(NotFoundError):
        start_conversation(engine, guest_id, "nobody")


@pytest.mark.integration
def test_unread_counts_and_read_marking(engine: Engine, guest_id: str, host_id: str) -> None:
    conversation_id = start_conversation(engine, guest_id, host_id, initial_message="Hello")[
        "conversation_id"
    ]
    send_message(engine, conversation_id, guest_id, "Are pets allowed?")

    inbox = get_conversations(engine, host_id)
    entry = inbox["data"][0]
    assert entry["unread_count"] == 2
    assert entry["other_participant"]["id"] == guest_id
    assert entry["last_message"]["content"] == "Are pets allowed?"

    thread = get_messages(engine, conversation_id, host_id)
    assert [m["content"] for m in thread["data"]] == ["Hello", "Are pets allowed?"]
    assert get_conversations(engine, host_id)["data"][0]["unread_count"] == 0


@pytest.mark.integration
def test_outsiders_cannot_read_or_post(
    engine: Engine, make_user: Callable[..., str], guest_id: str, host_id: str
) -> None:
    conversation_id = start_conversation(engine, guest_id, host_id)["conversation_id"]
    outsider = make_user()

    with pytest.raises(NotFoundError):
        get_messages(engine, conversation_id, outsider)
    with pytest.raises(NotFoundError):
        send_message(engine, conversation_id, outsider, "hi")


@pytest.mark.integration
def test_only_sender_deletes_message(engine: Engine, guest_id: str, host_id: str) -> None:
    conversation_id = start_conversation(engine, guest_id, host_id)["conversation_id"]
    message = send_message(engine, conversation_id, guest_id, "typo")

    with pytest.raises(NotFoundError):
        remove_message(engine, message["id"], host_id)

    remove_message(engine, message["id"], guest_id)
    assert get_messages(engine, conversation_id, guest_id)["pagination"]["total"] == 0


@pytest.mark.integration
def test_booking_created_notifies_host(
    engine: Engine, booking: dict[str, Any], host_id: str, guest_id: str
) -> None:
    create_booking_notification(engine, booking["id"], "booking_created", actor_id=guest_id)

    inbox = get_notifications(engine, host_id)
    assert inbox["unread_count"] == 1
    notification = inbox["data"][0]
    assert notification["title"] == "New Booking Request"
    assert notification["message"] == "Omar has requested to book Nile view apartment"
    assert notification["related_id"] == booking["id"]
    assert notification["data"] == {"booking_id": booking["id"], "type": "booking_created"}


@pytest.mark.integration
def test_cancellation_notifies_the_other_party(
    engine: Engine, booking: dict[str, Any], host_id: str, guest_id: str
) -> None:
    cancel_booking(engine, booking["id"], guest_id, now=NOW)
    create_booking_notification(engine, booking["id"], "booking_cancelled", actor_id=guest_id)

    assert get_notifications(engine, host_id)["pagination"]["total"] == 1
    assert get_notifications(engine, guest_id)["pagination"]["total"] == 0


@pytest.mark.integration
def test_unknown_booking_event_is_rejected(engine: Engine, booking: dict[str, Any]) -> None:
    with pytest.raises(ValidationError, match="Invalid notification type"):
        create_booking_notification(engine, booking["id"], "booking_exploded")


@pytest.mark.integration
def test_dispatch_swallows_missing_booking(engine: Engine) -> None:
    assert (
        dispatch_booking_notification(
            engine, "missing-booking", "booking_confirmed", actor_id="someone"
        )
        is None
    )


@pytest.mark.integration
def test_dispatch_swallows_unknown_event(engine: Engine, booking: dict[str, Any]) -> None:
    assert dispatch_booking_notification(engine, booking["id"], "booking_exploded") is None


@pytest.mark.integration
def test_dispatch_logs_push_failure_with_event_name(
    engine: Engine, booking: dict[str, Any]
) -> None:
    with patch(
        "homestay.services.notifications.create_booking_notification",
        MagicMock(side_effect=requests.ConnectionError("push service down")),
    ), patch("homestay.services.notifications.logger") as mock_logger:
        dispatch_booking_notification(engine, booking["id"], "booking_created")

    mock_logger.exception.assert_called_once()
    args, kwargs = mock_logger.exception.call_args
    assert args == ("booking_notification_failed",)
    assert kwargs["notification_event"] == "booking_created"
    assert "event" not in kwargs


@pytest.mark.integration
def test_read_state_management(engine: Engine, guest_id: str, host_id: str) -> None:
    first = create_notification(engine, guest_id, "system", "Welcome", "Hello there")
    create_notification(engine, guest_id, "system", "Tip", "Complete your profile")

    assert mark_as_read(engine, first["id"], guest_id)["is_read"] is True
    assert get_notifications(engine, guest_id, is_read=False)["pagination"]["total"] == 1

    with pytest.raises(NotFoundError):
        mark_as_read(engine, first["id"], host_id)

    assert mark_all_as_read(engine, guest_id) == {"updated": 1}
    assert get_notifications(engine, guest_id)["unread_count"] == 0

    remove_notification(engine, first["id"], guest_id)
    assert get_notifications(engine, guest_id)["pagination"]["total"] == 1


@pytest.mark.integration
def test_push_token_registration_is_idempotent(engine: Engine, guest_id: str) -> None:
    first = register_push_token(engine, guest_id, "ExponentPushToken[a]", "ios")
    again = register_push_token(engine, guest_id, "ExponentPushToken[a]", "ios")

    assert first["created"] is True
    assert again == {"token_id": first["token_id"], "created": False}
    assert remove_push_token(engine, guest_id, "ExponentPushToken[a]") == {"removed": 1}


@pytest.mark.integration
def test_push_is_skipped_when_disabled(engine: Engine, guest_id: str) -> None:
    register_push_token(engine, guest_id, "ExponentPushToken[a]")

    with patch("homestay.services.notifications.send_push") as mock_send:
        assert deliver_push(engine, guest_id, "Hi", "Body") == 0

    mock_send.assert_not_called()


@pytest.mark.integration
@patch("homestay.services.notifications.PUSH_ENABLED", True)
@patch("homestay.services.notifications.send_push")
def test_rejected_push_token_is_deactivated(
    mock_send: MagicMock, engine: Engine, guest_id: str
) -> None:
    register_push_token(engine, guest_id, "ExponentPushToken[good]")
    register_push_token(engine, guest_id, "ExponentPushToken[gone]")

    def fake_send(token: str, *args: Any, **kwargs: Any) -> dict[str, str]:
        if token.endswith("[gone]"):
            raise requests.RequestException("DeviceNotRegistered")
        return {"status": "ok"}

    mock_send.side_effect = fake_send

    assert deliver_push(engine, guest_id, "Hi", "Body") == 1
    assert deliver_push(engine, guest_id, "Hi", "Body") == 1
    assert mock_send.call_count == 3
