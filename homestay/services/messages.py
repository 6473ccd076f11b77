"""Two-party conversations and their messages."""

from typing import Any, Optional

import structlog
from sqlalchemy.engine import Connection, Engine

from homestay.db.readers.messages import (
    count_unread_messages,
    find_conversation_between,
    get_last_message,
    get_sent_message,
    get_user_conversation,
    list_conversations,
    list_messages,
)
from homestay.db.readers.users import get_user, get_user_summaries
from homestay.db.writers.messages import (
    delete_message,
    insert_conversation,
    insert_message,
    mark_messages_read,
)
from homestay.errors import NotFoundError, ValidationError
from homestay.utils.pagination import page_offset, paginated

logger = structlog.get_logger(__name__)

MESSAGES_DEFAULT_LIMIT = 50


def get_conversations(
    engine: Engine, user_id: str, page: int = 1, limit: int = 20
) -> dict[str, Any]:
    """
    A user's conversations, most recently active first.

    Each entry carries the other participant's summary, the last message and
    the number of messages the user has not read yet.
    """
    offset = page_offset(page, limit)
    with engine.connect() as conn:
        rows, total = list_conversations(conn, user_id, offset, limit)
        others = [
            c["participant_two_id"]
            if c["participant_one_id"] == user_id
            else c["participant_one_id"]
            for c in rows
        ]
        summaries = get_user_summaries(conn, others)
        for conversation, other_id in zip(rows, others):
            conversation["other_participant"] = summaries.get(other_id)
            conversation["last_message"] = get_last_message(conn, conversation["id"])
            conversation["unread_count"] = count_unread_messages(conn, conversation["id"], user_id)
    return paginated(rows, page, limit, total)


def _conversation_or_404(conn: Connection, conversation_id: str, user_id: str) -> dict[str, Any]:
    conversation = get_user_conversation(conn, conversation_id, user_id)
    if conversation is None:
        raise NotFoundError("Conversation not found or access denied")
    return conversation


def get_messages(
    engine: Engine,
    conversation_id: str,
    user_id: str,
    page: int = 1,
    limit: int = MESSAGES_DEFAULT_LIMIT,
) -> dict[str, Any]:
    """
    Page through a conversation, newest page first, oldest-first within a page.

    Reading marks the other participant's messages as read.
    """
    offset = page_offset(page, limit)
    with engine.begin() as conn:
        _conversation_or_404(conn, conversation_id, user_id)
        rows, total = list_messages(conn, conversation_id, offset, limit)
        mark_messages_read(conn, conversation_id, user_id)
    return paginated(rows, page, limit, total)


def _send(
    conn: Connection, conversation_id: str, sender_id: str, content: str, message_type: str
) -> str:
    message_id = insert_message(conn, conversation_id, sender_id, content, message_type)
    logger.info("message_sent", conversation_id=conversation_id, message_id=message_id)
    return message_id


def send_message(
    engine: Engine,
    conversation_id: str,
    sender_id: str,
    content: str,
    message_type: str = "text",
) -> dict[str, Any]:
    with engine.begin() as conn:
        _conversation_or_404(conn, conversation_id, sender_id)
        message_id = _send(conn, conversation_id, sender_id, content, message_type)
    return {"id": message_id, "conversation_id": conversation_id}


def start_conversation(
    engine: Engine, user_id: str, participant_id: str, initial_message: Optional[str] = None
) -> dict[str, Any]:
    """
    Open a conversation with another user, reusing an existing one.

    Returns:
        dict: conversation_id and whether it was newly created

    Raises:
        ValidationError: Conversation with oneself
        NotFoundError: The other participant does not exist
    """
    if participant_id == user_id:
        raise ValidationError("Cannot create conversation with yourself")

    with engine.begin() as conn:
        existing = find_conversation_between(conn, user_id, participant_id)
        if existing:
            conversation_id, created = existing["id"], False
        else:
            if get_user(conn, participant_id) is None:
                raise NotFoundError("User not found")
            conversation_id, created = insert_conversation(conn, user_id, participant_id), True

        if initial_message:
            _send(conn, conversation_id, user_id, initial_message, "text")

    return {"conversation_id": conversation_id, "is_new": created}


def remove_message(engine: Engine, message_id: str, user_id: str) -> dict[str, str]:
    """Delete a message; only its sender may."""
    with engine.begin() as conn:
        if get_sent_message(conn, message_id, user_id) is None:
            raise NotFoundError("Message not found or access denied")
        delete_message(conn, message_id)
    return {"message": "Message deleted successfully"}
