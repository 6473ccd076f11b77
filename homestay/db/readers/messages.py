from typing import Any, Optional

from sqlalchemy import and_, func, or_, select
from sqlalchemy.engine import Connection

from homestay.db._rows import count_rows, fetch_all, fetch_one
from homestay.models.messages import Conversation, Message


def _participant_clause(user_id: str) -> Any:
    return or_(
        Conversation.participant_one_id == user_id, Conversation.participant_two_id == user_id
    )


def get_user_conversation(
    conn: Connection, conversation_id: str, user_id: str
) -> Optional[dict[str, Any]]:
    """Conversation by id, only if the user takes part in it."""
    stmt = select(Conversation).where(
        Conversation.id == conversation_id, _participant_clause(user_id)
    )
    return fetch_one(conn, stmt)


def find_conversation_between(
    conn: Connection, user_a: str, user_b: str
) -> Optional[dict[str, Any]]:
    one, two = Conversation.participant_one_id, Conversation.participant_two_id
    stmt = select(Conversation).where(
        or_(and_(one == user_a, two == user_b), and_(one == user_b, two == user_a))
    )
    return fetch_one(conn, stmt)


def list_conversations(
    conn: Connection, user_id: str, offset: int, limit: int
) -> tuple[list[dict[str, Any]], int]:
    stmt = select(Conversation).where(_participant_clause(user_id))
    total = count_rows(conn, stmt)
    rows = fetch_all(
        conn,
        stmt.order_by(Conversation.updated_at.desc(), Conversation.id).offset(offset).limit(limit),
    )
    return rows, total


def get_last_message(conn: Connection, conversation_id: str) -> Optional[dict[str, Any]]:
    stmt = (
        select(Message)
        .where(Message.conversation_id == conversation_id)
        .order_by(Message.created_at.desc(), Message.id.desc())
        .limit(1)
    )
    return fetch_one(conn, stmt)


def count_unread_messages(conn: Connection, conversation_id: str, user_id: str) -> int:
    """Messages in the conversation sent by the other participant and not yet read."""
    stmt = select(func.count()).where(
        Message.conversation_id == conversation_id,
        Message.sender_id != user_id,
        Message.is_read.is_(False),
    )
    return conn.execute(stmt).scalar_one()


def list_messages(
    conn: Connection, conversation_id: str, offset: int, limit: int
) -> tuple[list[dict[str, Any]], int]:
    """Page of messages, newest page first, returned oldest-first within the page."""
    stmt = select(Message).where(Message.conversation_id == conversation_id)
    total = count_rows(conn, stmt)
    rows = fetch_all(
        conn,
        stmt.order_by(Message.created_at.desc(), Message.id.desc()).offset(offset).limit(limit),
    )
    rows.reverse()
    return rows, total


def get_sent_message(conn: Connection, message_id: str, sender_id: str) -> Optional[dict[str, Any]]:
    stmt = select(Message).where(Message.id == message_id, Message.sender_id == sender_id)
    return fetch_one(conn, stmt)

