from sqlalchemy import delete, update
from sqlalchemy.engine import Connection

from homestay.db._rows import insert_row, update_row
from homestay.models.messages import Conversation, Message
from homestay.utils.datetime import utc_now


def insert_conversation(conn: Connection, participant_one_id: str, participant_two_id: str) -> str:
    return insert_row(
        conn,
        Conversation,
        {"participant_one_id": participant_one_id, "participant_two_id": participant_two_id},
    )


def insert_message(
    conn: Connection, conversation_id: str, sender_id: str, content: str, message_type: str
) -> str:
    """
    Store a message and bump the conversation's last-activity time.

    Args:
        conn: Active database connection (within transaction)
        conversation_id: Target conversation
        sender_id: Author
        content: Message text
        message_type: text, image or system

    Returns:
        str: New message id
    """
    message_id = insert_row(
        conn,
        Message,
        {
            "conversation_id": conversation_id,
            "sender_id": sender_id,
            "content": content,
            "message_type": message_type,
            "is_read": False,
        },
    )
    update_row(conn, Conversation, conversation_id, {"updated_at": utc_now()})
    return message_id


def mark_messages_read(conn: Connection, conversation_id: str, reader_id: str) -> int:
    """Mark the other participant's unread messages as read by reader_id."""
    result = conn.execute(
        update(Message)
        .where(
            Message.conversation_id == conversation_id,
            Message.sender_id != reader_id,
            Message.is_read.is_(False),
        )
        .values(is_read=True, read_at=utc_now())
    )
    return result.rowcount


def delete_message(conn: Connection, message_id: str) -> None:
    conn.execute(delete(Message).where(Message.id == message_id))

