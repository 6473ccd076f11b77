from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text, text
from sqlalchemy.sql import func

from homestay.models.base import Base, new_id


class Conversation(Base):
    """
    ORM model for a two-person message thread.

    Participant order carries no meaning; lookups match either ordering.
    ``updated_at`` is bumped whenever a message is sent so inboxes sort by
    latest activity.
    """

    __tablename__ = "conversations"

    id = Column(String(36), primary_key=True, default=new_id)
    participant_one_id = Column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    participant_two_id = Column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class Message(Base):
    """ORM model for a single message; ``is_read`` is from the recipient's side."""

    __tablename__ = "messages"

    id = Column(String(36), primary_key=True, default=new_id)
    conversation_id = Column(
        String(36), ForeignKey("conversations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    sender_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    message_type = Column(String(16), nullable=False, server_default=text("'text'"))
    is_read = Column(Boolean, nullable=False, server_default=text("FALSE"))
    read_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
