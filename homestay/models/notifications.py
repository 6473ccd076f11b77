from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, String, Text, text
from sqlalchemy.sql import func

from homestay.models.base import Base, new_id


class Notification(Base):
    """
    ORM model for an in-app notification.

    ``data`` is an opaque JSON payload for the client (for booking events it
    carries the booking id and event type); ``related_id`` points at the
    entity the notification is about.
    """

    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type = Column(String(32), nullable=False)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    data = Column(JSON, nullable=True)
    related_id = Column(String(36), nullable=True)
    is_read = Column(Boolean, nullable=False, server_default=text("FALSE"))
    read_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class PushToken(Base):
    """Device token registered by a mobile client for push delivery."""

    __tablename__ = "push_tokens"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    device_token = Column(String(255), nullable=False)
    platform = Column(String(16), nullable=False, server_default=text("'mobile'"))
    is_active = Column(Boolean, nullable=False, server_default=text("TRUE"))
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
