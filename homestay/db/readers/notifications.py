from typing import Any, Optional

from sqlalchemy import func, select
from sqlalchemy.engine import Connection

from homestay.db._rows import count_rows, fetch_all, fetch_one
from homestay.models.notifications import Notification, PushToken


def get_user_notification(
    conn: Connection, notification_id: str, user_id: str
) -> Optional[dict[str, Any]]:
    """Notification by id, only if it belongs to the user."""
    stmt = select(Notification).where(
        Notification.id == notification_id, Notification.user_id == user_id
    )
    return fetch_one(conn, stmt)


def list_notifications(
    conn: Connection,
    user_id: str,
    offset: int,
    limit: int,
    type_: Optional[str] = None,
    is_read: Optional[bool] = None,
) -> tuple[list[dict[str, Any]], int]:
    stmt = select(Notification).where(Notification.user_id == user_id)
    if type_:
        stmt = stmt.where(Notification.type == type_)
    if is_read is not None:
        stmt = stmt.where(Notification.is_read.is_(is_read))

    total = count_rows(conn, stmt)
    rows = fetch_all(
        conn,
        stmt.order_by(Notification.created_at.desc(), Notification.id).offset(offset).limit(limit),
    )
    return rows, total


def count_unread(conn: Connection, user_id: str) -> int:
    stmt = select(func.count()).where(
        Notification.user_id == user_id, Notification.is_read.is_(False)
    )
    return conn.execute(stmt).scalar_one()


def get_push_token(conn: Connection, user_id: str, device_token: str) -> Optional[dict[str, Any]]:
    stmt = select(PushToken).where(
        PushToken.user_id == user_id, PushToken.device_token == device_token
    )
    return fetch_one(conn, stmt)


def list_active_push_tokens(conn: Connection, user_id: str) -> list[dict[str, Any]]:
    stmt = select(PushToken).where(PushToken.user_id == user_id, PushToken.is_active.is_(True))
    return fetch_all(conn, stmt)
