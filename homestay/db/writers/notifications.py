from typing import Any, Optional

from sqlalchemy import delete, update
from sqlalchemy.engine import Connection

from homestay.db._rows import insert_row, update_row
from homestay.models.notifications import Notification, PushToken
from homestay.utils.datetime import utc_now


def insert_notification(
    conn: Connection,
    user_id: str,
    type_: str,
    title: str,
    message: str,
    data: Optional[dict[str, Any]] = None,
    related_id: Optional[str] = None,
) -> str:
    return insert_row(
        conn,
        Notification,
        {
            "user_id": user_id,
            "type": type_,
            "title": title,
            "message": message,
            "data": data or {},
            "related_id": related_id,
            "is_read": False,
        },
    )


def mark_read(conn: Connection, notification_id: str) -> None:
    update_row(conn, Notification, notification_id, {"is_read": True, "read_at": utc_now()})


def mark_all_read(conn: Connection, user_id: str) -> int:
    """
    Mark every unread notification of a user as read.

    Returns:
        int: Number of notifications updated
    """
    result = conn.execute(
        update(Notification)
        .where(Notification.user_id == user_id, Notification.is_read.is_(False))
        .values(is_read=True, read_at=utc_now())
    )
    return result.rowcount


def delete_notification(conn: Connection, notification_id: str) -> None:
    conn.execute(delete(Notification).where(Notification.id == notification_id))


def insert_push_token(conn: Connection, user_id: str, device_token: str, platform: str) -> str:
    return insert_row(
        conn,
        PushToken,
        {"user_id": user_id, "device_token": device_token, "platform": platform, "is_active": True},
    )


def update_push_token(conn: Connection, token_id: str, values: dict[str, Any]) -> None:
    update_row(conn, PushToken, token_id, values)


def deactivate_push_tokens(conn: Connection, user_id: str, device_token: str) -> int:
    result = conn.execute(
        update(PushToken)
        .where(PushToken.user_id == user_id, PushToken.device_token == device_token)
        .values(is_active=False, updated_at=utc_now())
    )
    return result.rowcount
