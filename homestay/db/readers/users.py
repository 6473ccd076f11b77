from datetime import datetime
from typing import Any, Iterable, Optional

from sqlalchemy import select
from sqlalchemy.engine import Connection

from homestay.db._rows import fetch_all, fetch_one
from homestay.models.users import User

# Public profile fields attached to bookings, reviews and conversations
USER_SUMMARY_COLUMNS = (
    User.id,
    User.first_name,
    User.last_name,
    User.profile_image,
    User.is_verified,
)


# Never returned to clients
CREDENTIAL_FIELDS = frozenset({"password_hash", "password_reset_token", "password_reset_expires"})


def public_profile(user: dict[str, Any]) -> dict[str, Any]:
    """Copy of a user row without password or reset-token columns."""
    return {key: value for key, value in user.items() if key not in CREDENTIAL_FIELDS}


def get_user(conn: Connection, user_id: str) -> Optional[dict[str, Any]]:
    """
    Fetch a full user row by id.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        user_id (str): User id (the JWT subject).

    Returns:
        Optional[dict[str, Any]]: User row or None if not found.
    """
    return fetch_one(conn, select(User).where(User.id == user_id))


def get_user_by_email(conn: Connection, email: str) -> Optional[dict[str, Any]]:
    return fetch_one(conn, select(User).where(User.email == email))


def get_user_by_reset_token(
    conn: Connection, token_digest: str, now: datetime
) -> Optional[dict[str, Any]]:
    """User holding an unexpired reset token with this digest, if any."""
    stmt = select(User).where(
        User.password_reset_token == token_digest,
        User.password_reset_expires >= now,
    )
    return fetch_one(conn, stmt)


def get_user_summaries(conn: Connection, user_ids: Iterable[str]) -> dict[str, dict[str, Any]]:
    """
    Fetch public profile summaries for a batch of users.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        user_ids (Iterable[str]): Ids to look up; duplicates and None are ignored.

    Returns:
        dict[str, dict[str, Any]]: Summaries keyed by user id.
    """
    ids = {user_id for user_id in user_ids if user_id}
    if not ids:
        return {}
    rows = fetch_all(conn, select(*USER_SUMMARY_COLUMNS).where(User.id.in_(ids)))
    return {row["id"]: row for row in rows}
