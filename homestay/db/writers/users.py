from typing import Any

import structlog
from sqlalchemy.engine import Connection

from homestay.db._rows import insert_row, update_row
from homestay.models.users import User

logger = structlog.get_logger(__name__)


def insert_user(conn: Connection, values: dict[str, Any]) -> str:
    user_id = insert_row(conn, User, values)
    logger.info("user_inserted", user_id=user_id)
    return user_id


def update_user(conn: Connection, user_id: str, values: dict[str, Any]) -> int:
    """
    Apply profile changes to a user row.

    Args:
        conn: Active database connection (within transaction)
        user_id: User to update
        values: Column values to set

    Returns:
        int: Rows updated
    """
    return update_row(conn, User, user_id, values)
