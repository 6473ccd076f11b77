from typing import Any

from sqlalchemy import delete
from sqlalchemy.engine import Connection

from homestay.db._rows import insert_row, update_row
from homestay.models.reviews import Review


def insert_review(conn: Connection, values: dict[str, Any]) -> str:
    return insert_row(conn, Review, values)


def update_review(conn: Connection, review_id: str, values: dict[str, Any]) -> int:
    return update_row(conn, Review, review_id, values)


def delete_review(conn: Connection, review_id: str) -> None:
    conn.execute(delete(Review).where(Review.id == review_id))
