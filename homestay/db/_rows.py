"""
Shared row helpers for readers and writers.

Readers return plain dicts rather than ORM instances. Datetimes are
normalized to timezone-aware UTC on the way out because SQLite returns
stored timestamps without tzinfo.
"""

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import func, insert, select, update
from sqlalchemy.engine import Connection, RowMapping
from sqlalchemy.sql import Select

from homestay.models.base import new_id
from homestay.utils.datetime import as_utc, utc_now


def to_dict(row: RowMapping) -> dict[str, Any]:
    return {
        key: as_utc(value) if isinstance(value, datetime) else value
        for key, value in row.items()
    }


def fetch_one(conn: Connection, stmt: Select[Any]) -> Optional[dict[str, Any]]:
    row = conn.execute(stmt).mappings().first()
    return to_dict(row) if row else None


def fetch_all(conn: Connection, stmt: Select[Any]) -> list[dict[str, Any]]:
    return [to_dict(row) for row in conn.execute(stmt).mappings().all()]


def count_rows(conn: Connection, stmt: Select[Any]) -> int:
    """
    Count the rows a select would return, ignoring its ordering and paging.

    Args:
        conn: Active database connection
        stmt: Filtered select (without limit/offset)

    Returns:
        int: Number of matching rows
    """
    subquery = stmt.order_by(None).subquery()
    return conn.execute(select(func.count()).select_from(subquery)).scalar_one()


def insert_row(conn: Connection, table: type, values: dict[str, Any]) -> str:
    """
    Insert a single row, filling id and timestamps when absent.

    Args:
        conn: Active database connection (within transaction)
        table: ORM model class
        values: Column values

    Returns:
        str: Primary key of the inserted row
    """
    now = utc_now()
    row = {"id": new_id(), "created_at": now, **values}
    if "updated_at" in table.__table__.columns:
        row.setdefault("updated_at", now)

    conn.execute(insert(table).values(**row))
    return row["id"]


def update_row(conn: Connection, table: type, row_id: str, values: dict[str, Any]) -> int:
    """
    Update a single row by primary key, bumping updated_at when the table has one.

    Returns:
        int: Number of rows updated (0 when the id does not exist)
    """
    changes = dict(values)
    if "updated_at" in table.__table__.columns:
        changes.setdefault("updated_at", utc_now())

    result = conn.execute(update(table).where(table.id == row_id).values(**changes))
    return result.rowcount
