from typing import Any

from sqlalchemy.engine import Connection

from homestay.db._rows import insert_row, update_row
from homestay.models.tax import TaxInfo


def insert_tax_info(conn: Connection, host_id: str, values: dict[str, Any]) -> str:
    return insert_row(conn, TaxInfo, {**values, "host_id": host_id})


def update_tax_info(conn: Connection, tax_info_id: str, values: dict[str, Any]) -> int:
    return update_row(conn, TaxInfo, tax_info_id, values)
