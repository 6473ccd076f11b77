from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.engine import Connection

from homestay.db._rows import fetch_one
from homestay.models.tax import TaxInfo


def get_tax_info(conn: Connection, host_id: str) -> Optional[dict[str, Any]]:
    return fetch_one(conn, select(TaxInfo).where(TaxInfo.host_id == host_id))
