"""Host tax information, W-9 forms and yearly earnings summaries."""

from datetime import datetime, timezone
from typing import Any, Optional

import structlog
from sqlalchemy.engine import Connection, Engine

from homestay.db.readers.bookings import list_completed_host_bookings
from homestay.db.readers.listings import get_listing_summaries
from homestay.db.readers.tax import get_tax_info
from homestay.db.readers.users import get_user
from homestay.db.writers.tax import insert_tax_info, update_tax_info
from homestay.errors import NotFoundError, ValidationError
from homestay.schemas.tax import TaxInfoPayload, TaxStatusPayload
from homestay.utils.datetime import utc_now

logger = structlog.get_logger(__name__)


def _require_host(conn: Connection, user_id: str, action: str) -> None:
    user = get_user(conn, user_id)
    if user is None:
        raise NotFoundError("User not found")
    if not user["is_host"]:
        raise ValidationError(f"Only hosts can {action}")


def _upsert(conn: Connection, host_id: str, values: dict[str, Any]) -> str:
    existing = get_tax_info(conn, host_id)
    if existing:
        update_tax_info(conn, existing["id"], values)
        return existing["id"]
    return insert_tax_info(conn, host_id, values)


def submit_tax_info(engine: Engine, user_id: str, payload: TaxInfoPayload) -> dict[str, Any]:
    """
    Create or replace a host's tax details. Resubmission resets review to pending.

    Raises:
        NotFoundError: Unknown user
        ValidationError: User is not a host
    """
    with engine.begin() as conn:
        _require_host(conn, user_id, "submit tax information")
        _upsert(conn, user_id, {**payload.model_dump(), "status": "pending"})
        tax_info = get_tax_info(conn, user_id)

    logger.info("tax_info_submitted", host_id=user_id)
    return tax_info


def fetch_tax_info(engine: Engine, user_id: str) -> Optional[dict[str, Any]]:
    with engine.connect() as conn:
        if get_user(conn, user_id) is None:
            raise NotFoundError("User not found")
        return get_tax_info(conn, user_id)


def upload_w9(engine: Engine, user_id: str, w9_form_url: str) -> dict[str, Any]:
    with engine.begin() as conn:
        _require_host(conn, user_id, "upload tax forms")
        _upsert(conn, user_id, {"w9_form_url": w9_form_url, "status": "pending"})
        tax_info = get_tax_info(conn, user_id)

    logger.info("w9_uploaded", host_id=user_id)
    return tax_info


def tax_summary(engine: Engine, user_id: str, year: Optional[int] = None) -> dict[str, Any]:
    """
    Earnings from a host's COMPLETED stays that checked out during ``year``.

    Net income is gross minus the platform service fee and taxes.

    Args:
        engine: SQLAlchemy engine
        user_id: Host
        year: Calendar year (defaults to the current UTC year)

    Returns:
        dict: Totals and a per-booking breakdown
    """
    year = year or utc_now().year
    start = datetime(year, 1, 1, tzinfo=timezone.utc)
    end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)

    with engine.connect() as conn:
        _require_host(conn, user_id, "view tax summaries")
        bookings = list_completed_host_bookings(conn, user_id, start, end)
        listings = get_listing_summaries(conn, (b["listing_id"] for b in bookings))

    gross = sum(b["total_price"] or 0 for b in bookings)
    cleaning = sum(b["cleaning_fee"] or 0 for b in bookings)
    service = sum(b["service_fee"] or 0 for b in bookings)
    taxes = sum(b["taxes"] or 0 for b in bookings)

    return {
        "year": year,
        "total_bookings": len(bookings),
        "total_gross_income": gross,
        "total_cleaning_fees": cleaning,
        "total_service_fees": service,
        "total_taxes": taxes,
        "net_income": gross - service - taxes,
        "bookings": [
            {
                "id": b["id"],
                "booking_code": b["booking_code"],
                "property_title": (listings.get(b["listing_id"]) or {}).get("title"),
                "property_city": (listings.get(b["listing_id"]) or {}).get("city"),
                "check_in": b["check_in"],
                "check_out": b["check_out"],
                "total_price": b["total_price"],
                "cleaning_fee": b["cleaning_fee"],
                "service_fee": b["service_fee"],
                "taxes": b["taxes"],
            }
            for b in bookings
        ],
    }


def set_tax_status(engine: Engine, user_id: str, payload: TaxStatusPayload) -> dict[str, Any]:
    now = utc_now()
    with engine.begin() as conn:
        tax_info = get_tax_info(conn, user_id)
        if tax_info is None:
            raise NotFoundError("Tax information not found")
        update_tax_info(
            conn,
            tax_info["id"],
            {"status": payload.status, "admin_notes": payload.admin_notes, "reviewed_at": now},
        )

    logger.info("tax_status_updated", host_id=user_id, status=payload.status)
    return {"status": payload.status, "reviewed_at": now}
