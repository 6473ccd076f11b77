from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.engine import Connection

from homestay.db._rows import count_rows, fetch_all, fetch_one
from homestay.models.kyc import KycDocument, KycVerification


def get_kyc_for_user(conn: Connection, user_id: str) -> Optional[dict[str, Any]]:
    return fetch_one(conn, select(KycVerification).where(KycVerification.user_id == user_id))


def list_kyc_documents(conn: Connection, kyc_verification_id: str) -> list[dict[str, Any]]:
    stmt = (
        select(KycDocument)
        .where(KycDocument.kyc_verification_id == kyc_verification_id)
        .order_by(KycDocument.created_at)
    )
    return fetch_all(conn, stmt)


def list_kyc_submissions(
    conn: Connection, status: Optional[str], offset: int, limit: int
) -> tuple[list[dict[str, Any]], int]:
    """
    Page through KYC records for admin review, most recently updated first.

    Args:
        conn: Active database connection
        status: Optional status filter
        offset: Rows to skip
        limit: Page size

    Returns:
        tuple: (rows for the page, total matching rows)
    """
    stmt = select(KycVerification)
    if status:
        stmt = stmt.where(KycVerification.status == status)
    total = count_rows(conn, stmt)
    rows = fetch_all(
        conn,
        stmt.order_by(KycVerification.updated_at.desc(), KycVerification.id)
        .offset(offset)
        .limit(limit),
    )
    return rows, total
