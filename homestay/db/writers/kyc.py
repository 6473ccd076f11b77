from typing import Any

from sqlalchemy import delete
from sqlalchemy.engine import Connection

from homestay.db._rows import insert_row, update_row
from homestay.models.kyc import KycDocument, KycVerification


def insert_kyc(conn: Connection, user_id: str, values: dict[str, Any]) -> str:
    return insert_row(conn, KycVerification, {**values, "user_id": user_id, "status": "pending"})


def update_kyc(conn: Connection, kyc_id: str, values: dict[str, Any]) -> int:
    return update_row(conn, KycVerification, kyc_id, values)


def insert_kyc_document(conn: Connection, kyc_id: str, values: dict[str, Any]) -> str:
    return insert_row(
        conn, KycDocument, {**values, "kyc_verification_id": kyc_id, "status": "uploaded"}
    )


def delete_kyc(conn: Connection, kyc_id: str) -> None:
    """Remove a KYC record together with its documents."""
    conn.execute(delete(KycDocument).where(KycDocument.kyc_verification_id == kyc_id))
    conn.execute(delete(KycVerification).where(KycVerification.id == kyc_id))
