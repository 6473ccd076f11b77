"""Identity verification (KYC) records and their admin review."""

from typing import Any, Optional

import structlog
from sqlalchemy.engine import Engine

from homestay.db.readers.kyc import get_kyc_for_user, list_kyc_documents, list_kyc_submissions
from homestay.db.readers.users import get_user, get_user_summaries
from homestay.db.writers.kyc import delete_kyc, insert_kyc, insert_kyc_document, update_kyc
from homestay.db.writers.users import update_user
from homestay.errors import NotFoundError, ValidationError
from homestay.schemas.kyc import KycDocumentPayload, KycStartPayload, KycStatusPayload
from homestay.utils.datetime import utc_now
from homestay.utils.pagination import page_offset, paginated

logger = structlog.get_logger(__name__)

NOT_STARTED = "not_started"

# status -> (description, progress step); rejected is off the happy path
STATUS_DETAILS: dict[str, tuple[str, int]] = {
    NOT_STARTED: ("KYC verification not started", 0),
    "pending": ("KYC verification pending", 1),
    "document_uploaded": ("Documents uploaded, under review", 2),
    "under_review": ("KYC under review", 3),
    "approved": ("KYC verification approved", 4),
    "rejected": ("KYC verification rejected", -1),
}


def _status_details(status: str) -> dict[str, Any]:
    message, step = STATUS_DETAILS.get(status, STATUS_DETAILS["pending"])
    return {"message": message, "step": step}


def start_kyc(engine: Engine, user_id: str, payload: KycStartPayload) -> dict[str, Any]:
    """Start verification, or restart it with new details; status resets to pending."""
    values = payload.model_dump()
    with engine.begin() as conn:
        if get_user(conn, user_id) is None:
            raise NotFoundError("User not found")

        existing = get_kyc_for_user(conn, user_id)
        if existing:
            kyc_id = existing["id"]
            update_kyc(conn, kyc_id, {**values, "status": "pending", "rejection_reason": None})
        else:
            kyc_id = insert_kyc(conn, user_id, values)

    logger.info("kyc_started", user_id=user_id, kyc_id=kyc_id, restarted=bool(existing))
    return {"kyc_id": kyc_id, "status": "pending"}


def upload_document(engine: Engine, user_id: str, payload: KycDocumentPayload) -> dict[str, Any]:
    """
    Attach an already-uploaded identity document to the user's KYC record.

    Raises:
        ValidationError: Verification has not been started
    """
    with engine.begin() as conn:
        kyc = get_kyc_for_user(conn, user_id)
        if kyc is None:
            raise ValidationError("KYC verification process not started")
        document_id = insert_kyc_document(conn, kyc["id"], payload.model_dump())
        update_kyc(conn, kyc["id"], {"status": "document_uploaded"})

    logger.info("kyc_document_uploaded", user_id=user_id, document_type=payload.document_type)
    return {
        "document_id": document_id,
        "document_type": payload.document_type,
        "status": "uploaded",
    }


def get_kyc_status(engine: Engine, user_id: str) -> dict[str, Any]:
    with engine.connect() as conn:
        kyc = get_kyc_for_user(conn, user_id)
        if kyc is None:
            return {
                "status": NOT_STARTED,
                "status_details": _status_details(NOT_STARTED),
                "kyc": None,
            }
        kyc["documents"] = list_kyc_documents(conn, kyc["id"])

    return {"status": kyc["status"], "status_details": _status_details(kyc["status"]), "kyc": kyc}


def set_kyc_status(engine: Engine, user_id: str, payload: KycStatusPayload) -> dict[str, Any]:
    """
    Record an admin decision. Approval marks the user as verified.

    Raises:
        NotFoundError: The user has no KYC record
    """
    now = utc_now()
    with engine.begin() as conn:
        kyc = get_kyc_for_user(conn, user_id)
        if kyc is None:
            raise NotFoundError("KYC verification not found")

        update_kyc(
            conn,
            kyc["id"],
            {
                "status": payload.status,
                "rejection_reason": payload.rejection_reason or None,
                "reviewed_at": now,
            },
        )
        if payload.status == "approved":
            update_user(conn, user_id, {"is_verified": True, "verified_at": now})

    logger.info("kyc_status_updated", user_id=user_id, status=payload.status)
    return {"status": payload.status, "reviewed_at": now}


def get_submissions(
    engine: Engine, status: Optional[str] = None, page: int = 1, limit: int = 20
) -> dict[str, Any]:
    offset = page_offset(page, limit)
    with engine.connect() as conn:
        rows, total = list_kyc_submissions(conn, status, offset, limit)
        users = get_user_summaries(conn, (row["user_id"] for row in rows))
        for row in rows:
            row["user"] = users.get(row["user_id"])
            row["documents"] = list_kyc_documents(conn, row["id"])
    return paginated(rows, page, limit, total)


def remove_kyc(engine: Engine, user_id: str) -> dict[str, str]:
    with engine.begin() as conn:
        kyc = get_kyc_for_user(conn, user_id)
        if kyc is None:
            raise NotFoundError("KYC verification not found")
        delete_kyc(conn, kyc["id"])

    logger.info("kyc_deleted", user_id=user_id)
    return {"message": "KYC verification deleted successfully"}
