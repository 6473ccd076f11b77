from typing import Any, Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.engine import Engine

from homestay.dependencies import get_current_user, get_db_engine, require_admin
from homestay.errors import DomainError
from homestay.schemas.kyc import KycDocumentPayload, KycStartPayload, KycStatusPayload
from homestay.services.kyc import (
    get_kyc_status,
    get_submissions,
    remove_kyc,
    set_kyc_status,
    start_kyc,
    upload_document,
)

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post("/kyc/start", status_code=status.HTTP_201_CREATED)
def start(
    payload: KycStartPayload,
    user: dict[str, Any] = Depends(get_current_user),
    db: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    try:
        return start_kyc(db, user["id"], payload)
    except DomainError:
        raise
    except Exception as e:
        logger.exception("kyc_start_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/kyc/documents", status_code=status.HTTP_201_CREATED)
def add_document(
    payload: KycDocumentPayload,
    user: dict[str, Any] = Depends(get_current_user),
    db: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    try:
        return upload_document(db, user["id"], payload)
    except DomainError:
        raise
    except Exception as e:
        logger.exception("kyc_document_upload_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/kyc/status")
def current_status(
    user: dict[str, Any] = Depends(get_current_user),
    db: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    try:
        return get_kyc_status(db, user["id"])
    except DomainError:
        raise
    except Exception as e:
        logger.exception("kyc_status_fetch_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/kyc")
def delete(
    user: dict[str, Any] = Depends(get_current_user),
    db: Engine = Depends(get_db_engine),
) -> dict[str, str]:
    try:
        return remove_kyc(db, user["id"])
    except DomainError:
        raise
    except Exception as e:
        logger.exception("kyc_delete_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/kyc/admin/submissions")
def submissions(
    status_filter: Optional[str] = Query(None, alias="status"),
    page: int = Query(1),
    limit: int = Query(20),
    admin: dict[str, Any] = Depends(require_admin),
    db: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    try:
        return get_submissions(db, status=status_filter, page=page, limit=limit)
    except DomainError:
        raise
    except Exception as e:
        logger.exception("kyc_submissions_fetch_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.patch("/kyc/admin/{user_id}/status")
def review(
    user_id: str,
    payload: KycStatusPayload,
    admin: dict[str, Any] = Depends(require_admin),
    db: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """Approve or reject a user's verification; approval marks the user verified."""
    try:
        return set_kyc_status(db, user_id, payload)
    except DomainError:
        raise
    except Exception as e:
        logger.exception("kyc_review_failed", user_id=user_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")
