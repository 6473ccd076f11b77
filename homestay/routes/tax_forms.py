from typing import Any, Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.engine import Engine

from homestay.dependencies import get_current_user, get_db_engine, require_admin
from homestay.errors import DomainError
from homestay.schemas.tax import TaxInfoPayload, TaxStatusPayload, W9Payload
from homestay.services.tax_forms import (
    fetch_tax_info,
    set_tax_status,
    submit_tax_info,
    tax_summary,
    upload_w9,
)

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post("/tax-forms")
def submit(
    payload: TaxInfoPayload,
    user: dict[str, Any] = Depends(get_current_user),
    db: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    try:
        return submit_tax_info(db, user["id"], payload)
    except DomainError:
        raise
    except Exception as e:
        logger.exception("tax_info_submit_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/tax-forms")
def get_mine(
    user: dict[str, Any] = Depends(get_current_user),
    db: Engine = Depends(get_db_engine),
) -> Optional[dict[str, Any]]:
    try:
        return fetch_tax_info(db, user["id"])
    except DomainError:
        raise
    except Exception as e:
        logger.exception("tax_info_fetch_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/tax-forms/w9")
def w9(
    payload: W9Payload,
    user: dict[str, Any] = Depends(get_current_user),
    db: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    try:
        return upload_w9(db, user["id"], payload.w9_form_url)
    except DomainError:
        raise
    except Exception as e:
        logger.exception("w9_upload_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/tax-forms/summary")
def summary(
    year: Optional[int] = Query(None, ge=2000, le=2100),
    user: dict[str, Any] = Depends(get_current_user),
    db: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """Yearly earnings from completed stays; defaults to the current year."""
    try:
        return tax_summary(db, user["id"], year=year)
    except DomainError:
        raise
    except Exception as e:
        logger.exception("tax_summary_failed", year=year, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.patch("/tax-forms/admin/{user_id}/status")
def review(
    user_id: str,
    payload: TaxStatusPayload,
    admin: dict[str, Any] = Depends(require_admin),
    db: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    try:
        return set_tax_status(db, user_id, payload)
    except DomainError:
        raise
    except Exception as e:
        logger.exception("tax_review_failed", user_id=user_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")
