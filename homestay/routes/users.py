from typing import Any

import structlog
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.engine import Engine

from homestay.dependencies import get_current_user, get_db_engine
from homestay.errors import DomainError
from homestay.schemas.users import BecomeHostPayload, ProfileUpdatePayload
from homestay.services.users import become_host, get_profile, update_profile

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get("/users/me")
def me(
    user: dict[str, Any] = Depends(get_current_user),
    db: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    try:
        return get_profile(db, user["id"])
    except DomainError:
        raise
    except Exception as e:
        logger.exception("profile_fetch_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.patch("/users/me")
def update_me(
    payload: ProfileUpdatePayload,
    user: dict[str, Any] = Depends(get_current_user),
    db: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    try:
        return update_profile(db, user["id"], payload)
    except DomainError:
        raise
    except Exception as e:
        logger.exception("profile_update_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/users/me/become-host")
def upgrade_to_host(
    payload: BecomeHostPayload,
    user: dict[str, Any] = Depends(get_current_user),
    db: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """
    Turn the current user into a host.

    Returns:
        dict: The updated profile (is_host true, role host or both)
    """
    try:
        return become_host(db, user["id"], payload)
    except DomainError:
        raise
    except Exception as e:
        logger.exception("become_host_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")
