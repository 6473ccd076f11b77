from typing import Any, Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.engine import Engine

from homestay.dependencies import get_current_user, get_db_engine
from homestay.errors import DomainError
from homestay.schemas.notifications import PushTokenPayload, PushTokenRemovePayload
from homestay.services.notifications import (
    get_notifications,
    mark_all_as_read,
    mark_as_read,
    register_push_token,
    remove_notification,
    remove_push_token,
)

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get("/notifications")
def list_mine(
    page: int = Query(1),
    limit: int = Query(20),
    type_filter: Optional[str] = Query(None, alias="type"),
    is_read: Optional[bool] = Query(None, alias="isRead"),
    user: dict[str, Any] = Depends(get_current_user),
    db: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """Paginated notifications, newest first, with the unread count."""
    try:
        return get_notifications(
            db, user["id"], page=page, limit=limit, type_=type_filter, is_read=is_read
        )
    except DomainError:
        raise
    except Exception as e:
        logger.exception("notifications_fetch_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


# Declared before /notifications/{notification_id}/read
@router.patch("/notifications/read-all")
def read_all(
    user: dict[str, Any] = Depends(get_current_user),
    db: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    try:
        return mark_all_as_read(db, user["id"])
    except DomainError:
        raise
    except Exception as e:
        logger.exception("notifications_read_all_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.patch("/notifications/{notification_id}/read")
def read_one(
    notification_id: str,
    user: dict[str, Any] = Depends(get_current_user),
    db: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    try:
        return mark_as_read(db, notification_id, user["id"])
    except DomainError:
        raise
    except Exception as e:
        logger.exception("notification_read_failed", notification_id=notification_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/notifications/push-token", status_code=status.HTTP_201_CREATED)
def add_push_token(
    payload: PushTokenPayload,
    user: dict[str, Any] = Depends(get_current_user),
    db: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    try:
        return register_push_token(db, user["id"], payload.device_token, payload.platform)
    except DomainError:
        raise
    except Exception as e:
        logger.exception("push_token_registration_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/notifications/push-token")
def drop_push_token(
    payload: PushTokenRemovePayload,
    user: dict[str, Any] = Depends(get_current_user),
    db: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    try:
        return remove_push_token(db, user["id"], payload.device_token)
    except DomainError:
        raise
    except Exception as e:
        logger.exception("push_token_removal_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/notifications/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete(
    notification_id: str,
    user: dict[str, Any] = Depends(get_current_user),
    db: Engine = Depends(get_db_engine),
) -> None:
    try:
        remove_notification(db, notification_id, user["id"])
    except DomainError:
        raise
    except Exception as e:
        logger.exception(
            "notification_delete_failed", notification_id=notification_id, error=str(e)
        )
        raise HTTPException(status_code=500, detail="Internal server error")
