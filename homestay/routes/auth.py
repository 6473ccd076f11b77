from typing import Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.engine import Engine

from homestay.config import RESET_TOKEN_IN_RESPONSE
from homestay.dependencies import get_current_user, get_db_engine
from homestay.errors import DomainError
from homestay.schemas.auth import (
    ChangePasswordPayload,
    ForgotPasswordPayload,
    LoginPayload,
    RegisterPayload,
    ResetPasswordPayload,
)
from homestay.services.auth import (
    RESET_REQUESTED_MESSAGE,
    change_password,
    login,
    register,
    request_password_reset,
    reset_password,
)

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post("/auth/register", status_code=status.HTTP_201_CREATED)
def sign_up(payload: RegisterPayload, db: Engine = Depends(get_db_engine)) -> dict[str, Any]:
    """
    Create an account.

    Returns:
        dict: ``user`` profile and a bearer ``token``
    """
    try:
        return register(db, payload)
    except DomainError:
        raise
    except Exception as e:
        logger.exception("registration_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/auth/login")
def sign_in(payload: LoginPayload, db: Engine = Depends(get_db_engine)) -> dict[str, Any]:
    try:
        return login(db, payload)
    except DomainError:
        raise
    except Exception as e:
        logger.exception("login_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/auth/change-password")
def update_password(
    payload: ChangePasswordPayload,
    user: dict[str, Any] = Depends(get_current_user),
    db: Engine = Depends(get_db_engine),
) -> dict[str, str]:
    try:
        return change_password(db, user["id"], payload.current_password, payload.new_password)
    except DomainError:
        raise
    except Exception as e:
        logger.exception("password_change_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/auth/forgot-password")
def forgot_password(
    payload: ForgotPasswordPayload, db: Engine = Depends(get_db_engine)
) -> dict[str, Any]:
    """
    Start a password reset.

    The response is the same whether or not the email is registered. The
    token itself is only included when RESET_TOKEN_IN_RESPONSE is enabled
    for local development; otherwise it goes out by email.
    """
    try:
        token = request_password_reset(db, payload.email)
    except DomainError:
        raise
    except Exception as e:
        logger.exception("password_reset_request_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")

    response: dict[str, Any] = {"success": True, "message": RESET_REQUESTED_MESSAGE}
    if RESET_TOKEN_IN_RESPONSE and token:
        response["reset_token"] = token
    return response


@router.post("/auth/reset-password")
def complete_reset(
    payload: ResetPasswordPayload, db: Engine = Depends(get_db_engine)
) -> dict[str, str]:
    try:
        return reset_password(db, payload.token, payload.new_password)
    except DomainError:
        raise
    except Exception as e:
        logger.exception("password_reset_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")
