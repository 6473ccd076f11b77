"""
Account registration, login and password management.

Emails are matched case-insensitively by storing them lowercased. Login
failures never say whether the email exists, and neither does the
forgot-password flow.
"""

from datetime import datetime, timedelta
from typing import Any, Optional

import structlog
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from homestay.auth import (
    create_access_token,
    digest_reset_token,
    hash_password,
    new_reset_token,
    verify_password,
)
from homestay.config import PASSWORD_RESET_TTL_MINUTES
from homestay.db.readers.users import (
    get_user,
    get_user_by_email,
    get_user_by_reset_token,
    public_profile,
)
from homestay.db.writers.users import insert_user, update_user
from homestay.errors import NotFoundError, UnauthorizedError, ValidationError
from homestay.metrics import login_attempts
from homestay.schemas.auth import LoginPayload, RegisterPayload
from homestay.utils.datetime import as_utc, utc_now

logger = structlog.get_logger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"
EMAIL_TAKEN = "User with this email already exists"
RESET_REQUESTED_MESSAGE = (
    "If an account with that email exists, we have sent you a password reset link."
)


def _session(user: dict[str, Any]) -> dict[str, Any]:
    token = create_access_token(user["id"], extra={"email": user["email"], "role": user["role"]})
    return {"user": public_profile(user), "token": token}


def register(engine: Engine, payload: RegisterPayload) -> dict[str, Any]:
    """
    Create an account and sign it in.

    Args:
        engine: SQLAlchemy engine
        payload: Email, password and optional profile fields

    Returns:
        dict: ``user`` (public profile) and ``token`` (bearer JWT)

    Raises:
        ValidationError: Email already registered
    """
    email = payload.email.lower()
    values = payload.model_dump(exclude={"email", "password"}, exclude_none=True)
    values.update(email=email, password_hash=hash_password(payload.password))
    if payload.role in ("host", "both"):
        values.update(is_host=True, host_since=utc_now())

    try:
        with engine.begin() as conn:
            if get_user_by_email(conn, email) is not None:
                raise ValidationError(EMAIL_TAKEN)
            user_id = insert_user(conn, values)
            user = get_user(conn, user_id)
    except IntegrityError as e:
        # Lost a race with a concurrent registration for the same email
        raise ValidationError(EMAIL_TAKEN) from e

    logger.info("user_registered", user_id=user_id, role=payload.role)
    return _session(user)


def login(engine: Engine, payload: LoginPayload) -> dict[str, Any]:
    """
    Exchange email and password for a bearer token.

    Raises:
        UnauthorizedError: Unknown email, wrong password, or deactivated account
    """
    email = payload.email.lower()
    with engine.begin() as conn:
        user = get_user_by_email(conn, email)
        if user is None or not verify_password(payload.password, user["password_hash"]):
            login_attempts.labels(result="invalid").inc()
            logger.info("login_rejected", reason="invalid_credentials")
            raise UnauthorizedError(INVALID_CREDENTIALS)

        if not user["is_active"]:
            login_attempts.labels(result="inactive").inc()
            logger.info("login_rejected", user_id=user["id"], reason="inactive")
            raise UnauthorizedError("Account is suspended or deactivated")

        update_user(conn, user["id"], {"last_login_at": utc_now()})
        user = get_user(conn, user["id"])

    login_attempts.labels(result="success").inc()
    logger.info("user_logged_in", user_id=user["id"])
    return _session(user)


def change_password(
    engine: Engine, user_id: str, current_password: str, new_password: str
) -> dict[str, str]:
    """
    Replace a signed-in user's password after checking the current one.

    Raises:
        NotFoundError: Unknown user
        ValidationError: Current password is wrong
    """
    with engine.begin() as conn:
        user = get_user(conn, user_id)
        if user is None:
            raise NotFoundError("User not found")
        if not verify_password(current_password, user["password_hash"]):
            raise ValidationError("Current password is incorrect")

        update_user(conn, user_id, {"password_hash": hash_password(new_password)})

    logger.info("password_changed", user_id=user_id)
    return {"message": "Password changed successfully"}


def request_password_reset(
    engine: Engine, email: str, now: Optional[datetime] = None
) -> Optional[str]:
    """
    Issue a password-reset token for an account.

    Only the token's digest is stored; a new request replaces any earlier
    token. Delivering the token to the user is the caller's job.

    Args:
        engine: SQLAlchemy engine
        email: Account email
        now: Issue time (defaults to current UTC time)

    Returns:
        Optional[str]: The reset token, or None when no account matches
    """
    now = as_utc(now) if now is not None else utc_now()

    with engine.begin() as conn:
        user = get_user_by_email(conn, email.lower())
        if user is None:
            logger.info("password_reset_unknown_email")
            return None

        token, digest = new_reset_token()
        update_user(
            conn,
            user["id"],
            {
                "password_reset_token": digest,
                "password_reset_expires": now + timedelta(minutes=PASSWORD_RESET_TTL_MINUTES),
            },
        )

    logger.info("password_reset_requested", user_id=user["id"])
    return token


def reset_password(
    engine: Engine, token: str, new_password: str, now: Optional[datetime] = None
) -> dict[str, str]:
    """
    Set a new password using an unexpired reset token. Tokens are single-use.

    Raises:
        ValidationError: Token unknown, already used, or expired
    """
    now = as_utc(now) if now is not None else utc_now()

    with engine.begin() as conn:
        user = get_user_by_reset_token(conn, digest_reset_token(token), now)
        if user is None:
            raise ValidationError("Invalid or expired reset token")

        update_user(
            conn,
            user["id"],
            {
                "password_hash": hash_password(new_password),
                "password_reset_token": None,
                "password_reset_expires": None,
            },
        )

    logger.info("password_reset_completed", user_id=user["id"])
    return {"message": "Password reset successfully"}
