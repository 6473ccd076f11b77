"""Profile reads and updates, and the guest-to-host upgrade."""

from typing import Any

import structlog
from sqlalchemy.engine import Engine

from homestay.db.readers.users import get_user, public_profile
from homestay.db.writers.users import update_user
from homestay.errors import NotFoundError, ValidationError
from homestay.schemas.users import BecomeHostPayload, ProfileUpdatePayload
from homestay.utils.datetime import utc_now

logger = structlog.get_logger(__name__)


def get_profile(engine: Engine, user_id: str) -> dict[str, Any]:
    with engine.connect() as conn:
        user = get_user(conn, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return public_profile(user)


def update_profile(engine: Engine, user_id: str, payload: ProfileUpdatePayload) -> dict[str, Any]:
    changes = payload.model_dump(exclude_unset=True)
    with engine.begin() as conn:
        if get_user(conn, user_id) is None:
            raise NotFoundError("User not found")
        if changes:
            update_user(conn, user_id, changes)
        user = get_user(conn, user_id)

    logger.info("profile_updated", user_id=user_id, fields=sorted(changes))
    return public_profile(user)


def become_host(engine: Engine, user_id: str, payload: BecomeHostPayload) -> dict[str, Any]:
    """
    Upgrade a user to host.

    A guest becomes ``host``; any other role becomes ``both``.

    Raises:
        NotFoundError: Unknown user
        ValidationError: Already a host, or terms not accepted
    """
    if not payload.agree_to_terms:
        raise ValidationError("You must accept the host terms")

    with engine.begin() as conn:
        user = get_user(conn, user_id)
        if user is None:
            raise NotFoundError("User not found")
        if user["is_host"]:
            raise ValidationError("User is already a host")

        changes: dict[str, Any] = {
            "is_host": True,
            "role": "host" if user["role"] == "guest" else "both",
            "host_since": utc_now(),
        }
        changes.update(payload.model_dump(exclude_unset=True, exclude={"agree_to_terms"}))
        update_user(conn, user_id, changes)
        user = get_user(conn, user_id)

    logger.info("user_became_host", user_id=user_id)
    return public_profile(user)
