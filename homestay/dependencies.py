"""
FastAPI dependency injection providers.

Dependencies can be overridden in tests using app.dependency_overrides, making
it easy to inject mock objects for isolated unit testing.
"""

from __future__ import annotations

from typing import Any, Generator, Optional

import structlog
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.engine import Engine

from homestay.auth import decode_access_token
from homestay.db.engine import engine
from homestay.db.readers.users import get_user
from homestay.errors import ForbiddenError, UnauthorizedError

logger = structlog.get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_db_engine() -> Generator[Engine, None, None]:
    """
    Provide database engine for dependency injection.

    Yields:
        Engine: SQLAlchemy database engine

    Testing Example:
        >>> from unittest.mock import Mock
        >>> mock_engine = Mock(spec=Engine)
        >>> app.dependency_overrides[get_db_engine] = lambda: mock_engine
    """
    yield engine


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """
    Resolve the authenticated user from the Authorization header.

    Returns:
        dict: The user's row

    Raises:
        UnauthorizedError: Missing or invalid token, unknown or inactive user
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise UnauthorizedError("Not authenticated")

    user_id = decode_access_token(credentials.credentials)

    with db.connect() as conn:
        user = get_user(conn, user_id)

    if user is None or not user["is_active"]:
        logger.info("auth_rejected", user_id=user_id, reason="unknown_or_inactive")
        raise UnauthorizedError("User not found or inactive")

    structlog.contextvars.bind_contextvars(user_id=user_id)
    return user


def require_admin(user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    if not user["is_admin"]:
        raise ForbiddenError("Admin access required")
    return user


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Engine = Depends(get_db_engine),
) -> Optional[dict[str, Any]]:
    """Like get_current_user, but anonymous requests resolve to None."""
    if credentials is None:
        return None
    return get_current_user(credentials, db)
