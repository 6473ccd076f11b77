"""
Credentials and bearer tokens.

Access tokens are HS256 JWTs whose ``sub`` carries the user id. Passwords
are hashed with bcrypt through passlib. Password-reset tokens are random
URL-safe strings handed to the user once; only their SHA-256 digest is
stored, so a leaked users table cannot be replayed against the reset
endpoint.
"""

import hashlib
import secrets
from datetime import timedelta
from typing import Any, Optional

import jwt
from passlib.context import CryptContext

from homestay.config import ACCESS_TOKEN_TTL_HOURS, BCRYPT_ROUNDS, JWT_ALGORITHM, JWT_SECRET
from homestay.errors import UnauthorizedError
from homestay.utils.datetime import utc_now

DEFAULT_TOKEN_TTL = timedelta(hours=ACCESS_TOKEN_TTL_HOURS)

# bcrypt ignores input past 72 bytes; request schemas cap passwords below that
MAX_PASSWORD_BYTES = 72

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    """
    Check a password against a stored bcrypt hash.

    Accounts without a hash (provisioned without a password) never match.
    """
    if not password_hash:
        return False
    return pwd_context.verify(password, password_hash)


def new_reset_token() -> tuple[str, str]:
    """
    Generate a password-reset token.

    Returns:
        tuple[str, str]: The token to hand to the user and the digest to store
    """
    token = secrets.token_urlsafe(32)
    return token, digest_reset_token(token)


def digest_reset_token(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


def create_access_token(
    user_id: str, ttl: timedelta = DEFAULT_TOKEN_TTL, extra: Optional[dict[str, Any]] = None
) -> str:
    claims = {**(extra or {}), "sub": user_id, "exp": utc_now() + ttl}
    return jwt.encode(claims, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> str:
    """
    Verify a bearer token and return the user id it was issued for.

    Args:
        token: Encoded JWT

    Returns:
        str: The ``sub`` claim

    Raises:
        UnauthorizedError: Bad signature, expired, malformed, or missing ``sub``
    """
    try:
        claims = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Token has expired") from None
    except jwt.InvalidTokenError:
        raise UnauthorizedError("Could not validate credentials") from None

    user_id = claims.get("sub")
    if not user_id:
        raise UnauthorizedError("Invalid token")
    return str(user_id)
