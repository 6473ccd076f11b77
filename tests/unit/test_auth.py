"""
Unit tests for bearer token verification.
"""

from __future__ import annotations

from datetime import timedelta

import jwt
import pytest

from homestay.auth import (
    create_access_token,
    decode_access_token,
    digest_reset_token,
    hash_password,
    new_reset_token,
    verify_password,
)
from homestay.errors import UnauthorizedError


@pytest.mark.unit
def test_round_trip_returns_subject() -> None:
    token = create_access_token("user-123")

    assert decode_access_token(token) == "user-123"


@pytest.mark.unit
def test_expired_token_is_rejected() -> None:
    token = create_access_token("user-123", ttl=timedelta(seconds=-10))

    with pytest.raises(UnauthorizedError, match="expired"):
        decode_access_token(token)


@pytest.mark.unit
def test_token_signed_with_other_secret_is_rejected() -> None:
    token = jwt.encode({"sub": "user-123"}, "another-secret", algorithm="HS256")

    with pytest.raises(UnauthorizedError):
        decode_access_token(token)


@pytest.mark.unit
def test_garbage_token_is_rejected() -> None:
    with pytest.raises(UnauthorizedError):
        decode_access_token("not-a-jwt")


@pytest.mark.unit
def test_token_without_subject_is_rejected() -> None:
    token = jwt.encode({"role": "guest"}, "test-secret", algorithm="HS256")

    with pytest.raises(UnauthorizedError, match="Invalid token"):
        decode_access_token(token)


@pytest.mark.unit
def test_password_hash_verifies_only_the_original_password() -> None:
    hashed = hash_password("correct horse")

    assert hashed != "correct horse"
    assert hashed.startswith("$2b$")
    assert verify_password("correct horse", hashed) is True
    assert verify_password("wrong horse", hashed) is False


@pytest.mark.unit
def test_account_without_password_never_verifies() -> None:
    assert verify_password("anything", None) is False
    assert verify_password("anything", "") is False


@pytest.mark.unit
def test_reset_token_digest_is_stored_instead_of_token() -> None:
    token, digest = new_reset_token()
    other_token, _ = new_reset_token()

    assert digest == digest_reset_token(token)
    assert digest != token
    assert len(digest) == 64
    assert other_token != token
