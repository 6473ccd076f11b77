from typing import Literal, Optional

from pydantic import EmailStr, Field, field_validator

from homestay.auth import MAX_PASSWORD_BYTES
from homestay.schemas.common import CamelModel

MIN_PASSWORD_LENGTH = 8


def _check_password_bytes(value: str) -> str:
    if len(value.encode()) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return value


class RegisterPayload(CamelModel):
    """
    Schema for creating an account.

    Registering as ``host`` or ``both`` makes the account a host straight
    away; admins are never created through this endpoint.
    """

    email: EmailStr
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=32)
    bio: Optional[str] = Field(None, max_length=2000)
    role: Literal["guest", "host", "both"] = "guest"

    @field_validator("password")
    @classmethod
    def fits_bcrypt(cls, value: str) -> str:
        return _check_password_bytes(value)


class LoginPayload(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class ChangePasswordPayload(CamelModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)

    @field_validator("new_password")
    @classmethod
    def fits_bcrypt(cls, value: str) -> str:
        return _check_password_bytes(value)


class ForgotPasswordPayload(CamelModel):
    email: EmailStr


class ResetPasswordPayload(CamelModel):
    token: str = Field(..., min_length=1, max_length=128)
    new_password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)

    @field_validator("new_password")
    @classmethod
    def fits_bcrypt(cls, value: str) -> str:
        return _check_password_bytes(value)
