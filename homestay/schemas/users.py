from typing import Optional

from pydantic import Field

from homestay.schemas.common import CamelModel


class ProfileUpdatePayload(CamelModel):
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=32)
    bio: Optional[str] = Field(None, max_length=2000)
    profile_image: Optional[str] = Field(None, max_length=500)


class BecomeHostPayload(CamelModel):
    """Optional profile details supplied when a guest upgrades to host."""

    bio: Optional[str] = Field(None, max_length=2000)
    phone: Optional[str] = Field(None, max_length=32)
    agree_to_terms: bool = Field(True, description="Host terms must be accepted")
