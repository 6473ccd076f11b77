from pydantic import Field

from homestay.schemas.common import CamelModel


class PushTokenPayload(CamelModel):
    device_token: str = Field(..., min_length=1, max_length=255)
    platform: str = Field("mobile", max_length=16, description="ios, android, web or mobile")


class PushTokenRemovePayload(CamelModel):
    device_token: str = Field(..., min_length=1, max_length=255)
