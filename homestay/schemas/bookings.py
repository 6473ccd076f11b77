from datetime import date, datetime
from typing import Optional, Union

from pydantic import Field, field_validator

from homestay.schemas.common import CamelModel
from homestay.utils.datetime import as_utc


class BookingCreatePayload(CamelModel):
    """
    Schema for a guest's booking request.

    check_in/check_out accept either a date (``2025-03-01``) or a full
    ISO datetime and are normalized to timezone-aware UTC.
    """

    listing_id: str = Field(..., description="Listing to book")
    check_in: Union[datetime, date] = Field(..., description="Arrival date or datetime")
    check_out: Union[datetime, date] = Field(..., description="Departure date or datetime")
    adults: int = Field(1, ge=1, description="Number of adults")
    children: int = Field(0, ge=0)
    infants: int = Field(0, ge=0)
    pets: int = Field(0, ge=0)
    guest_message: Optional[str] = Field(None, max_length=2000)
    special_requests: Optional[str] = Field(None, max_length=2000)
    arrival_time: Optional[str] = Field(None, max_length=32)
    guest_phone: Optional[str] = Field(None, max_length=32)
    guest_email: Optional[str] = Field(None, max_length=255)

    @field_validator("check_in", "check_out", mode="after")
    @classmethod
    def normalize_to_utc(cls, value: Union[datetime, date]) -> datetime:
        return as_utc(value)


class BookingStatusPayload(CamelModel):
    """Schema for a status change requested by the host or guest."""

    status: str = Field(..., description="Target status, e.g. CONFIRMED")
    host_message: Optional[str] = Field(None, max_length=2000)
    cancel_reason: Optional[str] = Field(None, max_length=1000)


class BookingCancelPayload(CamelModel):
    cancel_reason: Optional[str] = Field(None, max_length=1000)
