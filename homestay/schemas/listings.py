from typing import Literal, Optional

from pydantic import Field, model_validator

from homestay.schemas.common import CamelModel

PropertyType = Literal[
    "apartment",
    "villa",
    "studio",
    "townhouse",
    "penthouse",
    "compound_villa",
    "room",
    "duplex",
    "chalet",
    "farm_house",
    "shared_room",
]


class ListingCreatePayload(CamelModel):
    """
    Schema for a new listing. Listings are created as inactive drafts.

    ``monthly_price`` is the rate charged per night.
    """

    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    property_type: PropertyType
    city: str = Field(..., min_length=1, max_length=100)
    area: Optional[str] = Field(None, max_length=100)
    district: Optional[str] = Field(None, max_length=100)
    bedrooms: int = Field(1, ge=0)
    bathrooms: float = Field(1, ge=0)
    beds: int = Field(1, ge=1)
    max_guests: int = Field(1, ge=1)
    monthly_price: float = Field(..., ge=0, description="Nightly rate")
    cleaning_fee: Optional[float] = Field(None, ge=0)
    security_deposit: Optional[float] = Field(None, ge=0)
    min_nights: int = Field(1, ge=1)
    max_nights: Optional[int] = Field(None, ge=1, le=365)
    instant_book: bool = False
    check_in_time: Optional[str] = Field(None, max_length=10)
    check_out_time: Optional[str] = Field(None, max_length=10)
    house_rules: Optional[str] = None
    photos: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_night_bounds(self) -> "ListingCreatePayload":
        if self.max_nights is not None and self.min_nights > self.max_nights:
            raise ValueError("min_nights cannot exceed max_nights")
        return self


class ListingUpdatePayload(CamelModel):
    """Schema for updating a listing. All fields are optional."""

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    property_type: Optional[PropertyType] = None
    city: Optional[str] = Field(None, min_length=1, max_length=100)
    area: Optional[str] = Field(None, max_length=100)
    district: Optional[str] = Field(None, max_length=100)
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[float] = Field(None, ge=0)
    beds: Optional[int] = Field(None, ge=1)
    max_guests: Optional[int] = Field(None, ge=1)
    monthly_price: Optional[float] = Field(None, ge=0)
    cleaning_fee: Optional[float] = Field(None, ge=0)
    security_deposit: Optional[float] = Field(None, ge=0)
    min_nights: Optional[int] = Field(None, ge=1)
    max_nights: Optional[int] = Field(None, ge=1, le=365)
    instant_book: Optional[bool] = None
    check_in_time: Optional[str] = Field(None, max_length=10)
    check_out_time: Optional[str] = Field(None, max_length=10)
    house_rules: Optional[str] = None
    photos: Optional[list[str]] = None
    status: Optional[Literal["draft", "active", "inactive"]] = Field(
        None, description="Publishing state; 'active' makes the listing bookable"
    )
    is_active: Optional[bool] = None
