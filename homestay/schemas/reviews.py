from typing import Annotated, Optional

from pydantic import Field, model_validator

from homestay.schemas.common import CamelModel

Score = Annotated[int, Field(ge=1, le=5)]


class ReviewCreatePayload(CamelModel):
    """
    Schema for a review of a listing and/or a user.

    When booking_id is given the booking must be COMPLETED and the reviewer
    must be its guest.
    """

    booking_id: Optional[str] = None
    listing_id: Optional[str] = None
    reviewee_id: Optional[str] = None
    overall: int = Field(..., ge=1, le=5)
    cleanliness: Optional[Score] = None
    accuracy: Optional[Score] = None
    communication: Optional[Score] = None
    location: Optional[Score] = None
    check_in: Optional[Score] = None
    value: Optional[Score] = None
    comment: Optional[str] = Field(None, max_length=5000)

    @model_validator(mode="after")
    def check_target(self) -> "ReviewCreatePayload":
        if not (self.booking_id or self.listing_id or self.reviewee_id):
            raise ValueError("A review needs a booking, listing or reviewee")
        return self


class ReviewUpdatePayload(CamelModel):
    overall: Optional[Score] = None
    cleanliness: Optional[Score] = None
    accuracy: Optional[Score] = None
    communication: Optional[Score] = None
    location: Optional[Score] = None
    check_in: Optional[Score] = None
    value: Optional[Score] = None
    comment: Optional[str] = Field(None, max_length=5000)
