from typing import Literal, Optional

from pydantic import Field, model_validator

from homestay.schemas.common import CamelModel

KycStatus = Literal["pending", "document_uploaded", "under_review", "approved", "rejected"]


class KycStartPayload(CamelModel):
    full_name: str = Field(..., min_length=1, max_length=200)
    date_of_birth: Optional[str] = Field(None, pattern=r"^\d{4}-\d{2}-\d{2}$")
    nationality: Optional[str] = Field(None, max_length=64)
    document_number: Optional[str] = Field(None, max_length=64)


class KycDocumentPayload(CamelModel):
    """An identity document already uploaded to blob storage."""

    document_type: Literal[
        "passport", "national_id", "drivers_license", "selfie", "proof_of_address"
    ]
    document_url: str = Field(..., min_length=1, max_length=500)
    file_name: str = Field("", max_length=255)
    file_size: int = Field(0, ge=0)
    mime_type: str = Field("", max_length=100)


class KycStatusPayload(CamelModel):
    status: KycStatus
    rejection_reason: Optional[str] = Field(None, max_length=2000)

    @model_validator(mode="after")
    def require_reason_on_reject(self) -> "KycStatusPayload":
        if self.status == "rejected" and not self.rejection_reason:
            raise ValueError("rejection_reason is required when rejecting")
        return self
