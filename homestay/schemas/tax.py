from typing import Literal, Optional

from pydantic import Field

from homestay.schemas.common import CamelModel

TaxStatus = Literal["pending", "approved", "rejected"]


class TaxInfoPayload(CamelModel):
    tax_id_number: str = Field(..., min_length=1, max_length=64)
    business_name: Optional[str] = Field(None, max_length=200)
    business_address: Optional[str] = None
    tax_classification: Optional[str] = Field(None, max_length=64)


class W9Payload(CamelModel):
    w9_form_url: str = Field(..., min_length=1, max_length=500)


class TaxStatusPayload(CamelModel):
    status: TaxStatus
    admin_notes: Optional[str] = Field(None, max_length=2000)
