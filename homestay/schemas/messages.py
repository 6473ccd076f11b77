from typing import Literal, Optional

from pydantic import Field

from homestay.schemas.common import CamelModel


class ConversationCreatePayload(CamelModel):
    participant_id: str = Field(..., description="The other participant")
    initial_message: Optional[str] = Field(None, max_length=5000)


class MessageCreatePayload(CamelModel):
    content: str = Field(..., min_length=1, max_length=5000)
    message_type: Literal["text", "image", "system"] = "text"
