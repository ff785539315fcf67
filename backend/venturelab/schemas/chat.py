import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import Field, field_validator

from venturelab.schemas.base import CamelModel


class ChatMessageCreate(CamelModel):
    content: str = Field(min_length=1)

    @field_validator("content")
    @classmethod
    def reject_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Message content must not be blank")
        return v


class ChatMessageRead(CamelModel):
    id: UUID
    venture_id: UUID
    stage: str
    role: Literal["user", "assistant"]
    content: str
    created_at: datetime.datetime


class ChatTurnResponse(CamelModel):
    user_message: ChatMessageRead
    assistant_message: ChatMessageRead
    ai_analysis: dict[str, Any] | None = None
