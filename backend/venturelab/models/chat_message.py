from uuid import UUID

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from venturelab.models.base import BaseUUIDModel


class ChatMessage(BaseUUIDModel, table=True):
    __tablename__ = "chat_messages"
    __table_args__ = (
        UniqueConstraint("venture_id", "stage", "seq", name="uq_message_seq"),
    )

    venture_id: UUID = Field(foreign_key="ventures.id", ondelete="CASCADE", index=True)
    stage: str = Field(max_length=40, index=True)
    # Insertion position within the (venture, stage) thread, starting at 1
    seq: int = Field(default=0)
    role: str = Field(max_length=20)  # "user" or "assistant"
    content: str  # TEXT by default
