from datetime import datetime
from uuid import UUID

from sqlmodel import Field

from venturelab.models.base import BaseUUIDModel, updated_at_field


class Venture(BaseUUIDModel, table=True):
    __tablename__ = "ventures"

    user_id: UUID = Field(index=True)
    title: str = Field(max_length=255)
    current_stage: int = Field(default=1)  # rank of venturelab.core.stages.Stage
    is_completed: bool = Field(default=False)

    # Sharing
    share_token: str | None = Field(default=None, max_length=64, unique=True, index=True)
    is_public: bool = Field(default=False)
    card_style: str = Field(default="default", max_length=20)
    card_theme: str = Field(default="light", max_length=20)
    card_description: str | None = Field(default=None, max_length=200)

    updated_at: datetime = updated_at_field()
