from datetime import datetime
from uuid import UUID

from sqlalchemy import Column, JSON, UniqueConstraint
from sqlmodel import Field

from venturelab.models.base import BaseUUIDModel, updated_at_field


class StageContent(BaseUUIDModel, table=True):
    __tablename__ = "stage_contents"
    __table_args__ = (
        UniqueConstraint("venture_id", "stage", name="uq_venture_stage"),
    )

    venture_id: UUID = Field(foreign_key="ventures.id", ondelete="CASCADE", index=True)
    stage: str = Field(max_length=40)
    content: dict = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    ai_analysis: dict | None = Field(default=None, sa_column=Column(JSON, nullable=True))
    is_completed: bool = Field(default=False)

    updated_at: datetime = updated_at_field()
