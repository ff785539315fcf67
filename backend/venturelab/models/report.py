from uuid import UUID

from sqlalchemy import Column, JSON, Text
from sqlmodel import Field

from venturelab.models.base import BaseUUIDModel


class Report(BaseUUIDModel, table=True):
    __tablename__ = "reports"

    venture_id: UUID = Field(foreign_key="ventures.id", ondelete="CASCADE", unique=True, index=True)
    title: str = Field(max_length=255)
    full_report: dict = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    pitch_deck: list = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    elevator_pitch: str = Field(default="", sa_column=Column(Text, nullable=False))
    full_pitch: str = Field(default="", sa_column=Column(Text, nullable=False))
