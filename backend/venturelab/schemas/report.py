import datetime
from typing import Any
from uuid import UUID

from pydantic import Field, field_validator

from venturelab.schemas.base import CamelModel


class PitchSlide(CamelModel):
    title: str
    content: str | list[str]


class ReportDraft(CamelModel):
    """Structured output of the report synthesizer."""

    full_report: dict[str, Any] = Field(
        min_length=1,
        description="Multi-section report. Keys are section names, values are text, lists of text or nested sections."
    )
    pitch_deck: list[PitchSlide] = Field(min_length=1, description="Ordered pitch deck slides.")
    elevator_pitch: str = Field(min_length=1, description="Elevator pitch of roughly 50 words.")
    full_pitch: str = Field(min_length=1, description="Full spoken pitch of roughly 450 words.")

    @field_validator("elevator_pitch", "full_pitch")
    @classmethod
    def _require_text(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class ReportRead(CamelModel):
    id: UUID
    venture_id: UUID
    title: str
    full_report: dict[str, Any]
    pitch_deck: list[PitchSlide]
    elevator_pitch: str
    full_pitch: str
    created_at: datetime.datetime
