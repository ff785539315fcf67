import datetime
from typing import Literal
from uuid import UUID

from pydantic import Field

from venturelab.core.stages import FIRST_STAGE_RANK, LAST_STAGE_RANK
from venturelab.schemas.base import CamelModel

CardStyle = Literal["default", "minimal", "gradient", "modern"]
CardTheme = Literal["light", "dark", "blue", "purple", "green"]


class VentureCreate(CamelModel):
    title: str = Field(min_length=1, max_length=255)
    # Owner when the request carries no X-User-Id header
    user_id: UUID | None = None


class VentureUpdate(CamelModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    current_stage: int | None = Field(default=None, ge=FIRST_STAGE_RANK, le=LAST_STAGE_RANK)
    is_completed: bool | None = None


class VentureRead(CamelModel):
    id: UUID
    user_id: UUID
    title: str
    current_stage: int
    is_completed: bool
    share_token: str | None = None
    is_public: bool = False
    card_style: str = "default"
    card_theme: str = "light"
    card_description: str | None = None
    created_at: datetime.datetime
    updated_at: datetime.datetime | None = None


class ShareUpdate(CamelModel):
    is_public: bool | None = None
    card_style: CardStyle | None = None
    card_theme: CardTheme | None = None
    card_description: str | None = Field(default=None, max_length=200)


class SharedVentureRead(CamelModel):
    """Public venture card, served without ownership checks."""

    title: str
    current_stage: int
    is_completed: bool
    card_style: str
    card_theme: str
    card_description: str | None = None
    completed_stages: list[str] = []
    elevator_pitch: str | None = None


class StageProgress(CamelModel):
    id: str
    label: str
    order: int
    is_completed: bool
    is_reachable: bool


class ProgressRead(CamelModel):
    venture_id: UUID
    current_stage: int
    is_completed: bool
    stages: list[StageProgress]
    can_generate_report: bool
    missing_stages: list[str]
