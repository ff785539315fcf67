import datetime
from typing import Any
from uuid import UUID

from venturelab.schemas.base import CamelModel


class StageDefinition(CamelModel):
    id: str
    label: str
    order: int


class StageContentUpsert(CamelModel):
    content: dict[str, Any] | None = None
    ai_analysis: dict[str, Any] | None = None
    is_completed: bool | None = None


class StageCompleteRequest(CamelModel):
    content: dict[str, Any] | None = None
    ai_analysis: dict[str, Any] | None = None


class StageContentRead(CamelModel):
    id: UUID
    venture_id: UUID
    stage: str
    content: dict[str, Any]
    ai_analysis: dict[str, Any] | None = None
    is_completed: bool
    created_at: datetime.datetime
    updated_at: datetime.datetime | None = None
