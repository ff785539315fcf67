import uuid

from fastapi import HTTPException
from pydantic import ValidationError

from venturelab.controllers import venture_controller
from venturelab.core.stages import Stage
from venturelab.models.stage_content import StageContent
from venturelab.schemas.analysis import normalize_stage_analysis
from venturelab.storage.base import VentureStore
from venturelab.storage.locks import venture_locks

COMPLETION_MARKER = {"completed": True}


def validate_analysis(stage: Stage, ai_analysis: dict | None) -> dict | None:
    """Check a client-supplied analysis against the stage's model; 400 on mismatch."""
    try:
        return normalize_stage_analysis(stage, ai_analysis)
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first["loc"]) or "aiAnalysis"
        raise HTTPException(
            status_code=400,
            detail=f"Invalid {stage.value} analysis at {location}: {first['msg']}",
        ) from exc


async def list_stage_contents(
    user_id: uuid.UUID,
    venture_id: uuid.UUID,
    store: VentureStore,
) -> list[StageContent]:
    venture = await venture_controller.get_venture(user_id, venture_id, store)
    return await store.list_stage_contents(venture.id)


async def get_stage_content(
    user_id: uuid.UUID,
    venture_id: uuid.UUID,
    stage: Stage,
    store: VentureStore,
) -> StageContent:
    venture = await venture_controller.get_venture(user_id, venture_id, store)
    content = await store.get_stage_content(venture.id, stage)
    if not content:
        raise HTTPException(status_code=404, detail="Stage content not found")
    return content


async def upsert_stage_content(
    user_id: uuid.UUID,
    venture_id: uuid.UUID,
    stage: Stage,
    store: VentureStore,
    content: dict | None = None,
    ai_analysis: dict | None = None,
    is_completed: bool | None = None,
) -> StageContent:
    venture = await venture_controller.get_venture(user_id, venture_id, store)
    ai_analysis = validate_analysis(stage, ai_analysis)

    async with venture_locks.hold((venture.id, stage)):
        return await store.upsert_stage_content(
            venture.id,
            stage,
            content=content,
            ai_analysis=ai_analysis,
            is_completed=is_completed,
        )


async def complete_stage(
    user_id: uuid.UUID,
    venture_id: uuid.UUID,
    stage: Stage,
    store: VentureStore,
    content: dict | None = None,
    ai_analysis: dict | None = None,
) -> StageContent:
    """Mark *stage* complete, creating its content when needed.

    Without *content* the completion marker is stored; without *ai_analysis*
    the previously stored analysis is kept.
    """
    venture = await venture_controller.get_venture(user_id, venture_id, store)
    ai_analysis = validate_analysis(stage, ai_analysis)

    async with venture_locks.hold((venture.id, stage)):
        return await store.upsert_stage_content(
            venture.id,
            stage,
            content=content if content is not None else dict(COMPLETION_MARKER),
            ai_analysis=ai_analysis,
            is_completed=True,
        )


async def is_stage_complete(venture_id: uuid.UUID, stage: Stage, store: VentureStore) -> bool:
    content = await store.get_stage_content(venture_id, stage)
    return bool(content and content.is_completed)
