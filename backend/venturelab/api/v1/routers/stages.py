import uuid

from fastapi import APIRouter, Depends, status

from venturelab.api.deps import get_current_user_id, get_store
from venturelab.controllers import stage_controller
from venturelab.core.stages import Stage, ordered_stages
from venturelab.schemas.stage import (
    StageCompleteRequest,
    StageContentRead,
    StageContentUpsert,
    StageDefinition,
)
from venturelab.storage.base import VentureStore

router = APIRouter(tags=["stages"])


@router.get("/stages", response_model=list[StageDefinition])
async def list_stages():
    """The stage catalogue in canonical order."""
    return [StageDefinition(id=s.value, label=s.label, order=s.order) for s in ordered_stages()]


@router.get("/ventures/{venture_id}/stages", response_model=list[StageContentRead])
async def list_stage_contents(
    venture_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    store: VentureStore = Depends(get_store),
):
    return await stage_controller.list_stage_contents(user_id, venture_id, store)


@router.get("/ventures/{venture_id}/stages/{stage}", response_model=StageContentRead)
async def get_stage_content(
    venture_id: uuid.UUID,
    stage: Stage,
    user_id: uuid.UUID = Depends(get_current_user_id),
    store: VentureStore = Depends(get_store),
):
    return await stage_controller.get_stage_content(user_id, venture_id, stage, store)


@router.post(
    "/ventures/{venture_id}/stages/{stage}",
    response_model=StageContentRead,
    status_code=status.HTTP_201_CREATED,
)
async def upsert_stage_content(
    venture_id: uuid.UUID,
    stage: Stage,
    payload: StageContentUpsert,
    user_id: uuid.UUID = Depends(get_current_user_id),
    store: VentureStore = Depends(get_store),
):
    """Create or update the content of a stage; omitted fields keep their stored values."""
    return await stage_controller.upsert_stage_content(
        user_id,
        venture_id,
        stage,
        store,
        content=payload.content,
        ai_analysis=payload.ai_analysis,
        is_completed=payload.is_completed,
    )


@router.post("/ventures/{venture_id}/stages/{stage}/complete", response_model=StageContentRead)
async def complete_stage(
    venture_id: uuid.UUID,
    stage: Stage,
    payload: StageCompleteRequest | None = None,
    user_id: uuid.UUID = Depends(get_current_user_id),
    store: VentureStore = Depends(get_store),
):
    """Mark a stage complete. Does not move the venture's stage pointer."""
    payload = payload or StageCompleteRequest()
    return await stage_controller.complete_stage(
        user_id,
        venture_id,
        stage,
        store,
        content=payload.content,
        ai_analysis=payload.ai_analysis,
    )
