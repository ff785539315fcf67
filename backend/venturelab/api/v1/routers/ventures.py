import uuid

from fastapi import APIRouter, Depends, Query, Response, status

from venturelab.api.deps import get_current_user_id, get_header_user_id, get_store
from venturelab.controllers import venture_controller
from venturelab.schemas.venture import ProgressRead, VentureCreate, VentureRead, VentureUpdate
from venturelab.storage.base import VentureStore

router = APIRouter(prefix="/ventures", tags=["ventures"])


@router.get("", response_model=list[VentureRead])
async def list_ventures(
    user_id: uuid.UUID | None = Query(None, alias="userId", description="Defaults to the caller"),
    caller_id: uuid.UUID = Depends(get_current_user_id),
    store: VentureStore = Depends(get_store),
):
    """List ventures of a user, most recently updated first."""
    return await venture_controller.list_ventures(user_id or caller_id, store)


@router.post("", response_model=VentureRead, status_code=status.HTTP_201_CREATED)
async def create_venture(
    payload: VentureCreate,
    header_user_id: uuid.UUID | None = Depends(get_header_user_id),
    store: VentureStore = Depends(get_store),
):
    """Create a venture at stage 1; the first stage opens with a welcome message."""
    return await venture_controller.create_venture(header_user_id, payload, store)


@router.get("/{venture_id}", response_model=VentureRead)
async def get_venture(
    venture_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    store: VentureStore = Depends(get_store),
):
    return await venture_controller.get_venture(user_id, venture_id, store)


@router.patch("/{venture_id}", response_model=VentureRead)
async def update_venture(
    venture_id: uuid.UUID,
    payload: VentureUpdate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    store: VentureStore = Depends(get_store),
):
    """Rename, complete or advance a venture. ``currentStage`` only moves forward."""
    return await venture_controller.update_venture(user_id, venture_id, payload, store)


@router.delete("/{venture_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_venture(
    venture_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    store: VentureStore = Depends(get_store),
):
    await venture_controller.delete_venture(user_id, venture_id, store)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{venture_id}/progress", response_model=ProgressRead)
async def get_progress(
    venture_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    store: VentureStore = Depends(get_store),
):
    """Per-stage completion and reachability, plus report eligibility."""
    return await venture_controller.get_progress(user_id, venture_id, store)
