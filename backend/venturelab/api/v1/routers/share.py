import uuid

from fastapi import APIRouter, Depends

from venturelab.api.deps import get_current_user_id, get_store
from venturelab.controllers import share_controller
from venturelab.schemas.venture import SharedVentureRead, ShareUpdate, VentureRead
from venturelab.storage.base import VentureStore

router = APIRouter(tags=["share"])


@router.patch("/ventures/{venture_id}/share", response_model=VentureRead)
async def update_share_settings(
    venture_id: uuid.UUID,
    payload: ShareUpdate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    store: VentureStore = Depends(get_store),
):
    """Update the public card of a venture. Making it public mints a share token."""
    return await share_controller.update_share_settings(user_id, venture_id, payload, store)


@router.get("/shared/{token}", response_model=SharedVentureRead)
async def get_shared_venture(token: str, store: VentureStore = Depends(get_store)):
    """Public venture card. No authentication."""
    return await share_controller.get_shared_venture(token, store)
