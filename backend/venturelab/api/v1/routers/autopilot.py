import uuid

from fastapi import APIRouter, Depends

from venturelab.api.deps import get_ai_client, get_current_user_id, get_store
from venturelab.controllers import journey_controller
from venturelab.core.ai_client import AIClient
from venturelab.schemas.journey import AutopilotRequest, AutopilotResponse
from venturelab.storage.base import VentureStore

router = APIRouter(prefix="/ventures/{venture_id}/autopilot", tags=["autopilot"])


@router.post("", response_model=AutopilotResponse)
async def run_autopilot(
    venture_id: uuid.UUID,
    payload: AutopilotRequest,
    user_id: uuid.UUID = Depends(get_current_user_id),
    store: VentureStore = Depends(get_store),
    ai: AIClient = Depends(get_ai_client),
):
    """Drive the venture through every remaining stage from a single idea description."""
    return await journey_controller.run_autopilot(
        user_id, venture_id, payload.idea, store, ai, generate_report=payload.generate_report
    )
