import uuid

from fastapi import APIRouter, Depends

from venturelab.api.deps import get_ai_client, get_current_user_id, get_store
from venturelab.controllers import chat_controller
from venturelab.core.ai_client import AIClient
from venturelab.core.stages import Stage
from venturelab.schemas.chat import ChatMessageCreate, ChatMessageRead, ChatTurnResponse
from venturelab.storage.base import VentureStore

router = APIRouter(prefix="/ventures/{venture_id}/stages/{stage}/messages", tags=["chat"])


@router.get("", response_model=list[ChatMessageRead])
async def list_messages(
    venture_id: uuid.UUID,
    stage: Stage,
    user_id: uuid.UUID = Depends(get_current_user_id),
    store: VentureStore = Depends(get_store),
):
    """Get the conversation of a stage, oldest first."""
    return await chat_controller.list_messages(user_id, venture_id, stage, store)


@router.post("", response_model=ChatTurnResponse)
async def send_message(
    venture_id: uuid.UUID,
    stage: Stage,
    payload: ChatMessageCreate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    store: VentureStore = Depends(get_store),
    ai: AIClient = Depends(get_ai_client),
):
    """
    Send a message to the stage coach.

    The reply and the refreshed stage analysis come back together; when the
    analysis cannot be produced the reply is an apology and ``aiAnalysis`` is null.
    """
    return await chat_controller.send_message(user_id, venture_id, stage, payload.content, store, ai)
