import uuid

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from venturelab.api.deps import get_ai_client, get_current_user_id, get_store
from venturelab.controllers import report_controller
from venturelab.core.ai_client import AIClient
from venturelab.schemas.report import ReportRead
from venturelab.storage.base import VentureStore

router = APIRouter(prefix="/ventures/{venture_id}/report", tags=["reports"])


@router.post("", response_model=ReportRead)
async def generate_report(
    venture_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    store: VentureStore = Depends(get_store),
    ai: AIClient = Depends(get_ai_client),
):
    """Generate (or regenerate) the venture report. Requires the six preceding stages complete."""
    return await report_controller.generate_report(user_id, venture_id, store, ai)


@router.get("", response_model=ReportRead)
async def get_report(
    venture_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    store: VentureStore = Depends(get_store),
):
    return await report_controller.get_report(user_id, venture_id, store)


@router.get("/markdown", response_class=PlainTextResponse)
async def get_report_markdown(
    venture_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    store: VentureStore = Depends(get_store),
):
    """Export the report as Markdown."""
    markdown = await report_controller.get_report_markdown(user_id, venture_id, store)
    return PlainTextResponse(markdown, media_type="text/markdown")
