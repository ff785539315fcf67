import logging
import uuid

from fastapi import HTTPException

from venturelab.controllers import venture_controller
from venturelab.core.ai_client import AIClient
from venturelab.core.report import ReportSynthesisError, render_markdown, synthesize
from venturelab.core.stages import Stage, missing_required_stages
from venturelab.models.report import Report
from venturelab.storage.base import VentureStore
from venturelab.storage.locks import venture_locks

logger = logging.getLogger(__name__)


async def generate_report(
    user_id: uuid.UUID,
    venture_id: uuid.UUID,
    store: VentureStore,
    ai: AIClient,
) -> Report:
    """Synthesize and store the venture report, then mark the venture complete.

    Every required stage must be complete regardless of ``current_stage``.
    A synthesis failure leaves both the report and the venture untouched.
    """
    venture = await venture_controller.get_venture(user_id, venture_id, store)

    async with venture_locks.hold(("report", venture.id)):
        stage_contents = await store.list_stage_contents(venture.id)
        completed = {Stage(sc.stage) for sc in stage_contents if sc.is_completed}
        missing = missing_required_stages(completed)
        if missing:
            raise HTTPException(
                status_code=400,
                detail="Cannot generate report. The following stages are incomplete: "
                + ", ".join(stage.value for stage in missing),
            )

        try:
            draft = await synthesize(ai, venture, stage_contents)
        except ReportSynthesisError:
            logger.error("Report synthesis failed for venture %s", venture.id, exc_info=True)
            raise HTTPException(status_code=500, detail="Failed to generate report")

        report = await store.upsert_report(
            venture.id,
            title=venture.title,
            full_report=draft.full_report,
            pitch_deck=[slide.model_dump() for slide in draft.pitch_deck],
            elevator_pitch=draft.elevator_pitch,
            full_pitch=draft.full_pitch,
        )
        await store.update_venture(venture.id, is_completed=True)

    logger.info("Report %s generated for venture %s", report.id, venture.id)
    return report


async def get_report(user_id: uuid.UUID, venture_id: uuid.UUID, store: VentureStore) -> Report:
    venture = await venture_controller.get_venture(user_id, venture_id, store)
    report = await store.get_report(venture.id)
    if not report:
        raise HTTPException(status_code=404, detail="Report not found")
    return report


async def get_report_markdown(user_id: uuid.UUID, venture_id: uuid.UUID, store: VentureStore) -> str:
    return render_markdown(await get_report(user_id, venture_id, store))
