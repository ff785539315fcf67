"""
Autopilot: drive a venture through every required stage in one request.

Only the public operations are used (chat turn, stage completion, stage
advance, report generation) so the result is indistinguishable from a
founder clicking through the stages by hand.
"""

import logging
import uuid

from venturelab.controllers import chat_controller, report_controller, stage_controller, venture_controller
from venturelab.core.ai_client import AIClient
from venturelab.core.stages import LAST_STAGE_RANK, REQUIRED_REPORT_STAGES, Stage
from venturelab.storage.base import VentureStore

logger = logging.getLogger(__name__)

STAGE_PROMPTS: dict[Stage, str] = {
    Stage.INITIAL_IDEA: "{idea}",
    Stage.SMART_REFINEMENT: (
        "Let's refine the idea against the SMART criteria. Suggest specific, measurable, "
        "achievable, relevant and time-bound goals for it: {idea}"
    ),
    Stage.OPPORTUNITY_ANALYSIS: (
        "Assess the market opportunity for this idea: market size, growth and competition. {idea}"
    ),
    Stage.VENTURE_THESIS: (
        "Draft the venture thesis for this idea: vision, mission, target customers, "
        "business model and roadmap. {idea}"
    ),
    Stage.VIABILITY_ASSESSMENT: (
        "Assess the viability of this venture: demand, financial projections and key risks. {idea}"
    ),
    Stage.GTM_STRATEGY: (
        "Propose a go-to-market strategy for this venture: segments, channels, pricing "
        "and launch phases. {idea}"
    ),
}


async def run_autopilot(
    user_id: uuid.UUID,
    venture_id: uuid.UUID,
    idea: str,
    store: VentureStore,
    ai: AIClient,
    generate_report: bool = True,
) -> dict:
    """Run each remaining required stage, then optionally generate the report.

    Stages ranked below the venture's current position and stages already
    completed are left as they are.
    """
    venture = await venture_controller.get_venture(user_id, venture_id, store)

    for stage in REQUIRED_REPORT_STAGES:
        if stage.order < venture.current_stage:
            continue

        if not await stage_controller.is_stage_complete(venture.id, stage, store):
            turn = await chat_controller.send_message(
                user_id, venture.id, stage, STAGE_PROMPTS[stage].format(idea=idea), store, ai
            )
            await stage_controller.complete_stage(
                user_id, venture.id, stage, store, ai_analysis=turn["ai_analysis"]
            )
            logger.info("Autopilot completed %s for venture %s", stage.value, venture.id)

        venture = await venture_controller.advance_stage(
            user_id, venture.id, min(stage.order + 1, LAST_STAGE_RANK), store
        )

    report = None
    if generate_report:
        report = await report_controller.generate_report(user_id, venture.id, store, ai)
        venture = await venture_controller.get_venture(user_id, venture.id, store)

    return {
        "venture": venture,
        "stages": await store.list_stage_contents(venture.id),
        "report": report,
    }
