"""
Chat turn handling.

A turn for (venture, stage):

1. Append the user message (always persisted, even if analysis fails).
2. Run the stage's analysis routine over the prior conversation, with the
   analyses of earlier stages as context.
3. Append the assistant reply; on analysis failure a fixed apology instead.
4. Upsert the new analysis into the stage content (completion untouched).

The whole turn holds the (venture, stage) lock so concurrent turns on the
same pair never interleave their messages.
"""

import logging
import uuid

from venturelab.controllers import venture_controller
from venturelab.core.ai_client import AIClient
from venturelab.core.analysis import AnalysisError, analyze
from venturelab.core.stages import Stage
from venturelab.models.chat_message import ChatMessage
from venturelab.storage.base import VentureStore
from venturelab.storage.locks import venture_locks

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "I apologize, but I encountered an error processing your request. Please try again."


async def list_messages(
    user_id: uuid.UUID,
    venture_id: uuid.UUID,
    stage: Stage,
    store: VentureStore,
) -> list[ChatMessage]:
    """Return the conversation for (venture, stage), oldest first."""
    venture = await venture_controller.get_venture(user_id, venture_id, store)
    return await store.list_messages(venture.id, stage)


async def _earlier_findings(venture_id: uuid.UUID, stage: Stage, store: VentureStore) -> dict:
    contents = await store.list_stage_contents(venture_id)
    return {
        sc.stage: sc.ai_analysis
        for sc in contents
        if sc.ai_analysis and Stage(sc.stage).order < stage.order
    }


async def send_message(
    user_id: uuid.UUID,
    venture_id: uuid.UUID,
    stage: Stage,
    content: str,
    store: VentureStore,
    ai: AIClient,
) -> dict:
    venture = await venture_controller.get_venture(user_id, venture_id, store)

    async with venture_locks.hold((venture.id, stage)):
        prior_messages = await store.list_messages(venture.id, stage)
        user_message = await store.add_message(venture.id, stage, "user", content)
        context = await _earlier_findings(venture.id, stage, store)

        try:
            result = await analyze(ai, stage, content, prior_messages, context=context)
            reply, analysis = result.reply, result.analysis
        except AnalysisError as exc:
            logger.warning("Analysis failed for venture %s stage %s: %s", venture.id, stage.value, exc)
            reply, analysis = FALLBACK_REPLY, None

        assistant_message = await store.add_message(venture.id, stage, "assistant", reply)

        if analysis is not None:
            await store.upsert_stage_content(venture.id, stage, ai_analysis=analysis)

    return {
        "user_message": user_message,
        "assistant_message": assistant_message,
        "ai_analysis": analysis,
    }
