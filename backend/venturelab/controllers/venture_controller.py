import logging
import uuid

from fastapi import HTTPException, status

from venturelab.core.config import settings
from venturelab.core.stages import (
    FIRST_STAGE_RANK,
    Stage,
    is_valid_rank,
    missing_required_stages,
    ordered_stages,
    reachable_stages,
)
from venturelab.models.venture import Venture
from venturelab.schemas.venture import ProgressRead, StageProgress, VentureCreate, VentureUpdate
from venturelab.storage.base import VentureStore

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = (
    "Hello! I'm excited to help you develop your venture idea. Please tell me about your "
    "initial concept. Be as detailed as possible about the problem you're solving and your approach."
)


async def get_venture(user_id: uuid.UUID, venture_id: uuid.UUID, store: VentureStore) -> Venture:
    """Return the venture, or 404 when it is missing or owned by someone else."""
    venture = await store.get_venture(venture_id)
    if not venture or venture.user_id != user_id:
        raise HTTPException(status_code=404, detail="Venture not found")
    return venture


async def list_ventures(user_id: uuid.UUID, store: VentureStore) -> list[Venture]:
    return await store.list_ventures(user_id)


async def create_venture(
    header_user_id: uuid.UUID | None,
    payload: VentureCreate,
    store: VentureStore,
) -> Venture:
    """
    Create a venture at the first stage and seed its welcome message.

    The owner is the X-User-Id caller when present, else the body's ``userId``,
    else the configured default user.
    """
    owner = header_user_id or payload.user_id or settings.DEFAULT_USER_ID
    venture = await store.create_venture(
        user_id=owner,
        title=payload.title,
        current_stage=FIRST_STAGE_RANK,
        is_completed=False,
    )
    await store.add_message(venture.id, Stage.INITIAL_IDEA, "assistant", WELCOME_MESSAGE)
    logger.info("Created venture %s for user %s", venture.id, venture.user_id)
    return venture


async def advance_stage(
    user_id: uuid.UUID,
    venture_id: uuid.UUID,
    target_rank: int,
    store: VentureStore,
) -> Venture:
    """Move the venture's stage pointer forward to *target_rank*.

    The current rank is accepted as a no-op; lower ranks are refused.
    """
    venture = await get_venture(user_id, venture_id, store)

    if not is_valid_rank(target_rank):
        raise HTTPException(status_code=400, detail=f"Invalid stage rank: {target_rank}")
    if target_rank < venture.current_stage:
        raise HTTPException(
            status_code=400,
            detail=f"Cannot move back from stage {venture.current_stage} to stage {target_rank}",
        )
    if target_rank == venture.current_stage:
        return venture

    updated = await store.advance_venture(venture.id, target_rank)
    if updated is None:
        # Another writer moved the pointer past target_rank in the meantime
        raise HTTPException(status_code=400, detail=f"Cannot move back to stage {target_rank}")
    return updated


async def update_venture(
    user_id: uuid.UUID,
    venture_id: uuid.UUID,
    payload: VentureUpdate,
    store: VentureStore,
) -> Venture:
    venture = await get_venture(user_id, venture_id, store)
    fields = payload.model_dump(exclude_unset=True, exclude_none=True)

    target_rank = fields.pop("current_stage", None)
    if target_rank is not None:
        venture = await advance_stage(user_id, venture_id, target_rank, store)

    if fields:
        updated = await store.update_venture(venture.id, **fields)
        if updated is None:
            raise HTTPException(status_code=404, detail="Venture not found")
        venture = updated
    return venture


async def delete_venture(user_id: uuid.UUID, venture_id: uuid.UUID, store: VentureStore) -> None:
    venture = await get_venture(user_id, venture_id, store)
    if not await store.delete_venture(venture.id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Venture not found")
    logger.info("Deleted venture %s", venture.id)


async def get_progress(user_id: uuid.UUID, venture_id: uuid.UUID, store: VentureStore) -> ProgressRead:
    venture = await get_venture(user_id, venture_id, store)
    contents = await store.list_stage_contents(venture.id)
    completed = {Stage(sc.stage) for sc in contents if sc.is_completed}
    reachable = set(reachable_stages(venture.current_stage))
    missing = missing_required_stages(completed)

    return ProgressRead(
        venture_id=venture.id,
        current_stage=venture.current_stage,
        is_completed=venture.is_completed,
        stages=[
            StageProgress(
                id=stage.value,
                label=stage.label,
                order=stage.order,
                is_completed=stage in completed,
                is_reachable=stage in reachable,
            )
            for stage in ordered_stages()
        ],
        can_generate_report=not missing,
        missing_stages=[stage.value for stage in missing],
    )
