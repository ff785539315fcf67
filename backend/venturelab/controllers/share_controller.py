import secrets
import string
import uuid

from fastapi import HTTPException

from venturelab.controllers import venture_controller
from venturelab.models.venture import Venture
from venturelab.schemas.venture import SharedVentureRead, ShareUpdate
from venturelab.storage.base import VentureStore


def _generate_token(length: int = 16) -> str:
    alphabet = string.ascii_letters + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(length))


async def update_share_settings(
    user_id: uuid.UUID,
    venture_id: uuid.UUID,
    payload: ShareUpdate,
    store: VentureStore,
) -> Venture:
    """Update the public card settings. A share token is minted the first time the venture goes public."""
    venture = await venture_controller.get_venture(user_id, venture_id, store)
    fields = payload.model_dump(exclude_unset=True)
    # card_description may be cleared with an explicit null; the flags may not
    fields = {k: v for k, v in fields.items() if v is not None or k == "card_description"}

    if fields.get("is_public") and not venture.share_token:
        fields["share_token"] = _generate_token()

    if not fields:
        return venture

    updated = await store.update_venture(venture.id, **fields)
    if updated is None:
        raise HTTPException(status_code=404, detail="Venture not found")
    return updated


async def get_shared_venture(token: str, store: VentureStore) -> SharedVentureRead:
    """Fetch the public card for *token*. Private or unknown ventures are 404."""
    venture = await store.get_venture_by_share_token(token)
    if not venture or not venture.is_public:
        raise HTTPException(status_code=404, detail="Shared venture not found")

    contents = await store.list_stage_contents(venture.id)
    report = await store.get_report(venture.id)

    return SharedVentureRead(
        title=venture.title,
        current_stage=venture.current_stage,
        is_completed=venture.is_completed,
        card_style=venture.card_style,
        card_theme=venture.card_theme,
        card_description=venture.card_description,
        completed_stages=[sc.stage for sc in contents if sc.is_completed],
        elevator_pitch=report.elevator_pitch if report else None,
    )
