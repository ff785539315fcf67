"""
Shared FastAPI dependencies, the single source of truth for DI.

All routers should import the store, the AI client and the caller identity
from HERE, not from ``request.app.state`` directly.
"""

from uuid import UUID

from fastapi import Depends, Header, HTTPException, Request

from venturelab.core.ai_client import AIClient
from venturelab.core.config import settings
from venturelab.storage.base import VentureStore

__all__ = ["get_store", "get_ai_client", "get_header_user_id", "get_current_user_id"]


def get_store(request: Request) -> VentureStore:
    return request.app.state.store


def get_ai_client(request: Request) -> AIClient:
    return request.app.state.ai_client


async def get_header_user_id(x_user_id: str | None = Header(default=None)) -> UUID | None:
    """The ``X-User-Id`` header as a UUID, or None when the request carries none."""
    if not x_user_id:
        return None
    try:
        return UUID(x_user_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="X-User-Id must be a UUID")


async def get_current_user_id(header_user_id: UUID | None = Depends(get_header_user_id)) -> UUID:
    """
    Identity of the caller. Without authentication in place the optional
    ``X-User-Id`` header is trusted; absent, the configured default user acts.
    """
    return header_user_id or settings.DEFAULT_USER_ID
