"""API v1: aggregates all routers under a single prefix."""

from fastapi import APIRouter

from venturelab.api.v1.routers import autopilot, chat, reports, share, stages, ventures

router = APIRouter()
router.include_router(stages.router)
router.include_router(ventures.router)
router.include_router(chat.router)
router.include_router(reports.router)
router.include_router(share.router)
router.include_router(autopilot.router)
