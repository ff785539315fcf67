import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware

from venturelab.api.v1.api import router
from venturelab.core.ai_client import AgentAIClient, AIClient
from venturelab.core.config import StorageBackend, settings
from venturelab.db.database import create_engine
from venturelab.storage.base import StorageError, VentureStore
from venturelab.storage.memory import MemoryStore
from venturelab.storage.sql import SQLStore

logger = logging.getLogger(__name__)


def build_store() -> VentureStore:
    """Pick the storage adapter configured by ``STORAGE_BACKEND``."""
    if settings.STORAGE_BACKEND == StorageBackend.sql:
        return SQLStore(create_engine(), create_tables=settings.AUTO_CREATE_TABLES)
    return MemoryStore()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: connect the store. Shutdown: release it."""
    store: VentureStore = app.state.store
    await store.startup()
    logger.info("%s started with %s storage", settings.PROJECT_NAME, store.backend_name)
    yield
    await store.shutdown()


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts) or "Invalid request"


def create_app(store: VentureStore | None = None, ai_client: AIClient | None = None) -> FastAPI:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title=settings.PROJECT_NAME,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        lifespan=lifespan,
    )
    app.state.store = store if store is not None else build_store()
    app.state.ai_client = ai_client if ai_client is not None else AgentAIClient()

    # ── Exception Handlers (ensure errors return JSON through CORS) ──

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"detail": _validation_message(exc)})

    @app.exception_handler(StorageError)
    async def storage_exception_handler(request: Request, exc: StorageError):
        logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=500, content={"detail": "Storage unavailable"})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error("Unhandled exception: %s", exc, exc_info=True)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    # ── Middleware ────────────────────────────────────────────

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Routers ───────────────────────────────────────────────

    app.include_router(router, prefix=settings.API_PREFIX)

    @app.get(f"{settings.API_PREFIX}/health")
    async def health(request: Request):
        return {"status": "healthy", "storage": request.app.state.store.backend_name}

    return app


app = create_app()
