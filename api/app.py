"""FastAPI application for Smart Notes."""

from __future__ import annotations

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from .config import Settings
from .database import Database
from .observability import initialize_observability
from .routes import ai_router, health_router, notes_router
from .services.ai_gateway import AIGateway
from .services.note_service import NoteService
from .services.note_store import MemoryNoteStore, MongoNoteStore, NoteStore

# Initialize logger
logger = structlog.get_logger(__name__)


async def _open_store(settings: Settings) -> NoteStore:
    if settings.note_store_backend == "memory":
        logger.warning("note_store_in_memory", message="Notes are lost on restart")
        return MemoryNoteStore()
    if settings.note_store_backend != "mongodb":
        raise RuntimeError(f"Unknown NOTE_STORE_BACKEND: {settings.note_store_backend}")
    return MongoNoteStore(await Database.connect(settings))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle startup and shutdown events."""
    settings: Settings = app.state.settings

    # Startup
    initialize_observability()
    logger.info("api_starting", store=settings.note_store_backend, ai_enabled=settings.ai_enabled)

    store = app.state.note_store or await _open_store(settings)
    gateway = app.state.ai_gateway or AIGateway(settings)

    app.state.note_store = store
    app.state.ai_gateway = gateway
    app.state.note_service = NoteService(store, gateway)
    logger.info("api_started", ai_mode="live" if gateway.live else "demo")

    yield

    # Shutdown
    logger.info("api_shutting_down")
    await gateway.aclose()
    await Database.disconnect()
    logger.info("api_shutdown_complete")


def create_app(
    settings: Settings | None = None,
    note_store: NoteStore | None = None,
    ai_gateway: AIGateway | None = None,
) -> FastAPI:
    """
    Build the application.

    The store and gateway are created during startup from ``settings``
    unless passed in explicitly.
    """
    app = FastAPI(
        title="Smart Notes API",
        description="Personal notes with AI topic extraction, suggestions and rewriting",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.settings = settings or Settings.from_env()
    app.state.note_store = note_store
    app.state.ai_gateway = ai_gateway

    # Instrument FastAPI with OpenTelemetry
    FastAPIInstrumentor.instrument_app(app)

    # Include routers
    app.include_router(health_router)
    app.include_router(notes_router)
    app.include_router(ai_router)

    return app


app = create_app()
