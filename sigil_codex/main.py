"""Sigil Codex API: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map CodexError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import sigil_codex.infrastructure.database as database
from sigil_codex import __version__
from sigil_codex.api.error_handlers import register_error_handlers
from sigil_codex.api.routes import codex, health, reference
from sigil_codex.config import get_settings
from sigil_codex.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("Sigil Codex API started")
    yield
    if database.db_manager:
        await database.db_manager.dispose()
    logger.info("Sigil Codex API shutting down")


app = FastAPI(
    title="Sigil Codex API", version=__version__, lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(reference.router)
app.include_router(codex.router)

register_error_handlers(app)
