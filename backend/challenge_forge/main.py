"""ChallengeForge API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map ChallengeForgeError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup and disposed on shutdown via lifespan

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Three error handler layers (api/error_handlers.py): ChallengeForgeError (domain),
      RequestValidationError (Pydantic, 400), Exception (catch-all) — never leaks
      internal details
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from challenge_forge.infrastructure import database
from challenge_forge.infrastructure.observability import setup_logging
from challenge_forge.config import get_settings
from challenge_forge.api.error_handlers import register_error_handlers
from challenge_forge.api.routes import challenges, health, mcqs

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
    logger.info("ChallengeForge API started")
    yield
    if database.db_manager:
        await database.db_manager.close()
    logger.info("ChallengeForge API shutting down")


app = FastAPI(
    title="ChallengeForge API", version="1.0.0", lifespan=lifespan,
)

# CORS — configured from settings, not hardcoded
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes — explicit registration
app.include_router(health.router)
app.include_router(challenges.router)
app.include_router(mcqs.router)

register_error_handlers(app)
