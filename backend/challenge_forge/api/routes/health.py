"""Health & Readiness Probes — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 if database is unreachable, or reachable but without
      the challenge tables (migrations not applied)

Design Decisions:
    - Separate liveness/readiness: liveness restarts, readiness removes from load balancer
    - db_manager read through the module at request time: it is created in lifespan,
      after this module is imported
"""

import logging
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from challenge_forge.infrastructure import database
from challenge_forge.models.coding_challenge import CodingChallenge
from challenge_forge.models.mcq_challenge import McqChallenge

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])

_RECORD_TABLES = (CodingChallenge.__tablename__, McqChallenge.__tablename__)


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "challenge-forge-api",
        "version": "1.0.0",
    }


@router.get("/ready")
async def readiness_check():
    """Readiness probe — database connectivity, then the record tables."""
    manager = database.db_manager
    db_ok = await manager.health_check() if manager else False
    if not db_ok:
        return _not_ready("database_unavailable")
    if not await manager.tables_present(_RECORD_TABLES):
        return _not_ready("schema_not_migrated")
    return {
        "status": "ready",
        "checks": {"database": "healthy", "schema": "migrated"},
    }


def _not_ready(reason: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "not_ready", "reason": reason},
    )
