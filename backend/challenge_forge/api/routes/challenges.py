"""Coding Challenge Routes — generate, list and fetch coding challenges.

Invariants:
    - POST /generate always returns 201 with a persisted record: model failure degrades
      to a fallback record, it never fails the request
    - The degradation block (wasRepaired, isFallback, warnings) is always in the response
    - Unknown id → 404 RESOURCE_NOT_FOUND via the global ChallengeForgeError handler

Design Decisions:
    - ChallengeGenerator injected via Depends(get_challenge_generator): tests override it
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from challenge_forge.core.domain_types import RecordKind
from challenge_forge.infrastructure.database import get_db
from challenge_forge.schemas.challenge import (
    ChallengeListResponse,
    ChallengeResponse,
    GenerateChallengeRequest,
    Pagination,
)
from challenge_forge.services import challenge_store
from challenge_forge.services.challenge_generator import (
    ChallengeGenerator,
    get_challenge_generator,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/challenges", tags=["challenges"])


@router.post(
    "/generate", response_model=ChallengeResponse,
    status_code=status.HTTP_201_CREATED,
)
async def generate_challenge(
    body: GenerateChallengeRequest,
    db: AsyncSession = Depends(get_db),
    generator: ChallengeGenerator = Depends(get_challenge_generator),
):
    """Generate a coding challenge from a prompt and persist it."""
    result = await generator.generate_challenge(body.prompt, body.difficulty_preference)
    row = await challenge_store.save_challenge(db, result.record)
    logger.info(
        f"Challenge {row.id} generated ({result.outcome.value})",
        extra={
            "record_kind": RecordKind.CHALLENGE.value,
            "record_id": str(row.id),
            "outcome": result.outcome.value,
            "warning_count": len(result.degradation.warnings),
        },
    )
    return ChallengeResponse.from_row(row)


@router.get("", response_model=ChallengeListResponse)
async def list_challenges(
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    """List challenges, newest first."""
    rows = await challenge_store.list_challenges(db, limit, offset)
    return ChallengeListResponse(
        challenges=[ChallengeResponse.from_row(r) for r in rows],
        pagination=Pagination(limit=limit, offset=offset),
    )


@router.get("/{challenge_id}", response_model=ChallengeResponse)
async def get_challenge(
    challenge_id: UUID, db: AsyncSession = Depends(get_db),
):
    """Get one challenge."""
    row = await challenge_store.get_challenge(db, challenge_id)
    return ChallengeResponse.from_row(row)
