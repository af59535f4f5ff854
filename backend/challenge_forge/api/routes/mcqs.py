"""Multiple-Choice Question Routes — generate, list and fetch questions.

Invariants:
    - POST /generate → 201 with the persisted question
    - Label-shaped defects → 422 (MISSING_SECTIONS / WRONG_OPTION_COUNT): the caller
      should regenerate; nothing is persisted
    - Generation service down or too slow → 503 GENERATION_API_ERROR

Design Decisions:
    - No fallback for questions: an answer key cannot be synthesized
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from challenge_forge.infrastructure.database import get_db
from challenge_forge.schemas.challenge import (
    GenerateMcqRequest,
    McqListResponse,
    McqResponse,
    Pagination,
)
from challenge_forge.services import challenge_store
from challenge_forge.services.challenge_generator import (
    ChallengeGenerator,
    get_challenge_generator,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/mcqs", tags=["mcqs"])


@router.post(
    "/generate", response_model=McqResponse,
    status_code=status.HTTP_201_CREATED,
)
async def generate_mcq(
    body: GenerateMcqRequest,
    db: AsyncSession = Depends(get_db),
    generator: ChallengeGenerator = Depends(get_challenge_generator),
):
    """Generate a multiple-choice question from a prompt and persist it."""
    record = await generator.generate_mcq(body.prompt)
    row = await challenge_store.save_mcq(db, record)
    return McqResponse.from_row(row)


@router.get("", response_model=McqListResponse)
async def list_mcqs(
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    """List questions, newest first."""
    rows = await challenge_store.list_mcqs(db, limit, offset)
    return McqListResponse(
        mcqs=[McqResponse.from_row(r) for r in rows],
        pagination=Pagination(limit=limit, offset=offset),
    )


@router.get("/{mcq_id}", response_model=McqResponse)
async def get_mcq(mcq_id: UUID, db: AsyncSession = Depends(get_db)):
    """Get one question."""
    row = await challenge_store.get_mcq(db, mcq_id)
    return McqResponse.from_row(row)
