"""Challenge Store — persists validated records and reads them back.

Invariants:
    - Only frozen, validated records are saved (ChallengeRecord / McqRecord)
    - list_* returns newest first with limit/offset pagination
    - get_* raises ResourceNotFoundError for unknown ids
    - SQLAlchemy failures on write are rolled back and raised as DatabaseError (503)

Design Decisions:
    - Plain async functions over a repository class: two entities, three operations each
    - Commit per save: a generated record is one unit of work
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from challenge_forge.core.domain_types import RecordKind
from challenge_forge.core.errors import DatabaseError, ErrorContext, ResourceNotFoundError
from challenge_forge.core.records import ChallengeRecord, McqRecord
from challenge_forge.models.coding_challenge import CodingChallenge
from challenge_forge.models.mcq_challenge import McqChallenge

logger = logging.getLogger(__name__)


async def _commit(db: AsyncSession, row, kind: RecordKind):
    db.add(row)
    try:
        await db.commit()
        await db.refresh(row)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(
            f"Failed to save {kind.value}: {e}",
            extra={"record_kind": kind.value, "error_code": "DATABASE_ERROR"},
        )
        raise DatabaseError(
            f"could not save {kind.value}", "commit",
            context=ErrorContext(record_kind=kind.value),
        )
    logger.info(
        f"Saved {kind.value} {row.id}",
        extra={"record_kind": kind.value, "record_id": str(row.id)},
    )
    return row


# --- Coding challenges ------------------------------------------------------------

async def save_challenge(db: AsyncSession, record: ChallengeRecord) -> CodingChallenge:
    data = record.to_dict()
    row = CodingChallenge(
        title=record.title,
        difficulty_level=record.difficulty_level.value,
        description=record.description,
        input_format=record.input_format,
        output_format=record.output_format,
        constraints=record.constraints,
        public_test_cases=data["publicTestCases"],
        private_test_cases=data["privateTestCases"],
        edge_cases=data["edgeCases"],
        explanation=record.explanation,
        prompt=record.prompt,
        was_repaired=record.degradation.was_repaired,
        is_fallback=record.degradation.is_fallback,
        warnings=list(record.degradation.warnings),
    )
    return await _commit(db, row, RecordKind.CHALLENGE)


async def list_challenges(
    db: AsyncSession, limit: int = 10, offset: int = 0,
) -> list[CodingChallenge]:
    result = await db.execute(
        select(CodingChallenge)
        .order_by(CodingChallenge.created_at.desc())
        .limit(limit).offset(offset),
    )
    return list(result.scalars().all())


async def get_challenge(db: AsyncSession, challenge_id: UUID) -> CodingChallenge:
    row = await db.get(CodingChallenge, challenge_id)
    if row is None:
        raise ResourceNotFoundError(
            "Challenge", str(challenge_id),
            ErrorContext(record_kind=RecordKind.CHALLENGE.value),
        )
    return row


# --- Multiple-choice questions ----------------------------------------------------

async def save_mcq(db: AsyncSession, record: McqRecord) -> McqChallenge:
    row = McqChallenge(
        title=record.title,
        difficulty_level=record.difficulty_level.value,
        question=record.question,
        options=[o.to_dict() for o in record.options],
        correct_option_id=record.correct_option_id.value,
        explanation=record.explanation,
        prompt=record.prompt,
        was_repaired=record.degradation.was_repaired,
        is_fallback=record.degradation.is_fallback,
        warnings=list(record.degradation.warnings),
    )
    return await _commit(db, row, RecordKind.MCQ)


async def list_mcqs(
    db: AsyncSession, limit: int = 10, offset: int = 0,
) -> list[McqChallenge]:
    result = await db.execute(
        select(McqChallenge)
        .order_by(McqChallenge.created_at.desc())
        .limit(limit).offset(offset),
    )
    return list(result.scalars().all())


async def get_mcq(db: AsyncSession, mcq_id: UUID) -> McqChallenge:
    row = await db.get(McqChallenge, mcq_id)
    if row is None:
        raise ResourceNotFoundError(
            "Question", str(mcq_id),
            ErrorContext(record_kind=RecordKind.MCQ.value),
        )
    return row
