"""McqChallenge ORM — persists one validated multiple-choice question.

Invariants:
    - options stored as a JSON list of exactly four {id, text}, ids A-D in order
    - correct_option_id is one of A, B, C, D

Design Decisions:
    - Same degradation columns as CodingChallenge: both shapes report trust the same way
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, Boolean, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from challenge_forge.core.domain_types import TITLE_MAX_LENGTH
from challenge_forge.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class McqChallenge(Base):
    """Multiple-choice question entity."""
    __tablename__ = "mcq_challenges"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    difficulty_level: Mapped[str] = mapped_column(
        String(10), nullable=False, default="Medium",
    )
    question: Mapped[str] = mapped_column(Text, nullable=False)
    options: Mapped[list] = mapped_column(JSON, nullable=False)
    correct_option_id: Mapped[str] = mapped_column(String(1), nullable=False)
    explanation: Mapped[str] = mapped_column(Text, nullable=False)
    prompt: Mapped[str] = mapped_column(Text, nullable=False, default="")

    was_repaired: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    is_fallback: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    warnings: Mapped[list] = mapped_column(
        JSON, nullable=False, default=list,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow,
    )
