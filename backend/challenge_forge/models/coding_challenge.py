"""CodingChallenge ORM — persists one validated coding challenge.

Invariants:
    - id is UUID primary key (client-side default)
    - Test-case arrays stored as JSON lists of {input, output}; cardinality is enforced
      upstream by the field validator, never re-checked here
    - was_repaired / is_fallback / warnings mirror the record's DegradationInfo
    - created_at set on insert, updated_at refreshed on every update

Design Decisions:
    - JSON columns for test cases: always read and written as a whole (ADR: no join
      for a fixed-size child list)
    - prompt stored next to the record: fallback records are only meaningful with it
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


class CodingChallenge(Base):
    """Coding challenge entity — a problem statement plus its test cases."""
    __tablename__ = "coding_challenges"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    difficulty_level: Mapped[str] = mapped_column(
        String(10), nullable=False, default="Medium",
    )
    description: Mapped[str] = mapped_column(Text, nullable=False)
    input_format: Mapped[str] = mapped_column(Text, nullable=False)
    output_format: Mapped[str] = mapped_column(Text, nullable=False)
    constraints: Mapped[str] = mapped_column(Text, nullable=False)
    public_test_cases: Mapped[list] = mapped_column(
        JSON, nullable=False, default=list,
    )
    private_test_cases: Mapped[list] = mapped_column(
        JSON, nullable=False, default=list,
    )
    edge_cases: Mapped[list] = mapped_column(
        JSON, nullable=False, default=list,
    )
    explanation: Mapped[str] = mapped_column(Text, nullable=False)
    prompt: Mapped[str] = mapped_column(Text, nullable=False)

    # Degradation
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
