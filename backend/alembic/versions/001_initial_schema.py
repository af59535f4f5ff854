"""Initial schema — coding_challenges, mcq_challenges.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _degradation_columns() -> list[sa.Column]:
    return [
        sa.Column("was_repaired", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("is_fallback", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("warnings", sa.JSON, nullable=False, server_default="[]"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "coding_challenges",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("difficulty_level", sa.String(10), nullable=False, server_default="Medium"),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("input_format", sa.Text, nullable=False),
        sa.Column("output_format", sa.Text, nullable=False),
        sa.Column("constraints", sa.Text, nullable=False),
        sa.Column("public_test_cases", sa.JSON, nullable=False),
        sa.Column("private_test_cases", sa.JSON, nullable=False),
        sa.Column("edge_cases", sa.JSON, nullable=False),
        sa.Column("explanation", sa.Text, nullable=False),
        sa.Column("prompt", sa.Text, nullable=False),
        *_degradation_columns(),
    )
    op.create_index(
        "ix_coding_challenges_created_at", "coding_challenges", ["created_at"],
    )

    op.create_table(
        "mcq_challenges",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("difficulty_level", sa.String(10), nullable=False, server_default="Medium"),
        sa.Column("question", sa.Text, nullable=False),
        sa.Column("options", sa.JSON, nullable=False),
        sa.Column("correct_option_id", sa.String(1), nullable=False),
        sa.Column("explanation", sa.Text, nullable=False),
        sa.Column("prompt", sa.Text, nullable=False, server_default=""),
        *_degradation_columns(),
    )
    op.create_index(
        "ix_mcq_challenges_created_at", "mcq_challenges", ["created_at"],
    )


def downgrade() -> None:
    op.drop_index("ix_mcq_challenges_created_at", table_name="mcq_challenges")
    op.drop_table("mcq_challenges")
    op.drop_index("ix_coding_challenges_created_at", table_name="coding_challenges")
    op.drop_table("coding_challenges")
