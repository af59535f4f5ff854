"""Challenge Schemas — Pydantic models with field-level validation for API boundaries.

Invariants:
    - GenerateChallengeRequest.prompt / GenerateMcqRequest.prompt: stripped, non-empty,
      at most 10000 chars (an empty prompt is a 400, never a generation call)
    - difficultyPreference accepts Easy / Medium / Hard in any case
    - All JSON is camelCase on the wire; Python attributes stay snake_case

Design Decisions:
    - alias_generator=to_camel + populate_by_name: one model serves request parsing and
      response building (ADR: wire shape matches the model's own JSON shape)
    - Responses built from ORM rows via from_row(), not from_attributes: the degradation
      block is nested on the wire but flat in the table
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from challenge_forge.core.domain_types import DifficultyLevel, parse_difficulty
from challenge_forge.models.coding_challenge import CodingChallenge
from challenge_forge.models.mcq_challenge import McqChallenge


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _strip_prompt(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("prompt cannot be empty or whitespace")
    return v


# --- Requests -----------------------------------------------------------------

class GenerateChallengeRequest(_CamelModel):
    """Coding-challenge generation request."""
    prompt: str = Field(max_length=10_000)
    difficulty_preference: DifficultyLevel | None = None

    @field_validator("prompt")
    @classmethod
    def strip_prompt(cls, v: str) -> str:
        return _strip_prompt(v)

    @field_validator("difficulty_preference", mode="before")
    @classmethod
    def normalize_difficulty(cls, v: object) -> object:
        if v is None or v == "":
            return None
        level = parse_difficulty(v)
        if level is None:
            raise ValueError("difficultyPreference must be Easy, Medium or Hard")
        return level


class GenerateMcqRequest(_CamelModel):
    """Multiple-choice question generation request."""
    prompt: str = Field(max_length=10_000)

    @field_validator("prompt")
    @classmethod
    def strip_prompt(cls, v: str) -> str:
        return _strip_prompt(v)


# --- Responses ----------------------------------------------------------------

class DegradationResponse(_CamelModel):
    was_repaired: bool
    is_fallback: bool
    warnings: list[str]


class TestCaseResponse(_CamelModel):
    __test__ = False  # not a pytest class

    input: str
    output: str


class ChallengeResponse(_CamelModel):
    """Persisted coding challenge."""
    id: UUID
    title: str
    difficulty_level: DifficultyLevel
    description: str
    input_format: str
    output_format: str
    constraints: str
    public_test_cases: list[TestCaseResponse]
    private_test_cases: list[TestCaseResponse]
    edge_cases: list[TestCaseResponse]
    explanation: str
    prompt: str
    degradation: DegradationResponse
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, row: CodingChallenge) -> "ChallengeResponse":
        return cls(
            id=row.id,
            title=row.title,
            difficulty_level=row.difficulty_level,
            description=row.description,
            input_format=row.input_format,
            output_format=row.output_format,
            constraints=row.constraints,
            public_test_cases=row.public_test_cases,
            private_test_cases=row.private_test_cases,
            edge_cases=row.edge_cases,
            explanation=row.explanation,
            prompt=row.prompt,
            degradation=DegradationResponse(
                was_repaired=row.was_repaired,
                is_fallback=row.is_fallback,
                warnings=row.warnings or [],
            ),
            created_at=row.created_at,
            updated_at=row.updated_at,
        )


class OptionResponse(_CamelModel):
    id: str
    text: str


class McqResponse(_CamelModel):
    """Persisted multiple-choice question."""
    id: UUID
    title: str
    difficulty_level: DifficultyLevel
    question: str
    options: list[OptionResponse]
    correct_option_id: str
    explanation: str
    prompt: str
    degradation: DegradationResponse
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, row: McqChallenge) -> "McqResponse":
        return cls(
            id=row.id,
            title=row.title,
            difficulty_level=row.difficulty_level,
            question=row.question,
            options=row.options,
            correct_option_id=row.correct_option_id,
            explanation=row.explanation,
            prompt=row.prompt,
            degradation=DegradationResponse(
                was_repaired=row.was_repaired,
                is_fallback=row.is_fallback,
                warnings=row.warnings or [],
            ),
            created_at=row.created_at,
            updated_at=row.updated_at,
        )


class Pagination(_CamelModel):
    limit: int
    offset: int


class ChallengeListResponse(_CamelModel):
    challenges: list[ChallengeResponse]
    pagination: Pagination


class McqListResponse(_CamelModel):
    mcqs: list[McqResponse]
    pagination: Pagination
