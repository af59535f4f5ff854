"""Extraction Records — immutable, fully-typed outputs of the extraction pipeline.

Invariants:
    - Records are frozen: built once by the field validator, never mutated afterwards
    - Every record carries a DegradationInfo (trust level of the data is never dropped)
    - ChallengeRecord: >= 2 public, exactly 4 private, exactly 1 edge test case
    - McqRecord: exactly 4 options with ids A, B, C, D; correct_option_id is one of them
    - ExtractionResult.outcome agrees with record.degradation
      (FALLBACK <=> is_fallback, REPAIRED <=> was_repaired and not is_fallback)

Design Decisions:
    - Frozen dataclasses over Pydantic: core stays free of validation frameworks,
      repair/coercion happens on the untyped candidate dict (ADR: functional core)
    - Tuples instead of lists for sequences: immutability all the way down
    - to_dict() emits the camelCase shape the model produced and the API returns
"""

from dataclasses import dataclass, field

from challenge_forge.core.domain_types import (
    DifficultyLevel,
    ExtractionOutcome,
    OptionId,
)


@dataclass(frozen=True)
class DegradationInfo:
    """How far a record deviates from a clean, directly-parsed model answer."""
    was_repaired: bool = False
    is_fallback: bool = False
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "wasRepaired": self.was_repaired,
            "isFallback": self.is_fallback,
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True)
class TestCase:
    """One stdin/stdout pair — both sides literal, non-empty text."""
    __test__ = False  # not a pytest class

    input: str
    output: str

    def to_dict(self) -> dict:
        return {"input": self.input, "output": self.output}


@dataclass(frozen=True)
class ChallengeRecord:
    """Validated coding challenge."""
    title: str
    difficulty_level: DifficultyLevel
    description: str
    input_format: str
    output_format: str
    constraints: str
    public_test_cases: tuple[TestCase, ...]
    private_test_cases: tuple[TestCase, ...]
    edge_cases: tuple[TestCase, ...]
    explanation: str
    prompt: str
    degradation: DegradationInfo = field(default_factory=DegradationInfo)

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "difficultyLevel": self.difficulty_level.value,
            "description": self.description,
            "inputFormat": self.input_format,
            "outputFormat": self.output_format,
            "constraints": self.constraints,
            "publicTestCases": [tc.to_dict() for tc in self.public_test_cases],
            "privateTestCases": [tc.to_dict() for tc in self.private_test_cases],
            "edgeCases": [tc.to_dict() for tc in self.edge_cases],
            "explanation": self.explanation,
            "prompt": self.prompt,
            "degradation": self.degradation.to_dict(),
        }


@dataclass(frozen=True)
class McqOption:
    id: OptionId
    text: str

    def to_dict(self) -> dict:
        return {"id": self.id.value, "text": self.text}


@dataclass(frozen=True)
class McqRecord:
    """Validated multiple-choice question."""
    title: str
    difficulty_level: DifficultyLevel
    question: str
    options: tuple[McqOption, ...]
    correct_option_id: OptionId
    explanation: str
    prompt: str
    degradation: DegradationInfo = field(default_factory=DegradationInfo)

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "difficultyLevel": self.difficulty_level.value,
            "question": self.question,
            "options": [o.to_dict() for o in self.options],
            "correctOptionId": self.correct_option_id.value,
            "explanation": self.explanation,
            "prompt": self.prompt,
            "degradation": self.degradation.to_dict(),
        }


@dataclass(frozen=True)
class ExtractionResult:
    """Tagged result of the JSON-shaped path: clean, repaired or fallback."""
    outcome: ExtractionOutcome
    record: ChallengeRecord

    @property
    def degradation(self) -> DegradationInfo:
        return self.record.degradation
