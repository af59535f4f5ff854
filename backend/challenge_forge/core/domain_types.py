"""Domain Types — enums and cardinality constants shared by the extraction pipeline.

Invariants:
    - All valid states encoded as Enums — no raw string matching in core logic
    - Cardinality constants are the single source for test-case array sizes
    - Field tuples list the top-level keys of the model's JSON shape (camelCase, as emitted)

Design Decisions:
    - str Enums: serialize to JSON without custom encoders (ADR: records go straight to the API)
    - Strict edge-case sizing (exactly 1): the latest prompt asks for one small boundary case
"""

from enum import Enum


# ─── Enums ───────────────────────────────────────────────────────

class DifficultyLevel(str, Enum):
    """Challenge / question difficulty — maps to DB `difficulty_level` column."""
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class OptionId(str, Enum):
    """The four MCQ option labels, in display order."""
    A = "A"
    B = "B"
    C = "C"
    D = "D"


class RecordKind(str, Enum):
    """Record shape a log line or error context refers to."""
    CHALLENGE = "challenge"
    MCQ = "mcq"


class ExtractionOutcome(str, Enum):
    """Tag of an extraction result — how much the record was degraded."""
    CLEAN = "clean"
    REPAIRED = "repaired"
    FALLBACK = "fallback"


class ExtractionStage(str, Enum):
    """Orchestrator states, in escalation order."""
    RAW_INPUT = "raw_input"
    TRY_DIRECT_PARSE = "try_direct_parse"
    TRY_SYNTAX_REPAIR = "try_syntax_repair"
    TRY_STRUCTURAL_REPAIR = "try_structural_repair"
    FALLBACK_SYNTHESIS = "fallback_synthesis"
    VALIDATED = "validated"


class TestCaseKind(str, Enum):
    """The three test-case arrays of a coding challenge."""
    __test__ = False  # not a pytest class

    PUBLIC = "public"
    PRIVATE = "private"
    EDGE = "edge"


# ─── Cardinality ─────────────────────────────────────────────────

MIN_PUBLIC_TEST_CASES = 2
PRIVATE_TEST_CASE_COUNT = 4
EDGE_CASE_COUNT = 1
MCQ_OPTION_COUNT = 4

# Matches the VARCHAR length of the title columns
TITLE_MAX_LENGTH = 300

DEFAULT_DIFFICULTY = DifficultyLevel.MEDIUM


# ─── Field names (model JSON shape) ─────────────────────────────

TEST_CASE_FIELDS: dict[TestCaseKind, str] = {
    TestCaseKind.PUBLIC: "publicTestCases",
    TestCaseKind.PRIVATE: "privateTestCases",
    TestCaseKind.EDGE: "edgeCases",
}

CHALLENGE_TEXT_FIELDS: tuple[str, ...] = (
    "title",
    "difficultyLevel",
    "description",
    "inputFormat",
    "outputFormat",
    "constraints",
    "explanation",
)

CHALLENGE_REQUIRED_FIELDS: tuple[str, ...] = (
    "title",
    "difficultyLevel",
    "description",
    "inputFormat",
    "outputFormat",
    "constraints",
    "publicTestCases",
    "privateTestCases",
    "edgeCases",
    "explanation",
)


def parse_difficulty(value: object) -> DifficultyLevel | None:
    """Match a difficulty case-insensitively; None when it is not one of the three."""
    if not isinstance(value, str):
        return None
    cleaned = value.strip().strip("[]()*\"'. ").lower()
    for level in DifficultyLevel:
        if cleaned == level.value.lower():
            return level
    return None
