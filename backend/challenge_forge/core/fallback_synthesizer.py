"""Fallback Synthesizer — last-resort candidate salvaged from raw text and the prompt.

Invariants:
    - Total: any input (empty string, prose, binary noise) yields a candidate
    - Only scalar `"field": "value"` pairs are salvaged; test-case arrays are ALWAYS
      placeholders sized to the cardinality rules (2 public, 4 private, 1 edge)
    - Missing scalars are derived deterministically from the prompt
    - The candidate always goes through the field validator with is_fallback=True

Design Decisions:
    - Regex salvage over partial parsing: by the time this runs, parsing has failed three
      times (ADR: no fourth parser)
    - String literals are decoded with json.loads so escapes read the same as on the
      clean path; an undecodable literal is treated as absent
"""

import json
import re

from challenge_forge.core.challenge_defaults import default_text_fields, placeholder_cases
from challenge_forge.core.domain_types import (
    EDGE_CASE_COUNT,
    MIN_PUBLIC_TEST_CASES,
    PRIVATE_TEST_CASE_COUNT,
    TEST_CASE_FIELDS,
    CHALLENGE_TEXT_FIELDS,
    DifficultyLevel,
    TestCaseKind,
)

_PLACEHOLDER_COUNTS: dict[TestCaseKind, int] = {
    TestCaseKind.PUBLIC: MIN_PUBLIC_TEST_CASES,
    TestCaseKind.PRIVATE: PRIVATE_TEST_CASE_COUNT,
    TestCaseKind.EDGE: EDGE_CASE_COUNT,
}


def salvage_scalar(raw_text: str, field_name: str) -> str | None:
    """First `"field": "value"` string found in the raw text, decoded; None if absent."""
    match = re.search(rf'"{field_name}"\s*:\s*("(?:[^"\\]|\\.)*")', raw_text, re.DOTALL)
    if not match:
        return None
    try:
        value = json.loads(match.group(1), strict=False)
    except ValueError:
        return None
    return value if value.strip() else None


def synthesize_candidate(
    raw_text: str,
    prompt: str,
    difficulty_preference: DifficultyLevel | None = None,
) -> tuple[dict, list[str]]:
    """Build a candidate dict plus notes on what was salvaged."""
    defaults = default_text_fields(prompt, difficulty_preference)
    candidate: dict = {}
    salvaged: list[str] = []
    for name in CHALLENGE_TEXT_FIELDS:
        value = salvage_scalar(raw_text or "", name)
        if value is None:
            candidate[name] = defaults[name]
        else:
            candidate[name] = value
            salvaged.append(name)

    for kind, field_name in TEST_CASE_FIELDS.items():
        candidate[field_name] = placeholder_cases(kind, _PLACEHOLDER_COUNTS[kind])

    notes = ["fallback synthesis: structured output could not be parsed"]
    if salvaged:
        notes.append(f"fallback salvaged field(s): {', '.join(salvaged)}")
    notes.append("all test cases are placeholders")
    return candidate, notes
