"""Field Validator tests — candidate dict → ChallengeRecord, never raising.

Tests cover:
    - Cardinality: >= 2 public (pad), exactly 4 private, exactly 1 edge (pad / cut)
    - Text field defaults for missing, empty and wrong-typed values
    - constraints list joined with "; "
    - Difficulty coercion and preference
    - Per-case coercion and literal-text sanitation
    - Edge-case boundary advisory (warning only)
"""

import pytest

from challenge_forge.core.domain_types import DifficultyLevel
from challenge_forge.core.field_validator import (
    has_boundary_evidence,
    sanitize_literal,
    validate_challenge,
)
from challenge_forge.core.records import TestCase

PROMPT = "Find the longest increasing subsequence in an array"


def _cases(n: int, prefix: str = "") -> list[dict]:
    return [{"input": f"{prefix}{i}", "output": f"out {i}"} for i in range(n)]


def _candidate(**overrides) -> dict:
    candidate = {
        "title": "Longest Increasing Subsequence",
        "difficultyLevel": "Medium",
        "description": "Given an array, find the LIS length.",
        "inputFormat": "n, then n integers",
        "outputFormat": "One integer",
        "constraints": "1 <= n <= 10^5",
        "publicTestCases": _cases(2),
        "privateTestCases": _cases(4),
        "edgeCases": [{"input": "100000", "output": "1"}],
        "explanation": "Patience sorting in O(n log n).",
    }
    candidate.update(overrides)
    return candidate


def test_complete_candidate_has_no_warnings():
    record = validate_challenge(_candidate(), PROMPT)
    assert record.degradation.warnings == ()
    assert record.title == "Longest Increasing Subsequence"
    assert record.prompt == PROMPT


@pytest.mark.parametrize("n", range(11))
def test_private_cases_always_exactly_four(n):
    record = validate_challenge(_candidate(privateTestCases=_cases(n)), PROMPT)
    assert len(record.private_test_cases) == 4
    if n > 4:
        assert any(f"dropped {n - 4}" in w for w in record.degradation.warnings)
    if n < 4:
        assert record.private_test_cases[-1].input == "[placeholder] private case 4 input"


def test_public_cases_padded_to_two_but_not_cut():
    assert len(validate_challenge(_candidate(publicTestCases=[]), PROMPT).public_test_cases) == 2
    assert len(validate_challenge(_candidate(publicTestCases=_cases(5)), PROMPT).public_test_cases) == 5


def test_edge_cases_cut_to_one_with_warning():
    record = validate_challenge(_candidate(edgeCases=_cases(3, prefix="1000")), PROMPT)
    assert len(record.edge_cases) == 1
    assert any("dropped 2" in w for w in record.degradation.warnings)


def test_missing_text_fields_use_prompt_defaults():
    candidate = _candidate()
    del candidate["title"]
    del candidate["description"]
    record = validate_challenge(candidate, PROMPT)
    assert record.title == "Challenge: Find the longest increasing subsequence in..."
    assert PROMPT in record.description
    assert "missing field 'title'; default used" in record.degradation.warnings


def test_number_for_text_field_is_wrong_type():
    record = validate_challenge(_candidate(title=42), PROMPT)
    assert record.title.startswith("Challenge: ")
    assert any("'title' has type int" in w for w in record.degradation.warnings)


def test_empty_text_field_replaced():
    record = validate_challenge(_candidate(outputFormat="   "), PROMPT)
    assert record.output_format == "Output should be provided in plain text."


def test_constraints_list_joined_without_warning():
    record = validate_challenge(
        _candidate(constraints=["1 <= n <= 10^5", "values fit in 32 bits"]), PROMPT,
    )
    assert record.constraints == "1 <= n <= 10^5; values fit in 32 bits"
    assert record.degradation.warnings == ()


def test_difficulty_matched_case_insensitively():
    record = validate_challenge(_candidate(difficultyLevel="HARD"), PROMPT)
    assert record.difficulty_level is DifficultyLevel.HARD


def test_unknown_difficulty_uses_preference():
    record = validate_challenge(
        _candidate(difficultyLevel="Brutal"), PROMPT, DifficultyLevel.EASY,
    )
    assert record.difficulty_level is DifficultyLevel.EASY
    assert any("Brutal" in w for w in record.degradation.warnings)


def test_unknown_difficulty_without_preference_is_medium():
    record = validate_challenge(_candidate(difficultyLevel=None), PROMPT)
    assert record.difficulty_level is DifficultyLevel.MEDIUM


def test_non_string_side_becomes_placeholder():
    record = validate_challenge(
        _candidate(publicTestCases=[{"input": 5, "output": "x"}, {"output": "y"}]), PROMPT,
    )
    assert record.public_test_cases[0] == TestCase(
        input="[placeholder] public case 1 input", output="x",
    )
    assert record.public_test_cases[1].input == "[placeholder] public case 2 input"


def test_non_object_case_becomes_placeholder():
    record = validate_challenge(_candidate(edgeCases=["0"]), PROMPT)
    assert record.edge_cases[0].output == "[placeholder] edge case 1 output"


def test_programmatic_expressions_sanitized():
    record = validate_challenge(_candidate(publicTestCases=[
        {"input": '" ".join(["a", "b"])', "output": "1 2 ... 9"},
        {"input": "${n}", "output": '"a" * 100'},
    ]), PROMPT)
    first, second = record.public_test_cases
    assert first.input == "[placeholder] public case 1 input"
    assert first.output == "1 2 _ 9"
    assert second.input == "[placeholder] public case 2 input"
    assert any("programmatic expression" in w for w in record.degradation.warnings)


@pytest.mark.parametrize("value,expected", [
    ("1 2 3", "1 2 3"),
    ("range(1, 100)", "_"),
    ("ab…", "ab_"),
    ('"x" + "y"', "_"),
    ("{{value}}", "_"),
])
def test_sanitize_literal(value, expected):
    assert sanitize_literal(value) == expected


@pytest.mark.parametrize("value", ["0", "100000", "n = 10^5", "1e9", "max value", "[]", "5\n0"])
def test_boundary_evidence_found(value):
    assert has_boundary_evidence(value)


def test_edge_without_boundary_evidence_warns_only():
    record = validate_challenge(_candidate(edgeCases=[{"input": "3 4", "output": "7"}]), PROMPT)
    assert record.edge_cases[0] == TestCase(input="3 4", output="7")
    assert "edge case 1 input shows no boundary or maximum-scale value" in record.degradation.warnings


def test_non_dict_candidate_never_raises():
    record = validate_challenge(["not", "a", "dict"], PROMPT)
    assert len(record.public_test_cases) == 2
    assert len(record.private_test_cases) == 4
    assert len(record.edge_cases) == 1


def test_notes_come_first_and_flags_pass_through():
    record = validate_challenge(
        _candidate(), PROMPT, was_repaired=True, notes=["syntax repair applied"],
    )
    assert record.degradation.warnings[0] == "syntax repair applied"
    assert record.degradation.was_repaired
    assert not record.degradation.is_fallback


def test_over_long_title_hard_cut_with_warning():
    record = validate_challenge(_candidate(title="T" * 400), PROMPT)
    assert record.title == "T" * 297 + "..."
    assert len(record.title) == 300
    assert "title had 400 characters; shortened to fit 300" in record.degradation.warnings


def test_over_long_title_cut_at_word_boundary():
    record = validate_challenge(_candidate(title="word " * 100), PROMPT)
    assert len(record.title) <= 300
    assert record.title.endswith("word...")
