"""Extraction Orchestrator tests — escalation from direct parse to fallback.

Tests cover:
    - Clean JSON → CLEAN, no repair flags
    - Fenced / prose-wrapped JSON → REPAIRED via syntax repair
    - Truncation example → REPAIRED via structural repair, never fallback
    - Empty, noise and non-object JSON → FALLBACK with prompt-derived title
    - Totality: every input yields a record meeting the cardinality rules
"""

import json

import pytest

from challenge_forge.core.domain_types import DifficultyLevel, ExtractionOutcome
from challenge_forge.core.extract_challenge import (
    extract_challenge,
    fallback_result,
    parse_candidate,
)
from challenge_forge.core.records import TestCase

PROMPT = "Reverse the words of a sentence"


def _valid_challenge() -> dict:
    return {
        "title": "Reverse Words",
        "difficultyLevel": "Easy",
        "description": "Reverse the order of words.",
        "inputFormat": "One line of text",
        "outputFormat": "The words in reverse order",
        "constraints": "1 <= length <= 10^4",
        "publicTestCases": [
            {"input": "hello world", "output": "world hello"},
            {"input": "a b c", "output": "c b a"},
        ],
        "privateTestCases": [
            {"input": "one", "output": "one"},
            {"input": "x y", "output": "y x"},
            {"input": "1 2 3 4", "output": "4 3 2 1"},
            {"input": "the quick fox", "output": "fox quick the"},
        ],
        "edgeCases": [{"input": "", "output": ""}],
        "explanation": "Split, reverse, join.",
    }


def _assert_cardinality(result):
    record = result.record
    assert len(record.public_test_cases) >= 2
    assert len(record.private_test_cases) == 4
    assert len(record.edge_cases) == 1


def test_clean_json_is_clean():
    raw = json.dumps(_valid_challenge())
    result = extract_challenge(raw, PROMPT)
    assert result.outcome is ExtractionOutcome.CLEAN
    assert not result.degradation.was_repaired
    assert not result.degradation.is_fallback
    assert result.record.difficulty_level is DifficultyLevel.EASY


def test_fenced_json_is_repaired():
    raw = "Sure! Here it is:\n```json\n" + json.dumps(_valid_challenge(), indent=2) + "\n```"
    result = extract_challenge(raw, PROMPT)
    assert result.outcome is ExtractionOutcome.REPAIRED
    assert result.record.title == "Reverse Words"
    assert result.degradation.warnings[0] == "syntax repair applied to model output"


def test_truncation_example_is_repaired_not_fallback():
    raw = '{"title":"t","publicTestCases":[{"input":"a","output":"b"},{"inp'
    result = extract_challenge(raw, PROMPT)
    assert result.outcome is ExtractionOutcome.REPAIRED
    assert result.degradation.was_repaired
    assert not result.degradation.is_fallback
    assert result.record.title == "t"
    assert result.record.public_test_cases[0] == TestCase(input="a", output="b")
    assert result.record.public_test_cases[1].input.startswith("[placeholder]")
    _assert_cardinality(result)


def test_array_of_one_object_is_accepted():
    raw = json.dumps([_valid_challenge()])
    result = extract_challenge(raw, PROMPT)
    assert result.outcome is ExtractionOutcome.REPAIRED
    assert result.record.title == "Reverse Words"


def test_empty_string_falls_back_to_prompt():
    result = extract_challenge("", PROMPT)
    assert result.outcome is ExtractionOutcome.FALLBACK
    assert result.degradation.is_fallback
    assert not result.degradation.was_repaired
    assert result.record.title == "Challenge: Reverse the words of a sentence"
    _assert_cardinality(result)


def test_fallback_keeps_difficulty_preference():
    result = extract_challenge("no json here", PROMPT, DifficultyLevel.HARD)
    assert result.outcome is ExtractionOutcome.FALLBACK
    assert result.record.difficulty_level is DifficultyLevel.HARD


@pytest.mark.parametrize("raw", [
    "%%%",
    '"just a string"',
    "42",
    "}}}]]]",
    "[1, 2, 3]",
    '{"title": "x", "publicTestCases": [[[[',
    "```json\n```",
])
def test_extraction_is_total(raw):
    result = extract_challenge(raw, PROMPT)
    _assert_cardinality(result)
    assert result.record.prompt == PROMPT


def test_fallback_result_records_reason_first():
    result = fallback_result(PROMPT, reason="generation timed out after 5s")
    assert result.degradation.warnings[0] == "generation timed out after 5s"
    assert result.outcome is ExtractionOutcome.FALLBACK


def test_parse_candidate_only_accepts_objects():
    assert parse_candidate('{"a": 1}') == {"a": 1}
    assert parse_candidate("[1]") is None
    assert parse_candidate("{bad") is None


def test_titles_never_exceed_column_length():
    assert len(extract_challenge("", "x" * 500).record.title) <= 300
    result = extract_challenge(json.dumps({"title": "T" * 400}), PROMPT)
    assert len(result.record.title) == 300
