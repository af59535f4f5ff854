"""ChallengeGenerator tests — generation failures degrade to fallback, questions refuse."""

import asyncio

import pytest

from challenge_forge.core.domain_types import DifficultyLevel, ExtractionOutcome, OptionId
from challenge_forge.core.errors import (
    GenerationAPIError,
    MissingSectionsError,
    WrongOptionCountError,
)
from challenge_forge.services.challenge_generator import ChallengeGenerator
from tests.services.stub_generator import (
    VALID_MCQ_TEXT,
    StubTextGenerator,
    valid_challenge_json,
)

PROMPT = "Find two numbers in an array that sum to a target"


def _service(*outcomes, timeout_seconds=5.0):
    stub = StubTextGenerator(*outcomes)
    return ChallengeGenerator(
        stub, challenge_max_tokens=8000, mcq_max_tokens=2500,
        timeout_seconds=timeout_seconds,
    ), stub


async def _never_answers():
    await asyncio.sleep(10)
    return "{}"


# --- Coding challenges ------------------------------------------------------------

async def test_clean_output_yields_clean_record():
    service, stub = _service(valid_challenge_json())
    result = await service.generate_challenge(PROMPT)
    assert result.outcome == ExtractionOutcome.CLEAN
    assert result.record.title == "Two Sum"
    assert result.record.prompt == PROMPT
    assert stub.calls[0][1] == PROMPT
    assert stub.calls[0][2] == 8000


async def test_difficulty_preference_written_into_system_prompt():
    service, stub = _service(valid_challenge_json())
    await service.generate_challenge(PROMPT, DifficultyLevel.HARD)
    assert '"difficultyLevel": "Hard"' in stub.calls[0][0]


async def test_without_preference_model_chooses_difficulty():
    service, stub = _service(valid_challenge_json())
    await service.generate_challenge(PROMPT)
    assert '"Easy", "Medium", or "Hard"' in stub.calls[0][0]


async def test_api_error_degrades_to_fallback():
    service, _ = _service(GenerationAPIError("overloaded", "connection_error"))
    result = await service.generate_challenge(PROMPT, DifficultyLevel.EASY)
    assert result.outcome == ExtractionOutcome.FALLBACK
    assert result.degradation.is_fallback is True
    assert result.degradation.warnings[0] == "generation service unavailable (connection_error)"
    assert result.record.difficulty_level == DifficultyLevel.EASY
    assert len(result.record.private_test_cases) == 4


async def test_timeout_degrades_to_fallback():
    service, _ = _service(_never_answers, timeout_seconds=0.01)
    result = await service.generate_challenge(PROMPT)
    assert result.outcome == ExtractionOutcome.FALLBACK
    assert result.degradation.warnings[0] == "generation timed out after 0.01s"


async def test_unexpected_exception_degrades_to_fallback():
    service, _ = _service(RuntimeError("socket closed"))
    result = await service.generate_challenge(PROMPT)
    assert result.outcome == ExtractionOutcome.FALLBACK
    assert result.degradation.warnings[0] == "generation failed (RuntimeError)"


async def test_cancellation_propagates():
    service, _ = _service(asyncio.CancelledError())
    with pytest.raises(asyncio.CancelledError):
        await service.generate_challenge(PROMPT)


async def test_garbage_output_still_yields_record():
    service, _ = _service("I'm sorry, I can't help with that.")
    result = await service.generate_challenge(PROMPT)
    assert result.outcome == ExtractionOutcome.FALLBACK
    assert len(result.record.public_test_cases) >= 2
    assert len(result.record.edge_cases) == 1


# --- Multiple-choice questions ----------------------------------------------------

async def test_mcq_success():
    service, stub = _service(VALID_MCQ_TEXT)
    record = await service.generate_mcq("SQL joins")
    assert record.title == "SQL Joins"
    assert record.correct_option_id == OptionId.B
    assert [o.id for o in record.options] == list(OptionId)
    assert "```sql" in record.question
    assert stub.calls[0][2] == 2500


async def test_mcq_missing_sections_refused():
    service, _ = _service("TITLE: Joins\nQUESTION: Which join?")
    with pytest.raises(MissingSectionsError) as exc_info:
        await service.generate_mcq("SQL joins")
    assert "OPTIONS" in exc_info.value.missing
    assert "CORRECT" in exc_info.value.missing


async def test_mcq_wrong_option_count_refused():
    text = VALID_MCQ_TEXT.replace("D: CROSS JOIN\n", "")
    service, _ = _service(text)
    with pytest.raises(WrongOptionCountError) as exc_info:
        await service.generate_mcq("SQL joins")
    assert exc_info.value.found == 3


async def test_mcq_timeout_raises_generation_error():
    service, _ = _service(_never_answers, timeout_seconds=0.01)
    with pytest.raises(GenerationAPIError) as exc_info:
        await service.generate_mcq("SQL joins")
    assert exc_info.value.api_error_type == "timeout"


async def test_mcq_api_error_propagates():
    service, _ = _service(GenerationAPIError("down", "rate_limit"))
    with pytest.raises(GenerationAPIError):
        await service.generate_mcq("SQL joins")
