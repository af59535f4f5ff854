"""Challenge Generator — awaits the generation service, then hands text to the pure pipeline.

Invariants:
    - The generation call is the only await; it is bounded by asyncio.wait_for
    - No retry here: ResilientAnthropicClient owns retry/backoff
    - Coding challenges ALWAYS yield a record: failure or timeout → fallback from the prompt
    - Questions never fall back: generation failure → GenerationAPIError (503),
      malformed label text → MissingSectionsError / WrongOptionCountError (422)
    - asyncio.CancelledError is never caught

Design Decisions:
    - TextGenerator injected by constructor (ADR: stub in tests, Anthropic in production)
    - Module-level singleton built lazily from settings, exposed as a FastAPI dependency
      so routes can be tested with dependency_overrides
"""

import asyncio
import logging

from challenge_forge.config import get_settings
from challenge_forge.core.boundary_protocols import TextGenerator
from challenge_forge.core.domain_types import DifficultyLevel, ExtractionStage, RecordKind
from challenge_forge.core.errors import ErrorContext, GenerationAPIError
from challenge_forge.core.extract_challenge import extract_challenge, extract_mcq, fallback_result
from challenge_forge.core.records import ExtractionResult, McqRecord
from challenge_forge.infrastructure.anthropic_client import ResilientAnthropicClient
from challenge_forge.services.challenge_prompts import (
    MCQ_SYSTEM_PROMPT,
    build_challenge_system_prompt,
)
from challenge_forge.services.text_generator import AnthropicTextGenerator

logger = logging.getLogger(__name__)


class ChallengeGenerator:
    """Generates coding challenges and questions through an injected TextGenerator."""

    def __init__(
        self,
        generator: TextGenerator,
        *,
        challenge_max_tokens: int = 8000,
        mcq_max_tokens: int = 2500,
        timeout_seconds: float = 180.0,
    ):
        self.generator = generator
        self.challenge_max_tokens = challenge_max_tokens
        self.mcq_max_tokens = mcq_max_tokens
        self.timeout_seconds = timeout_seconds

    async def generate_challenge(
        self, prompt: str, difficulty_preference: DifficultyLevel | None = None,
    ) -> ExtractionResult:
        system = build_challenge_system_prompt(difficulty_preference)
        try:
            raw_text = await asyncio.wait_for(
                self.generator.generate(system, prompt, self.challenge_max_tokens),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            return self._fallback(
                prompt, difficulty_preference,
                f"generation timed out after {self.timeout_seconds:g}s",
            )
        except GenerationAPIError as e:
            return self._fallback(
                prompt, difficulty_preference,
                f"generation service unavailable ({e.api_error_type})",
                error_code=e.code,
            )
        except Exception as e:
            logger.error(f"Unexpected generation failure: {e}", exc_info=True)
            return self._fallback(
                prompt, difficulty_preference,
                f"generation failed ({type(e).__name__})",
            )

        if not isinstance(raw_text, str):
            raw_text = ""
        return extract_challenge(raw_text, prompt, difficulty_preference)

    async def generate_mcq(self, prompt: str) -> McqRecord:
        try:
            raw_text = await asyncio.wait_for(
                self.generator.generate(MCQ_SYSTEM_PROMPT, prompt, self.mcq_max_tokens),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            raise GenerationAPIError(
                f"no response within {self.timeout_seconds:g}s", "timeout",
                context=ErrorContext(record_kind=RecordKind.MCQ.value),
            )
        except GenerationAPIError as e:
            e.context.record_kind = RecordKind.MCQ.value
            raise
        return extract_mcq(raw_text if isinstance(raw_text, str) else "", prompt)

    def _fallback(
        self,
        prompt: str,
        difficulty_preference: DifficultyLevel | None,
        reason: str,
        error_code: str | None = None,
    ) -> ExtractionResult:
        logger.warning(
            f"Challenge generation degraded to fallback: {reason}",
            extra={
                "stage": ExtractionStage.FALLBACK_SYNTHESIS.value,
                "record_kind": RecordKind.CHALLENGE.value,
                "error_code": error_code,
            },
        )
        return fallback_result(prompt, difficulty_preference, reason=reason)


# -- Dependency ----------------------------------------------------------------

_challenge_generator: ChallengeGenerator | None = None


def get_challenge_generator() -> ChallengeGenerator:
    """FastAPI dependency: shared ChallengeGenerator over the Anthropic client."""
    global _challenge_generator
    if _challenge_generator is None:
        settings = get_settings()
        client = ResilientAnthropicClient(
            api_key=settings.anthropic_api_key,
            max_retries=settings.anthropic_max_retries,
            base_delay_ms=settings.anthropic_base_delay_ms,
            max_delay_ms=settings.anthropic_max_delay_ms,
            timeout_seconds=settings.anthropic_timeout_seconds,
        )
        _challenge_generator = ChallengeGenerator(
            AnthropicTextGenerator(
                client,
                model=settings.generation_model,
                temperature=settings.generation_temperature,
            ),
            challenge_max_tokens=settings.challenge_max_tokens,
            mcq_max_tokens=settings.mcq_max_tokens,
            timeout_seconds=settings.generation_timeout_seconds,
        )
    return _challenge_generator
