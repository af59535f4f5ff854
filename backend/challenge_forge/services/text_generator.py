"""Anthropic Text Generator — TextGenerator implementation over the resilient client.

Invariants:
    - generate() returns the concatenated text blocks of one model response ("" if none)
    - Retry, backoff and error mapping live in ResilientAnthropicClient, not here
    - Failures surface as GenerationAPIError (raised by the client)

Design Decisions:
    - Thin adapter so the generator service depends on the TextGenerator protocol only
      (ADR: tests inject a stub, never the SDK)
"""

import logging

from challenge_forge.infrastructure.anthropic_client import ResilientAnthropicClient

logger = logging.getLogger(__name__)


class AnthropicTextGenerator:
    """One system + user message in, model text out."""

    def __init__(
        self,
        client: ResilientAnthropicClient,
        model: str,
        temperature: float | None = None,
    ):
        self.client = client
        self.model = model
        self.temperature = temperature

    async def generate(self, system: str, user: str, max_tokens: int) -> str:
        response = await self.client.create_message(
            model=self.model,
            max_tokens=max_tokens,
            system=system,
            messages=[{"role": "user", "content": user}],
            temperature=self.temperature,
        )
        text = "".join(
            block.text for block in response.content
            if getattr(block, "type", None) == "text"
        )
        if getattr(response, "stop_reason", None) == "max_tokens":
            logger.warning(
                f"Generation hit max_tokens ({max_tokens}); output is truncated",
                extra={"output_tokens": max_tokens},
            )
        return text
