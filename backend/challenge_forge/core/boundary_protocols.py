"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - The generation service is accessed through a Protocol type
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, tests pass a plain stub class
    - Async in Protocol: implementations do network IO, but the extraction functions
      that consume their output are never async themselves — the shell awaits, then
      hands raw text to the pure pipeline
"""

from typing import Protocol


class TextGenerator(Protocol):
    """Contract for the generation service — implemented by shell.

    May fail, be slow, or return any text at all; callers never trust the shape.
    """
    async def generate(self, system: str, user: str, max_tokens: int) -> str: ...
