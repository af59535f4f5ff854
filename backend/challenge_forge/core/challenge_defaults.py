"""Challenge Defaults — deterministic placeholder values for degraded records.

Invariants:
    - All functions are pure and deterministic: same prompt, same defaults
    - Placeholder test cases are clearly labeled ("[placeholder] ...") — never passed off
      as genuine model output
    - placeholder_text() names the array, the 1-based case number and the side

Design Decisions:
    - One module shared by structural repair, validator and fallback synthesizer
      (ADR: a single source of defaults, so every degraded path reads the same)
    - Prompt-derived title uses the first words of the prompt, not a character slice:
      never cuts a word in half
    - Titles longer than TITLE_MAX_LENGTH are shortened at a word boundary when one sits
      in the second half of the limit, otherwise hard-cut; "..." marks either cut
"""

from challenge_forge.core.domain_types import (
    DEFAULT_DIFFICULTY,
    TITLE_MAX_LENGTH,
    DifficultyLevel,
    TestCaseKind,
)

_TITLE_WORDS = 6
_FALLBACK_TITLE = "Challenge: Untitled Problem"


def placeholder_text(kind: TestCaseKind, index: int, side: str) -> str:
    """Label for a test-case leaf that could not be taken from the model output."""
    return f"[placeholder] {kind.value} case {index + 1} {side}"


def placeholder_case(kind: TestCaseKind, index: int) -> dict[str, str]:
    return {
        "input": placeholder_text(kind, index, "input"),
        "output": placeholder_text(kind, index, "output"),
    }


def placeholder_cases(kind: TestCaseKind, count: int, start: int = 0) -> list[dict[str, str]]:
    return [placeholder_case(kind, i) for i in range(start, start + count)]


def title_from_prompt(prompt: str) -> str:
    """Deterministic title from the first few words of the request prompt."""
    words = prompt.split()
    if not words:
        return _FALLBACK_TITLE
    title = " ".join(words[:_TITLE_WORDS])
    if len(words) > _TITLE_WORDS:
        title += "..."
    return shorten_title(f"Challenge: {title}")


def shorten_title(title: str) -> str:
    """Fit a title into TITLE_MAX_LENGTH characters."""
    if len(title) <= TITLE_MAX_LENGTH:
        return title
    cut = title[:TITLE_MAX_LENGTH - 3]
    space = cut.rfind(" ")
    if space > TITLE_MAX_LENGTH // 2:
        cut = cut[:space]
    return cut.rstrip() + "..."


def default_text_fields(
    prompt: str, difficulty_preference: DifficultyLevel | None = None,
) -> dict[str, str]:
    """Defaults for every text field of a coding challenge."""
    subject = prompt.strip() or "the requested problem"
    return {
        "title": title_from_prompt(prompt),
        "difficultyLevel": (difficulty_preference or DEFAULT_DIFFICULTY).value,
        "description": f"Write a program to solve the following problem: {subject}",
        "inputFormat": "Input format will be provided in plain text.",
        "outputFormat": "Output should be provided in plain text.",
        "constraints": "Standard time and space complexity constraints apply.",
        "explanation": (
            "Solve this problem using appropriate algorithms and data structures "
            "based on the requirements."
        ),
    }
