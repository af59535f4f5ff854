"""Label Parser — extracts a multiple-choice candidate from `LABEL: value` sectioned text.

Invariants:
    - All functions are PURE: no IO, no async, no side effects
    - Sections are searched in fixed order: TITLE, DIFFICULTY, QUESTION, OPTIONS, CORRECT,
      EXPLANATION; each runs up to the start of the next recognized label
    - Every absent section is reported at once (MissingSectionsError.missing), not just the first
    - OPTIONS must yield exactly four options whose ids are exactly {A, B, C, D},
      otherwise WrongOptionCountError with the count found
    - Never synthesizes or guesses content: a shape mismatch is surfaced to the caller

Design Decisions:
    - Labels only count at the start of a line (optionally wrapped in markdown bold/heading
      markers): a word like "correct:" inside an explanation must not split the section
    - A CORRECT section with no A–D letter counts as missing — the answer key is the one
      thing that cannot be defaulted
"""

import re

from challenge_forge.core.domain_types import MCQ_OPTION_COUNT, OptionId
from challenge_forge.core.errors import MissingSectionsError, WrongOptionCountError

SECTION_LABELS: tuple[str, ...] = (
    "TITLE", "DIFFICULTY", "QUESTION", "OPTIONS", "CORRECT", "EXPLANATION",
)

_LABEL_LINE = re.compile(
    r"^[ \t]*(?:#{1,6}[ \t]*)?(?:\*\*|__)?[ \t]*"
    r"(" + "|".join(SECTION_LABELS) + r")[ \t]*(?:\*\*|__)?[ \t]*:[ \t]*(?:\*\*|__)?",
    re.IGNORECASE | re.MULTILINE,
)
_OPTION_LINE = re.compile(
    r"^[ \t]*(?:\*\*|__)?[ \t]*\(?([A-Da-d])\)?[ \t]*(?:\*\*|__)?[ \t]*:[ \t]*(?:\*\*|__)?",
    re.MULTILINE,
)
_CORRECT_LETTER = re.compile(r"\b([A-D])\b")
_LONE_LETTER = re.compile(r"^\W*([A-Da-d])\W*$")


def parse_sections(text: str) -> dict[str, str]:
    """Split label-shaped text into its six sections, raising when any is absent."""
    starts: dict[str, re.Match] = {}
    cursor = 0
    for label in SECTION_LABELS:
        match = _find_label(text, label, cursor)
        if match:
            starts[label] = match
            cursor = match.end()

    boundaries = sorted(m.start() for m in _LABEL_LINE.finditer(text))
    sections: dict[str, str] = {}
    for label, match in starts.items():
        end = next((b for b in boundaries if b >= match.end()), len(text))
        sections[label] = text[match.end():end].strip()

    correct = sections.get("CORRECT")
    if correct is not None and correct_letter(correct) is None:
        del sections["CORRECT"]

    missing = [label for label in SECTION_LABELS if not sections.get(label)]
    if missing:
        raise MissingSectionsError(missing)
    return sections


def parse_options(options_text: str) -> list[dict[str, str]]:
    """Parse `A: ...` lines; option text runs until the next letter label."""
    matches = list(_OPTION_LINE.finditer(options_text))
    options: list[dict[str, str]] = []
    for i, match in enumerate(matches):
        end = matches[i + 1].start() if i + 1 < len(matches) else len(options_text)
        options.append({
            "id": match.group(1).upper(),
            "text": options_text[match.end():end].strip(),
        })

    ids = [o["id"] for o in options]
    expected = [o.value for o in OptionId]
    if len(options) != MCQ_OPTION_COUNT or sorted(ids) != expected:
        raise WrongOptionCountError(len(options), ids)
    return options


def parse_label_record(text: str) -> dict:
    """Label-shaped text → untyped MCQ candidate (camelCase keys)."""
    sections = parse_sections(text)
    options = parse_options(sections["OPTIONS"])
    correct = correct_letter(sections["CORRECT"])
    return {
        "title": _first_line(sections["TITLE"]),
        "difficultyLevel": _first_line(sections["DIFFICULTY"]),
        "question": sections["QUESTION"],
        "options": options,
        "correctOptionId": correct,
        "explanation": sections["EXPLANATION"],
    }


def correct_letter(section: str) -> str | None:
    """Answer letter of a CORRECT section: a standalone A-D, or a lone a-d."""
    match = _CORRECT_LETTER.search(section) or _LONE_LETTER.match(section.strip())
    return match.group(1).upper() if match else None


def _find_label(text: str, label: str, cursor: int) -> re.Match | None:
    for match in _LABEL_LINE.finditer(text, cursor):
        if match.group(1).upper() == label:
            return match
    return None


def _first_line(value: str) -> str:
    return value.splitlines()[0].strip() if value else value
