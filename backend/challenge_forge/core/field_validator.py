"""Field Validator — coerces an untyped candidate dict into a frozen record.

Invariants:
    - validate_challenge() NEVER raises: every defect becomes a default plus a warning
    - Output cardinality: >= 2 public, exactly 4 private, exactly 1 edge test case
    - Every test-case side is non-empty literal text: placeholders for absent, non-string
      or empty sides; programmatic expressions and truncation markers replaced by "_"
    - Warnings from earlier stages (repair notes) come first, validator warnings after
    - validate_mcq() trusts no shape it cannot check: bad options or answer key are refused
      (WrongOptionCountError / MissingSectionsError), never guessed

Design Decisions:
    - One warnings list threaded through small coercion helpers (ADR: no partial records,
      no exceptions as control flow)
    - Numbers in text fields count as wrong type, not as text: a title of 42 is a defect
    - Edge-case boundary check is advisory: a warning, never a rewrite
"""

import logging
import re

from challenge_forge.core.challenge_defaults import (
    default_text_fields,
    placeholder_case,
    placeholder_text,
    shorten_title,
)
from challenge_forge.core.domain_types import (
    DEFAULT_DIFFICULTY,
    EDGE_CASE_COUNT,
    MCQ_OPTION_COUNT,
    MIN_PUBLIC_TEST_CASES,
    PRIVATE_TEST_CASE_COUNT,
    TEST_CASE_FIELDS,
    TITLE_MAX_LENGTH,
    DifficultyLevel,
    OptionId,
    RecordKind,
    TestCaseKind,
    parse_difficulty,
)
from challenge_forge.core.errors import MissingSectionsError, WrongOptionCountError
from challenge_forge.core.markdown_normalizer import normalize_markdown
from challenge_forge.core.records import (
    ChallengeRecord,
    DegradationInfo,
    McqOption,
    McqRecord,
    TestCase,
)

logger = logging.getLogger(__name__)

_PROSE_FIELDS = ("title", "description", "inputFormat", "outputFormat", "constraints", "explanation")

# Literal-text sanitation: each match is replaced by "_"
_PROGRAMMATIC_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"\$\{[^}]*\}?"),                                  # ${n}
    re.compile(r"\{\{.*?(?:\}\}|$)"),                             # {{value}}
    re.compile(r"(?:\"[^\"]*\"|'[^']*')\s*\*\s*\w+"),             # "a" * 100
    re.compile(r"\w+\s*\*\s*(?:\"[^\"]*\"|'[^']*')"),             # 100 * "a"
    re.compile(r"(?:\"[^\"]*\"|'[^']*')(?:\s*\+\s*(?:\"[^\"]*\"|'[^']*'|\w+))+"),  # "x" + "y"
    re.compile(r"(?:\"[^\"]*\"|'[^']*'|[\w.]*)\.join\([^)]*\)*"),  # " ".join(...)
    re.compile(r"\brange\([^)]*\)*"),                              # range(1, 100)
    re.compile(r"\.\.\.+|…"),                                      # truncation
)

_BOUNDARY_EVIDENCE: tuple[re.Pattern, ...] = (
    re.compile(r"\d{4,}"),                                   # large number
    re.compile(r"\b10\s*(?:\^|\*\*)\s*\d+|\b\d+(?:\.\d+)?[eE]\+?\d+\b"),  # 10^5, 1e5
    re.compile(r"(?:^|[\s\[,(])-?0(?:$|[\s\],)])"),          # a zero value
    re.compile(r"^\s*(?:\"\"|''|\[\s*\]|\{\s*\})?\s*$"),    # empty input
    re.compile(
        r"\b(?:max(?:imum)?|min(?:imum)?|limit|boundary|empty|overflow|zero|"
        r"largest|smallest|negative)\b",
        re.IGNORECASE,
    ),
)

_COUNT_RULES: dict[TestCaseKind, tuple[int, int | None]] = {
    # kind: (minimum, exact maximum or None)
    TestCaseKind.PUBLIC: (MIN_PUBLIC_TEST_CASES, None),
    TestCaseKind.PRIVATE: (PRIVATE_TEST_CASE_COUNT, PRIVATE_TEST_CASE_COUNT),
    TestCaseKind.EDGE: (EDGE_CASE_COUNT, EDGE_CASE_COUNT),
}


# ─── Coding challenge ────────────────────────────────────────────

def validate_challenge(
    candidate: dict,
    prompt: str,
    difficulty_preference: DifficultyLevel | None = None,
    *,
    was_repaired: bool = False,
    is_fallback: bool = False,
    notes: tuple[str, ...] | list[str] = (),
) -> ChallengeRecord:
    """Coerce a candidate dict into a ChallengeRecord. Never raises."""
    warnings: list[str] = list(notes)
    if not isinstance(candidate, dict):
        warnings.append(f"candidate is {type(candidate).__name__}, not an object; defaults used")
        candidate = {}

    defaults = default_text_fields(prompt, difficulty_preference)
    text = {
        name: coerce_text_field(candidate, name, defaults[name], warnings)
        for name in _PROSE_FIELDS
    }
    text["title"] = cap_title(text["title"], warnings)
    difficulty = coerce_difficulty(
        candidate.get("difficultyLevel"), difficulty_preference, warnings,
    )
    cases = {
        kind: coerce_test_cases(candidate.get(field_name), kind, warnings)
        for kind, field_name in TEST_CASE_FIELDS.items()
    }
    check_edge_cases(cases[TestCaseKind.EDGE], warnings)

    if len(warnings) > len(notes):
        logger.debug(
            f"Validator produced {len(warnings) - len(notes)} warning(s)",
            extra={"record_kind": RecordKind.CHALLENGE.value, "warning_count": len(warnings)},
        )
    return ChallengeRecord(
        title=text["title"],
        difficulty_level=difficulty,
        description=text["description"],
        input_format=text["inputFormat"],
        output_format=text["outputFormat"],
        constraints=text["constraints"],
        public_test_cases=tuple(cases[TestCaseKind.PUBLIC]),
        private_test_cases=tuple(cases[TestCaseKind.PRIVATE]),
        edge_cases=tuple(cases[TestCaseKind.EDGE]),
        explanation=text["explanation"],
        prompt=prompt,
        degradation=DegradationInfo(
            was_repaired=was_repaired,
            is_fallback=is_fallback,
            warnings=tuple(warnings),
        ),
    )


def coerce_text_field(candidate: dict, name: str, default: str, warnings: list[str]) -> str:
    """Non-empty string or the default; a list of strings for constraints is joined."""
    if name not in candidate:
        warnings.append(f"missing field '{name}'; default used")
        return default
    value = candidate[name]
    if name == "constraints" and isinstance(value, list) and all(isinstance(v, str) for v in value):
        value = "; ".join(v.strip() for v in value if v.strip())
    if not isinstance(value, str):
        warnings.append(
            f"field '{name}' has type {type(value).__name__}, expected text; default used"
        )
        return default
    if not value.strip():
        warnings.append(f"field '{name}' is empty; default used")
        return default
    return value.strip()


def cap_title(title: str, warnings: list[str]) -> str:
    """Shorten an over-long title so it fits its column."""
    if len(title) <= TITLE_MAX_LENGTH:
        return title
    warnings.append(
        f"title had {len(title)} characters; shortened to fit {TITLE_MAX_LENGTH}"
    )
    return shorten_title(title)


def coerce_difficulty(
    value: object,
    preference: DifficultyLevel | None,
    warnings: list[str],
) -> DifficultyLevel:
    level = parse_difficulty(value)
    if level is not None:
        return level
    chosen = preference or DEFAULT_DIFFICULTY
    warnings.append(f"difficultyLevel {value!r} not recognised; using {chosen.value}")
    return chosen


# ─── Test cases ──────────────────────────────────────────────────

def coerce_test_cases(raw: object, kind: TestCaseKind, warnings: list[str]) -> list[TestCase]:
    """Coerce one test-case array and enforce its cardinality."""
    field_name = TEST_CASE_FIELDS[kind]
    if raw is None:
        raw = []
    elif not isinstance(raw, list):
        warnings.append(f"{field_name} is {type(raw).__name__}, not a list; replaced")
        raw = []

    cases = [coerce_test_case(item, kind, i, warnings) for i, item in enumerate(raw)]
    minimum, exact = _COUNT_RULES[kind]

    if exact is not None and len(cases) > exact:
        dropped = len(cases) - exact
        warnings.append(
            f"{field_name} had {len(cases)} case(s); dropped {dropped} to keep exactly {exact}"
        )
        cases = cases[:exact]
    if len(cases) < minimum:
        missing = minimum - len(cases)
        warnings.append(
            f"{field_name} had {len(cases)} case(s); added {missing} placeholder(s)"
        )
        cases.extend(
            TestCase(**placeholder_case(kind, i)) for i in range(len(cases), minimum)
        )
    return cases


def coerce_test_case(item: object, kind: TestCaseKind, index: int, warnings: list[str]) -> TestCase:
    if not isinstance(item, dict):
        warnings.append(
            f"{kind.value} case {index + 1} is {type(item).__name__}, not an object; placeholder used"
        )
        return TestCase(**placeholder_case(kind, index))
    return TestCase(
        input=_coerce_side(item.get("input"), kind, index, "input", warnings),
        output=_coerce_side(item.get("output"), kind, index, "output", warnings),
    )


def _coerce_side(
    value: object, kind: TestCaseKind, index: int, side: str, warnings: list[str],
) -> str:
    where = f"{kind.value} case {index + 1} {side}"
    if not isinstance(value, str) or not value.strip():
        reason = "missing" if value is None else (
            "empty" if isinstance(value, str) else f"{type(value).__name__}, not text"
        )
        warnings.append(f"{where} {reason}; placeholder used")
        return placeholder_text(kind, index, side)

    cleaned = sanitize_literal(value)
    if cleaned != value:
        warnings.append(f"{where} contained a programmatic expression or truncation marker")
        if not cleaned.strip(" _\n"):
            return placeholder_text(kind, index, side)
    return cleaned


def sanitize_literal(value: str) -> str:
    """Replace programmatic expressions and truncation markers with "_"."""
    for pattern in _PROGRAMMATIC_PATTERNS:
        value = pattern.sub("_", value)
    return value


def has_boundary_evidence(value: str) -> bool:
    return any(p.search(value) for p in _BOUNDARY_EVIDENCE)


def check_edge_cases(cases: list[TestCase], warnings: list[str]) -> None:
    """Advisory only: flag edge inputs that show no boundary or max-scale value."""
    for i, case in enumerate(cases):
        if case.input.startswith("[placeholder]"):
            continue
        if not has_boundary_evidence(case.input):
            warnings.append(
                f"edge case {i + 1} input shows no boundary or maximum-scale value"
            )


# ─── Multiple-choice question ────────────────────────────────────

def validate_mcq(
    candidate: dict,
    prompt: str = "",
    *,
    notes: tuple[str, ...] | list[str] = (),
) -> McqRecord:
    """Coerce a label-parsed candidate into an McqRecord.

    Prose fields pass through the markdown normalizer. Difficulty is coerced like
    the challenge path; options and the answer key are refused when malformed.
    """
    warnings: list[str] = list(notes)
    defaults = default_text_fields(prompt)

    title = cap_title(
        coerce_text_field(candidate, "title", defaults["title"], warnings), warnings,
    )
    difficulty = coerce_difficulty(candidate.get("difficultyLevel"), None, warnings)
    options = coerce_options(candidate.get("options"))

    correct = str(candidate.get("correctOptionId", "")).strip().upper()
    if correct not in {o.value for o in OptionId}:
        raise MissingSectionsError(["CORRECT"])

    question = normalize_markdown(str(candidate.get("question", "")).strip())
    explanation = normalize_markdown(str(candidate.get("explanation", "")).strip())

    return McqRecord(
        title=title,
        difficulty_level=difficulty,
        question=question,
        options=options,
        correct_option_id=OptionId(correct),
        explanation=explanation,
        prompt=prompt,
        degradation=DegradationInfo(was_repaired=False, is_fallback=False, warnings=tuple(warnings)),
    )


def coerce_options(raw: object) -> tuple[McqOption, ...]:
    items = raw if isinstance(raw, list) else []
    ids = [str(o.get("id", "")).upper() for o in items if isinstance(o, dict)]
    if len(items) != MCQ_OPTION_COUNT or sorted(ids) != [o.value for o in OptionId]:
        raise WrongOptionCountError(len(items), ids)
    by_id = {str(o["id"]).upper(): normalize_markdown(str(o.get("text", "")).strip()) for o in items}
    return tuple(McqOption(id=option_id, text=by_id[option_id.value]) for option_id in OptionId)
