"""Structural Repair — blob-level fixes for syntax-repaired text that still fails to parse.

Invariants:
    - All functions are PURE: no IO, no async, no side effects
    - Transforms run in a fixed order: stray closers → truncated arrays → missing fields
      (field injection must see the repaired arrays, never the truncated ones)
    - A truncated test-case array keeps only its syntactically complete {input, output}
      elements; with none left it holds exactly one labeled placeholder
    - Missing fields are detected by label presence, never by parsing
    - Every transform is idempotent and reports what it changed as notes
    - No guarantee of a parseable result — the field validator is the safety net

Design Decisions:
    - Small ordered pipeline of (text) -> (text, notes) transforms over one big regex chain
      (ADR: each step testable on its own)
    - Injected text fields are empty strings: the validator then fills them with
      prompt-aware defaults and records why (ADR: one source of defaults)
"""

import json
import re
from collections.abc import Callable
from dataclasses import dataclass

from challenge_forge.core.challenge_defaults import placeholder_case
from challenge_forge.core.domain_types import (
    CHALLENGE_REQUIRED_FIELDS,
    TEST_CASE_FIELDS,
    TestCaseKind,
)

_STRING_LITERAL = r'"(?:[^"\\]|\\.)*"'
_TEST_CASE_ELEMENT = re.compile(
    r"\{\s*\"input\"\s*:\s*" + _STRING_LITERAL
    + r"\s*,\s*\"output\"\s*:\s*" + _STRING_LITERAL + r"\s*\}"
    r"|\{\s*\"output\"\s*:\s*" + _STRING_LITERAL
    + r"\s*,\s*\"input\"\s*:\s*" + _STRING_LITERAL + r"\s*\}",
    re.DOTALL,
)
_KIND_FOR_FIELD: dict[str, TestCaseKind] = {name: kind for kind, name in TEST_CASE_FIELDS.items()}

Transform = Callable[[str], tuple[str, list[str]]]


@dataclass(frozen=True)
class StructuralRepair:
    """Repaired text plus one note per change made."""
    text: str
    notes: tuple[str, ...]


def repair_structure(text: str) -> StructuralRepair:
    """Run the structural transforms in order."""
    notes: list[str] = []
    for transform in STRUCTURAL_TRANSFORMS:
        text, step_notes = transform(text)
        notes.extend(step_notes)
    return StructuralRepair(text=text, notes=tuple(notes))


# --- Transform 1: stray closers -----------------------------------------------

def drop_stray_closers(text: str) -> tuple[str, list[str]]:
    """Remove closers that have no opener left to close (over-closed structure)."""
    out: list[str] = []
    stack: list[str] = []
    dropped = 0
    for c, in_string in _walk(text):
        if not in_string and c in "{[":
            stack.append(c)
        elif not in_string and c in "}]":
            opener = "{" if c == "}" else "["
            if not stack or stack[-1] != opener:
                dropped += 1
                continue
            stack.pop()
        out.append(c)
    if not dropped:
        return text, []
    return "".join(out), [f"dropped {dropped} unmatched closing bracket(s)"]


# --- Transform 2: truncated test-case arrays -----------------------------------

def repair_truncated_arrays(text: str) -> tuple[str, list[str]]:
    notes: list[str] = []
    for field_name in TEST_CASE_FIELDS.values():
        text, note = repair_truncated_array(text, field_name)
        if note:
            notes.append(note)
    return text, notes


def repair_truncated_array(text: str, field_name: str) -> tuple[str, str | None]:
    """Cut a test-case array after its last complete element and close it.

    An array counts as truncated when its closing bracket never arrives, or when
    a partial element trails the last complete one.
    """
    label = re.search(rf'"{field_name}"\s*:\s*\[', text)
    if not label:
        return text, None
    open_idx = label.end() - 1
    close_idx = _matching_close(text, open_idx)
    body_end = close_idx if close_idx is not None else len(text)
    body = text[open_idx + 1:body_end]

    matches = list(_TEST_CASE_ELEMENT.finditer(body))
    elements = [m.group(0) for m in matches]
    last_end = matches[-1].end() if matches else 0
    leftover = body[last_end:].strip(" \t\r\n,")
    if close_idx is not None and not leftover:
        return text, None

    if elements:
        array = "[" + ", ".join(elements) + "]"
        note = (
            f"{field_name} truncated; kept {len(elements)} complete element(s)"
        )
    else:
        kind = _KIND_FOR_FIELD[field_name]
        array = "[" + json.dumps(placeholder_case(kind, 0)) + "]"
        note = f"{field_name} truncated with no complete element; placeholder substituted"

    if close_idx is not None:
        return text[:open_idx] + array + text[close_idx + 1:], note
    head = text[:open_idx] + array
    return head + _closers_for(text[:open_idx]), note


# --- Transform 3: missing top-level fields --------------------------------------

def inject_missing_fields(text: str) -> tuple[str, list[str]]:
    """Insert defaults for required fields whose label never appears."""
    final_brace = text.rfind("}")
    if final_brace == -1:
        return text, []
    missing = [
        name for name in CHALLENGE_REQUIRED_FIELDS
        if not re.search(rf'"{name}"\s*:', text)
    ]
    if not missing:
        return text, []

    fragments = [f'"{name}": {_default_json(name)}' for name in missing]
    head = text[:final_brace].rstrip()
    separator = "" if head.endswith(("{", ",")) else ", "
    repaired = head + separator + ", ".join(fragments) + text[final_brace:]
    return repaired, [f"injected missing field '{name}'" for name in missing]


def _default_json(field_name: str) -> str:
    kind = _KIND_FOR_FIELD.get(field_name)
    if kind is None:
        return '""'
    return "[" + json.dumps(placeholder_case(kind, 0)) + "]"


STRUCTURAL_TRANSFORMS: tuple[Transform, ...] = (
    drop_stray_closers,
    repair_truncated_arrays,
    inject_missing_fields,
)


# --- Scanning helpers -------------------------------------------------------------

def _walk(text: str):
    """Yield (char, inside_string) pairs; escapes inside strings are honoured."""
    in_string = False
    escaped = False
    for c in text:
        if in_string:
            if escaped:
                escaped = False
            elif c == "\\":
                escaped = True
            elif c == '"':
                yield c, True
                in_string = False
                continue
            yield c, True
        else:
            if c == '"':
                in_string = True
                yield c, True
                continue
            yield c, False


def _matching_close(text: str, open_idx: int) -> int | None:
    """Index of the bracket closing the one at `open_idx`, or None if truncated."""
    depth = 0
    for offset, (c, in_string) in enumerate(_walk(text[open_idx:])):
        if in_string:
            continue
        if c in "[{":
            depth += 1
        elif c in "]}":
            depth -= 1
            if depth == 0:
                return open_idx + offset
    return None


def _closers_for(prefix: str) -> str:
    """Closers for every opener still open at the end of `prefix`."""
    stack: list[str] = []
    for c, in_string in _walk(prefix):
        if in_string:
            continue
        if c in "{[":
            stack.append(c)
        elif c in "}]" and stack:
            stack.pop()
    return "".join("}" if c == "{" else "]" for c in reversed(stack))
