"""Extraction Orchestrator — escalates from direct parse to fallback synthesis.

Invariants:
    - All functions are PURE apart from logging: no IO, no async
    - Stage order is fixed: RAW_INPUT → TRY_DIRECT_PARSE → TRY_SYNTAX_REPAIR →
      TRY_STRUCTURAL_REPAIR → FALLBACK_SYNTHESIS → VALIDATED
    - Only a parsed JSON *object* counts as success; arrays and scalars advance the stage
    - extract_challenge() is total: it always returns an ExtractionResult
    - was_repaired is set only when syntax or structural repair produced the parsed text;
      is_fallback only when the synthesizer ran
    - extract_mcq() never synthesizes: label-shaped defects propagate as 422 errors

Design Decisions:
    - Explicit stage loop instead of nested try/except (ADR: each escalation is logged
      and testable on its own)
    - Raw model text is logged only at DEBUG
"""

import json
import logging

from challenge_forge.core.domain_types import (
    DifficultyLevel,
    ExtractionOutcome,
    ExtractionStage,
    RecordKind,
)
from challenge_forge.core.fallback_synthesizer import synthesize_candidate
from challenge_forge.core.field_validator import validate_challenge, validate_mcq
from challenge_forge.core.json_scanner import repair_syntax
from challenge_forge.core.label_parser import parse_label_record
from challenge_forge.core.markdown_normalizer import normalize_markdown
from challenge_forge.core.records import ExtractionResult, McqRecord
from challenge_forge.core.structural_repair import repair_structure

logger = logging.getLogger(__name__)


def parse_candidate(text: str) -> dict | None:
    """json.loads that only accepts an object; None on any failure."""
    try:
        value = json.loads(text)
    except (ValueError, RecursionError):
        return None
    return value if isinstance(value, dict) else None


def _first_object(value: object) -> dict | None:
    """An array of objects (`[{...}]`) counts as its first object."""
    if isinstance(value, list) and value and isinstance(value[0], dict):
        return value[0]
    return None


def parse_candidate_lenient(text: str) -> dict | None:
    candidate = parse_candidate(text)
    if candidate is not None:
        return candidate
    try:
        return _first_object(json.loads(text))
    except (ValueError, RecursionError):
        return None


def extract_challenge(
    raw_text: str,
    prompt: str,
    difficulty_preference: DifficultyLevel | None = None,
) -> ExtractionResult:
    """Raw model text → validated ChallengeRecord, however broken the text is."""
    raw_text = raw_text or ""
    logger.debug(f"Raw model text ({len(raw_text)} chars): {raw_text[:2000]}")

    stage = ExtractionStage.RAW_INPUT
    candidate: dict | None = None
    notes: list[str] = []
    working = raw_text
    was_repaired = False

    while candidate is None:
        if stage is ExtractionStage.RAW_INPUT:
            stage = ExtractionStage.TRY_DIRECT_PARSE
        elif stage is ExtractionStage.TRY_DIRECT_PARSE:
            candidate = parse_candidate(working.strip())
            if candidate is None:
                stage = _escalate(stage, ExtractionStage.TRY_SYNTAX_REPAIR)
        elif stage is ExtractionStage.TRY_SYNTAX_REPAIR:
            working = repair_syntax(raw_text)
            candidate = parse_candidate_lenient(working)
            if candidate is not None:
                was_repaired = True
                notes.append("syntax repair applied to model output")
            else:
                stage = _escalate(stage, ExtractionStage.TRY_STRUCTURAL_REPAIR)
        elif stage is ExtractionStage.TRY_STRUCTURAL_REPAIR:
            repaired = repair_structure(working)
            candidate = parse_candidate_lenient(repaired.text)
            if candidate is not None:
                was_repaired = True
                notes.append("structural repair applied to model output")
                notes.extend(repaired.notes)
            else:
                stage = _escalate(stage, ExtractionStage.FALLBACK_SYNTHESIS)
        else:
            return fallback_result(prompt, difficulty_preference, raw_text=raw_text)

    record = validate_challenge(
        candidate, prompt, difficulty_preference,
        was_repaired=was_repaired, notes=notes,
    )
    outcome = ExtractionOutcome.REPAIRED if was_repaired else ExtractionOutcome.CLEAN
    logger.info(
        f"Challenge extracted ({outcome.value}) at stage {stage.value}",
        extra={
            "stage": stage.value,
            "record_kind": RecordKind.CHALLENGE.value,
            "outcome": outcome.value,
            "warning_count": len(record.degradation.warnings),
        },
    )
    return ExtractionResult(outcome=outcome, record=record)


def fallback_result(
    prompt: str,
    difficulty_preference: DifficultyLevel | None = None,
    *,
    raw_text: str = "",
    reason: str | None = None,
) -> ExtractionResult:
    """Synthesize a record from whatever scalars the raw text holds, plus the prompt."""
    candidate, notes = synthesize_candidate(raw_text, prompt, difficulty_preference)
    if reason:
        notes.insert(0, reason)
    record = validate_challenge(
        candidate, prompt, difficulty_preference, is_fallback=True, notes=notes,
    )
    logger.warning(
        "Challenge synthesized by fallback",
        extra={
            "stage": ExtractionStage.FALLBACK_SYNTHESIS.value,
            "record_kind": RecordKind.CHALLENGE.value,
            "outcome": ExtractionOutcome.FALLBACK.value,
            "warning_count": len(record.degradation.warnings),
        },
    )
    return ExtractionResult(outcome=ExtractionOutcome.FALLBACK, record=record)


def _escalate(current: ExtractionStage, nxt: ExtractionStage) -> ExtractionStage:
    logger.info(
        f"Extraction escalating: {current.value} -> {nxt.value}",
        extra={"stage": nxt.value, "record_kind": RecordKind.CHALLENGE.value},
    )
    return nxt


# ─── Label-shaped (MCQ) path ─────────────────────────────────────

def extract_mcq(raw_text: str, prompt: str = "") -> McqRecord:
    """Label-shaped model text → McqRecord.

    Raises:
        MissingSectionsError: one or more labels absent (CORRECT without a letter counts).
        WrongOptionCountError: OPTIONS does not hold exactly A, B, C and D.
    """
    text = normalize_markdown((raw_text or "").replace("\r\n", "\n"))
    candidate = parse_label_record(text)
    record = validate_mcq(candidate, prompt)
    logger.info(
        "Question extracted",
        extra={
            "record_kind": RecordKind.MCQ.value,
            "outcome": ExtractionOutcome.CLEAN.value,
            "warning_count": len(record.degradation.warnings),
        },
    )
    return record
