"""Records — frozen outputs and their camelCase dict shape."""

import dataclasses

import pytest

from challenge_forge.core.domain_types import DifficultyLevel, OptionId
from challenge_forge.core.records import DegradationInfo, McqOption, McqRecord, TestCase


def _mcq() -> McqRecord:
    return McqRecord(
        title="t",
        difficulty_level=DifficultyLevel.EASY,
        question="q",
        options=tuple(McqOption(id=o, text=o.value.lower()) for o in OptionId),
        correct_option_id=OptionId.B,
        explanation="e",
        prompt="p",
    )


def test_records_are_frozen():
    with pytest.raises(dataclasses.FrozenInstanceError):
        TestCase(input="1", output="2").input = "3"


def test_default_degradation_is_clean():
    assert _mcq().degradation == DegradationInfo()


def test_mcq_to_dict_is_camel_case():
    data = _mcq().to_dict()
    assert data["difficultyLevel"] == "Easy"
    assert data["correctOptionId"] == "B"
    assert data["options"][0] == {"id": "A", "text": "a"}
    assert data["degradation"] == {"wasRepaired": False, "isFallback": False, "warnings": []}
