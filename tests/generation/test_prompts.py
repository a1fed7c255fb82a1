"""Tests for question text and labels."""

import pytest

from verb_trainer.generation.prompts import (
    build_prompt,
    build_vocab_prompt,
    difficulty_label,
    person_label,
    tense_label,
)


def test_build_prompt_when_known_keys_then_english_labels(gehen):
    assert build_prompt(gehen, "präsens", "ich") == 'Conjugate "gehen" (to go) in Present for "I" (ich)'


def test_build_prompt_when_unknown_tense_then_key_used(gehen):
    assert "in konjunktiv for" in build_prompt(gehen, "konjunktiv", "er")


def test_build_vocab_prompt(machen):
    assert build_vocab_prompt(machen) == 'Translate "machen" into English'


def test_labels_when_known_then_mapped():
    assert tense_label("präteritum") == "Simple Past"
    assert person_label("sie") == "they/you (formal)"


@pytest.mark.parametrize("level,label", [(0, "Very Easy"), (1, "Very Easy"), (3, "Medium"), (9, "Very Hard")])
def test_difficulty_label_when_out_of_range_then_clamped(level, label):
    assert difficulty_label(level) == label
