"""
Module: generation.prompts

Purpose:
    Human-readable question text. Presentation only: nothing in
    scoring or storage depends on these strings.
"""

from __future__ import annotations

from typing import Dict

from verb_trainer.core.models.verbs import Verb

TENSE_LABELS: Dict[str, str] = {
    "präsens": "Present",
    "präteritum": "Simple Past",
    "perfekt": "Present Perfect",
    "plusquamperfekt": "Past Perfect",
    "futur": "Future",
}

PERSON_LABELS: Dict[str, str] = {
    "ich": "I",
    "du": "you (informal)",
    "er": "he/she/it",
    "wir": "we",
    "ihr": "you (plural)",
    "sie": "they/you (formal)",
}

DIFFICULTY_LABELS: Dict[int, str] = {
    1: "Very Easy",
    2: "Easy",
    3: "Medium",
    4: "Hard",
    5: "Very Hard",
}


def tense_label(tense: str) -> str:
    """English label for a tense key (unknown keys pass through)."""
    return TENSE_LABELS.get(tense, tense)


def person_label(person: str) -> str:
    return PERSON_LABELS.get(person, person)


def difficulty_label(level: int) -> str:
    if level <= 1:
        return DIFFICULTY_LABELS[1]
    return DIFFICULTY_LABELS.get(level, DIFFICULTY_LABELS[5])


def build_prompt(verb: Verb, tense: str, person: str) -> str:
    """
    Build the conjugation question text.

    Example:
        >>> build_prompt(gehen, "präsens", "ich")
        'Conjugate "gehen" (to go) in Present for "I" (ich)'
    """
    return (
        f'Conjugate "{verb.infinitive}" ({verb.english_translation}) '
        f'in {tense_label(tense)} for "{person_label(person)}" ({person})'
    )


def build_vocab_prompt(verb: Verb) -> str:
    return f'Translate "{verb.infinitive}" into English'
