"""
Module: scoring.vocab

Purpose:
    Vocabulary-mode scoring: the canonical answer is the English
    translation and matching is deliberately looser than in
    conjugation mode.

Accepted answers (after normalisation):
    - Equal to the translation
    - Equal once a leading "to " is removed from both sides
    - Either stripped form contains the other ("go" vs "to go out")

    The containment rule also accepts overlapping but different words
    ("go" for "going"). It is kept as existing product behaviour.
    An empty answer is always wrong.
"""

from __future__ import annotations

from typing import Optional

from verb_trainer.core.models.attempts import TEST_TYPE_VOCABULARY, VocabAnswerDetail

from .engine import ScoringEngine
from .normalize import normalize, strip_leading_to


class VocabularyScoringEngine(ScoringEngine):
    """
    Scores VocabQuestion lists into "vocabulary" attempts.

    Example:
        >>> VocabularyScoringEngine().validate(question_gehen, "go")
        True
    """

    test_type = TEST_TYPE_VOCABULARY

    def validate(self, question, raw: Optional[str]) -> bool:
        user = normalize(raw or "")
        if not user:
            return False
        correct = normalize(question.correct_answer)
        if user == correct:
            return True

        user_bare = strip_leading_to(user)
        correct_bare = strip_leading_to(correct)
        if user_bare == correct_bare:
            return True
        if not user_bare or not correct_bare:
            return False
        return correct_bare in user_bare or user_bare in correct_bare

    def _detail(self, question, user_answer: str, is_correct: bool) -> VocabAnswerDetail:
        return VocabAnswerDetail(
            infinitive=question.verb.infinitive,
            correct_answer=question.correct_answer,
            user_answer=user_answer,
            is_correct=is_correct,
        )

    def config_snapshot(self, questions) -> dict:
        return {
            "verbCount": len(questions),
            "difficultyLevels": sorted({q.verb.difficulty_level for q in questions}),
            "includeAllTypes": True,
        }
