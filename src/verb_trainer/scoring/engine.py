"""
Module: scoring.engine

Purpose:
    Validate raw answers against generated questions and score a
    completed quiz into an Attempt.

Key Classes:
    - ScoringEngine: conjugation-mode validation, feedback, hints, scoring

Invariants:
    - score() performs no I/O and, given attempt_id, idempotency_key
      and completed_at, is fully deterministic
    - A missing answer scores as the empty string

Dependencies:
    - scoring.normalize
    - core.models.attempts: Attempt, AnswerDetail

Used By:
    - session.TrainerSession
    - scoring.vocab.VocabularyScoringEngine (subclass)
"""

from __future__ import annotations

import logging
import math
import uuid
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from verb_trainer.core.models.attempts import (
    TEST_TYPE_CONJUGATION,
    AnswerDetail,
    Attempt,
    compute_percentage,
)
from verb_trainer.core.models.config import TestConfig
from verb_trainer.core.models.questions import Question
from verb_trainer.core.models.timestamps import ensure_utc, utc_now

from .normalize import normalize

logger = logging.getLogger(__name__)

FEEDBACK_CORRECT = "correct"
FEEDBACK_CLOSE = "close"
FEEDBACK_WRONG = "wrong"

MIN_PARTIAL_LENGTH = 2


def _unique(values) -> List:
    """Distinct values in first-seen order."""
    return list(dict.fromkeys(values))


class ScoringEngine:
    """
    Conjugation-mode answer checking and quiz scoring.

    Example:
        >>> engine = ScoringEngine()
        >>> engine.validate(question_ging, "  GING ")
        True
        >>> engine.feedback(question_ging, "Ginge")
        'close'
    """

    test_type = TEST_TYPE_CONJUGATION

    def __init__(self, *, clock: Callable[[], datetime] = utc_now) -> None:
        """
        Args:
            clock: Source of "now" when score() is not given completed_at
        """
        self._clock = clock

    # ─────────────────────────────────────────────────────────────────────────
    # Single Answers
    # ─────────────────────────────────────────────────────────────────────────

    def validate(self, question, raw: Optional[str]) -> bool:
        """True if the normalized answer equals the normalized canonical form."""
        return normalize(raw or "") == normalize(question.correct_answer)

    def is_partial_match(self, question, raw: Optional[str]) -> bool:
        """
        Prefix match in either direction, for "close" feedback only.

        Answers shorter than two characters after normalisation never match.
        """
        user = normalize(raw or "")
        correct = normalize(question.correct_answer)
        if len(user) < MIN_PARTIAL_LENGTH:
            return False
        return correct.startswith(user) or user.startswith(correct)

    def feedback(self, question, raw: Optional[str]) -> str:
        """Classify an answer as "correct", "close" or "wrong"."""
        if self.validate(question, raw):
            return FEEDBACK_CORRECT
        if self.is_partial_match(question, raw):
            return FEEDBACK_CLOSE
        return FEEDBACK_WRONG

    def hint(self, question, level: int = 1) -> str:
        """
        Reveal the first min(level, len//2) characters of the answer.

        Example:
            >>> engine.hint(question_ging, 1)
            'g...'
        """
        answer = question.correct_answer
        reveal = max(0, min(level, len(answer) // 2))
        return answer[:reveal] + "..."

    # ─────────────────────────────────────────────────────────────────────────
    # Quiz Scoring
    # ─────────────────────────────────────────────────────────────────────────

    def _detail(self, question: Question, user_answer: str, is_correct: bool) -> AnswerDetail:
        return AnswerDetail(
            verb=question.verb.infinitive,
            tense=question.tense,
            person=question.person,
            verb_type=question.verb.verb_type.value,
            difficulty_level=question.verb.difficulty_level,
            correct_answer=question.correct_answer,
            user_answer=user_answer,
            is_correct=is_correct,
        )

    def config_snapshot(self, questions: Sequence[Question]) -> Dict[str, Any]:
        """Configuration implied by a question list (used when none is given)."""
        return {
            "tenses": _unique(q.tense for q in questions),
            "verbTypes": _unique(q.verb.verb_type.value for q in questions),
            "persons": _unique(q.person for q in questions),
            "questionCount": len(questions),
            "difficultyLevels": sorted({q.verb.difficulty_level for q in questions}),
        }

    def score(
        self,
        questions: Sequence,
        answers_by_id: Mapping[str, Optional[str]],
        started_at: Optional[datetime] = None,
        *,
        completed_at: Optional[datetime] = None,
        attempt_id: Optional[str] = None,
        idempotency_key: Optional[str] = None,
        user_id: Optional[str] = None,
        config: Union[TestConfig, Mapping[str, Any], None] = None,
    ) -> Attempt:
        """
        Score a completed quiz.

        Args:
            questions: Questions in the order they were asked
            answers_by_id: Raw answers keyed by question id (missing = "")
            started_at: Quiz start; duration is omitted without it
            completed_at: Scoring time (defaults to the engine clock)
            attempt_id: Attempt id (defaults to a fresh uuid4)
            idempotency_key: Remote upsert key (defaults to a fresh uuid4)
            user_id: Optional owner
            config: Configuration snapshot (derived from questions if None)

        Returns:
            Unsynced Attempt with one detail row per question

        Example:
            >>> attempt = engine.score(questions, {q.id: q.correct_answer for q in questions[:7]})
            >>> (attempt.score, attempt.percentage)
            (7, 70.0)
        """
        completed = ensure_utc(completed_at) if completed_at else self._clock()
        started = ensure_utc(started_at) if started_at else None

        details = []
        correct_count = 0
        for question in questions:
            user_answer = answers_by_id.get(question.id) or ""
            is_correct = self.validate(question, user_answer)
            if is_correct:
                correct_count += 1
            details.append(self._detail(question, user_answer, is_correct))

        duration = None
        if started is not None:
            duration = max(0, math.floor((completed - started).total_seconds()))

        if config is None:
            snapshot = self.config_snapshot(questions)
        elif hasattr(config, "to_dict"):
            snapshot = config.to_dict()
        else:
            snapshot = dict(config)

        attempt_id = attempt_id or str(uuid.uuid4())
        idempotency_key = idempotency_key or str(uuid.uuid4())

        total = len(questions)
        attempt = Attempt(
            id=attempt_id,
            idempotency_key=idempotency_key,
            test_type=self.test_type,
            started_at=started or completed,
            completed_at=completed,
            score=correct_count,
            total_questions=total,
            percentage=compute_percentage(correct_count, total),
            config=snapshot,
            answers=tuple(details),
            duration_seconds=duration,
            user_id=user_id,
        )
        logger.info(
            f"Scored {self.test_type} quiz: {correct_count}/{total} ({attempt.percentage}%)"
        )
        return attempt
