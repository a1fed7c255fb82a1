"""
Module: session

Purpose:
    Orchestration facade wiring catalog -> generator -> scorer -> ledger
    for one user's practice session.

Key Classes:
    - Quiz / VocabQuiz: A started quiz (questions + config + start time)
    - TrainerSession: start/finish conjugation and vocabulary quizzes,
      including vocabulary quizzes over a saved custom verb list

Ordering:
    finish_quiz() returns only after the attempt has been appended to
    the ledger, so an attempt is never visible to upload() before it is
    durably stored.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Mapping, Optional, Tuple

from verb_trainer.catalog.catalog import VerbCatalog
from verb_trainer.core.models.attempts import Attempt
from verb_trainer.core.models.config import TestConfig, VocabConfig
from verb_trainer.core.models.questions import Question, VocabQuestion
from verb_trainer.core.models.timestamps import utc_now
from verb_trainer.core.schemas.validator import ValidationError
from verb_trainer.generation.generator import QuestionGenerator
from verb_trainer.ledger.ledger import AttemptLedger
from verb_trainer.ledger.preferences import PreferencesStore
from verb_trainer.ledger.verb_lists import CustomVerbListStore
from verb_trainer.scoring.engine import ScoringEngine
from verb_trainer.scoring.vocab import VocabularyScoringEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Quiz:
    questions: Tuple[Question, ...]
    config: TestConfig
    started_at: datetime


@dataclass(frozen=True)
class VocabQuiz:
    questions: Tuple[VocabQuestion, ...]
    config: VocabConfig
    started_at: datetime


class TrainerSession:
    """
    High-level entry point used by the orchestration layer.

    Example:
        >>> session = TrainerSession(catalog, AttemptLedger(MemoryStore()))
        >>> quiz = session.start_quiz(config)
        >>> attempt = session.finish_quiz(quiz, {q.id: "gehe" for q in quiz.questions})
    """

    def __init__(
        self,
        catalog: VerbCatalog,
        ledger: AttemptLedger,
        generator: Optional[QuestionGenerator] = None,
        scorer: Optional[ScoringEngine] = None,
        vocab_scorer: Optional[VocabularyScoringEngine] = None,
        *,
        preferences: Optional[PreferencesStore] = None,
        verb_lists: Optional[CustomVerbListStore] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.catalog = catalog
        self.ledger = ledger
        self.generator = generator or QuestionGenerator(catalog)
        self.scorer = scorer or ScoringEngine(clock=clock)
        self.vocab_scorer = vocab_scorer or VocabularyScoringEngine(clock=clock)
        self.preferences = preferences
        self.verb_lists = verb_lists
        self._clock = clock

    # ─────────────────────────────────────────────────────────────────────────
    # Conjugation Quizzes
    # ─────────────────────────────────────────────────────────────────────────

    def start_quiz(self, config: TestConfig) -> Quiz:
        """
        Validate the config and generate questions.

        Raises:
            ValidationError: With every configuration problem in `errors`
        """
        validation = self.generator.validate(config)
        if not validation.valid:
            raise ValidationError(
                f"Invalid quiz configuration: {validation.errors[0]}",
                path="config",
                errors=list(validation.errors),
            )
        questions = self.generator.generate(config)
        if self.preferences is not None:
            self.preferences.save_test_config(config)
        return Quiz(questions=tuple(questions), config=config, started_at=self._clock())

    def finish_quiz(
        self,
        quiz: Quiz,
        answers: Mapping[str, Optional[str]],
        user_id: Optional[str] = None,
    ) -> Attempt:
        """Score the quiz and append the attempt to the ledger."""
        attempt = self.scorer.score(
            quiz.questions,
            answers,
            quiz.started_at,
            user_id=user_id,
            config=quiz.config,
        )
        self.ledger.append(attempt)
        return attempt

    # ─────────────────────────────────────────────────────────────────────────
    # Vocabulary Quizzes
    # ─────────────────────────────────────────────────────────────────────────

    def start_vocabulary_quiz(self, config: VocabConfig) -> VocabQuiz:
        validation = self.generator.validate_vocabulary(config)
        if not validation.valid:
            raise ValidationError(
                f"Invalid vocabulary configuration: {validation.errors[0]}",
                path="config",
                errors=list(validation.errors),
            )
        questions = self.generator.generate_vocabulary(config)
        if self.preferences is not None:
            self.preferences.save_vocab_config(config)
        return VocabQuiz(questions=tuple(questions), config=config, started_at=self._clock())

    def start_vocabulary_quiz_from_list(
        self, list_id: str, base: Optional[VocabConfig] = None
    ) -> VocabQuiz:
        """
        Start a vocabulary quiz restricted to a saved custom verb list.

        Raises:
            ValueError: If no verb list store is configured or the list is empty
            NotFoundError: If the list does not exist
            ValidationError: If the resolved config is invalid
        """
        if self.verb_lists is None:
            raise ValueError("No custom verb list store configured")
        config = self.verb_lists.vocab_config(list_id, base)
        logger.info(f"Starting vocabulary quiz from list {list_id} ({len(config.specific_verbs)} verbs)")
        return self.start_vocabulary_quiz(config)

    def finish_vocabulary_quiz(
        self,
        quiz: VocabQuiz,
        answers: Mapping[str, Optional[str]],
        user_id: Optional[str] = None,
    ) -> Attempt:
        attempt = self.vocab_scorer.score(
            quiz.questions,
            answers,
            quiz.started_at,
            user_id=user_id,
            config=quiz.config,
        )
        self.ledger.append(attempt)
        return attempt
