"""
Module: generation.generator

Purpose:
    Turn a TestConfig into a shuffled list of distinct conjugation
    questions, and validate configurations up front so callers can
    report actionable errors instead of starting a short quiz.

Key Functions:
    - question_statistics(): Per-quiz breakdown by tense/person/type

Key Classes:
    - QuestionGenerator: generate / validate / vocabulary variants
    - ConfigValidation: (valid, errors) result
    - QuizStatistics / Tally: per-quiz breakdown values

Algorithm (generate):
    1. Filter the catalog by verb types, difficulty and explicit verbs
    2. Keep only verbs defining every requested (tense, person)
    3. Build the cross product, dropping triples without a form
    4. Shuffle the combinations (Fisher-Yates)
    5. Take the first min(question_count, len) combinations

Dependencies:
    - catalog.catalog.VerbCatalog
    - generation.prompts: question text

Used By:
    - session.TrainerSession
"""

from __future__ import annotations

import logging
import random
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from verb_trainer.catalog.catalog import VerbCatalog
from verb_trainer.catalog.filters import VerbFilter
from verb_trainer.core.models.attempts import AnswerDetail, Attempt
from verb_trainer.core.models.config import (
    MAX_QUESTION_COUNT,
    MAX_VOCAB_COUNT,
    MIN_QUESTION_COUNT,
    MIN_VOCAB_COUNT,
    TestConfig,
    VocabConfig,
)
from verb_trainer.core.models.questions import Question, VocabQuestion
from verb_trainer.core.models.verbs import Verb

from .prompts import build_prompt, build_vocab_prompt

logger = logging.getLogger(__name__)

Combination = Tuple[Verb, str, str]


@dataclass(frozen=True)
class ConfigValidation:
    """Outcome of a configuration check."""

    valid: bool
    errors: Tuple[str, ...] = ()

    def __bool__(self) -> bool:
        return self.valid


def _verb_filter(config: TestConfig) -> VerbFilter:
    return VerbFilter(
        verb_types=config.verb_types,
        difficulty_levels=config.difficulty_levels,
        infinitives=config.specific_verbs,
    )


class QuestionGenerator:
    """
    Generates conjugation and vocabulary questions from a catalog.

    Example:
        >>> generator = QuestionGenerator(catalog, rng=random.Random(7))
        >>> config = TestConfig(["präsens", "präteritum"], ["strong"], ["ich"], 2)
        >>> sorted(q.correct_answer for q in generator.generate(config))
        ['gehe', 'ging']
    """

    def __init__(self, catalog: VerbCatalog, *, rng: Optional[random.Random] = None) -> None:
        self.catalog = catalog
        self._rng = rng or random.Random()

    # ─────────────────────────────────────────────────────────────────────────
    # Conjugation Quizzes
    # ─────────────────────────────────────────────────────────────────────────

    def combinations(self, config: TestConfig) -> List[Combination]:
        """All answerable (verb, tense, person) triples for a config, unshuffled."""
        verbs = self.catalog.verbs_with_conjugations(
            config.tenses, config.persons, _verb_filter(config)
        )
        return [
            (verb, tense, person)
            for verb in verbs
            for tense in config.tenses
            for person in config.persons
            if verb.conjugation(tense, person) is not None
        ]

    def generate(self, config: TestConfig) -> List[Question]:
        """
        Generate up to config.question_count distinct questions.

        Returns:
            Shuffled questions; an empty list means the quiz cannot start

        Invariants:
            - No two questions share a (verb, tense, person) triple
            - Each correct_answer equals the verb's table value
        """
        combos = self.combinations(config)
        if not combos:
            logger.warning(f"No verbs available for config {config.to_dict()}")
            return []

        self._rng.shuffle(combos)
        selected = combos[: min(config.question_count, len(combos))]
        if len(selected) < config.question_count:
            logger.warning(
                f"Only {len(selected)} combinations available, "
                f"{config.question_count} questions requested"
            )

        questions = [
            Question(
                id=uuid.uuid4().hex,
                verb=verb,
                tense=tense,
                person=person,
                correct_answer=verb.conjugation(tense, person),
                prompt=build_prompt(verb, tense, person),
            )
            for verb, tense, person in selected
        ]
        logger.info(f"Generated {len(questions)} questions from {len(combos)} combinations")
        return questions

    def validate(self, config: TestConfig) -> ConfigValidation:
        """
        Check a configuration before generating.

        Returns:
            ConfigValidation listing every problem found
        """
        errors: List[str] = []

        if not config.tenses:
            errors.append("At least one tense must be selected")
        if not config.verb_types:
            errors.append("At least one verb type must be selected")
        if not config.persons:
            errors.append("At least one person must be selected")
        if config.question_count < MIN_QUESTION_COUNT:
            errors.append(f"Question count must be at least {MIN_QUESTION_COUNT}")
        if config.question_count > MAX_QUESTION_COUNT:
            errors.append(f"Question count cannot exceed {MAX_QUESTION_COUNT}")

        errors.extend(self._unknown_verb_errors(config.specific_verbs))

        if config.tenses and config.persons and config.verb_types:
            available = len(self.combinations(config))
            if available == 0:
                errors.append("No verbs available matching the selected criteria")
            elif available < config.question_count:
                errors.append(
                    f"Only {available} combinations available, "
                    f"but {config.question_count} questions requested"
                )

        return ConfigValidation(valid=not errors, errors=tuple(errors))

    def _unknown_verb_errors(self, infinitives: Optional[Tuple[str, ...]]) -> List[str]:
        if not infinitives:
            return []
        missing = [inf for inf in infinitives if self.catalog.get(inf) is None]
        if not missing:
            return []
        return [f"Unknown verb(s) selected: {', '.join(missing)}"]

    # ─────────────────────────────────────────────────────────────────────────
    # Vocabulary Quizzes
    # ─────────────────────────────────────────────────────────────────────────

    def _vocab_filter(self, config: VocabConfig) -> VerbFilter:
        return VerbFilter(
            verb_types=config.verb_types,
            difficulty_levels=config.difficulty_levels,
            infinitives=config.specific_verbs,
        )

    def generate_vocabulary(self, config: VocabConfig) -> List[VocabQuestion]:
        """Sample up to config.verb_count verbs as translation questions."""
        verbs = self.catalog.sample(config.verb_count, self._vocab_filter(config), rng=self._rng)
        questions = [
            VocabQuestion(
                id=uuid.uuid4().hex,
                verb=verb,
                correct_answer=verb.english_translation,
                prompt=build_vocab_prompt(verb),
            )
            for verb in verbs
        ]
        logger.info(f"Generated {len(questions)} vocabulary questions")
        return questions

    def validate_vocabulary(self, config: VocabConfig) -> ConfigValidation:
        errors: List[str] = []
        if config.verb_count < MIN_VOCAB_COUNT:
            errors.append(f"Verb count must be at least {MIN_VOCAB_COUNT}")
        if config.verb_count > MAX_VOCAB_COUNT:
            errors.append(f"Verb count cannot exceed {MAX_VOCAB_COUNT}")
        if not config.specific_verbs and not config.difficulty_levels:
            errors.append("At least one difficulty level must be selected")
        if config.verb_types is not None and not config.verb_types:
            errors.append("At least one verb type must be selected")
        errors.extend(self._unknown_verb_errors(config.specific_verbs))

        available = len(self.catalog.filter(self._vocab_filter(config)))
        if available == 0:
            errors.append("No verbs available matching the selected criteria")
        return ConfigValidation(valid=not errors, errors=tuple(errors))


# ─────────────────────────────────────────────────────────────────────────────
# Per-Quiz Statistics
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class Tally:
    correct: int = 0
    total: int = 0

    def add(self, is_correct: bool) -> None:
        self.total += 1
        if is_correct:
            self.correct += 1


@dataclass
class QuizStatistics:
    """Correct/total counts for one quiz, keyed by tense, person and verb type."""

    by_tense: Dict[str, Tally] = field(default_factory=dict)
    by_person: Dict[str, Tally] = field(default_factory=dict)
    by_verb_type: Dict[str, Tally] = field(default_factory=dict)


def question_statistics(attempt: Attempt) -> QuizStatistics:
    """
    Break down a scored conjugation attempt.

    Vocabulary attempts have no tense/person/type dimensions and yield
    empty breakdowns.
    """
    stats = QuizStatistics()
    for answer in attempt.answers:
        if not isinstance(answer, AnswerDetail):
            continue
        stats.by_tense.setdefault(answer.tense, Tally()).add(answer.is_correct)
        stats.by_person.setdefault(answer.person, Tally()).add(answer.is_correct)
        stats.by_verb_type.setdefault(answer.verb_type, Tally()).add(answer.is_correct)
    return stats
