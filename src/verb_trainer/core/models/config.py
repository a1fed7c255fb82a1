"""
Module: config

Purpose:
    Immutable quiz configuration values: TestConfig for conjugation
    quizzes and VocabConfig for vocabulary quizzes.

Key Classes:
    - TestConfig: tenses/verb types/persons/count/difficulty/explicit verbs
    - VocabConfig: verb count/difficulty/types/custom verb list

Dependencies:
    - dataclasses (std)

Used By:
    - generation.generator.QuestionGenerator
    - scoring.engine (config snapshot on Attempt)
    - ledger.preferences.PreferencesStore
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Tuple

MIN_QUESTION_COUNT = 1
MAX_QUESTION_COUNT = 100

MIN_VOCAB_COUNT = 5
MAX_VOCAB_COUNT = 100


def _as_tuple(values: Optional[Iterable]) -> Optional[tuple]:
    if values is None:
        return None
    if isinstance(values, str):
        return (values,)
    return tuple(values)


@dataclass(frozen=True)
class TestConfig:
    """
    Generation constraints for a conjugation quiz (immutable).

    Empty sets and out-of-range counts are not rejected on construction;
    QuestionGenerator.validate() reports all of them together.

    Attributes:
        tenses: Tenses to ask ("präsens", "präteritum", ...)
        verb_types: Verb categories to draw from
        persons: Grammatical persons to ask ("ich", "du", ...)
        question_count: Target number of questions (1-100)
        difficulty_levels: Optional difficulty subset (None/empty = any)
        specific_verbs: Optional explicit infinitive subset (None/empty = any)

    Example:
        >>> config = TestConfig(
        ...     tenses=["präsens", "präteritum"],
        ...     verb_types=["strong"],
        ...     persons=["ich"],
        ...     question_count=2,
        ... )
        >>> config.tenses
        ('präsens', 'präteritum')
    """

    __test__ = False  # not a pytest test class

    tenses: Tuple[str, ...]
    verb_types: Tuple[str, ...]
    persons: Tuple[str, ...]
    question_count: int
    difficulty_levels: Optional[Tuple[int, ...]] = None
    specific_verbs: Optional[Tuple[str, ...]] = None

    def __post_init__(self) -> None:
        """Normalise sequence fields to tuples."""
        object.__setattr__(self, "tenses", _as_tuple(self.tenses) or ())
        object.__setattr__(
            self, "verb_types", tuple(str(t) for t in (_as_tuple(self.verb_types) or ()))
        )
        object.__setattr__(self, "persons", _as_tuple(self.persons) or ())
        object.__setattr__(self, "difficulty_levels", _as_tuple(self.difficulty_levels))
        object.__setattr__(self, "specific_verbs", _as_tuple(self.specific_verbs))
        if isinstance(self.question_count, bool) or not isinstance(self.question_count, int):
            raise TypeError(f"question_count must be an int: {self.question_count!r}")

    def to_dict(self) -> dict:
        """Serialize using the wire field names of the stored configuration."""
        d = {
            "tenses": list(self.tenses),
            "verbTypes": list(self.verb_types),
            "persons": list(self.persons),
            "questionCount": self.question_count,
        }
        if self.difficulty_levels is not None:
            d["difficultyLevels"] = list(self.difficulty_levels)
        if self.specific_verbs is not None:
            d["specificVerbs"] = list(self.specific_verbs)
        return d

    @classmethod
    def from_dict(cls, data: Mapping) -> TestConfig:
        """Deserialize from either camelCase (wire) or snake_case keys."""
        def pick(camel: str, snake: str, default=None):
            if camel in data:
                return data[camel]
            return data.get(snake, default)

        return cls(
            tenses=pick("tenses", "tenses", ()),
            verb_types=pick("verbTypes", "verb_types", ()),
            persons=pick("persons", "persons", ()),
            question_count=int(pick("questionCount", "question_count", 0)),
            difficulty_levels=pick("difficultyLevels", "difficulty_levels"),
            specific_verbs=pick("specificVerbs", "specific_verbs"),
        )


DEFAULT_TEST_CONFIG = TestConfig(
    tenses=("präsens",),
    verb_types=("weak", "strong"),
    persons=("ich", "du", "er"),
    question_count=10,
    difficulty_levels=(1, 2, 3),
)


@dataclass(frozen=True)
class VocabConfig:
    """
    Selection constraints for a vocabulary quiz (immutable).

    Attributes:
        verb_count: Number of verbs to ask (5-100)
        difficulty_levels: Difficulty subset (empty = any)
        verb_types: Optional category subset (None = all types)
        specific_verbs: Optional custom verb list (infinitives)
    """

    verb_count: int = 20
    difficulty_levels: Tuple[int, ...] = (1, 2)
    verb_types: Optional[Tuple[str, ...]] = None
    specific_verbs: Optional[Tuple[str, ...]] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "difficulty_levels", _as_tuple(self.difficulty_levels) or ())
        object.__setattr__(self, "verb_types", _as_tuple(self.verb_types))
        object.__setattr__(self, "specific_verbs", _as_tuple(self.specific_verbs))

    def to_dict(self) -> dict:
        d = {
            "verbCount": self.verb_count,
            "difficultyLevels": list(self.difficulty_levels),
            "includeAllTypes": self.verb_types is None,
        }
        if self.verb_types is not None:
            d["verbTypes"] = list(self.verb_types)
        if self.specific_verbs is not None:
            d["specificVerbs"] = list(self.specific_verbs)
        return d

    @classmethod
    def from_dict(cls, data: Mapping) -> VocabConfig:
        return cls(
            verb_count=int(data.get("verbCount", data.get("verb_count", 20))),
            difficulty_levels=data.get("difficultyLevels", data.get("difficulty_levels", (1, 2))),
            verb_types=data.get("verbTypes", data.get("verb_types")),
            specific_verbs=data.get("specificVerbs", data.get("specific_verbs")),
        )


DEFAULT_VOCAB_CONFIG = VocabConfig()
