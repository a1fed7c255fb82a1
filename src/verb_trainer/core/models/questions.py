"""
Module: questions

Purpose:
    Provides the Question dataclass (one conjugation prompt) and
    VocabQuestion (one translation prompt). Both are immutable once
    produced: the canonical answer is resolved at generation time and
    never changes afterwards.

Dependencies:
    - dataclasses (std)
    - .verbs.Verb

Used By:
    - generation.generator.QuestionGenerator
    - scoring.engine.ScoringEngine
"""

from __future__ import annotations

from dataclasses import dataclass

from .verbs import Verb


@dataclass(frozen=True)
class Question:
    """
    A generated conjugation question (immutable).

    Attributes:
        id: Unique identifier (uuid4 hex)
        verb: The verb being tested
        tense: Tense key like "präsens"
        person: Person key like "ich"
        correct_answer: Canonical form from the verb's conjugation table
        prompt: Human-readable question text (presentation only)

    Invariants:
        - correct_answer == verb.conjugation(tense, person)
    """

    id: str
    verb: Verb
    tense: str
    person: str
    correct_answer: str
    prompt: str = ""

    def __post_init__(self) -> None:
        """Validate the canonical answer against the verb table."""
        expected = self.verb.conjugation(self.tense, self.person)
        if expected is None:
            raise ValueError(
                f"{self.verb.infinitive!r} has no conjugation for "
                f"({self.tense!r}, {self.person!r})"
            )
        if self.correct_answer != expected:
            raise ValueError(
                f"correct_answer {self.correct_answer!r} does not match "
                f"table value {expected!r} for {self.verb.infinitive!r}"
            )

    @property
    def combination(self) -> tuple[str, str, str]:
        """The (infinitive, tense, person) triple this question asks."""
        return (self.verb.infinitive, self.tense, self.person)

    def __repr__(self) -> str:
        return (
            f"Question({self.verb.infinitive!r}, {self.tense!r}, "
            f"{self.person!r}, answer={self.correct_answer!r})"
        )


@dataclass(frozen=True)
class VocabQuestion:
    """A vocabulary question: translate the infinitive into English."""

    id: str
    verb: Verb
    correct_answer: str
    prompt: str = ""

    def __post_init__(self) -> None:
        if self.correct_answer != self.verb.english_translation:
            raise ValueError(
                f"correct_answer {self.correct_answer!r} does not match "
                f"translation of {self.verb.infinitive!r}"
            )
