"""
Module: verbs

Purpose:
    Provides the Verb dataclass - one catalog entry with its sparse
    conjugation table (tense -> person -> form) - and the VerbType
    enumeration used to categorise verbs.

Key Functions:
    - Verb.conjugation(tense, person): Resolve a single form (or None)
    - Verb.has_conjugations(tenses, persons): Check full coverage
    - Verb.to_dict() / Verb.from_dict(): Serialization

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - catalog.catalog.VerbCatalog
    - core.models.questions.Question
    - generation.generator.QuestionGenerator
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Mapping, Optional

MIN_DIFFICULTY = 1
MAX_DIFFICULTY = 5


class VerbType(str, Enum):
    """Grammatical category of a verb."""
    WEAK = "weak"
    STRONG = "strong"
    IRREGULAR = "irregular"
    MODAL = "modal"

    def __str__(self) -> str:
        return self.value


VERB_TYPES = tuple(t.value for t in VerbType)

ConjugationTable = Dict[str, Dict[str, str]]


@dataclass(frozen=True)
class Verb:
    """
    A single catalog verb (immutable).

    The conjugation table is sparse: a verb need not define every
    (tense, person) combination. Catalog snapshots replace Verb
    instances wholesale, they are never edited in place.

    Attributes:
        infinitive: German infinitive, unique within a catalog ("gehen")
        english_translation: Meaning, used as the vocabulary answer ("to go")
        verb_type: Category (weak/strong/irregular/modal)
        stem: Verb stem ("geh")
        difficulty_level: 1 (easiest) to 5
        conjugations: tense -> person -> conjugated form
        id: Optional remote row id
        created_at: Optional remote creation timestamp (ISO string)

    Example:
        >>> verb = Verb(
        ...     infinitive="gehen",
        ...     english_translation="to go",
        ...     verb_type=VerbType.STRONG,
        ...     stem="geh",
        ...     difficulty_level=2,
        ...     conjugations={"präsens": {"ich": "gehe"}},
        ... )
        >>> verb.conjugation("präsens", "ich")
        'gehe'
    """

    infinitive: str
    english_translation: str
    verb_type: VerbType
    stem: str
    difficulty_level: int
    conjugations: ConjugationTable = field(default_factory=dict)
    id: Optional[str] = None
    created_at: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate verb on construction."""
        if not self.infinitive:
            raise ValueError("infinitive must be a non-empty string")
        if not isinstance(self.verb_type, VerbType):
            # Accept raw strings from JSON
            object.__setattr__(self, "verb_type", VerbType(self.verb_type))
        if not (MIN_DIFFICULTY <= self.difficulty_level <= MAX_DIFFICULTY):
            raise ValueError(
                f"difficulty_level must be {MIN_DIFFICULTY}-{MAX_DIFFICULTY}: "
                f"{self.difficulty_level}"
            )
        # Own copy of the table, detached from the caller's dicts
        object.__setattr__(
            self,
            "conjugations",
            {tense: dict(persons) for tense, persons in self.conjugations.items()},
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Query Methods
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def tenses(self) -> tuple[str, ...]:
        """Tenses defined for this verb, in table order."""
        return tuple(self.conjugations.keys())

    def conjugation(self, tense: str, person: str) -> Optional[str]:
        """
        Resolve the conjugated form for (tense, person).

        Args:
            tense: Tense key like "präsens"
            person: Person key like "ich"

        Returns:
            The form, or None if the table has no (non-empty) entry
        """
        persons = self.conjugations.get(tense)
        if not persons:
            return None
        form = persons.get(person)
        return form or None

    def has_conjugations(self, tenses: Iterable[str], persons: Iterable[str]) -> bool:
        """
        Check that every requested tense defines every requested person.

        A verb that cannot answer all combinations is excluded from a
        quiz entirely rather than used partially.
        """
        persons = tuple(persons)
        for tense in tenses:
            for person in persons:
                if self.conjugation(tense, person) is None:
                    return False
        return True

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> dict:
        """Serialize using the catalog wire field names."""
        d = {
            "infinitive": self.infinitive,
            "english_translation": self.english_translation,
            "verb_type": self.verb_type.value,
            "stem": self.stem,
            "difficulty_level": self.difficulty_level,
            "conjugations": {t: dict(p) for t, p in self.conjugations.items()},
        }
        if self.id is not None:
            d["id"] = self.id
        if self.created_at is not None:
            d["created_at"] = self.created_at
        return d

    @classmethod
    def from_dict(cls, data: Mapping) -> Verb:
        """Deserialize from a catalog record (already validated)."""
        return cls(
            infinitive=data["infinitive"],
            english_translation=data["english_translation"],
            verb_type=VerbType(data["verb_type"]),
            stem=data["stem"],
            difficulty_level=int(data["difficulty_level"]),
            conjugations=data.get("conjugations", {}),
            id=str(data["id"]) if data.get("id") is not None else None,
            created_at=data.get("created_at"),
        )

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        return (
            f"Verb({self.infinitive!r}, type={self.verb_type.value}, "
            f"difficulty={self.difficulty_level}, tenses={len(self.conjugations)})"
        )
