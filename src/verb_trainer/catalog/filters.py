"""
Module: catalog.filters

Purpose:
    Selection criteria for catalog queries.

Key Classes:
    - VerbFilter: verb types / difficulty levels / explicit infinitives

Used By:
    - catalog.catalog.VerbCatalog.filter()
    - generation.generator.QuestionGenerator
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from verb_trainer.core.models.verbs import Verb


def _as_tuple(values: Optional[Iterable]) -> Optional[tuple]:
    if values is None:
        return None
    if isinstance(values, str):
        return (values,)
    return tuple(values)


@dataclass(frozen=True)
class VerbFilter:
    """
    Catalog selection criteria (immutable).

    Fields are combined with AND; values within a field with OR.
    A None or empty field imposes no constraint.

    Example:
        >>> VerbFilter(verb_types=["strong"], difficulty_levels=[1, 2]).matches(gehen)
        True
    """

    verb_types: Optional[Tuple[str, ...]] = None
    difficulty_levels: Optional[Tuple[int, ...]] = None
    infinitives: Optional[Tuple[str, ...]] = None

    def __post_init__(self) -> None:
        types = _as_tuple(self.verb_types)
        object.__setattr__(
            self, "verb_types", tuple(str(t) for t in types) if types is not None else None
        )
        object.__setattr__(self, "difficulty_levels", _as_tuple(self.difficulty_levels))
        object.__setattr__(self, "infinitives", _as_tuple(self.infinitives))

    @property
    def is_empty(self) -> bool:
        """True if no field constrains the selection."""
        return not (self.verb_types or self.difficulty_levels or self.infinitives)

    def matches(self, verb: Verb) -> bool:
        if self.verb_types and verb.verb_type.value not in self.verb_types:
            return False
        if self.difficulty_levels and verb.difficulty_level not in self.difficulty_levels:
            return False
        if self.infinitives and verb.infinitive not in self.infinitives:
            return False
        return True
