"""
Module: ledger.filters

Purpose:
    History filtering criteria for attempts.

Key Classes:
    - HistoryFilter: date/score ranges, config facets, sync state, type
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from verb_trainer.core.models.attempts import Attempt
from verb_trainer.core.models.timestamps import ensure_utc


@dataclass(frozen=True)
class HistoryFilter:
    """
    Attempt selection criteria (all given criteria must hold).

    Attributes:
        date_from / date_to: Inclusive bounds on started_at
        min_score / max_score: Inclusive bounds on percentage
        tenses / verb_types / difficulty_levels: Match if the attempt's
            configuration snapshot shares at least one value
        synced_only / unsynced_only: Sync-state restriction
        test_type: "conjugation" or "vocabulary"

    Example:
        >>> HistoryFilter(min_score=50, synced_only=True).apply(attempts)
    """

    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    min_score: Optional[float] = None
    max_score: Optional[float] = None
    tenses: Optional[Tuple[str, ...]] = None
    verb_types: Optional[Tuple[str, ...]] = None
    difficulty_levels: Optional[Tuple[int, ...]] = None
    synced_only: bool = False
    unsynced_only: bool = False
    test_type: Optional[str] = None

    def matches(self, attempt: Attempt) -> bool:
        if self.date_from is not None and attempt.started_at < ensure_utc(self.date_from):
            return False
        if self.date_to is not None and attempt.started_at > ensure_utc(self.date_to):
            return False
        if self.min_score is not None and attempt.percentage < self.min_score:
            return False
        if self.max_score is not None and attempt.percentage > self.max_score:
            return False
        if self.test_type is not None and attempt.test_type != self.test_type:
            return False

        config = attempt.config
        if self.tenses and not _shares(config.get("tenses"), self.tenses):
            return False
        if self.verb_types and not _shares(config.get("verbTypes"), self.verb_types):
            return False
        if self.difficulty_levels and not _shares(
            config.get("difficultyLevels"), self.difficulty_levels
        ):
            return False

        if self.synced_only and not attempt.synced:
            return False
        if self.unsynced_only and attempt.synced:
            return False
        return True

    def apply(self, attempts: Iterable[Attempt]) -> List[Attempt]:
        return [a for a in attempts if self.matches(a)]


def _shares(values: Optional[Iterable], wanted: Iterable) -> bool:
    if not values:
        return False
    present = set(values)
    return any(v in present for v in wanted)
