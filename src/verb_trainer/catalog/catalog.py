"""
Module: catalog.catalog

Purpose:
    In-memory verb catalog: an index keyed by infinitive plus a flat
    list, swapped together on every load. Provides filtering, search,
    grouping and uniform random sampling.

Key Classes:
    - VerbCatalog: Catalog with readiness signalling

Dependencies:
    - concurrent.futures (std): readiness future
    - threading (std): index swap lock
    - verb_trainer.core.models: Verb
    - core.schemas.validator: input contract for raw records

Used By:
    - catalog.loader.load_catalog()
    - generation.generator.QuestionGenerator
    - session.TrainerSession

Readiness:
    `ready_future` resolves exactly once per load cycle. Queries issued
    before the first load return empty results (with a warning) rather
    than raising.
"""

from __future__ import annotations

import logging
import random
from concurrent.futures import Future, TimeoutError as FutureTimeoutError
from threading import Lock
from typing import Dict, Iterable, List, Mapping, Optional, Union

from verb_trainer.core.models.verbs import Verb, VERB_TYPES
from verb_trainer.core.schemas.validator import ValidationError, require_valid_verb_records

from .filters import VerbFilter

logger = logging.getLogger(__name__)

VerbInput = Union[Verb, Mapping]


class VerbCatalog:
    """
    Thread-safe in-memory verb catalog.

    Example:
        >>> catalog = VerbCatalog()
        >>> catalog.load([gehen, machen])
        >>> catalog.get("gehen").english_translation
        'to go'
        >>> [v.infinitive for v in catalog.filter(VerbFilter(verb_types=["weak"]))]
        ['machen']
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        """
        Initialize an empty, not-ready catalog.

        Args:
            rng: Random source for sample(); inject a seeded instance
                for reproducible tests
        """
        self._by_infinitive: Dict[str, Verb] = {}
        self._verbs: List[Verb] = []
        self._ready = False
        self._ready_future: Future = Future()
        self._lock = Lock()
        self._rng = rng or random.Random()

    # ─────────────────────────────────────────────────────────────────────────
    # Loading & Readiness
    # ─────────────────────────────────────────────────────────────────────────

    def load(self, verbs: Iterable[VerbInput]) -> None:
        """
        Replace the whole index with the given verbs.

        Raw dicts are validated against the catalog input contract
        first. The previous index stays intact if anything is invalid.

        Args:
            verbs: Verb instances or raw catalog records

        Raises:
            ValidationError: If a record is invalid or an infinitive repeats
        """
        items = list(verbs)
        raw = [v for v in items if not isinstance(v, Verb)]
        if raw:
            require_valid_verb_records(raw)

        parsed = [v if isinstance(v, Verb) else Verb.from_dict(v) for v in items]

        index: Dict[str, Verb] = {}
        duplicates = []
        for verb in parsed:
            if verb.infinitive in index:
                duplicates.append(verb.infinitive)
            index[verb.infinitive] = verb
        if duplicates:
            raise ValidationError(
                f"Duplicate infinitive(s) in catalog: {', '.join(sorted(set(duplicates)))}",
                path="infinitive",
                errors=[f'Duplicate infinitive "{inf}"' for inf in duplicates],
            )

        with self._lock:
            self._by_infinitive = index
            self._verbs = parsed
            self._ready = True
            if self._ready_future.done() and (
                self._ready_future.cancelled() or self._ready_future.exception() is not None
            ):
                # Previous cycle failed; start a fresh one that this load resolves
                self._ready_future = Future()
            future = self._ready_future

        if not future.done():
            future.set_result(len(parsed))
        logger.info(f"Catalog loaded with {len(parsed)} verbs")

    def begin_reload(self) -> None:
        """Mark the catalog not-ready and install a fresh readiness future."""
        with self._lock:
            self._ready = False
            if self._ready_future.done():
                self._ready_future = Future()
        logger.debug("Catalog reload started")

    def clear(self) -> None:
        """Drop all verbs and reset readiness."""
        with self._lock:
            self._by_infinitive = {}
            self._verbs = []
            self._ready = False
            if self._ready_future.done():
                self._ready_future = Future()
        logger.info("Catalog cleared")

    def fail_load(self, error: BaseException) -> None:
        """Propagate a load failure to anyone waiting on the current cycle."""
        with self._lock:
            future = self._ready_future
        if not future.done():
            future.set_exception(error)

    def is_ready(self) -> bool:
        return self._ready

    @property
    def ready_future(self) -> Future:
        """Future resolved (with the verb count) when the current load completes."""
        return self._ready_future

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """
        Block until the catalog is loaded.

        Returns:
            True once ready, False if the timeout expired

        Raises:
            Exception: Whatever fail_load() recorded for this cycle
        """
        try:
            self._ready_future.result(timeout=timeout)
        except FutureTimeoutError:
            return False
        return self._ready

    # ─────────────────────────────────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────────────────────────────────

    def _snapshot(self, operation: str) -> Optional[List[Verb]]:
        """Current verb list, or None (with a warning) before readiness."""
        with self._lock:
            if not self._ready:
                logger.warning(f"Catalog not ready, {operation}() returns an empty result")
                return None
            return self._verbs

    def all(self) -> List[Verb]:
        return list(self._snapshot("all") or [])

    def count(self) -> int:
        return len(self._snapshot("count") or [])

    def get(self, infinitive: str) -> Optional[Verb]:
        """Look up a verb by infinitive (None if unknown or not ready)."""
        with self._lock:
            if not self._ready:
                logger.warning("Catalog not ready, get() returns None")
                return None
            return self._by_infinitive.get(infinitive)

    def filter(self, criteria: Optional[VerbFilter] = None) -> List[Verb]:
        """
        Verbs matching all given criteria, in catalog order.

        Args:
            criteria: VerbFilter; None or empty returns every verb
        """
        verbs = self._snapshot("filter")
        if verbs is None:
            return []
        if criteria is None or criteria.is_empty:
            return list(verbs)
        return [v for v in verbs if criteria.matches(v)]

    def search(self, text: str) -> List[Verb]:
        """
        Case-insensitive substring search over infinitive and translation.

        Blank text returns every verb.
        """
        verbs = self._snapshot("search")
        if verbs is None:
            return []
        term = (text or "").strip().lower()
        if not term:
            return list(verbs)
        return [
            v for v in verbs
            if term in v.infinitive.lower() or term in v.english_translation.lower()
        ]

    def sample(
        self,
        n: int,
        criteria: Optional[VerbFilter] = None,
        *,
        rng: Optional[random.Random] = None,
    ) -> List[Verb]:
        """
        Uniformly sample up to n distinct verbs.

        Shuffles a copy (Fisher-Yates via random.shuffle); the catalog
        itself is never reordered.

        Returns:
            min(n, available) verbs
        """
        pool = self.filter(criteria)
        if n <= 0 or not pool:
            return []
        (rng or self._rng).shuffle(pool)
        return pool[:n]

    def has_enough_verbs(self, n: int, criteria: Optional[VerbFilter] = None) -> bool:
        return len(self.filter(criteria)) >= n

    def verbs_with_conjugations(
        self,
        tenses: Iterable[str],
        persons: Iterable[str],
        criteria: Optional[VerbFilter] = None,
    ) -> List[Verb]:
        """Verbs matching criteria that define every (tense, person) pair."""
        tenses = tuple(tenses)
        persons = tuple(persons)
        return [v for v in self.filter(criteria) if v.has_conjugations(tenses, persons)]

    # ─────────────────────────────────────────────────────────────────────────
    # Grouping & Facets
    # ─────────────────────────────────────────────────────────────────────────

    def group_by_type(self) -> Dict[str, List[Verb]]:
        """Verbs grouped by verb type (every type present, possibly empty)."""
        groups: Dict[str, List[Verb]] = {t: [] for t in VERB_TYPES}
        for verb in self._snapshot("group_by_type") or []:
            groups[verb.verb_type.value].append(verb)
        return groups

    def group_by_difficulty(self) -> Dict[int, List[Verb]]:
        groups: Dict[int, List[Verb]] = {}
        for verb in self._snapshot("group_by_difficulty") or []:
            groups.setdefault(verb.difficulty_level, []).append(verb)
        return dict(sorted(groups.items()))

    def available_tenses(self) -> List[str]:
        """Distinct tenses across the catalog, in first-seen order."""
        seen: Dict[str, None] = {}
        for verb in self._snapshot("available_tenses") or []:
            for tense in verb.tenses:
                seen.setdefault(tense, None)
        return list(seen)

    def available_verb_types(self) -> List[str]:
        present = {v.verb_type.value for v in self._snapshot("available_verb_types") or []}
        return [t for t in VERB_TYPES if t in present]

    def available_difficulty_levels(self) -> List[int]:
        return sorted({v.difficulty_level for v in self._snapshot("available_difficulty_levels") or []})

    def __len__(self) -> int:
        with self._lock:
            return len(self._verbs) if self._ready else 0

    def __repr__(self) -> str:
        return f"VerbCatalog(ready={self._ready}, verbs={len(self._verbs)})"
