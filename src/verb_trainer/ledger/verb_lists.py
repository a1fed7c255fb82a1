"""
Module: ledger.verb_lists

Purpose:
    Named, user-curated verb lists for vocabulary practice, persisted as
    one JSON array in the same keyed store as the attempt ledger. A list
    resolves into VocabConfig.specific_verbs when a quiz starts.

Key Classes:
    - CustomVerbList: Immutable list record (id, name, infinitives, times)
    - CustomVerbListStore: CRUD plus add/remove of verbs

Used By:
    - session.TrainerSession.start_vocabulary_quiz_from_list
"""

from __future__ import annotations

import json
import logging
import random
import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from threading import RLock
from typing import Callable, Iterable, List, Mapping, Optional, Tuple

from verb_trainer.catalog.catalog import VerbCatalog
from verb_trainer.core.models.config import VocabConfig
from verb_trainer.core.models.timestamps import parse_iso, to_iso, utc_now
from verb_trainer.core.models.verbs import Verb

from .ledger import NotFoundError
from .storage import KeyValueStore

logger = logging.getLogger(__name__)


def _unique(infinitives: Iterable[str]) -> Tuple[str, ...]:
    """Strip blanks and drop repeats, keeping first-seen order."""
    seen = []
    for infinitive in infinitives:
        text = str(infinitive).strip()
        if text and text not in seen:
            seen.append(text)
    return tuple(seen)


@dataclass(frozen=True)
class CustomVerbList:
    """
    A named selection of infinitives.

    Attributes:
        id: Unique list id ("list_<hex>")
        name: Display name (non-empty)
        description: Optional free text
        verb_infinitives: Distinct infinitives in insertion order
        created_at: Creation time (UTC)
        updated_at: Last modification time (UTC)
    """

    id: str
    name: str
    description: str
    verb_infinitives: Tuple[str, ...]
    created_at: datetime
    updated_at: datetime

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("id cannot be empty")
        if not str(self.name).strip():
            raise ValueError("name cannot be empty")
        object.__setattr__(self, "verb_infinitives", _unique(self.verb_infinitives))

    def __len__(self) -> int:
        return len(self.verb_infinitives)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "verbInfinitives": list(self.verb_infinitives),
            "createdAt": to_iso(self.created_at),
            "updatedAt": to_iso(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: Mapping) -> CustomVerbList:
        return cls(
            id=data["id"],
            name=data["name"],
            description=data.get("description") or "",
            verb_infinitives=tuple(data.get("verbInfinitives") or ()),
            created_at=parse_iso(data["createdAt"]),
            updated_at=parse_iso(data["updatedAt"]),
        )


class CustomVerbListStore:
    """
    Persists custom verb lists under `{namespace}.custom-verb-lists`.

    Mutators return False for an unknown list id, matching the lookup
    style of the rest of the app. Unreadable data reads as no lists;
    write errors propagate.

    Example:
        >>> lists = CustomVerbListStore(MemoryStore())
        >>> exam = lists.create("Exam verbs", verb_infinitives=["gehen", "sehen"])
        >>> lists.add_verbs(exam.id, ["kommen"])
        True
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        namespace: str = "verb-trainer",
        clock: Callable[[], datetime] = utc_now,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._store = store
        self.lists_key = f"{namespace}.custom-verb-lists"
        self._clock = clock
        self._rng = rng or random.Random()
        self._lock = RLock()

    # ─────────────────────────────────────────────────────────────────────────
    # Raw Persistence
    # ─────────────────────────────────────────────────────────────────────────

    def _read(self) -> List[CustomVerbList]:
        raw = self._store.get(self.lists_key)
        if not raw:
            return []
        try:
            records = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error(f"Custom verb lists are corrupt, reading as empty: {e}")
            return []
        if not isinstance(records, list):
            logger.error("Custom verb lists are not a JSON array, reading as empty")
            return []

        lists = []
        for index, record in enumerate(records):
            try:
                lists.append(CustomVerbList.from_dict(record))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning(f"Skipping malformed verb list #{index}: {e}")
        return lists

    def _write(self, lists: Iterable[CustomVerbList]) -> None:
        payload = json.dumps([item.to_dict() for item in lists], ensure_ascii=False)
        self._store.set(self.lists_key, payload)

    def _modify(self, list_id: str, **changes) -> bool:
        with self._lock:
            lists = self._read()
            for index, current in enumerate(lists):
                if current.id == list_id:
                    lists[index] = replace(current, updated_at=self._clock(), **changes)
                    self._write(lists)
                    return True
        logger.warning(f"No custom verb list with id {list_id!r}")
        return False

    # ─────────────────────────────────────────────────────────────────────────
    # CRUD
    # ─────────────────────────────────────────────────────────────────────────

    def all_lists(self) -> List[CustomVerbList]:
        return self._read()

    def get(self, list_id: str) -> Optional[CustomVerbList]:
        return next((item for item in self._read() if item.id == list_id), None)

    def create(
        self,
        name: str,
        description: str = "",
        verb_infinitives: Iterable[str] = (),
    ) -> CustomVerbList:
        """
        Create and persist a new list.

        Raises:
            ValueError: If name is blank
        """
        now = self._clock()
        new_list = CustomVerbList(
            id=f"list_{uuid.uuid4().hex}",
            name=name.strip(),
            description=description,
            verb_infinitives=tuple(verb_infinitives),
            created_at=now,
            updated_at=now,
        )
        with self._lock:
            lists = self._read()
            lists.append(new_list)
            self._write(lists)
        logger.info(f"Created verb list {new_list.name!r} with {len(new_list)} verbs")
        return new_list

    def update(
        self,
        list_id: str,
        *,
        name: Optional[str] = None,
        description: Optional[str] = None,
        verb_infinitives: Optional[Iterable[str]] = None,
    ) -> bool:
        """Change name, description or contents; id and created_at are fixed."""
        changes = {}
        if name is not None:
            changes["name"] = name.strip()
        if description is not None:
            changes["description"] = description
        if verb_infinitives is not None:
            changes["verb_infinitives"] = tuple(verb_infinitives)
        return self._modify(list_id, **changes)

    def delete(self, list_id: str) -> bool:
        with self._lock:
            lists = self._read()
            remaining = [item for item in lists if item.id != list_id]
            if len(remaining) == len(lists):
                return False
            self._write(remaining)
        logger.info(f"Deleted verb list {list_id}")
        return True

    def add_verbs(self, list_id: str, infinitives: Iterable[str]) -> bool:
        """Append infinitives not already in the list."""
        with self._lock:
            current = self.get(list_id)
            if current is None:
                return False
            return self._modify(
                list_id, verb_infinitives=current.verb_infinitives + tuple(infinitives)
            )

    def remove_verbs(self, list_id: str, infinitives: Iterable[str]) -> bool:
        to_remove = set(infinitives)
        with self._lock:
            current = self.get(list_id)
            if current is None:
                return False
            kept = tuple(i for i in current.verb_infinitives if i not in to_remove)
            return self._modify(list_id, verb_infinitives=kept)

    # ─────────────────────────────────────────────────────────────────────────
    # Resolution
    # ─────────────────────────────────────────────────────────────────────────

    def verbs_for_list(self, list_id: str, catalog: VerbCatalog) -> List[Verb]:
        """Catalog verbs for a list; infinitives missing from the catalog are skipped."""
        current = self.get(list_id)
        if current is None:
            return []
        verbs = [catalog.get(i) for i in current.verb_infinitives]
        return [v for v in verbs if v is not None]

    def random_verbs(
        self,
        list_id: str,
        count: int,
        catalog: VerbCatalog,
        *,
        rng: Optional[random.Random] = None,
    ) -> List[Verb]:
        """Up to count distinct verbs from the list in random order."""
        verbs = self.verbs_for_list(list_id, catalog)
        (rng or self._rng).shuffle(verbs)
        return verbs[: max(count, 0)]

    def vocab_config(self, list_id: str, base: Optional[VocabConfig] = None) -> VocabConfig:
        """
        Restrict a vocabulary config to the list's verbs.

        Difficulty and type limits are cleared so every listed verb is
        eligible.

        Args:
            list_id: List to resolve
            base: Config supplying count and other settings (defaults otherwise)

        Raises:
            NotFoundError: If no list has this id
            ValueError: If the list is empty
        """
        current = self.get(list_id)
        if current is None:
            raise NotFoundError(list_id)
        if not current.verb_infinitives:
            raise ValueError(f"Custom verb list {current.name!r} has no verbs")
        return replace(
            base or VocabConfig(),
            difficulty_levels=(),
            verb_types=None,
            specific_verbs=current.verb_infinitives,
        )
