"""
Module: ledger.ledger

Purpose:
    Durable local log of completed attempts. The whole log is stored as
    one JSON array under a namespaced key, so every mutation is a single
    read-modify-write of that value.

Key Classes:
    - AttemptLedger: append / query / sync-state updates / statistics
    - NotFoundError: Raised for unknown ids when missing_ok=False

Storage Layout:
    - "<namespace>.attempts"  -> JSON array of Attempt.to_dict() records
    - "<namespace>.last-sync" -> ISO-8601 timestamp of the last sync

Read Policy:
    A missing or corrupt blob reads as an empty ledger; malformed
    records are skipped. Both are logged. Write failures (including
    QuotaExceededError) always propagate.

Dependencies:
    - ledger.storage: KeyValueStore backends
    - ledger.statistics / ledger.filters

Used By:
    - sync.reconciler.SyncReconciler
    - session.TrainerSession
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from threading import RLock
from typing import Any, Iterable, List, Optional

from verb_trainer.core.models.attempts import Attempt, SYNC_FIELDS
from verb_trainer.core.models.config import TestConfig
from verb_trainer.core.models.timestamps import parse_iso, to_iso, utc_now

from .filters import HistoryFilter
from .preferences import PreferencesStore
from .statistics import AttemptStatistics, compute_statistics
from .storage import KeyValueStore

logger = logging.getLogger(__name__)

EXPORT_VERSION = "1.0"


class NotFoundError(KeyError):
    """No attempt with the given id exists in the ledger."""
    pass


class AttemptLedger:
    """
    Append-mostly attempt log over a KeyValueStore.

    Thread-safe within a process: append/update/delete hold an RLock
    around their read-modify-write.

    Example:
        >>> ledger = AttemptLedger(MemoryStore())
        >>> ledger.append(attempt)
        >>> [a.id for a in ledger.unsynced()]
        ['a1']
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        namespace: str = "verb-trainer",
        preferences: Optional[PreferencesStore] = None,
    ) -> None:
        """
        Args:
            store: Backing keyed store
            namespace: Key prefix for this ledger's entries
            preferences: Included in export_json()/import_json() when given
        """
        self._store = store
        self.attempts_key = f"{namespace}.attempts"
        self.last_sync_key = f"{namespace}.last-sync"
        self.preferences = preferences
        self._lock = RLock()

    # ─────────────────────────────────────────────────────────────────────────
    # Raw Persistence
    # ─────────────────────────────────────────────────────────────────────────

    def _read(self) -> List[Attempt]:
        """Load every readable attempt in stored order."""
        raw = self._store.get(self.attempts_key)
        if not raw:
            return []
        try:
            records = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error(f"Attempt ledger is corrupt, reading as empty: {e}")
            return []
        if not isinstance(records, list):
            logger.error("Attempt ledger is not a JSON array, reading as empty")
            return []

        attempts = []
        for index, record in enumerate(records):
            try:
                attempts.append(Attempt.from_dict(record))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning(f"Skipping malformed attempt record #{index}: {e}")
        return attempts

    def _write(self, attempts: Iterable[Attempt]) -> None:
        payload = json.dumps([a.to_dict() for a in attempts], ensure_ascii=False)
        self._store.set(self.attempts_key, payload)

    # ─────────────────────────────────────────────────────────────────────────
    # Mutations
    # ─────────────────────────────────────────────────────────────────────────

    def append(self, attempt: Attempt) -> None:
        """
        Persist a new attempt.

        Raises:
            ValueError: If an attempt with the same id is already stored
            QuotaExceededError: If the store is full (nothing is written)
        """
        with self._lock:
            attempts = self._read()
            if any(a.id == attempt.id for a in attempts):
                raise ValueError(f"Attempt {attempt.id!r} already exists")
            attempts.append(attempt)
            self._write(attempts)
        logger.info(f"Saved attempt {attempt.id} ({attempt.score}/{attempt.total_questions})")

    def append_many(self, new_attempts: Iterable[Attempt]) -> List[Attempt]:
        """
        Persist several attempts in one write.

        Attempts whose id or idempotency key is already stored are skipped.

        Returns:
            The attempts actually added
        """
        with self._lock:
            attempts = self._read()
            ids = {a.id for a in attempts}
            keys = {a.idempotency_key for a in attempts}
            added = []
            for attempt in new_attempts:
                if attempt.id in ids or attempt.idempotency_key in keys:
                    logger.debug(f"Skipping already stored attempt {attempt.id}")
                    continue
                ids.add(attempt.id)
                keys.add(attempt.idempotency_key)
                added.append(attempt)
            if added:
                self._write(attempts + added)
        return added

    def update(self, id: str, *, missing_ok: bool = True, **changes: Any) -> bool:
        """
        Change the sync state of one attempt.

        Args:
            id: Attempt id
            missing_ok: If False, raise NotFoundError for unknown ids
            **changes: synced and/or synced_at

        Returns:
            True if the attempt was updated, False if it was not found

        Raises:
            ValueError: If a non sync-state field is given
            NotFoundError: If missing_ok=False and the id is unknown
        """
        illegal = set(changes) - SYNC_FIELDS
        if illegal:
            raise ValueError(f"Only sync-state fields may change: {sorted(illegal)}")

        with self._lock:
            attempts = self._read()
            for index, attempt in enumerate(attempts):
                if attempt.id == id:
                    attempts[index] = attempt.with_sync_state(**changes)
                    self._write(attempts)
                    logger.debug(f"Updated attempt {id}: {sorted(changes)}")
                    return True
        return self._not_found(id, "update", missing_ok)

    def mark_synced(self, ids: Iterable[str], at: datetime) -> int:
        """
        Mark several attempts synced in one write.

        Returns:
            Number of attempts changed (unknown ids are ignored)
        """
        wanted = set(ids)
        if not wanted:
            return 0
        with self._lock:
            attempts = self._read()
            changed = 0
            for index, attempt in enumerate(attempts):
                if attempt.id in wanted:
                    attempts[index] = attempt.mark_synced(at)
                    changed += 1
            if changed:
                self._write(attempts)
        return changed

    def delete(self, id: str, *, missing_ok: bool = True) -> bool:
        """
        Remove one attempt.

        Returns:
            True if removed, False if not found

        Raises:
            NotFoundError: If missing_ok=False and the id is unknown
        """
        with self._lock:
            attempts = self._read()
            remaining = [a for a in attempts if a.id != id]
            if len(remaining) != len(attempts):
                self._write(remaining)
                logger.info(f"Deleted attempt {id}")
                return True
        return self._not_found(id, "delete", missing_ok)

    def delete_many(self, ids: Iterable[str]) -> int:
        wanted = set(ids)
        with self._lock:
            attempts = self._read()
            remaining = [a for a in attempts if a.id not in wanted]
            removed = len(attempts) - len(remaining)
            if removed:
                self._write(remaining)
        return removed

    def clear(self) -> None:
        """Remove every attempt and the last sync time."""
        with self._lock:
            self._store.remove(self.attempts_key)
            self._store.remove(self.last_sync_key)
        logger.info("Attempt ledger cleared")

    def clear_synced(self) -> int:
        """Remove attempts already confirmed remotely; returns how many."""
        with self._lock:
            attempts = self._read()
            remaining = [a for a in attempts if not a.synced]
            removed = len(attempts) - len(remaining)
            if removed:
                self._write(remaining)
        logger.info(f"Removed {removed} synced attempts")
        return removed

    def _not_found(self, id: str, operation: str, missing_ok: bool) -> bool:
        if not missing_ok:
            raise NotFoundError(id)
        logger.warning(f"Attempt not found for {operation}: {id}")
        return False

    # ─────────────────────────────────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────────────────────────────────

    def all(self) -> List[Attempt]:
        """Every attempt, newest first (by start time)."""
        return sorted(self._read(), key=lambda a: a.started_at, reverse=True)

    def get(self, id: str) -> Optional[Attempt]:
        return next((a for a in self._read() if a.id == id), None)

    def find_by_idempotency_key(self, key: str) -> Optional[Attempt]:
        return next((a for a in self._read() if a.idempotency_key == key), None)

    def recent(self, n: int) -> List[Attempt]:
        return self.all()[: max(0, n)]

    def unsynced(self) -> List[Attempt]:
        return [a for a in self.all() if not a.synced]

    def synced(self) -> List[Attempt]:
        return [a for a in self.all() if a.synced]

    def filter(self, criteria: HistoryFilter) -> List[Attempt]:
        return criteria.apply(self.all())

    def statistics(self, criteria: Optional[HistoryFilter] = None) -> AttemptStatistics:
        attempts = self.filter(criteria) if criteria is not None else self.all()
        return compute_statistics(attempts)

    def __len__(self) -> int:
        return len(self._read())

    # ─────────────────────────────────────────────────────────────────────────
    # Last Sync Time
    # ─────────────────────────────────────────────────────────────────────────

    def last_sync_time(self) -> Optional[datetime]:
        raw = self._store.get(self.last_sync_key)
        try:
            return parse_iso(raw)
        except ValueError:
            logger.warning(f"Ignoring unreadable last sync time: {raw!r}")
            return None

    def set_last_sync_time(self, at: datetime) -> None:
        self._store.set(self.last_sync_key, to_iso(at))

    # ─────────────────────────────────────────────────────────────────────────
    # Export / Import
    # ─────────────────────────────────────────────────────────────────────────

    def export_json(self) -> str:
        """
        Serialize the ledger (and saved configuration) for backup.

        Format: {"results": [...], "config": {...}|null, "exportDate": ISO, "version": "1.0"}
        """
        config = self.preferences.test_config() if self.preferences else None
        data = {
            "results": [a.to_dict() for a in self.all()],
            "config": config.to_dict() if config else None,
            "exportDate": to_iso(utc_now()),
            "version": EXPORT_VERSION,
        }
        return json.dumps(data, indent=2, ensure_ascii=False)

    def import_json(self, text: str) -> int:
        """
        Replace the ledger with an export_json() payload.

        An empty results array leaves existing attempts in place.

        Returns:
            Number of attempts imported

        Raises:
            ValueError: If the payload is not a valid export
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid import data: {e}") from e
        if not isinstance(data, dict) or not isinstance(data.get("results"), list):
            raise ValueError("Invalid import data: missing or invalid results array")

        try:
            attempts = [Attempt.from_dict(record) for record in data["results"]]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise ValueError(f"Invalid import data: bad attempt record: {e}") from e

        if attempts:
            with self._lock:
                self._write(attempts)

        imported_config = data.get("config")
        if imported_config and self.preferences is not None:
            self.preferences.save_test_config(TestConfig.from_dict(imported_config))

        logger.info(f"Imported {len(attempts)} attempts")
        return len(attempts)
