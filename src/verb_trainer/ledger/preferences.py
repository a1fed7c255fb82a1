"""Persisted quiz preferences: the last used conjugation and vocabulary configs."""

from __future__ import annotations

import json
import logging
from typing import Optional

from verb_trainer.core.models.config import TestConfig, VocabConfig

from .storage import KeyValueStore

logger = logging.getLogger(__name__)


class PreferencesStore:
    """
    Saves and restores TestConfig / VocabConfig in a keyed store.

    Unreadable entries are logged and treated as absent.
    """

    def __init__(self, store: KeyValueStore, *, namespace: str = "verb-trainer") -> None:
        self._store = store
        self.config_key = f"{namespace}.config"
        self.vocab_config_key = f"{namespace}.vocab-config"

    def _read(self, key: str) -> Optional[dict]:
        raw = self._store.get(key)
        if not raw:
            return None
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring unreadable preferences under {key}: {e}")
            return None
        return data if isinstance(data, dict) else None

    def save_test_config(self, config: TestConfig) -> None:
        self._store.set(self.config_key, json.dumps(config.to_dict(), ensure_ascii=False))
        logger.debug("Saved test configuration")

    def test_config(self) -> Optional[TestConfig]:
        data = self._read(self.config_key)
        if data is None:
            return None
        try:
            return TestConfig.from_dict(data)
        except (TypeError, ValueError) as e:
            logger.warning(f"Ignoring invalid stored test configuration: {e}")
            return None

    def save_vocab_config(self, config: VocabConfig) -> None:
        self._store.set(self.vocab_config_key, json.dumps(config.to_dict(), ensure_ascii=False))

    def vocab_config(self) -> Optional[VocabConfig]:
        data = self._read(self.vocab_config_key)
        if data is None:
            return None
        try:
            return VocabConfig.from_dict(data)
        except (TypeError, ValueError) as e:
            logger.warning(f"Ignoring invalid stored vocabulary configuration: {e}")
            return None

    def clear(self) -> None:
        self._store.remove(self.config_key)
        self._store.remove(self.vocab_config_key)
