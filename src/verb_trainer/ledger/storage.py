"""
Module: ledger.storage

Purpose:
    Simple keyed durable storage used by the attempt ledger and the
    preferences store. Values are JSON text; capacity mimics a browser
    storage quota.

Key Classes:
    - KeyValueStore: Protocol with get/set/remove
    - MemoryStore: In-process dictionary (tests, ephemeral sessions)
    - JsonFileStore: One file per key under a directory
    - QuotaExceededError / StorageError

Dependencies:
    - portalocker: Cross-platform exclusive lock around writes

Used By:
    - ledger.ledger.AttemptLedger
    - ledger.preferences.PreferencesStore
    - config.Settings.create_store()
"""

from __future__ import annotations

import errno
import logging
import os
import re
import tempfile
from contextlib import contextmanager
from pathlib import Path
from threading import Lock
from typing import Dict, Generator, Optional, Protocol

import portalocker

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY_BYTES = 5 * 1024 * 1024

_QUOTA_ERRNOS = {errno.ENOSPC, getattr(errno, "EDQUOT", errno.ENOSPC)}
_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9._-]")


class StorageError(Exception):
    """Storage backend failure."""
    pass


class QuotaExceededError(StorageError):
    """A write would exceed the store's capacity (or the disk is full)."""
    pass


class KeyValueStore(Protocol):
    """Minimal keyed store holding text values."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def remove(self, key: str) -> None:
        ...


def _entry_size(key: str, value: str) -> int:
    return len(key.encode("utf-8")) + len(value.encode("utf-8"))


class MemoryStore:
    """
    Dictionary-backed store with an optional capacity.

    Example:
        >>> store = MemoryStore(capacity_bytes=1024)
        >>> store.set("k", "[]")
        >>> store.get("k")
        '[]'
    """

    def __init__(self, capacity_bytes: Optional[int] = None) -> None:
        self.capacity_bytes = capacity_bytes
        self._data: Dict[str, str] = {}
        self._lock = Lock()
        self.write_count = 0

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            if self.capacity_bytes is not None:
                used = sum(_entry_size(k, v) for k, v in self._data.items() if k != key)
                needed = used + _entry_size(key, value)
                if needed > self.capacity_bytes:
                    raise QuotaExceededError(
                        f"Storage quota exceeded: {needed} > {self.capacity_bytes} bytes"
                    )
            self._data[key] = value
            self.write_count += 1

    def remove(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def keys(self):
        with self._lock:
            return list(self._data)


class JsonFileStore:
    """
    Directory-backed store: each key is a `<key>.json` file.

    Writes go to a temporary file in the same directory and are moved
    into place with os.replace() while an exclusive portalocker lock on
    `.store.lock` is held, so readers never see a half-written value.

    Args:
        directory: Storage directory (created on first write)
        capacity_bytes: Optional total size limit across all keys
    """

    LOCK_NAME = ".store.lock"

    def __init__(self, directory: Path, capacity_bytes: Optional[int] = None) -> None:
        self.directory = Path(directory)
        self.capacity_bytes = capacity_bytes

    def _path(self, key: str) -> Path:
        return self.directory / f"{_UNSAFE_KEY_CHARS.sub('_', key)}.json"

    @contextmanager
    def _locked(self) -> Generator:
        """Hold an exclusive cross-process lock on the store directory."""
        self.directory.mkdir(parents=True, exist_ok=True)
        with open(self.directory / self.LOCK_NAME, "a", encoding="utf-8") as f:
            portalocker.lock(f, portalocker.LOCK_EX)
            try:
                yield
            finally:
                portalocker.unlock(f)

    def _used_bytes(self, exclude: Path) -> int:
        total = 0
        for path in self.directory.glob("*.json"):
            if path != exclude:
                total += len(path.stem.encode("utf-8")) + path.stat().st_size
        return total

    def get(self, key: str) -> Optional[str]:
        """Read a value; unreadable files are logged and read as missing."""
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as e:
            logger.error(f"Stored value {path.name} is not valid UTF-8, reading as empty: {e}")
            return None
        except OSError as e:
            logger.error(f"Could not read {path.name}, reading as empty: {e}")
            return None

    def set(self, key: str, value: str) -> None:
        """
        Atomically write a value.

        Raises:
            QuotaExceededError: If capacity would be exceeded or the disk is full
            OSError: Any other filesystem failure
        """
        path = self._path(key)
        with self._locked():
            if self.capacity_bytes is not None:
                needed = self._used_bytes(path) + _entry_size(path.stem, value)
                if needed > self.capacity_bytes:
                    raise QuotaExceededError(
                        f"Storage quota exceeded: {needed} > {self.capacity_bytes} bytes"
                    )

            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=".tmp-", suffix=".part")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(value)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_name, path)
            except OSError as e:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                if e.errno in _QUOTA_ERRNOS:
                    raise QuotaExceededError(f"Disk full while writing {path.name}: {e}") from e
                raise

        logger.debug(f"Wrote {len(value)} chars to {path.name}")

    def remove(self, key: str) -> None:
        path = self._path(key)
        with self._locked():
            try:
                path.unlink()
            except FileNotFoundError:
                pass

    def __repr__(self) -> str:
        return f"JsonFileStore({str(self.directory)!r})"
