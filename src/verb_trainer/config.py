"""
Module: config

Purpose:
    Runtime settings for the verb trainer core and factories for the
    configured storage, remote store and catalog sources.

Key Functions:
    - load_settings(): JSON file + VERB_TRAINER_* environment overrides
    - default_data_dir(): Platform-standard data directory

Key Classes:
    - Settings: Immutable, validated settings

Environment Overrides:
    VERB_TRAINER_DATA_DIR, VERB_TRAINER_LEDGER_CAPACITY_BYTES,
    VERB_TRAINER_REMOTE_URL, VERB_TRAINER_REMOTE_API_KEY,
    VERB_TRAINER_REMOTE_TIMEOUT, VERB_TRAINER_FALLBACK_CATALOG_PATH,
    VERB_TRAINER_USER_ID

Dependencies:
    - ledger.storage / sync.remote / catalog.loader (built lazily)
"""

from __future__ import annotations

import json
import logging
import os
import platform
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from verb_trainer.ledger.storage import DEFAULT_CAPACITY_BYTES, JsonFileStore, KeyValueStore

logger = logging.getLogger(__name__)

ENV_PREFIX = "VERB_TRAINER_"
APP_DIR_NAME = "German Verb Trainer"


def default_data_dir() -> Path:
    """
    Platform-standard location for ledger files.

    Windows: %LOCALAPPDATA%/German Verb Trainer
    macOS:   ~/Library/Application Support/German Verb Trainer
    Other:   ~/.local/share/German Verb Trainer
    """
    system = platform.system()
    if system == "Windows":
        base = os.environ.get("LOCALAPPDATA", os.environ.get("APPDATA"))
        return Path(base) / APP_DIR_NAME if base else Path.home() / ".verb_trainer"
    if system == "Darwin":
        return Path.home() / "Library/Application Support" / APP_DIR_NAME
    return Path.home() / ".local/share" / APP_DIR_NAME


@dataclass(frozen=True)
class Settings:
    """
    Core settings (immutable).

    Attributes:
        data_dir: Directory for the JSON file store
        ledger_capacity_bytes: Store quota (None = unlimited)
        remote_url: PostgREST root, e.g. "https://x.supabase.co/rest/v1"
        remote_api_key: API key sent as apikey/Bearer token
        remote_timeout: HTTP timeout in seconds
        fallback_catalog_path: Local verbs JSON used when the remote fails
        user_id: Owner for uploads/downloads (None = anonymous)

    Example:
        >>> settings = Settings(data_dir=Path("/tmp/vt"), remote_url=None)
        >>> settings.has_remote
        False
    """

    data_dir: Optional[Path] = None
    ledger_capacity_bytes: Optional[int] = DEFAULT_CAPACITY_BYTES
    remote_url: Optional[str] = None
    remote_api_key: Optional[str] = None
    remote_timeout: float = 30.0
    fallback_catalog_path: Optional[Path] = None
    user_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate and normalise settings on construction."""
        data_dir = Path(self.data_dir) if self.data_dir else default_data_dir()
        object.__setattr__(self, "data_dir", data_dir)
        if self.fallback_catalog_path is not None:
            object.__setattr__(self, "fallback_catalog_path", Path(self.fallback_catalog_path))
        if self.ledger_capacity_bytes is not None and self.ledger_capacity_bytes <= 0:
            raise ValueError(
                f"ledger_capacity_bytes must be positive: {self.ledger_capacity_bytes}"
            )
        if self.remote_timeout <= 0:
            raise ValueError(f"remote_timeout must be positive: {self.remote_timeout}")
        if self.remote_url and not self.remote_url.startswith(("http://", "https://")):
            raise ValueError(f"remote_url must be an http(s) URL: {self.remote_url!r}")

    @property
    def has_remote(self) -> bool:
        return bool(self.remote_url)

    # ─────────────────────────────────────────────────────────────────────────
    # Factories
    # ─────────────────────────────────────────────────────────────────────────

    def create_store(self) -> KeyValueStore:
        return JsonFileStore(self.data_dir, capacity_bytes=self.ledger_capacity_bytes)

    def create_remote(self):
        """
        Build the remote attempt store.

        Raises:
            ValueError: If no remote_url is configured
        """
        if not self.remote_url:
            raise ValueError("remote_url is not configured")
        from verb_trainer.sync.remote import RestAttemptStore

        return RestAttemptStore(self.remote_url, self.remote_api_key, timeout=self.remote_timeout)

    def create_catalog_source(self):
        """Remote catalog source if configured, else the fallback file source."""
        from verb_trainer.catalog.loader import JsonFileCatalogSource, RestCatalogSource

        if self.remote_url:
            return RestCatalogSource(self.remote_url, self.remote_api_key, timeout=self.remote_timeout)
        if self.fallback_catalog_path is not None:
            return JsonFileCatalogSource(self.fallback_catalog_path)
        raise ValueError("Neither remote_url nor fallback_catalog_path is configured")

    def create_fallback_catalog_source(self):
        """File source for fallback use, or None when the remote is the only source."""
        from verb_trainer.catalog.loader import JsonFileCatalogSource

        if self.remote_url and self.fallback_catalog_path is not None:
            return JsonFileCatalogSource(self.fallback_catalog_path)
        return None

    def to_dict(self) -> Dict[str, Any]:
        d = {f.name: getattr(self, f.name) for f in fields(self)}
        d["data_dir"] = str(self.data_dir)
        if self.fallback_catalog_path is not None:
            d["fallback_catalog_path"] = str(self.fallback_catalog_path)
        d.pop("remote_api_key")
        return d


# ─────────────────────────────────────────────────────────────────────────────
# Loading
# ─────────────────────────────────────────────────────────────────────────────

_CASTS = {
    "data_dir": Path,
    "ledger_capacity_bytes": int,
    "remote_url": str,
    "remote_api_key": str,
    "remote_timeout": float,
    "fallback_catalog_path": Path,
    "user_id": str,
}


def _env_overrides(env: Mapping[str, str]) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for name, cast in _CASTS.items():
        raw = env.get(f"{ENV_PREFIX}{name.upper()}")
        if raw is None or raw == "":
            continue
        try:
            overrides[name] = cast(raw)
        except ValueError as e:
            raise ValueError(f"Invalid {ENV_PREFIX}{name.upper()}={raw!r}: {e}") from e
    return overrides


def load_settings(
    path: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
) -> Settings:
    """
    Build Settings from an optional JSON file and the environment.

    Precedence: environment > file > defaults. Unknown file keys are
    ignored with a warning.

    Args:
        path: Optional JSON settings file
        env: Environment mapping (defaults to os.environ)

    Raises:
        FileNotFoundError: If path is given but missing
        ValueError: If a value is invalid
    """
    env = os.environ if env is None else env
    values: Dict[str, Any] = {}

    if path is not None:
        path = Path(path)
        with open(path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid settings file {path}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Settings file {path} must contain a JSON object")
        for key, value in data.items():
            if key not in _CASTS:
                logger.warning(f"Ignoring unknown setting {key!r} in {path.name}")
                continue
            values[key] = _CASTS[key](value) if value is not None else None

    values.update(_env_overrides(env))
    settings = Settings(**values)
    logger.debug(f"Loaded settings: {settings.to_dict()}")
    return settings
