"""
Serialization Utilities

Provides to/from JSON utilities for verbs and attempts.

- Verb files: `load_verbs_json()` / `save_verbs_json()` (validated on load)
- Remote attempt records: `attempt_to_remote()` / `attempt_from_remote()`

The local ledger format is owned by `Attempt.to_dict()`; the remote
format differs only in its sync fields (`synced_from_client` instead of
`synced`/`synced_at`).
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Mapping

from ..models.attempts import Attempt
from ..models.timestamps import parse_iso, to_iso
from ..models.verbs import Verb
from ..schemas.validator import ValidationError, require_valid_verb_records

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Verb Files
# ─────────────────────────────────────────────────────────────────────────────

def deserialize_verbs(
    records: Any,
    *,
    validate: bool = True,
    strict: bool = False,
) -> list[Verb]:
    """
    Convert parsed catalog records into Verb instances.

    Args:
        records: Parsed JSON array of verb objects
        validate: Whether to run the catalog input checks first
        strict: Also validate against verbs.schema.json

    Raises:
        ValidationError: If validate=True and any record is invalid
    """
    if validate:
        require_valid_verb_records(records, strict=strict)
    return [Verb.from_dict(record) for record in records]


def load_verbs_json(path: Path, *, strict: bool = False) -> list[Verb]:
    """
    Load and validate verbs from a JSON file.

    Args:
        path: Path to a JSON array of verb records
        strict: Also validate against verbs.schema.json

    Returns:
        List of Verb instances in file order

    Raises:
        FileNotFoundError: If file doesn't exist
        ValidationError: If the file is not valid JSON or any record is invalid
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Verbs file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(
                f"Invalid JSON in {path.name}: {e}",
                path=str(path),
                errors=[str(e)],
            )

    try:
        verbs = deserialize_verbs(data, strict=strict)
    except ValidationError as e:
        raise ValidationError(str(e), path=f"{path}{e.path}", errors=e.errors)

    logger.debug(f"Loaded {len(verbs)} verbs from {path.name}")
    return verbs


def save_verbs_json(verbs: Iterable[Verb], path: Path) -> None:
    """Write verbs as a JSON array (the same format load_verbs_json reads)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump([v.to_dict() for v in verbs], f, indent=2, ensure_ascii=False)


# ─────────────────────────────────────────────────────────────────────────────
# Remote Attempt Records
# ─────────────────────────────────────────────────────────────────────────────

def attempt_to_remote(attempt: Attempt, synced_at: datetime) -> dict[str, Any]:
    """
    Build the remote record for an upload.

    Args:
        attempt: Local attempt
        synced_at: Upload time, stored as `synced_from_client`

    Returns:
        Dictionary keyed by the remote table's column names
    """
    return {
        "id": attempt.id,
        "user_id": attempt.user_id,
        "test_date": to_iso(attempt.started_at),
        "test_type": attempt.test_type,
        "score": attempt.score,
        "total_questions": attempt.total_questions,
        "percentage": attempt.percentage,
        "test_configuration": dict(attempt.config),
        "answers": [a.to_dict() for a in attempt.answers],
        "duration_seconds": attempt.duration_seconds,
        "synced_from_client": to_iso(synced_at),
        "client_generated_id": attempt.idempotency_key,
    }


def attempt_from_remote(record: Mapping[str, Any]) -> Attempt:
    """
    Convert a downloaded remote record into a synced local Attempt.

    `synced_from_client` becomes `synced_at`; records without it are
    stamped with their `test_date`.

    Raises:
        KeyError: If a required column is missing
        ValueError: If a column is malformed
    """
    local = dict(record)
    local.setdefault("completed_at", record.get("test_date"))
    local["synced"] = True
    local["synced_at"] = to_iso(
        parse_iso(record.get("synced_from_client")) or parse_iso(record.get("test_date"))
    )
    return Attempt.from_dict(local)
