"""
Utils Package

Serialization helpers for verbs and remote attempt records.
"""

from .serialization import (
    deserialize_verbs,
    load_verbs_json,
    save_verbs_json,
    attempt_to_remote,
    attempt_from_remote,
)

__all__ = [
    "deserialize_verbs",
    "load_verbs_json",
    "save_verbs_json",
    "attempt_to_remote",
    "attempt_from_remote",
]
