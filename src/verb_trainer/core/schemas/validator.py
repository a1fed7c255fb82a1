"""
Verb Catalog Validation

Validates verb records before they enter a catalog.

Two levels:
- `validate_verb_records()` - field-level checks that collect every
  problem with a record number, infinitive and field name
  (e.g. `Verb 3 ("gehen"): 'difficulty_level' must be a number between 1 and 5`)
- `strict=True` - additionally runs jsonschema against `verbs.schema.json`

`require_valid_verb_records()` raises ValidationError carrying the full
error list, which is what loaders and VerbCatalog.load() use.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from ..models.verbs import MAX_DIFFICULTY, MIN_DIFFICULTY, VERB_TYPES

logger = logging.getLogger(__name__)


# Load schemas lazily
_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class ValidationError(Exception):
    """Raised when data fails validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def _is_text(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def _label(index: int, record: Any) -> str:
    """Error prefix naming the 1-based record number and, if known, the infinitive."""
    infinitive = record.get("infinitive") if isinstance(record, dict) else None
    if _is_text(infinitive):
        return f'Verb {index + 1} ("{infinitive}")'
    return f"Verb {index + 1}"


def _record_errors(index: int, record: Any) -> list[str]:
    """Collect field-level problems for a single record."""
    if not isinstance(record, dict):
        return [f"Verb {index + 1}: Record must be an object"]

    label = _label(index, record)
    errors: list[str] = []

    if not _is_text(record.get("infinitive")):
        errors.append(f"{label}: Missing or invalid 'infinitive' field")

    if not _is_text(record.get("english_translation")):
        errors.append(f"{label}: Missing or invalid 'english_translation' field")

    verb_type = record.get("verb_type")
    if verb_type not in VERB_TYPES:
        errors.append(
            f"{label}: Invalid 'verb_type' \"{verb_type}\". "
            f"Must be one of: {', '.join(VERB_TYPES)}"
        )

    if not _is_text(record.get("stem")):
        errors.append(f"{label}: Missing or invalid 'stem' field")

    level = record.get("difficulty_level")
    if (
        isinstance(level, bool)
        or not isinstance(level, int)
        or not (MIN_DIFFICULTY <= level <= MAX_DIFFICULTY)
    ):
        errors.append(
            f"{label}: 'difficulty_level' must be a number between "
            f"{MIN_DIFFICULTY} and {MAX_DIFFICULTY}"
        )

    errors.extend(_conjugation_errors(label, record.get("conjugations")))
    return errors


def _conjugation_errors(label: str, conjugations: Any) -> list[str]:
    if not isinstance(conjugations, dict):
        return [f"{label}: Missing or invalid 'conjugations' field"]
    if not conjugations:
        return [f"{label}: 'conjugations' must have at least one tense"]

    errors: list[str] = []
    for tense, persons in conjugations.items():
        if not isinstance(persons, dict):
            errors.append(f"{label}: Conjugations for '{tense}' must be an object")
            continue
        if not persons:
            errors.append(f"{label}: Tense '{tense}' must have at least one person conjugation")
            continue
        for person, form in persons.items():
            if not isinstance(form, str):
                errors.append(
                    f"{label}: Conjugation for '{tense}' - '{person}' must be a string"
                )
    return errors


def validate_verb_records(records: Any, *, strict: bool = False) -> list[str]:
    """
    Check a batch of catalog records and return every problem found.

    Args:
        records: Parsed JSON (expected: a list of verb objects)
        strict: If True, also validate against verbs.schema.json

    Returns:
        List of human-readable error strings (empty when valid)

    Example:
        >>> validate_verb_records({"infinitive": "gehen"})
        ['Verb data must be an array']
    """
    if not isinstance(records, list):
        return ["Verb data must be an array"]
    if not records:
        return ["Verb data must contain at least one verb"]

    errors: list[str] = []
    seen: dict[str, int] = {}
    for index, record in enumerate(records):
        errors.extend(_record_errors(index, record))
        infinitive = record.get("infinitive") if isinstance(record, dict) else None
        if _is_text(infinitive):
            if infinitive in seen:
                errors.append(
                    f"{_label(index, record)}: Duplicate infinitive "
                    f"(already defined by verb {seen[infinitive] + 1})"
                )
            else:
                seen[infinitive] = index

    if strict:
        errors.extend(_schema_errors(records))

    return errors


def _schema_errors(records: list) -> list[str]:
    """Run jsonschema and format each violation with its location."""
    import jsonschema

    validator = jsonschema.Draft7Validator(_load_schema("verbs"))
    messages = []
    for error in sorted(validator.iter_errors(records), key=lambda e: [str(p) for p in e.absolute_path]):
        location = ".".join(str(p) for p in error.absolute_path)
        messages.append(f"Schema: {location or '<root>'}: {error.message}")
    return messages


def require_valid_verb_records(records: Any, *, strict: bool = False) -> None:
    """
    Validate a batch and raise if anything is wrong.

    Raises:
        ValidationError: With `errors` holding every problem and `path`
            pointing at the first offending record
    """
    errors = validate_verb_records(records, strict=strict)
    if not errors:
        return

    path = ""
    if isinstance(records, list):
        for index, record in enumerate(records):
            if _record_errors(index, record):
                path = f"[{index}]"
                break

    logger.warning(f"Verb data rejected with {len(errors)} error(s): {errors[0]}")
    raise ValidationError(
        f"Invalid verb data ({len(errors)} error(s)): {errors[0]}",
        path=path,
        errors=errors,
    )
