"""
Schemas Package

Catalog input validation (field checks plus JSON schema).
"""

from .validator import (
    validate_verb_records,
    require_valid_verb_records,
    ValidationError,
)

__all__ = [
    "validate_verb_records",
    "require_valid_verb_records",
    "ValidationError",
]
