"""
Verb Trainer Core Package

Shared data models, catalog input validation and serialization.

1. **Immutable Data Models**
   - Frozen dataclasses; new instances are created for any change
   - Attempts only change their sync state (`Attempt.mark_synced`)

2. **Calculated Values**
   - `Attempt.percentage` is always derived from score/total
   - `Question.correct_answer` always matches the verb's table

3. **Validation Before Construction**
   - Raw catalog records pass `require_valid_verb_records()` before
     they become `Verb` instances
"""

from .models import (
    Verb,
    VerbType,
    TestConfig,
    VocabConfig,
    Question,
    VocabQuestion,
    Attempt,
    AnswerDetail,
    VocabAnswerDetail,
    SyncResult,
    SyncStats,
)
from .schemas import ValidationError

__all__ = [
    "Verb",
    "VerbType",
    "TestConfig",
    "VocabConfig",
    "Question",
    "VocabQuestion",
    "Attempt",
    "AnswerDetail",
    "VocabAnswerDetail",
    "SyncResult",
    "SyncStats",
    "ValidationError",
]
