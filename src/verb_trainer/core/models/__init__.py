"""
Core Models Package

Immutable, validated data models shared by every component.

All models in this package are frozen dataclasses: catalog snapshots
are replaced wholesale, generated questions never change their
canonical answer, and attempts only ever change their sync state
(through `dataclasses.replace`, producing a new instance).
"""

from .verbs import Verb, VerbType, VERB_TYPES
from .config import (
    TestConfig,
    VocabConfig,
    DEFAULT_TEST_CONFIG,
    DEFAULT_VOCAB_CONFIG,
    MIN_QUESTION_COUNT,
    MAX_QUESTION_COUNT,
)
from .questions import Question, VocabQuestion
from .attempts import (
    Attempt,
    AnswerDetail,
    VocabAnswerDetail,
    SyncResult,
    SyncStats,
    compute_percentage,
    TEST_TYPE_CONJUGATION,
    TEST_TYPE_VOCABULARY,
)

__all__ = [
    "Verb",
    "VerbType",
    "VERB_TYPES",
    "TestConfig",
    "VocabConfig",
    "DEFAULT_TEST_CONFIG",
    "DEFAULT_VOCAB_CONFIG",
    "MIN_QUESTION_COUNT",
    "MAX_QUESTION_COUNT",
    "Question",
    "VocabQuestion",
    "Attempt",
    "AnswerDetail",
    "VocabAnswerDetail",
    "SyncResult",
    "SyncStats",
    "compute_percentage",
    "TEST_TYPE_CONJUGATION",
    "TEST_TYPE_VOCABULARY",
]
