"""
Ledger Package

Durable local attempt log, its storage backends, history filters,
statistics, saved preferences and custom verb lists.
"""

from .storage import (
    KeyValueStore,
    MemoryStore,
    JsonFileStore,
    StorageError,
    QuotaExceededError,
    DEFAULT_CAPACITY_BYTES,
)
from .ledger import AttemptLedger, NotFoundError
from .filters import HistoryFilter
from .statistics import AttemptStatistics, CategoryBreakdown, Trend, compute_statistics
from .preferences import PreferencesStore
from .verb_lists import CustomVerbList, CustomVerbListStore

__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "JsonFileStore",
    "StorageError",
    "QuotaExceededError",
    "DEFAULT_CAPACITY_BYTES",
    "AttemptLedger",
    "NotFoundError",
    "HistoryFilter",
    "AttemptStatistics",
    "CategoryBreakdown",
    "Trend",
    "compute_statistics",
    "PreferencesStore",
    "CustomVerbList",
    "CustomVerbListStore",
]
