"""
Sync Package

Explicit reconciliation of the local ledger with a remote attempt store.
"""

from .remote import (
    RemoteAttemptStore,
    RestAttemptStore,
    InMemoryRemoteStore,
    NetworkError,
)
from .reconciler import SyncReconciler

__all__ = [
    "RemoteAttemptStore",
    "RestAttemptStore",
    "InMemoryRemoteStore",
    "NetworkError",
    "SyncReconciler",
]
