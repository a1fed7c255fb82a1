"""
Module: sync.reconciler

Purpose:
    Move attempts between the local ledger and a remote store without
    duplication, only when explicitly asked to.

Key Classes:
    - SyncReconciler: upload / download / stats (+ executor submission)

Guarantees:
    - upload() sends every unsynced attempt in one upsert keyed by the
      idempotency key, then marks them synced in one ledger write;
      a failed upload leaves the ledger untouched
    - download() never overwrites local records and skips any remote
      record whose idempotency key is already known
    - Ledger writes only happen after the remote call has returned, so a
      caller abandoning a submitted Future cannot leave partial state

Dependencies:
    - sync.remote: RemoteAttemptStore, NetworkError
    - ledger.ledger: AttemptLedger
    - core.utils.serialization: remote record mapping
"""

from __future__ import annotations

import logging
from concurrent.futures import Executor, Future
from datetime import datetime
from typing import Callable, List, Optional

from verb_trainer.core.models.attempts import Attempt, SyncResult, SyncStats
from verb_trainer.core.models.timestamps import utc_now
from verb_trainer.core.utils.serialization import attempt_from_remote, attempt_to_remote
from verb_trainer.ledger.ledger import AttemptLedger

from .remote import NetworkError, RemoteAttemptStore

logger = logging.getLogger(__name__)


class SyncReconciler:
    """
    Explicit, idempotent reconciliation between ledger and remote store.

    Example:
        >>> reconciler = SyncReconciler(ledger, InMemoryRemoteStore())
        >>> reconciler.upload()
        SyncResult(success=True, message='No unsynced results to upload', ...)
    """

    def __init__(
        self,
        ledger: AttemptLedger,
        remote: RemoteAttemptStore,
        *,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.ledger = ledger
        self.remote = remote
        self._clock = clock

    def upload(self) -> SyncResult:
        """
        Push every unsynced attempt to the remote store.

        Returns:
            SyncResult; on failure success=False and failed_count is the
            number of attempts that remain unsynced
        """
        pending = self.ledger.unsynced()
        if not pending:
            logger.info("No unsynced results to upload")
            return SyncResult(
                success=True,
                message="No unsynced results to upload",
                synced_count=0,
                failed_count=0,
                timestamp=self._clock(),
            )

        now = self._clock()
        logger.info(f"Uploading {len(pending)} results")
        try:
            self.remote.upsert_attempts([attempt_to_remote(a, now) for a in pending])
        except NetworkError as e:
            logger.error(f"Upload failed: {e}")
            return SyncResult(
                success=False,
                message=str(e) or "Failed to upload results to server",
                synced_count=0,
                failed_count=len(pending),
                timestamp=self._clock(),
            )

        self.ledger.mark_synced([a.id for a in pending], now)
        self.ledger.set_last_sync_time(now)
        logger.info(f"Successfully uploaded {len(pending)} results")
        return SyncResult(
            success=True,
            message=f"Successfully uploaded {len(pending)} result(s)",
            synced_count=len(pending),
            failed_count=0,
            timestamp=now,
        )

    def download(self, user_id: Optional[str] = None) -> List[Attempt]:
        """
        Merge remote attempts into the ledger.

        Args:
            user_id: Owner to fetch; None fetches anonymous attempts

        Returns:
            The full local attempt list after merging (unchanged on failure)
        """
        try:
            records = self.remote.fetch_attempts(user_id)
        except NetworkError as e:
            logger.error(f"Download failed, keeping local results: {e}")
            return self.ledger.all()

        incoming = []
        for record in records:
            try:
                incoming.append(attempt_from_remote(record))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed remote attempt: {e}")

        added = self.ledger.append_many(incoming)
        self.ledger.set_last_sync_time(self._clock())
        logger.info(
            f"Downloaded {len(records)} results, added {len(added)} new to the ledger"
        )
        return self.ledger.all()

    def stats(self) -> SyncStats:
        attempts = self.ledger.all()
        synced = sum(1 for a in attempts if a.synced)
        return SyncStats(
            total=len(attempts),
            synced=synced,
            unsynced=len(attempts) - synced,
            last_sync_time=self.ledger.last_sync_time(),
        )

    def clear_synced(self) -> int:
        return self.ledger.clear_synced()

    # ─────────────────────────────────────────────────────────────────────────
    # Background Execution
    # ─────────────────────────────────────────────────────────────────────────

    def submit_upload(self, executor: Executor) -> Future:
        """Run upload() on an executor; the Future yields the SyncResult."""
        return executor.submit(self.upload)

    def submit_download(self, executor: Executor, user_id: Optional[str] = None) -> Future:
        return executor.submit(self.download, user_id)
