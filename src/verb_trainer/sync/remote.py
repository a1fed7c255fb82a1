"""
Module: sync.remote

Purpose:
    Remote attempt store contract and its implementations.

Key Classes:
    - RemoteAttemptStore: Protocol (upsert_attempts / fetch_attempts)
    - RestAttemptStore: PostgREST `test_results` table via requests
    - InMemoryRemoteStore: In-process fake that counts writes
    - NetworkError: Any transport or HTTP failure

Contract:
    - upsert_attempts() is keyed by `client_generated_id`: re-sending
      the same attempt never creates a second remote row
    - fetch_attempts(None) returns rows whose user_id is null

Dependencies:
    - requests: HTTP transport
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Dict, List, Optional, Protocol, Sequence

import requests

from verb_trainer.core.utils.rest import postgrest_headers, table_url

logger = logging.getLogger(__name__)

ATTEMPTS_TABLE = "test_results"
CONFLICT_KEY = "client_generated_id"


class NetworkError(Exception):
    """The remote store could not be reached or rejected the request."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RemoteAttemptStore(Protocol):
    def upsert_attempts(self, records: Sequence[Dict[str, Any]]) -> None:
        ...

    def fetch_attempts(self, user_id: Optional[str] = None) -> List[Dict[str, Any]]:
        ...


class RestAttemptStore:
    """
    Attempt store backed by a PostgREST endpoint.

    Example:
        >>> remote = RestAttemptStore("https://db.example/rest/v1", api_key="...")
        >>> remote.upsert_attempts([record])
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        *,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url
        self.api_key = api_key
        self.timeout = timeout
        self._session = session or requests.Session()

    @property
    def url(self) -> str:
        return table_url(self.base_url, ATTEMPTS_TABLE)

    def upsert_attempts(self, records: Sequence[Dict[str, Any]]) -> None:
        """
        Insert or merge records by client_generated_id.

        Raises:
            NetworkError: On transport failure or a non-2xx response
        """
        headers = postgrest_headers(
            self.api_key, Prefer="resolution=merge-duplicates,return=minimal"
        )
        try:
            response = self._session.post(
                self.url,
                params={"on_conflict": CONFLICT_KEY},
                json=list(records),
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise NetworkError(f"Upload rejected by server: {e}", status_code=status) from e
        except requests.RequestException as e:
            raise NetworkError(f"Upload failed: {e}") from e
        logger.debug(f"Upserted {len(records)} attempts to {self.url}")

    def fetch_attempts(self, user_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Download attempts for a user (or the anonymous ones), newest first.

        Raises:
            NetworkError: On transport failure, non-2xx status or bad JSON
        """
        params = {
            "select": "*",
            "user_id": f"eq.{user_id}" if user_id else "is.null",
            "order": "test_date.desc",
        }
        try:
            response = self._session.get(
                self.url,
                params=params,
                headers=postgrest_headers(self.api_key),
                timeout=self.timeout,
            )
            response.raise_for_status()
            records = response.json()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise NetworkError(f"Download rejected by server: {e}", status_code=status) from e
        except (requests.RequestException, ValueError) as e:
            raise NetworkError(f"Download failed: {e}") from e

        if not isinstance(records, list):
            raise NetworkError("Download returned an unexpected payload")
        return records

    def __repr__(self) -> str:
        return f"RestAttemptStore({self.base_url!r})"


class InMemoryRemoteStore:
    """
    Remote store fake with the same upsert semantics.

    Attributes:
        rows: Stored records keyed by client_generated_id
        write_calls: Number of upsert_attempts() calls received
        fail_with: If set, every call raises this error
    """

    def __init__(self, rows: Optional[Sequence[Dict[str, Any]]] = None) -> None:
        self.rows: Dict[str, Dict[str, Any]] = {}
        for row in rows or ():
            self.rows[row[CONFLICT_KEY]] = copy.deepcopy(dict(row))
        self.write_calls = 0
        self.fetch_calls = 0
        self.fail_with: Optional[Exception] = None

    def upsert_attempts(self, records: Sequence[Dict[str, Any]]) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.write_calls += 1
        for record in records:
            key = record[CONFLICT_KEY]
            merged = dict(self.rows.get(key, {}))
            merged.update(copy.deepcopy(dict(record)))
            self.rows[key] = merged

    def fetch_attempts(self, user_id: Optional[str] = None) -> List[Dict[str, Any]]:
        if self.fail_with is not None:
            raise self.fail_with
        self.fetch_calls += 1
        matching = [copy.deepcopy(r) for r in self.rows.values() if r.get("user_id") == user_id]
        return sorted(matching, key=lambda r: r.get("test_date") or "", reverse=True)
