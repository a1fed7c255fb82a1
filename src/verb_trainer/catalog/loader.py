"""
Module: catalog.loader

Purpose:
    Fetch verb records from a source and load them into a VerbCatalog,
    falling back to a local JSON file when the primary source fails or
    returns nothing.

Key Functions:
    - load_catalog(): Primary -> fallback -> CatalogUnavailableError
    - load_catalog_async(): Same, on an executor, returning a Future

Key Classes:
    - CatalogSource: Protocol with fetch_verbs()
    - RestCatalogSource: PostgREST `verbs` table via requests
    - JsonFileCatalogSource: Local JSON file
    - LoaderError / CatalogSourceError / CatalogUnavailableError

Dependencies:
    - requests: HTTP access to the remote catalog
    - core.utils.serialization: validation + Verb construction

Used By:
    - config.Settings.create_catalog_source()
    - session / orchestration layer at start-up
"""

from __future__ import annotations

import logging
from concurrent.futures import Executor, Future
from pathlib import Path
from typing import List, Optional, Protocol

import requests

from verb_trainer.core.models.verbs import Verb
from verb_trainer.core.schemas.validator import ValidationError
from verb_trainer.core.utils.rest import postgrest_headers, table_url
from verb_trainer.core.utils.serialization import deserialize_verbs, load_verbs_json

from .catalog import VerbCatalog

logger = logging.getLogger(__name__)

VERBS_TABLE = "verbs"


class LoaderError(Exception):
    """Error loading verbs into the catalog."""
    pass


class CatalogSourceError(LoaderError):
    """A single catalog source could not deliver verbs."""
    pass


class CatalogUnavailableError(LoaderError):
    """Neither the primary nor the fallback source yielded any verbs."""
    pass


class CatalogSource(Protocol):
    """Anything that can produce the full verb list."""

    def fetch_verbs(self) -> List[Verb]:
        ...


class RestCatalogSource:
    """
    Reads the `verbs` table from a PostgREST endpoint, ordered by infinitive.

    Example:
        >>> source = RestCatalogSource("https://db.example/rest/v1", api_key="...")
        >>> verbs = source.fetch_verbs()
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        *,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url
        self.api_key = api_key
        self.timeout = timeout
        self._session = session or requests.Session()

    def fetch_verbs(self) -> List[Verb]:
        """
        Raises:
            CatalogSourceError: On network failure, non-2xx status,
                malformed JSON or invalid records
        """
        url = table_url(self.base_url, VERBS_TABLE)
        try:
            response = self._session.get(
                url,
                params={"select": "*", "order": "infinitive.asc"},
                headers=postgrest_headers(self.api_key),
                timeout=self.timeout,
            )
            response.raise_for_status()
            records = response.json()
        except (requests.RequestException, ValueError) as e:
            raise CatalogSourceError(f"Failed to fetch verbs from {url}: {e}") from e

        try:
            verbs = deserialize_verbs(records)
        except ValidationError as e:
            raise CatalogSourceError(f"Remote verbs rejected: {e}") from e

        logger.debug(f"Fetched {len(verbs)} verbs from {url}")
        return verbs

    def __repr__(self) -> str:
        return f"RestCatalogSource({self.base_url!r})"


class JsonFileCatalogSource:
    """Reads verbs from a local JSON array file."""

    def __init__(self, path: Path, *, strict: bool = False) -> None:
        self.path = Path(path)
        self.strict = strict

    def fetch_verbs(self) -> List[Verb]:
        try:
            return load_verbs_json(self.path, strict=self.strict)
        except (FileNotFoundError, ValidationError) as e:
            raise CatalogSourceError(f"Failed to read verbs from {self.path}: {e}") from e

    def __repr__(self) -> str:
        return f"JsonFileCatalogSource({str(self.path)!r})"


def _try_source(source: CatalogSource, role: str) -> Optional[List[Verb]]:
    """Fetch from one source; None if it failed or was empty."""
    try:
        verbs = source.fetch_verbs()
    except LoaderError as e:
        logger.warning(f"{role.capitalize()} catalog source {source!r} failed: {e}")
        return None
    if not verbs:
        logger.warning(f"{role.capitalize()} catalog source {source!r} returned no verbs")
        return None
    return verbs


def load_catalog(
    catalog: VerbCatalog,
    primary: CatalogSource,
    fallback: Optional[CatalogSource] = None,
) -> int:
    """
    Load the catalog from the primary source, else the fallback.

    Process:
    1. Fetch from primary; a failure or an empty result falls through
    2. Fetch from fallback (if given)
    3. Load the first non-empty result into the catalog

    On any failure, waiters on catalog.ready_future receive the same error.

    Args:
        catalog: Catalog to (re)load
        primary: Preferred source (usually remote)
        fallback: Local source used when the primary fails

    Returns:
        Number of verbs loaded

    Raises:
        CatalogUnavailableError: If no source yields verbs
        ValidationError: If the fetched verbs cannot be indexed
        Exception: Anything else a source raises outside LoaderError
    """
    try:
        verbs = _try_source(primary, "primary")
        if verbs is None and fallback is not None:
            verbs = _try_source(fallback, "fallback")
            if verbs is not None:
                logger.info(f"Using fallback catalog ({len(verbs)} verbs)")

        if verbs is None:
            raise CatalogUnavailableError("No catalog source yielded any verbs")

        catalog.load(verbs)
    except Exception as e:
        logger.error(f"Catalog load failed: {e}")
        catalog.fail_load(e)
        raise
    return len(verbs)


def load_catalog_async(
    catalog: VerbCatalog,
    primary: CatalogSource,
    fallback: Optional[CatalogSource],
    executor: Executor,
) -> Future:
    """Run load_catalog() on an executor; the Future yields the verb count."""
    return executor.submit(load_catalog, catalog, primary, fallback)
