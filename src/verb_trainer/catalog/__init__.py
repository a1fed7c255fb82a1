"""
Catalog Package

In-memory verb catalog and the loaders that populate it.
"""

from .catalog import VerbCatalog
from .filters import VerbFilter
from .loader import (
    CatalogSource,
    RestCatalogSource,
    JsonFileCatalogSource,
    load_catalog,
    load_catalog_async,
    LoaderError,
    CatalogSourceError,
    CatalogUnavailableError,
)

__all__ = [
    "VerbCatalog",
    "VerbFilter",
    "CatalogSource",
    "RestCatalogSource",
    "JsonFileCatalogSource",
    "load_catalog",
    "load_catalog_async",
    "LoaderError",
    "CatalogSourceError",
    "CatalogUnavailableError",
]
