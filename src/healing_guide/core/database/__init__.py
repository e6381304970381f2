"""SQLite persistence for the catalog, document cache and search cache."""

from .sqlite import SQLiteDatabase
from .stores import CatalogStore, SearchCacheStore, SymptomCacheStore

__all__ = [
    "SQLiteDatabase",
    "CatalogStore",
    "SymptomCacheStore",
    "SearchCacheStore",
]
