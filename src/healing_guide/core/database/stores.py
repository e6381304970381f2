"""Catalog, document-cache and search-cache stores on SQLite."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from ...config.defaults import TOXIC_SHORT_DEFINITION
from ..exceptions import PersistenceError
from ..models import CacheEntry, CandidateResult, SymptomDocument
from ..normalizer import to_slug
from .sqlite import SQLiteDatabase


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def _decode_document(raw: str, table: str, key: str) -> SymptomDocument | None:
    try:
        return SymptomDocument.model_validate(json.loads(raw))
    except (json.JSONDecodeError, ValidationError) as e:
        logger.warning(f"Ignoring unreadable {table} row '{key}': {e}")
        return None


class CatalogStore:
    """Curated, authoritative documents. Read-only for the resolvers."""

    def __init__(self, database: SQLiteDatabase):
        self.database = database

    async def get(self, slug: str) -> SymptomDocument | None:
        row = await self.database.fetchone(
            "SELECT content FROM symptom_catalog WHERE slug = ?", (slug,)
        )
        if row is None:
            return None
        return _decode_document(row[0], "symptom_catalog", slug)

    async def count(self) -> int:
        row = await self.database.fetchone("SELECT COUNT(*) FROM symptom_catalog")
        return int(row[0]) if row else 0

    async def load_from_json(self, path: Path) -> int:
        """Import curated documents from a JSON file.

        Accepts either an object mapping slug to document, or a list of
        documents (optionally wrapped as `{"slug": ..., "content": {...}}`).
        Slugs missing from the file are derived from the document name.
        Returns the number of rows written.
        """
        with open(path, encoding="utf-8") as f:
            data = json.load(f)

        if isinstance(data, dict):
            items = [(slug, content) for slug, content in data.items()]
        elif isinstance(data, list):
            items = []
            for item in data:
                content = item.get("content", item) if isinstance(item, dict) else item
                slug = item.get("slug") if isinstance(item, dict) else None
                items.append((slug, content))
        else:
            raise ValueError(f"{path} must contain a JSON object or array")

        rows = []
        for slug, content in items:
            try:
                document = SymptomDocument.model_validate(content)
            except ValidationError as e:
                logger.warning(f"Skipping invalid catalog document: {e}")
                continue
            key = to_slug(slug or document.name)
            if not key:
                logger.warning("Skipping catalog document without slug or name")
                continue
            rows.append((key, json.dumps(document.to_payload(), ensure_ascii=False)))

        def _write(conn):
            conn.executemany(
                """
                INSERT OR REPLACE INTO symptom_catalog (slug, content, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                """,
                rows,
            )
            return len(rows)

        written = await self.database.run(_write)
        logger.info(f"Imported {written} catalog documents from {path}")
        return written


class SymptomCacheStore:
    """Generated documents, one row per slug, last writer wins."""

    def __init__(self, database: SQLiteDatabase, toxic_marker: str = TOXIC_SHORT_DEFINITION):
        self.database = database
        self.toxic_marker = toxic_marker

    async def get(self, slug: str) -> CacheEntry | None:
        row = await self.database.fetchone(
            "SELECT name, data, updated_at FROM symptom_cache WHERE slug = ?", (slug,)
        )
        if row is None:
            return None
        name, raw, updated_at = row
        document = _decode_document(raw, "symptom_cache", slug)
        if document is None:
            return None
        return CacheEntry(
            slug=slug, name=name, document=document, stored_at=_parse_timestamp(updated_at)
        )

    async def upsert(self, slug: str, name: str, document: SymptomDocument) -> None:
        payload = json.dumps(document.to_payload(), ensure_ascii=False)
        await self.database.execute(
            """
            INSERT INTO symptom_cache (slug, name, data)
            VALUES (?, ?, ?)
            ON CONFLICT(slug) DO UPDATE SET
                name = excluded.name,
                data = excluded.data,
                updated_at = CURRENT_TIMESTAMP
            """,
            (slug, name, payload),
        )
        logger.info(f"Cached healing guide for '{slug}'")

    def is_toxic(self, entry: CacheEntry) -> bool:
        return entry.document.short_definition == self.toxic_marker


class SearchCacheStore:
    """Generated candidate lists, insert-only, first writer wins."""

    def __init__(self, database: SQLiteDatabase):
        self.database = database

    async def get(self, search_key: str) -> list[CandidateResult] | None:
        row = await self.database.fetchone(
            "SELECT results FROM search_cache WHERE query = ?", (search_key,)
        )
        if row is None:
            return None
        try:
            data = json.loads(row[0])
            return [CandidateResult.model_validate(item) for item in data]
        except (json.JSONDecodeError, TypeError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable search_cache row '{search_key}': {e}")
            return None

    async def insert(self, search_key: str, results: list[CandidateResult]) -> None:
        if not results:
            raise PersistenceError("Refusing to cache an empty candidate list")
        payload = json.dumps([r.to_payload() for r in results], ensure_ascii=False)
        inserted = await self.database.execute(
            "INSERT OR IGNORE INTO search_cache (query, results) VALUES (?, ?)",
            (search_key, payload),
        )
        if inserted:
            logger.info(f"Cached search results for '{search_key}'")
        else:
            logger.debug(f"Search cache already holds '{search_key}'; keeping first write")
