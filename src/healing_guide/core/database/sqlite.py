"""SQLite connection handling shared by the stores.

Every call opens a short-lived connection and runs in the default executor,
so the event loop never blocks on disk I/O.
"""

from __future__ import annotations

import asyncio
import sqlite3
from functools import partial
from pathlib import Path
from typing import Any, Callable, TypeVar

from loguru import logger

from ..exceptions import PersistenceError

T = TypeVar("T")

SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS symptom_catalog (
        slug TEXT PRIMARY KEY,
        content TEXT NOT NULL,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS symptom_cache (
        slug TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        data TEXT NOT NULL,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS search_cache (
        query TEXT PRIMARY KEY,
        results TEXT NOT NULL,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
)


class SQLiteDatabase:
    """Owns the database file and its schema."""

    def __init__(self, db_path: Path):
        """Initialize the database.

        Args:
            db_path: Path to the SQLite file; parent directories are created
        """
        self.db_path = Path(db_path)
        self._init_database()

    def _init_database(self) -> None:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.db_path)
        try:
            for statement in SCHEMA:
                conn.execute(statement)
            conn.commit()
        finally:
            conn.close()
        logger.debug(f"SQLite database ready at {self.db_path}")

    def _get_connection(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path)

    def _run_sync(self, func: Callable[[sqlite3.Connection], T]) -> T:
        conn = self._get_connection()
        try:
            result = func(conn)
            conn.commit()
            return result
        except sqlite3.Error as e:
            raise PersistenceError(f"SQLite operation failed on {self.db_path}: {e}") from e
        finally:
            conn.close()

    async def run(self, func: Callable[[sqlite3.Connection], T]) -> T:
        """Run `func(connection)` in the default executor and commit."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(self._run_sync, func))

    async def fetchone(self, sql: str, params: tuple[Any, ...] = ()) -> tuple | None:
        return await self.run(lambda conn: conn.execute(sql, params).fetchone())

    async def fetchall(self, sql: str, params: tuple[Any, ...] = ()) -> list[tuple]:
        return await self.run(lambda conn: conn.execute(sql, params).fetchall())

    async def execute(self, sql: str, params: tuple[Any, ...] = ()) -> int:
        """Execute a write statement; returns the affected row count."""
        return await self.run(lambda conn: conn.execute(sql, params).rowcount)
