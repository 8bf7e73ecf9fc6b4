"""SQLite connection wrapper for the zoo.

One aiosqlite connection per Database. Rows come back as aiosqlite.Row, so
columns can be read by name. Schema versioning lives in migrations.py.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any, AsyncIterator

import aiosqlite

from zoo.logging_config import log_storage

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)

Row = aiosqlite.Row

MEMORY_PATH = Path(":memory:")


class Database:
    """Async SQLite connection.

    Usage:
        async with Database(Path("zoo_data/zoo.db")) as db:
            count = await db.fetch_value("SELECT COUNT(*) FROM animals")
    """

    def __init__(self, path: Path = MEMORY_PATH):
        """
        Args:
            path: Database file, or MEMORY_PATH for a private in-memory database
        """
        self.path = path
        self._conn: aiosqlite.Connection | None = None
        self._in_transaction = False

    @property
    def is_memory(self) -> bool:
        return self.path == MEMORY_PATH

    @property
    def in_transaction(self) -> bool:
        return self._in_transaction

    @property
    def connection(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self._conn

    # --- Lifecycle ---

    async def connect(self) -> None:
        """Open the connection if it is not open yet.

        File databases run in WAL mode. Foreign keys are always on, since
        deleting an enclosure row relies on ON DELETE SET NULL.
        """
        if self._conn is not None:
            return
        if not self.is_memory:
            self.path.parent.mkdir(parents=True, exist_ok=True)

        conn = await aiosqlite.connect(self.path)
        try:
            conn.row_factory = aiosqlite.Row
            if not self.is_memory:
                await conn.execute("PRAGMA journal_mode=WAL")
            await conn.execute("PRAGMA foreign_keys=ON")
        except aiosqlite.Error:
            await conn.close()
            raise
        self._conn = conn
        log_storage(logger, "connect", self.path)

    async def close(self) -> None:
        if self._conn is None:
            return
        await self._conn.close()
        self._conn = None
        log_storage(logger, "close", self.path)

    async def __aenter__(self) -> Database:
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    # --- Queries ---

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> aiosqlite.Cursor:
        return await self.connection.execute(sql, params)

    async def executescript(self, sql: str) -> aiosqlite.Cursor:
        """Run several statements. SQLite commits any open transaction first."""
        return await self.connection.executescript(sql)

    async def fetch_one(self, sql: str, params: Sequence[Any] = ()) -> Row | None:
        cursor = await self.execute(sql, params)
        return await cursor.fetchone()

    async def fetch_all(self, sql: str, params: Sequence[Any] = ()) -> list[Row]:
        cursor = await self.execute(sql, params)
        return list(await cursor.fetchall())

    async def fetch_value(self, sql: str, params: Sequence[Any] = ()) -> Any:
        """First column of the first row, or None when nothing matches."""
        row = await self.fetch_one(sql, params)
        return None if row is None else row[0]

    # --- Transactions ---

    async def commit(self) -> None:
        """Commit pending writes; deferred to the block inside transaction()."""
        if not self._in_transaction:
            await self.connection.commit()

    async def rollback(self) -> None:
        await self.connection.rollback()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """Run the block as one unit: commit on success, roll back on error.

        Example:
            async with db.transaction():
                await db.execute("DELETE FROM animals")
                await db.execute("DELETE FROM enclosures")

        Raises:
            RuntimeError: If a transaction block is already open
        """
        if self._in_transaction:
            raise RuntimeError("Nested transactions are not supported")

        await self.execute("BEGIN")
        self._in_transaction = True
        try:
            yield
        except BaseException:
            self._in_transaction = False
            await self.execute("ROLLBACK")
            raise
        self._in_transaction = False
        await self.execute("COMMIT")
