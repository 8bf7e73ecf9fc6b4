"""Storage layer for the zoo.

Provides persistence via SQLite (animal catalog and enclosures) and the
narrative journal (JSON or XML files).

Usage:
    storage = Storage(Path("zoo_data"))
    await storage.connect()
    try:
        enclosure = await storage.animals.add_enclosure("A", 5)
        await storage.animals.add_animal(Cat(name="Whiskers", age=3))
    finally:
        await storage.close()
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from .database import MEMORY_PATH, Database
from .errors import JournalError, StorageError
from .journal import Journal, JournalEntry, JsonJournal, XmlJournal, create_journal
from .migrations import ensure_schema
from .repositories import AnimalRepository, EnclosureRecord

logger = logging.getLogger(__name__)

__all__ = [
    "Storage",
    "Database",
    "AnimalRepository",
    "EnclosureRecord",
    "StorageError",
    "JournalError",
    "Journal",
    "JournalEntry",
    "JsonJournal",
    "XmlJournal",
    "create_journal",
]


class Storage:
    """Unified storage facade for the zoo.

    Provides:
    - Database connection management
    - The animal repository (animals, enclosures, membership)

    Pass data_dir=None for an in-memory database.
    """

    def __init__(self, data_dir: Path | None, database_name: str = "zoo.db"):
        """Initialize storage.

        Args:
            data_dir: Base directory for the database file, or None for memory
            database_name: File name of the SQLite database
        """
        self.data_dir = data_dir
        path = MEMORY_PATH if data_dir is None else data_dir / database_name
        self.db = Database(path)

        self._animals: AnimalRepository | None = None

    @property
    def animals(self) -> AnimalRepository:
        """Get the animal repository.

        Raises:
            RuntimeError: If not connected
        """
        if self._animals is None:
            raise RuntimeError("Storage not connected. Call connect() first.")
        return self._animals

    async def connect(self) -> None:
        """Connect to the database, run migrations and build repositories.

        Raises:
            StorageError: If the database cannot be opened or migrated
        """
        if self.data_dir is not None:
            self.data_dir.mkdir(parents=True, exist_ok=True)

        try:
            await self.db.connect()
            version = await ensure_schema(self.db)
        except Exception as e:
            await self.db.close()
            raise StorageError(f"Failed to open database {self.db.path}: {e}", cause=e) from e
        logger.info(f"Database schema at version {version}")

        self._animals = AnimalRepository(self.db)
        logger.info(f"Storage connected: {self.db.path}")

    async def close(self) -> None:
        await self.db.close()
        self._animals = None
        logger.info("Storage closed")

    async def __aenter__(self) -> "Storage":
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    @property
    def is_connected(self) -> bool:
        return self._animals is not None
