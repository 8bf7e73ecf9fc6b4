"""Fixtures for storage layer tests."""

from pathlib import Path
from typing import AsyncGenerator

import pytest_asyncio

from zoo.storage import AnimalRepository, Database, Storage
from zoo.storage.migrations import ensure_schema


@pytest_asyncio.fixture
async def db() -> AsyncGenerator[Database, None]:
    """Create an in-memory database for testing."""
    database = Database()
    await database.connect()
    yield database
    await database.close()


@pytest_asyncio.fixture
async def db_with_schema(db: Database) -> Database:
    """Create a database with schema applied."""
    await ensure_schema(db)
    return db


@pytest_asyncio.fixture
async def repo(db_with_schema: Database) -> AnimalRepository:
    return AnimalRepository(db_with_schema)


@pytest_asyncio.fixture
async def storage(temp_data_dir: Path) -> AsyncGenerator[Storage, None]:
    """Create a fully initialized file-backed Storage instance."""
    store = Storage(temp_data_dir)
    await store.connect()
    yield store
    await store.close()
