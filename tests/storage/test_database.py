"""Tests for Database and schema migrations."""

from pathlib import Path

import pytest

from zoo.storage import Database, StorageError
from zoo.storage.database import MEMORY_PATH
from zoo.storage.migrations import ensure_schema, reset_schema, schema_version
from zoo.storage.schema import CURRENT_VERSION, MIGRATIONS, Migration, pending_migrations


async def table_names(db: Database) -> set[str]:
    rows = await db.fetch_all("SELECT name FROM sqlite_master WHERE type = 'table'")
    return {row["name"] for row in rows}


class TestDatabaseConnection:
    async def test_connect_and_close(self):
        db = Database()
        await db.connect()
        assert db.is_memory
        await db.close()

    async def test_not_connected_raises(self):
        db = Database(MEMORY_PATH)
        with pytest.raises(RuntimeError, match="not connected"):
            db.connection

    async def test_context_manager_creates_parent_dirs(self, temp_data_dir: Path):
        path = temp_data_dir / "nested" / "zoo.db"
        async with Database(path) as db:
            assert not db.is_memory
            await db.execute("CREATE TABLE t (x INTEGER)")
            await db.commit()
        assert path.exists()

    async def test_foreign_keys_enabled(self, db):
        assert await db.fetch_value("PRAGMA foreign_keys") == 1

    async def test_fetch_value_without_rows(self, db):
        assert await db.fetch_value("SELECT 1 WHERE 0") is None


class TestTransactions:
    async def test_commit_on_success(self, db):
        await db.execute("CREATE TABLE t (x INTEGER)")
        await db.commit()

        async with db.transaction():
            await db.execute("INSERT INTO t VALUES (1)")
            await db.execute("INSERT INTO t VALUES (2)")

        assert await db.fetch_value("SELECT COUNT(*) FROM t") == 2

    async def test_rollback_on_error(self, db):
        await db.execute("CREATE TABLE t (x INTEGER)")
        await db.commit()

        with pytest.raises(ValueError):
            async with db.transaction():
                await db.execute("INSERT INTO t VALUES (1)")
                raise ValueError("boom")

        assert await db.fetch_value("SELECT COUNT(*) FROM t") == 0
        assert not db.in_transaction

    async def test_nested_transaction_rejected(self, db):
        async with db.transaction():
            with pytest.raises(RuntimeError, match="Nested"):
                async with db.transaction():
                    pass


class TestMigrations:
    async def test_fresh_database_is_version_zero(self, db):
        assert await schema_version(db) == 0

    async def test_ensure_schema_creates_tables(self, db):
        version = await ensure_schema(db)

        assert version == CURRENT_VERSION
        assert {"animals", "enclosures", "schema_version"} <= await table_names(db)

    async def test_applied_versions_are_recorded(self, db_with_schema):
        rows = await db_with_schema.fetch_all("SELECT version, description FROM schema_version")
        assert [(row["version"], row["description"]) for row in rows] == [
            (m.version, m.description) for m in MIGRATIONS
        ]

    async def test_ensure_schema_is_idempotent(self, db):
        await ensure_schema(db)
        assert await ensure_schema(db) == CURRENT_VERSION
        assert await db.fetch_value("SELECT COUNT(*) FROM schema_version") == len(MIGRATIONS)

    async def test_reset_schema_drops_data(self, db_with_schema):
        await db_with_schema.execute("INSERT INTO enclosures (name, capacity) VALUES ('A', 3)")
        await db_with_schema.commit()

        assert await reset_schema(db_with_schema) == CURRENT_VERSION

        assert await db_with_schema.fetch_value("SELECT COUNT(*) FROM enclosures") == 0

    async def test_failed_migration_raises_storage_error(self, db, monkeypatch):
        broken = (Migration(1, "broken", "INSERT INTO missing_table VALUES (1);"),)
        monkeypatch.setattr("zoo.storage.migrations.pending_migrations", lambda current: list(broken))

        with pytest.raises(StorageError, match="migration v1"):
            await ensure_schema(db)

    def test_pending_migrations(self):
        assert [m.version for m in pending_migrations(0)] == list(range(1, CURRENT_VERSION + 1))
        assert pending_migrations(CURRENT_VERSION) == []
