"""Versioned schema upgrades for the zoo database.

Applied versions are recorded in the schema_version table. ensure_schema()
brings a database from whatever version it holds up to CURRENT_VERSION.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING

import aiosqlite

from zoo.logging_config import log_storage

from .errors import StorageError
from .schema import VERSION_TABLE_SQL, Migration, pending_migrations

if TYPE_CHECKING:
    from .database import Database

logger = logging.getLogger(__name__)


async def schema_version(db: Database) -> int:
    """Highest applied migration version (0 for a fresh database)."""
    has_table = await db.fetch_value(
        "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = 'schema_version'"
    )
    if not has_table:
        return 0
    version = await db.fetch_value("SELECT MAX(version) FROM schema_version")
    return int(version or 0)


async def ensure_schema(db: Database) -> int:
    """Apply every pending migration.

    Args:
        db: Connected database instance

    Returns:
        Schema version after upgrading

    Raises:
        StorageError: If a migration fails; earlier steps stay applied
    """
    current = await schema_version(db)
    pending = pending_migrations(current)
    if not pending:
        logger.debug(f"Schema is up to date (v{current})")
        return current

    for migration in pending:
        operation = f"migrate v{migration.version}"
        try:
            await _apply(db, migration)
        except aiosqlite.Error as e:
            log_storage(logger, operation, db.path, success=False, details=str(e))
            raise StorageError(f"Failed to apply migration v{migration.version}: {e}", cause=e) from e
        log_storage(logger, operation, db.path, details=migration.description)

    return pending[-1].version


async def reset_schema(db: Database) -> int:
    """Drop every table and rebuild the schema. Destroys all data."""
    logger.warning(f"Resetting database schema at {db.path}")
    await db.executescript(
        """
        DROP TABLE IF EXISTS animals;
        DROP TABLE IF EXISTS enclosures;
        DROP TABLE IF EXISTS schema_version;
        """
    )
    return await ensure_schema(db)


async def _apply(db: Database, migration: Migration) -> None:
    # executescript commits first, so the script and its version row are two steps
    await db.executescript(VERSION_TABLE_SQL + migration.sql)
    await db.execute(
        "INSERT INTO schema_version (version, description, applied_at) VALUES (?, ?, ?)",
        (migration.version, migration.description, datetime.now(timezone.utc).isoformat()),
    )
    await db.commit()
