"""SQLite schema for the zoo.

Two tables hold the catalog: enclosures (unique name, positive capacity) and
animals (kind tag plus the kind's extra attribute). An animal row points at
its enclosure by id; deleting the enclosure row detaches its animals.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Migration:
    """One schema upgrade step."""

    version: int
    description: str
    sql: str


VERSION_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY,
    description TEXT NOT NULL,
    applied_at TEXT NOT NULL
);
"""

CATALOG_SQL = """
CREATE TABLE IF NOT EXISTS enclosures (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL UNIQUE,
    capacity INTEGER NOT NULL CHECK (capacity > 0)
);

-- kind is the discriminator; extra_info holds favourite food, breed or colour
CREATE TABLE IF NOT EXISTS animals (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    age INTEGER NOT NULL,
    kind TEXT NOT NULL,
    extra_info TEXT,
    eating_speed REAL NOT NULL,
    enclosure_id INTEGER REFERENCES enclosures(id) ON DELETE SET NULL
);

CREATE INDEX IF NOT EXISTS idx_animals_enclosure ON animals(enclosure_id);
"""

# Append new steps here; versions must increase
MIGRATIONS: tuple[Migration, ...] = (
    Migration(1, "animal catalog and enclosures", CATALOG_SQL),
)

CURRENT_VERSION = MIGRATIONS[-1].version


def pending_migrations(current: int) -> list[Migration]:
    """Migrations newer than the given version, oldest first."""
    return [m for m in MIGRATIONS if m.version > current]
