"""Animal repository for the zoo.

Handles persistence of the animal catalog, enclosure rows and the
animal-enclosure relationship. Every failure is surfaced as StorageError;
reads do not degrade to empty results.
"""

from __future__ import annotations

import aiosqlite
from pydantic import BaseModel, ConfigDict

from zoo.core.animals import Animal, animal_from_record
from zoo.core.types import AnimalId, EnclosureName

from ..errors import StorageError
from .base import BaseRepository


class EnclosureRecord(BaseModel):
    """Stored enclosure row."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: EnclosureName
    capacity: int


_ANIMAL_SELECT = """
    SELECT a.id, a.name, a.age, a.kind, a.extra_info, a.eating_speed,
           e.name AS enclosure_name
    FROM animals a
    LEFT JOIN enclosures e ON e.id = a.enclosure_id
"""


class AnimalRepository(BaseRepository):
    """Repository for animals and enclosures.

    Handles:
    - Animal CRUD (id assigned on insert)
    - Enclosure rows (unique names, removal only when empty)
    - Membership (animal.enclosure_id)
    """

    # --- Animal CRUD ---

    async def add_animal(self, animal: Animal) -> AnimalId:
        """Insert an animal and assign its id.

        Args:
            animal: Animal to store; its enclosure back-reference, if any,
                must name a stored enclosure

        Returns:
            The new id (also set on the animal)
        """
        with self.storage_errors("add animal"):
            enclosure_id = await self._enclosure_id_for(animal.enclosure)
            cursor = await self.db.execute(
                """
                INSERT INTO animals (name, age, kind, extra_info, eating_speed, enclosure_id)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    animal.name,
                    animal.age,
                    animal.kind.value,
                    animal.extra_info,
                    animal.eating_speed,
                    enclosure_id,
                ),
            )
            await self.db.commit()
            animal.id = AnimalId(cursor.lastrowid)
        return animal.id

    async def remove_animal(self, animal_id: int) -> None:
        with self.storage_errors("remove animal"):
            await self.db.execute("DELETE FROM animals WHERE id = ?", (animal_id,))
            await self.db.commit()

    async def update_animal(self, animal: Animal) -> None:
        """Update a stored animal.

        Raises:
            ValueError: If the animal has never been saved
            StorageError: If no row with the animal's id exists
        """
        if animal.id <= 0:
            raise ValueError("Animal must have a valid id")

        with self.storage_errors("update animal"):
            enclosure_id = await self._enclosure_id_for(animal.enclosure)
            cursor = await self.db.execute(
                """
                UPDATE animals
                SET name = ?, age = ?, kind = ?, extra_info = ?,
                    eating_speed = ?, enclosure_id = ?
                WHERE id = ?
                """,
                (
                    animal.name,
                    animal.age,
                    animal.kind.value,
                    animal.extra_info,
                    animal.eating_speed,
                    enclosure_id,
                    animal.id,
                ),
            )
            if cursor.rowcount == 0:
                await self.db.rollback()
                raise StorageError(f"Failed to update animal: animal with id {animal.id} not found")
            await self.db.commit()

    async def get_animal_by_id(self, animal_id: int) -> Animal | None:
        """Get an animal by id.

        Raises:
            UnknownAnimalKindError: If the stored kind is not recognised
        """
        with self.storage_errors("get animal"):
            row = await self.db.fetch_one(f"{_ANIMAL_SELECT} WHERE a.id = ?", (animal_id,))
        if row is None:
            return None
        return self._row_to_animal(row)

    async def get_all_animals(self) -> list[Animal]:
        """Get every animal in id order.

        Raises:
            UnknownAnimalKindError: If any stored kind is not recognised;
                the whole load is aborted
        """
        with self.storage_errors("get animals"):
            rows = await self.db.fetch_all(f"{_ANIMAL_SELECT} ORDER BY a.id")
        return [self._row_to_animal(row) for row in rows]

    # --- Enclosures ---

    async def add_enclosure(self, name: str, capacity: int) -> EnclosureRecord:
        """Insert an enclosure.

        Raises:
            ValueError: If name is blank or capacity is not positive
            StorageError: If the name is already taken
        """
        if not name or not name.strip():
            raise ValueError("Enclosure name cannot be empty")
        if capacity <= 0:
            raise ValueError("Capacity must be greater than 0")

        with self.storage_errors("add enclosure"):
            try:
                cursor = await self.db.execute(
                    "INSERT INTO enclosures (name, capacity) VALUES (?, ?)",
                    (name, capacity),
                )
            except aiosqlite.IntegrityError as e:
                await self.db.rollback()
                raise StorageError(
                    f"Failed to add enclosure: enclosure with name '{name}' already exists", cause=e
                ) from e
            await self.db.commit()
        return EnclosureRecord(id=cursor.lastrowid, name=EnclosureName(name), capacity=capacity)

    async def remove_enclosure(self, enclosure_id: int) -> None:
        """Delete an enclosure row.

        Raises:
            StorageError: If animals are still assigned to it
        """
        with self.storage_errors("remove enclosure"):
            count = await self.db.fetch_value(
                "SELECT COUNT(*) FROM animals WHERE enclosure_id = ?", (enclosure_id,)
            )
            if count:
                raise StorageError(
                    f"Failed to remove enclosure: {count} animal(s) still assigned to it. "
                    "Remove animals first."
                )
            await self.db.execute("DELETE FROM enclosures WHERE id = ?", (enclosure_id,))
            await self.db.commit()

    async def get_all_enclosures(self) -> list[EnclosureRecord]:
        with self.storage_errors("get enclosures"):
            rows = await self.db.fetch_all("SELECT id, name, capacity FROM enclosures ORDER BY id")
        return [
            EnclosureRecord(id=row["id"], name=EnclosureName(row["name"]), capacity=row["capacity"])
            for row in rows
        ]

    async def get_enclosure_by_name(self, name: str) -> EnclosureRecord | None:
        with self.storage_errors("get enclosure"):
            row = await self.db.fetch_one(
                "SELECT id, name, capacity FROM enclosures WHERE name = ?", (name,)
            )
        if row is None:
            return None
        return EnclosureRecord(id=row["id"], name=EnclosureName(row["name"]), capacity=row["capacity"])

    # --- Membership ---

    async def assign_animal_to_enclosure(self, animal_id: int, enclosure_id: int) -> None:
        with self.storage_errors("assign animal to enclosure"):
            await self.db.execute(
                "UPDATE animals SET enclosure_id = ? WHERE id = ?",
                (enclosure_id, animal_id),
            )
            await self.db.commit()

    async def remove_animal_from_enclosure(self, animal_id: int) -> None:
        with self.storage_errors("remove animal from enclosure"):
            await self.db.execute(
                "UPDATE animals SET enclosure_id = NULL WHERE id = ?", (animal_id,)
            )
            await self.db.commit()

    async def get_animals_by_enclosure(self, enclosure_id: int) -> list[Animal]:
        with self.storage_errors("get animals by enclosure"):
            rows = await self.db.fetch_all(
                f"{_ANIMAL_SELECT} WHERE a.enclosure_id = ? ORDER BY a.id", (enclosure_id,)
            )
        return [self._row_to_animal(row) for row in rows]

    # --- Utility ---

    async def clear_all(self) -> None:
        """Delete every animal and enclosure (animals first)."""
        with self.storage_errors("clear database"):
            async with self.db.transaction():
                await self.db.execute("DELETE FROM animals")
                await self.db.execute("DELETE FROM enclosures")

    async def get_next_animal_id(self) -> int:
        with self.storage_errors("get next animal id"):
            value = await self.db.fetch_value("SELECT COALESCE(MAX(id), 0) + 1 FROM animals")
        return int(value)

    # --- Helpers ---

    async def _enclosure_id_or_none(self, name: str) -> int | None:
        return await self.db.fetch_value("SELECT id FROM enclosures WHERE name = ?", (name,))

    async def _enclosure_id_for(self, name: str | None) -> int | None:
        """Resolve an enclosure back-reference to its row id."""
        if not name:
            return None
        enclosure_id = await self._enclosure_id_or_none(name)
        if enclosure_id is None:
            raise StorageError(f"Enclosure '{name}' is not stored")
        return enclosure_id

    def _row_to_animal(self, row) -> Animal:
        return animal_from_record(
            row["kind"],
            name=row["name"],
            age=row["age"],
            eating_speed=row["eating_speed"],
            extra_info=row["extra_info"],
            id=row["id"],
            enclosure=row["enclosure_name"],
        )
