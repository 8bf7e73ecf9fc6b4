"""Tests for AnimalRepository."""

import sqlite3

import pytest

from zoo.core import Bird, Cat, Dog, Raccoon, UnknownAnimalKindError
from zoo.storage import StorageError


class TestAnimalCrud:
    async def test_add_assigns_id(self, repo):
        cat = Cat(name="Muri", age=3, favorite_food="cheese")

        animal_id = await repo.add_animal(cat)

        assert animal_id > 0
        assert cat.id == animal_id

    async def test_ids_are_unique(self, repo):
        first = await repo.add_animal(Cat(name="Ada", age=1))
        second = await repo.add_animal(Dog(name="Bea", age=2))
        assert first != second

    async def test_get_by_id_round_trips_every_field(self, repo):
        dog = Dog(name="Rex", age=5, breed="German Shepherd", eating_speed=0.8)
        await repo.add_animal(dog)

        loaded = await repo.get_animal_by_id(dog.id)

        assert isinstance(loaded, Dog)
        assert loaded is not dog
        assert (loaded.name, loaded.age, loaded.breed, loaded.eating_speed) == ("Rex", 5, "German Shepherd", 0.8)

    async def test_get_missing_returns_none(self, repo):
        assert await repo.get_animal_by_id(999) is None

    async def test_get_all_in_id_order(self, repo):
        for name in ("Ada", "Bea", "Cid"):
            await repo.add_animal(Bird(name=name, age=1))

        animals = await repo.get_all_animals()

        assert [a.name for a in animals] == ["Ada", "Bea", "Cid"]

    async def test_update(self, repo):
        cat = Cat(name="Muri", age=3)
        await repo.add_animal(cat)
        cat.age = 4

        await repo.update_animal(cat)

        assert (await repo.get_animal_by_id(cat.id)).age == 4

    async def test_update_unsaved_rejected(self, repo):
        with pytest.raises(ValueError):
            await repo.update_animal(Cat(name="Muri", age=3))

    async def test_update_missing_row_fails(self, repo):
        ghost = Cat(name="Ghost", age=3, id=404)
        with pytest.raises(StorageError, match="not found"):
            await repo.update_animal(ghost)

    async def test_remove(self, repo):
        cat = Cat(name="Muri", age=3)
        await repo.add_animal(cat)

        await repo.remove_animal(cat.id)

        assert await repo.get_animal_by_id(cat.id) is None

    async def test_next_animal_id(self, repo):
        assert await repo.get_next_animal_id() == 1
        cat = Cat(name="Muri", age=3)
        await repo.add_animal(cat)
        assert await repo.get_next_animal_id() == cat.id + 1

    async def test_unknown_kind_aborts_load(self, repo, db_with_schema):
        await repo.add_animal(Cat(name="Muri", age=3))
        await db_with_schema.execute(
            "INSERT INTO animals (name, age, kind, eating_speed) VALUES ('Smaug', 99, 'Dragon', 3.0)"
        )
        await db_with_schema.commit()

        with pytest.raises(UnknownAnimalKindError):
            await repo.get_all_animals()


class TestEnclosures:
    async def test_add_and_list(self, repo):
        record = await repo.add_enclosure("A", 5)

        assert record.id > 0
        assert await repo.get_all_enclosures() == [record]

    async def test_get_by_name(self, repo):
        record = await repo.add_enclosure("A", 5)
        assert await repo.get_enclosure_by_name("A") == record
        assert await repo.get_enclosure_by_name("Z") is None

    @pytest.mark.parametrize("name,capacity", [("", 3), ("   ", 3), ("A", 0), ("A", -2)])
    async def test_invalid_enclosure_rejected(self, repo, name, capacity):
        with pytest.raises(ValueError):
            await repo.add_enclosure(name, capacity)

    async def test_duplicate_name_rejected(self, repo):
        await repo.add_enclosure("A", 5)
        with pytest.raises(StorageError, match="already exists") as exc_info:
            await repo.add_enclosure("A", 3)
        assert isinstance(exc_info.value.cause, sqlite3.IntegrityError)

        await repo.clear_all()
        assert await repo.get_all_enclosures() == []

    async def test_remove_empty_enclosure(self, repo):
        record = await repo.add_enclosure("A", 5)
        await repo.remove_enclosure(record.id)
        assert await repo.get_all_enclosures() == []

    async def test_remove_occupied_enclosure_fails(self, repo):
        record = await repo.add_enclosure("A", 5)
        cat = Cat(name="Muri", age=3)
        await repo.add_animal(cat)
        await repo.assign_animal_to_enclosure(cat.id, record.id)

        with pytest.raises(StorageError, match="still assigned"):
            await repo.remove_enclosure(record.id)


class TestMembership:
    async def test_assign_and_list(self, repo):
        record = await repo.add_enclosure("A", 5)
        cat = Cat(name="Muri", age=3)
        dog = Dog(name="Rex", age=5)
        await repo.add_animal(cat)
        await repo.add_animal(dog)

        await repo.assign_animal_to_enclosure(cat.id, record.id)

        members = await repo.get_animals_by_enclosure(record.id)
        assert [m.name for m in members] == ["Muri"]
        assert members[0].enclosure == "A"

    async def test_add_with_back_reference(self, repo):
        record = await repo.add_enclosure("A", 5)
        raccoon = Raccoon(name="Riku", age=4, enclosure="A")

        await repo.add_animal(raccoon)

        assert [m.name for m in await repo.get_animals_by_enclosure(record.id)] == ["Riku"]

    async def test_add_with_unknown_enclosure_fails(self, repo):
        with pytest.raises(StorageError):
            await repo.add_animal(Cat(name="Muri", age=3, enclosure="Nowhere"))

    async def test_unassign(self, repo):
        record = await repo.add_enclosure("A", 5)
        cat = Cat(name="Muri", age=3)
        await repo.add_animal(cat)
        await repo.assign_animal_to_enclosure(cat.id, record.id)

        await repo.remove_animal_from_enclosure(cat.id)

        assert await repo.get_animals_by_enclosure(record.id) == []
        assert (await repo.get_animal_by_id(cat.id)).enclosure is None

    async def test_clear_all(self, repo):
        record = await repo.add_enclosure("A", 5)
        cat = Cat(name="Muri", age=3)
        await repo.add_animal(cat)
        await repo.assign_animal_to_enclosure(cat.id, record.id)

        await repo.clear_all()

        assert await repo.get_all_animals() == []
        assert await repo.get_all_enclosures() == []


class TestErrorWrapping:
    async def test_sqlite_failure_is_wrapped(self, repo, db_with_schema):
        await db_with_schema.executescript("DROP TABLE animals;")

        with pytest.raises(StorageError, match="Failed to get animals") as exc_info:
            await repo.get_all_animals()

        assert exc_info.value.cause is not None
        assert exc_info.value.__cause__ is exc_info.value.cause
