"""ZooEngine - Main orchestrator for a zoo session.

Wires together the event bus, narrator, feeding coordinator, day/night cycle,
journal and (optionally) SQLite storage, and exposes the operations a keeper
performs on the zoo.

All methods must be called on the engine's event loop. Use ZooRunner to
drive an engine from another thread.
"""

from __future__ import annotations

import asyncio
import logging
import random
from pathlib import Path
from typing import TYPE_CHECKING, Callable, cast

from zoo.config import ZooSettings
from zoo.core import (
    Animal,
    AnimalNotFoundError,
    Capability,
    DuplicateEnclosureError,
    Enclosure,
    EnclosureName,
    EnclosureNotEmptyError,
    EnclosureNotFoundError,
    ErraticActor,
    EventBus,
    Flyer,
    FoodKind,
    Messages,
    DEFAULT_MESSAGES,
)
from zoo.services import (
    DEFAULT_ANIMALS,
    DEFAULT_ENCLOSURES,
    DayNightCycle,
    FeedingCoordinator,
    Narrator,
    ZooStatistics,
    build_animal,
    compute_statistics,
)
from zoo.services.feeding import Sleep
from zoo.storage import create_journal

if TYPE_CHECKING:
    from zoo.storage import Journal, JournalEntry, Storage

logger = logging.getLogger(__name__)


class ZooEngine:
    """Main orchestrator for a zoo session.

    Wires together:
    - EventBus (enclosure, feeding and cycle events)
    - Narrator (subscribed first, so its lines lead)
    - FeedingCoordinator and DayNightCycle
    - Journal (narrative lines) and optional Storage (catalog persistence)

    In-memory state is authoritative for the session. When storage is
    attached, every mutation is written to it first and storage errors
    propagate without touching the in-memory state.
    """

    def __init__(
        self,
        settings: ZooSettings | None = None,
        storage: "Storage | None" = None,
        rng: random.Random | None = None,
        messages: Messages = DEFAULT_MESSAGES,
        journal: "Journal | None" = None,
        sleep: Sleep = asyncio.sleep,
    ):
        """Initialize ZooEngine.

        Args:
            settings: Session settings (default: ZooSettings())
            storage: Connected Storage instance, or None to run in memory
            rng: Random source for night events and erratic actions
            messages: Message catalog for narrative lines
            journal: Journal to write to (default: per settings.journal_format)
            sleep: Awaitable delay used by feeding and the cycle
        """
        self.settings = settings or ZooSettings()
        self.messages = messages
        self._storage = storage
        self._rng = rng or random.Random()

        self.bus = EventBus()
        self.journal = journal or create_journal(self.settings.journal_format)

        self._enclosures: dict[EnclosureName, Enclosure] = {}
        self._animals: list[Animal] = []

        # Subscription order matters: narrator lines precede feeding lines
        self.narrator = Narrator(self.journal, self.get_enclosure, messages)
        self.narrator.attach(self.bus)
        self.feeding = FeedingCoordinator(
            self.bus,
            self.journal,
            self.get_enclosure,
            messages=messages,
            time_scale=self.settings.feeding_time_scale,
            sleep=sleep,
        )
        self.feeding.attach()
        self.cycle = DayNightCycle(
            self.bus,
            interval_seconds=self.settings.day_night_interval_seconds,
            messages=messages,
            rng=self._rng,
            sleep=sleep,
        )

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def storage(self) -> "Storage | None":
        return self._storage

    @property
    def enclosures(self) -> tuple[Enclosure, ...]:
        return tuple(self._enclosures.values())

    @property
    def animals(self) -> tuple[Animal, ...]:
        return tuple(self._animals)

    def get_enclosure(self, name: str) -> Enclosure | None:
        return self._enclosures.get(EnclosureName(name))

    def get_animal(self, animal_id: int) -> Animal | None:
        for animal in self._animals:
            if animal.id == animal_id:
                return animal
        return None

    def find_animal(self, name: str) -> Animal | None:
        """First catalog animal with the given name."""
        for animal in self._animals:
            if animal.name == name:
                return animal
        return None

    def statistics(self) -> ZooStatistics:
        return compute_statistics(self._animals)

    def on_line(self, callback: Callable[["JournalEntry"], None]) -> None:
        """Register a callback for every new journal line."""
        self.journal.add_listener(callback)

    # =========================================================================
    # Enclosures
    # =========================================================================

    async def create_enclosure(self, name: str, capacity: int = Enclosure.DEFAULT_CAPACITY) -> Enclosure:
        """Create an enclosure (and its storage row).

        Raises:
            ValueError: If name is blank or capacity is not positive
            DuplicateEnclosureError: If the name is already in use
            StorageError: If persisting fails
        """
        if not name or not name.strip():
            raise ValueError("Enclosure name cannot be empty")
        if capacity <= 0:
            raise ValueError("Capacity must be greater than 0")
        if EnclosureName(name) in self._enclosures:
            raise DuplicateEnclosureError(name)

        enclosure_id = 0
        if self._storage is not None:
            record = await self._storage.animals.add_enclosure(name, capacity)
            enclosure_id = record.id

        enclosure = Enclosure(name, capacity, bus=self.bus, id=enclosure_id)
        self._enclosures[enclosure.name] = enclosure
        logger.info(f"Created enclosure {enclosure}")
        return enclosure

    async def remove_enclosure(self, name: str) -> None:
        """Remove an empty enclosure.

        Raises:
            EnclosureNotFoundError: If no such enclosure exists
            EnclosureNotEmptyError: If animals still live in it
        """
        enclosure = self._require_enclosure(name)
        if enclosure.count:
            raise EnclosureNotEmptyError(enclosure.name, enclosure.count)

        if self._storage is not None:
            await self._storage.animals.remove_enclosure(enclosure.id)

        self.feeding.cancel(enclosure.name)
        del self._enclosures[enclosure.name]
        logger.info(f"Removed enclosure {enclosure.name}")

    # =========================================================================
    # Animals
    # =========================================================================

    async def register_animal(self, animal: Animal, enclosure: str | None = None) -> Animal:
        """Add an animal to the catalog, optionally placing it right away.

        Returns:
            The same animal, with its id assigned when storage is attached
        """
        if any(member is animal for member in self._animals):
            raise ValueError(f"{animal.name} is already registered")

        animal.enclosure = None
        if self._storage is not None:
            await self._storage.animals.add_animal(animal)

        self._animals.append(animal)
        self.journal.log(self.messages.animal_added.format(animal=animal))
        logger.info(f"Registered {animal} id={animal.id}")

        if enclosure is not None:
            await self.place_animal(animal, enclosure)
        return animal

    async def remove_animal(self, animal: Animal) -> None:
        """Remove an animal from the catalog, leaving its enclosure first.

        Raises:
            AnimalNotFoundError: If the animal is not in the catalog
        """
        index = self._catalog_index(animal)

        if self._storage is not None and animal.id > 0:
            await self._storage.animals.remove_animal(animal.id)

        current = self._current_enclosure(animal)
        if current is not None:
            current.remove_animal(animal)
        del self._animals[index]
        self.journal.log(self.messages.animal_removed.format(animal=animal.name))
        logger.info(f"Removed {animal}")

    async def place_animal(self, animal: Animal, enclosure: str) -> bool:
        """Move an animal into an enclosure, leaving its current one.

        Returns:
            False without any change if the target enclosure is full

        Raises:
            AnimalNotFoundError: If the animal is not in the catalog
            EnclosureNotFoundError: If the target does not exist
        """
        self._catalog_index(animal)
        target = self._require_enclosure(enclosure)
        if target.contains(animal):
            return True
        if target.is_full:
            self.journal.log(
                self.messages.enclosure_full.format(enclosure=target.name, animal=animal.name)
            )
            return False

        if self._storage is not None and animal.id > 0:
            await self._storage.animals.assign_animal_to_enclosure(animal.id, target.id)

        current = self._current_enclosure(animal)
        if current is not None:
            current.remove_animal(animal)
        return target.add_animal(animal)

    async def unplace_animal(self, animal: Animal) -> bool:
        """Take an animal out of its enclosure, keeping it in the catalog.

        Returns:
            False if the animal was not in any enclosure
        """
        self._catalog_index(animal)
        current = self._current_enclosure(animal)
        if current is None:
            return False

        if self._storage is not None and animal.id > 0:
            await self._storage.animals.remove_animal_from_enclosure(animal.id)
        return current.remove_animal(animal)

    # =========================================================================
    # Actions
    # =========================================================================

    def drop_food(self, enclosure: str, food: str | None = None) -> None:
        """Drop food into an enclosure; feeding runs in the background.

        Raises:
            EnclosureNotFoundError: If the enclosure does not exist
        """
        target = self._require_enclosure(enclosure)
        target.drop_food(FoodKind(food or self.settings.default_food))

    def drop_food_everywhere(self, food: str | None = None) -> None:
        for enclosure in self.enclosures:
            enclosure.drop_food(FoodKind(food or self.settings.default_food))

    def make_sound(self, animal: Animal) -> str:
        sound = animal.make_sound()
        self.journal.log(self.messages.sound_made.format(animal=animal.name, sound=sound))
        return sound

    def act_erratically(self, animal: Animal) -> str | None:
        """Trigger the animal's crazy action, if it has one.

        Returns:
            The action description, or None if the kind has no such action
        """
        if not animal.has_capability(Capability.ERRATIC_ACTION):
            self.journal.log(self.messages.no_erratic_action.format(animal=animal.name))
            return None
        result = cast(ErraticActor, animal).act_erratically(self._rng)
        self.journal.log(self.messages.erratic_action.format(result=result))
        return result

    def toggle_flight(self, animal: Animal) -> bool:
        """Toggle flight for animals that can fly.

        Returns:
            False if the animal cannot fly
        """
        if not animal.has_capability(Capability.FLIGHT):
            self.journal.log(self.messages.cannot_fly.format(animal=animal.name))
            return False
        flyer = cast(Flyer, animal)
        flyer.toggle_flight()
        template = self.messages.started_flying if flyer.is_flying else self.messages.landed
        self.journal.log(template.format(animal=animal.name))
        return True

    def describe(self, animal: Animal) -> str:
        return animal.describe()

    # =========================================================================
    # Day/night cycle
    # =========================================================================

    def start_cycle(self) -> bool:
        return self.cycle.start()

    def stop_cycle(self) -> bool:
        return self.cycle.stop()

    def change_interval(self, seconds: float) -> None:
        self.cycle.change_interval(seconds)

    # =========================================================================
    # Journal
    # =========================================================================

    async def save_journal(self, path: Path | None = None) -> Path:
        target = path or self.settings.journal_path
        await self.journal.save_to_file(target)
        return target

    async def load_journal(self, path: Path | None = None) -> None:
        await self.journal.load_from_file(path or self.settings.journal_path)

    def clear_journal(self) -> None:
        self.journal.clear()
        self.journal.log(self.messages.log_cleared)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def initialize(self) -> None:
        """Recover the catalog from storage, or seed a fresh zoo."""
        if await self.recover():
            return
        if self.settings.seed_defaults:
            await self.seed_defaults()

    async def seed_defaults(self) -> None:
        """Create the default enclosures and animals."""
        for enclosure_seed in DEFAULT_ENCLOSURES:
            await self.create_enclosure(enclosure_seed.name, enclosure_seed.capacity)
        for animal_seed in DEFAULT_ANIMALS:
            await self.register_animal(build_animal(animal_seed), animal_seed.enclosure)

        self.journal.log(self.messages.welcome)
        self.journal.log(
            self.messages.animals_loaded.format(
                animals=len(self._animals), enclosures=len(self._enclosures)
            )
        )

    async def recover(self) -> bool:
        """Rebuild enclosures and animals from storage without narrating.

        Returns:
            False if there is no storage or it holds no enclosures

        Raises:
            StorageError: If reading fails
            UnknownAnimalKindError: If a stored kind is not recognised
        """
        if self._storage is None:
            return False
        records = await self._storage.animals.get_all_enclosures()
        if not records:
            return False
        animals = await self._storage.animals.get_all_animals()

        self._enclosures.clear()
        self._animals.clear()
        for record in records:
            # Attached to the bus only after the roster is rebuilt
            self._enclosures[record.name] = Enclosure(record.name, record.capacity, id=record.id)

        for animal in animals:
            self._animals.append(animal)
            if animal.enclosure is None:
                continue
            enclosure = self._enclosures.get(animal.enclosure)
            if enclosure is None or not enclosure.add_animal(animal):
                logger.warning(f"Could not restore {animal} into enclosure {animal.enclosure}")
                animal.enclosure = None

        for enclosure in self._enclosures.values():
            enclosure.bus = self.bus

        self.journal.log(
            self.messages.animals_loaded.format(
                animals=len(self._animals), enclosures=len(self._enclosures)
            )
        )
        logger.info(f"Recovered {len(self._animals)} animals and {len(self._enclosures)} enclosures")
        return True

    async def wait_idle(self) -> None:
        """Wait for all in-flight feedings to finish."""
        await self.feeding.wait_idle()

    async def shutdown(self) -> None:
        """Stop the cycle and cancel any feeding in progress."""
        await self.cycle.shutdown()
        await self.feeding.shutdown()
        logger.info("Zoo engine shut down")

    # =========================================================================
    # Helpers
    # =========================================================================

    def _require_enclosure(self, name: str) -> Enclosure:
        enclosure = self.get_enclosure(name)
        if enclosure is None:
            raise EnclosureNotFoundError(name)
        return enclosure

    def _catalog_index(self, animal: Animal) -> int:
        for index, member in enumerate(self._animals):
            if member is animal:
                return index
        raise AnimalNotFoundError(f"{animal.name} is not in the catalog")

    def _current_enclosure(self, animal: Animal) -> Enclosure | None:
        if animal.enclosure is None:
            return None
        enclosure = self._enclosures.get(animal.enclosure)
        if enclosure is not None and enclosure.contains(animal):
            return enclosure
        return None
