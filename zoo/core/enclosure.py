"""Enclosure model for the zoo.

An enclosure owns an ordered, capacity-bounded list of animals. Insertion order
is arrival order and drives the feeding sequence. Animals only hold a
back-reference by enclosure name.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .animals import Animal
from .events import AnimalJoinedEvent, AnimalLeftEvent, FoodDroppedEvent
from .types import EnclosureName, FoodKind

if TYPE_CHECKING:
    from .bus import EventBus

logger = logging.getLogger(__name__)


class Enclosure:
    """Named, capacity-bounded group of animals.

    Emits AnimalJoinedEvent, AnimalLeftEvent and FoodDroppedEvent on the bus.
    Reacting to those events (neighbour greetings, feeding) is the
    subscribers' job.
    """

    DEFAULT_CAPACITY = 10

    def __init__(
        self,
        name: EnclosureName | str,
        capacity: int = DEFAULT_CAPACITY,
        bus: "EventBus | None" = None,
        id: int = 0,
    ):
        """Initialize an enclosure.

        Args:
            name: Unique name within the session
            capacity: Maximum number of members (positive)
            bus: Event bus to emit on; events are dropped if None
            id: Persistence identifier (0 before first save)
        """
        self.name = EnclosureName(name)
        self.capacity = capacity
        self.id = id
        self.bus = bus
        self._animals: list[Animal] = []

    @property
    def animals(self) -> tuple[Animal, ...]:
        """Snapshot of members in arrival order."""
        return tuple(self._animals)

    @property
    def count(self) -> int:
        return len(self._animals)

    @property
    def is_full(self) -> bool:
        return len(self._animals) >= self.capacity

    def contains(self, animal: Animal) -> bool:
        """Check membership by identity."""
        return any(member is animal for member in self._animals)

    def add_animal(self, animal: Animal) -> bool:
        """Add an animal and emit AnimalJoinedEvent.

        Returns:
            False without any mutation if the enclosure is full
        """
        if self.is_full:
            logger.debug(f"Enclosure {self.name} is full ({self.count}/{self.capacity}), rejected {animal.name}")
            return False

        self._animals.append(animal)
        animal.enclosure = self.name
        self._emit(AnimalJoinedEvent(animal=animal, enclosure=self.name))
        return True

    def remove_animal(self, animal: Animal) -> bool:
        """Remove an animal and emit AnimalLeftEvent.

        A non-member's back-reference is left untouched, since it belongs
        to whichever enclosure actually holds the animal.

        Returns:
            False if the animal was not a member
        """
        for index, member in enumerate(self._animals):
            if member is animal:
                del self._animals[index]
                animal.enclosure = None
                self._emit(AnimalLeftEvent(animal=animal, enclosure=self.name))
                return True
        return False

    def drop_food(self, food: FoodKind | str) -> None:
        """Emit FoodDroppedEvent, even when the enclosure is empty."""
        self._emit(FoodDroppedEvent(food=FoodKind(food), enclosure=self.name))

    def _emit(self, event: object) -> None:
        if self.bus is not None:
            self.bus.emit(event)

    def __str__(self) -> str:
        return f"{self.name} ({self.count}/{self.capacity})"

    def __repr__(self) -> str:
        return f"Enclosure(name={self.name!r}, capacity={self.capacity}, count={self.count})"
