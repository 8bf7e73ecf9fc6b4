"""
Bootstrap helpers for a fresh zoo.

Defines the default enclosures and animals a new zoo starts with.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from zoo.core.animals import ANIMAL_KINDS, Animal
from zoo.core.types import AnimalKind


@dataclass(frozen=True)
class EnclosureSeed:
    name: str
    capacity: int


@dataclass(frozen=True)
class AnimalSeed:
    kind: AnimalKind
    name: str
    age: int
    extra: dict[str, str] = field(default_factory=dict)
    enclosure: str | None = None


DEFAULT_ENCLOSURES: tuple[EnclosureSeed, ...] = (
    EnclosureSeed("Enclosure A", 5),
    EnclosureSeed("Enclosure B", 5),
    EnclosureSeed("Enclosure C", 3),
)

DEFAULT_ANIMALS: tuple[AnimalSeed, ...] = (
    AnimalSeed(AnimalKind.CAT, "Muri", 3, {"favorite_food": "cheese"}, enclosure="Enclosure A"),
    AnimalSeed(AnimalKind.DOG, "Rex", 5, {"breed": "German Shepherd"}, enclosure="Enclosure A"),
    AnimalSeed(AnimalKind.BIRD, "Piip", 2, {"color": "yellow"}, enclosure="Enclosure B"),
    AnimalSeed(AnimalKind.RACCOON, "Riku", 4, enclosure="Enclosure B"),
    AnimalSeed(AnimalKind.MONKEY, "Mango", 6, enclosure="Enclosure C"),
    AnimalSeed(AnimalKind.CAT, "Miisu", 4, {"favorite_food": "fish"}),
    AnimalSeed(AnimalKind.DOG, "Bobik", 3, {"breed": "Puppy"}),
)


def build_animal(seed: AnimalSeed) -> Animal:
    """Create an unplaced animal from a seed."""
    return ANIMAL_KINDS[seed.kind](name=seed.name, age=seed.age, **seed.extra)
