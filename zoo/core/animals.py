"""Animal models for the zoo.

Animals are polymorphic over a closed set of kinds. Each kind fixes:
- Sound, default eating speed and describe suffix
- Reactions to a new neighbour and to dropped food
- Optional capabilities (erratic action, flight), queryable via has_capability()

Animals are mutable: the enclosure back-reference, flight state and the
raccoon's loot counter change during a session. Eating speed is fixed at creation.
"""

from __future__ import annotations

import random
from typing import Annotated, ClassVar, Literal, Protocol, Union, runtime_checkable

from pydantic import BaseModel, ConfigDict, Discriminator, Field

from .errors import UnknownAnimalKindError
from .types import AnimalId, AnimalKind, Capability, EnclosureName


class Animal(BaseModel):
    """Base class for every animal kind."""

    model_config = ConfigDict(validate_assignment=True)

    capabilities: ClassVar[frozenset[Capability]] = frozenset()

    kind: AnimalKind
    name: str = Field(min_length=2, max_length=50)
    age: int = Field(ge=0, le=100)
    eating_speed: float = Field(default=2.0, gt=0, frozen=True)
    id: AnimalId = AnimalId(0)
    enclosure: EnclosureName | None = None

    def has_capability(self, capability: Capability) -> bool:
        """Check whether this kind supports an optional behaviour."""
        return capability in self.capabilities

    @property
    def extra_info(self) -> str | None:
        """Kind-specific attribute stored alongside the animal, if any."""
        return None

    def make_sound(self) -> str:
        raise NotImplementedError

    def describe(self) -> str:
        return f"{self.name} is {self.age} years old"

    def react_to_new_neighbor(self, newcomer: Animal) -> str:
        return f"{self.name}: Oh, a new neighbour {newcomer.name}!"

    def react_to_food(self, food: str) -> str:
        return f"{self.name} starts eating the {food}..."

    def __str__(self) -> str:
        return f"{self.name} ({self.kind.value})"


@runtime_checkable
class ErraticActor(Protocol):
    """Animals with Capability.ERRATIC_ACTION."""

    def act_erratically(self, rng: random.Random | None = None) -> str: ...


@runtime_checkable
class Flyer(Protocol):
    """Animals with Capability.FLIGHT."""

    is_flying: bool

    def toggle_flight(self) -> None: ...


# =============================================================================
# Kinds
# =============================================================================


class Cat(Animal):
    """Fast, picky eater with a taste for kitchen raids."""

    STOLEN_FOODS: ClassVar[tuple[str, ...]] = (
        "cheese", "sausage", "fish", "milk", "chicken fillet",
    )
    capabilities: ClassVar[frozenset[Capability]] = frozenset({Capability.ERRATIC_ACTION})

    kind: Literal[AnimalKind.CAT] = AnimalKind.CAT
    eating_speed: float = Field(default=1.5, gt=0, frozen=True)
    favorite_food: str = "fish"

    @property
    def extra_info(self) -> str | None:
        return self.favorite_food

    def make_sound(self) -> str:
        return "Meow! Meow!"

    def describe(self) -> str:
        return super().describe() + f" and loves {self.favorite_food}"

    def act_erratically(self, rng: random.Random | None = None) -> str:
        stolen = (rng or random).choice(self.STOLEN_FOODS)
        return f"{self.name} stole {stolen} from the kitchen!"

    def react_to_new_neighbor(self, newcomer: Animal) -> str:
        if newcomer.kind is AnimalKind.DOG:
            return f"{self.name}: Pah, a dog! *whispers*"
        return super().react_to_new_neighbor(newcomer)

    def react_to_food(self, food: str) -> str:
        return f"{self.name} carefully sniffs the {food}..."


class Dog(Animal):
    """Very fast eater, friendly to everyone."""

    capabilities: ClassVar[frozenset[Capability]] = frozenset({Capability.ERRATIC_ACTION})

    kind: Literal[AnimalKind.DOG] = AnimalKind.DOG
    eating_speed: float = Field(default=1.0, gt=0, frozen=True)
    breed: str = "Mixed breed"

    @property
    def extra_info(self) -> str | None:
        return self.breed

    def make_sound(self) -> str:
        return "Woof! Woof!"

    def describe(self) -> str:
        return super().describe() + f", breed: {self.breed}"

    def act_erratically(self, rng: random.Random | None = None) -> str:
        return f"{self.name} barks like crazy: WOOF! WOOF! WOOF! WOOF! WOOF!"

    def react_to_new_neighbor(self, newcomer: Animal) -> str:
        return f"{self.name}: *wags tail* Hello, {newcomer.name}!"

    def react_to_food(self, food: str) -> str:
        return f"{self.name} happily jumps at the {food}!"


class Bird(Animal):
    """The only kind that can fly."""

    capabilities: ClassVar[frozenset[Capability]] = frozenset(
        {Capability.ERRATIC_ACTION, Capability.FLIGHT}
    )

    kind: Literal[AnimalKind.BIRD] = AnimalKind.BIRD
    eating_speed: float = Field(default=0.5, gt=0, frozen=True)
    color: str = "blue"
    is_flying: bool = False

    @property
    def extra_info(self) -> str | None:
        return self.color

    def make_sound(self) -> str:
        return "Tweet! Tweet!"

    def describe(self) -> str:
        status = "flying" if self.is_flying else "sitting on a branch"
        return super().describe() + f", colour: {self.color}, currently {status}"

    def toggle_flight(self) -> None:
        self.is_flying = not self.is_flying

    def act_erratically(self, rng: random.Random | None = None) -> str:
        self.toggle_flight()
        action = "started flying like crazy" if self.is_flying else "suddenly fell down"
        return f"{self.name} {action} and screeches: CHIRP!!! CHIRP!!! CHIRP!!!"

    def react_to_new_neighbor(self, newcomer: Animal) -> str:
        return f"{self.name}: *chirps happily* A new friend!"

    def react_to_food(self, food: str) -> str:
        return f"{self.name} quickly pecks at the {food}!"


class Raccoon(Animal):
    """Slow eater and compulsive collector of shiny things."""

    LOOT: ClassVar[tuple[str, ...]] = (
        "a sparkly gadget",
        "a shiny button",
        "a golden coin",
        "a mirror",
        "a silver spoon",
        "a crystal glass",
    )
    capabilities: ClassVar[frozenset[Capability]] = frozenset({Capability.ERRATIC_ACTION})

    kind: Literal[AnimalKind.RACCOON] = AnimalKind.RACCOON
    eating_speed: float = Field(default=2.5, gt=0, frozen=True)
    things_stolen: int = Field(default=0, ge=0)

    def make_sound(self) -> str:
        return "Trrrr! Khhhh!"

    def describe(self) -> str:
        return super().describe() + f", has stolen {self.things_stolen} things"

    def act_erratically(self, rng: random.Random | None = None) -> str:
        item = (rng or random).choice(self.LOOT)
        self.things_stolen += 1
        return f"{self.name} found {item} and hid it in a secret place!"

    def react_to_new_neighbor(self, newcomer: Animal) -> str:
        return f"{self.name}: *inspects the new neighbour's pockets*"

    def react_to_food(self, food: str) -> str:
        return f"{self.name} washes the {food} in water before eating..."


class Monkey(Animal):
    """Mischievous by default."""

    capabilities: ClassVar[frozenset[Capability]] = frozenset({Capability.ERRATIC_ACTION})

    kind: Literal[AnimalKind.MONKEY] = AnimalKind.MONKEY
    eating_speed: float = Field(default=1.2, gt=0, frozen=True)
    is_mischievous: bool = True

    def make_sound(self) -> str:
        return "Ooh-ooh-ah-ah-ah!"

    def describe(self) -> str:
        mood = "very mischievous" if self.is_mischievous else "calm"
        return super().describe() + f", is {mood}"

    def act_erratically(self, rng: random.Random | None = None) -> str:
        return f"{self.name} jumps around like crazy and throws bananas!"

    def react_to_new_neighbor(self, newcomer: Animal) -> str:
        return f"{self.name}: *mimics the new neighbour and pulls faces*"

    def react_to_food(self, food: str) -> str:
        return f"{self.name} grabs the {food} and escapes up a tree!"


# --- The discriminated union ---

AnyAnimal = Annotated[
    Union[Cat, Dog, Bird, Raccoon, Monkey],
    Discriminator("kind"),
]

ANIMAL_KINDS: dict[AnimalKind, type[Animal]] = {
    AnimalKind.CAT: Cat,
    AnimalKind.DOG: Dog,
    AnimalKind.BIRD: Bird,
    AnimalKind.RACCOON: Raccoon,
    AnimalKind.MONKEY: Monkey,
}

# Field that receives extra_info when rebuilding from storage
_EXTRA_FIELDS: dict[AnimalKind, str] = {
    AnimalKind.CAT: "favorite_food",
    AnimalKind.DOG: "breed",
    AnimalKind.BIRD: "color",
}


def animal_from_record(
    kind: str,
    *,
    name: str,
    age: int,
    eating_speed: float,
    extra_info: str | None = None,
    id: int = 0,
    enclosure: str | None = None,
) -> Animal:
    """Rebuild an animal from its stored representation.

    Args:
        kind: Stored kind tag (e.g. "cat")
        name: Display name
        age: Age in years
        eating_speed: Eating delay in seconds
        extra_info: Favourite food / breed / colour, if the kind has one
        id: Persistence identifier
        enclosure: Name of the enclosure the animal lives in

    Returns:
        A new animal of the matching kind

    Raises:
        UnknownAnimalKindError: If kind is not one of the known kinds
    """
    try:
        animal_kind = AnimalKind(kind.lower())
    except ValueError:
        raise UnknownAnimalKindError(kind) from None

    fields: dict[str, object] = {
        "name": name,
        "age": age,
        "eating_speed": eating_speed,
        "id": AnimalId(id),
        "enclosure": EnclosureName(enclosure) if enclosure else None,
    }
    extra_field = _EXTRA_FIELDS.get(animal_kind)
    if extra_field is not None and extra_info:
        fields[extra_field] = extra_info

    return ANIMAL_KINDS[animal_kind](**fields)
