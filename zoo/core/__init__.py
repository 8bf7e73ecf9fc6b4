"""Core domain models for the zoo.

Pure domain: animals, enclosures, events, the event bus and the message
catalog. No I/O and no scheduling lives here.

Usage:
    from zoo.core import Cat, Enclosure, EventBus, FoodDroppedEvent
"""

# Types
from .types import (
    AnimalId,
    EnclosureName,
    FoodKind,
    AnimalKind,
    Capability,
)

# Errors
from .errors import (
    ZooError,
    UnknownAnimalKindError,
    EnclosureNotFoundError,
    DuplicateEnclosureError,
    EnclosureNotEmptyError,
    AnimalNotFoundError,
)

# Animals
from .animals import (
    Animal,
    AnyAnimal,
    Cat,
    Dog,
    Bird,
    Raccoon,
    Monkey,
    ErraticActor,
    Flyer,
    ANIMAL_KINDS,
    animal_from_record,
)

# Events
from .events import (
    BaseEvent,
    AnimalJoinedEvent,
    AnimalLeftEvent,
    FoodDroppedEvent,
    AnimalFinishedEatingEvent,
    AllFedEvent,
    NightFallenEvent,
    MorningArrivedEvent,
    TimerStateChangedEvent,
    ZooEvent,
)

from .bus import EventBus
from .enclosure import Enclosure
from .messages import Messages, DEFAULT_MESSAGES, NIGHT_EVENTS

__all__ = [
    # Types
    "AnimalId",
    "EnclosureName",
    "FoodKind",
    "AnimalKind",
    "Capability",
    # Errors
    "ZooError",
    "UnknownAnimalKindError",
    "EnclosureNotFoundError",
    "DuplicateEnclosureError",
    "EnclosureNotEmptyError",
    "AnimalNotFoundError",
    # Animals
    "Animal",
    "AnyAnimal",
    "Cat",
    "Dog",
    "Bird",
    "Raccoon",
    "Monkey",
    "ErraticActor",
    "Flyer",
    "ANIMAL_KINDS",
    "animal_from_record",
    # Events
    "BaseEvent",
    "AnimalJoinedEvent",
    "AnimalLeftEvent",
    "FoodDroppedEvent",
    "AnimalFinishedEatingEvent",
    "AllFedEvent",
    "NightFallenEvent",
    "MorningArrivedEvent",
    "TimerStateChangedEvent",
    "ZooEvent",
    # Infrastructure
    "EventBus",
    "Enclosure",
    "Messages",
    "DEFAULT_MESSAGES",
    "NIGHT_EVENTS",
]
