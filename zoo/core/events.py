"""Event types for the zoo.

Events are ephemeral: they are dispatched through the EventBus and rendered
into narrative lines by subscribers. Only the rendered text is persisted (via
the Journal). Events stay serializable for debugging.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, SerializeAsAny

from .animals import Animal
from .types import EnclosureName, FoodKind


class BaseEvent(BaseModel):
    """Base class for all events.

    All events carry the wall-clock time they were created at.
    """

    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(default_factory=datetime.now)


# --- Enclosure Events ---


class AnimalJoinedEvent(BaseEvent):
    """An animal was added to an enclosure."""

    type: Literal["animal_joined"] = "animal_joined"
    animal: SerializeAsAny[Animal]
    enclosure: EnclosureName


class AnimalLeftEvent(BaseEvent):
    """An animal was removed from an enclosure."""

    type: Literal["animal_left"] = "animal_left"
    animal: SerializeAsAny[Animal]
    enclosure: EnclosureName


class FoodDroppedEvent(BaseEvent):
    """Food was dropped into an enclosure."""

    type: Literal["food_dropped"] = "food_dropped"
    food: FoodKind
    enclosure: EnclosureName


# --- Feeding Events ---


class AnimalFinishedEatingEvent(BaseEvent):
    """One animal finished its share of a feeding sequence."""

    type: Literal["animal_finished_eating"] = "animal_finished_eating"
    animal_name: str
    enclosure: EnclosureName


class AllFedEvent(BaseEvent):
    """Every animal in the feeding roster has eaten."""

    type: Literal["all_fed"] = "all_fed"
    enclosure: EnclosureName
    fed_count: int


# --- Day/Night Events ---


class NightFallenEvent(BaseEvent):
    """Day turned into night."""

    type: Literal["night_fallen"] = "night_fallen"
    day_number: int
    message: str


class MorningArrivedEvent(BaseEvent):
    """Night turned into day."""

    type: Literal["morning_arrived"] = "morning_arrived"
    day_number: int
    message: str


class TimerStateChangedEvent(BaseEvent):
    """The day/night timer was started, stopped or re-timed."""

    type: Literal["timer_state_changed"] = "timer_state_changed"
    status: Literal["started", "stopped", "interval_changed"]
    interval_seconds: float


# --- The discriminated union ---

ZooEvent = Annotated[
    Union[
        AnimalJoinedEvent,
        AnimalLeftEvent,
        FoodDroppedEvent,
        AnimalFinishedEatingEvent,
        AllFedEvent,
        NightFallenEvent,
        MorningArrivedEvent,
        TimerStateChangedEvent,
    ],
    Discriminator("type"),
]
