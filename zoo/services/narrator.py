"""Narrator service for the zoo.

Turns bus events into visitor-facing journal lines using the message
catalog. It must be subscribed before the feeding coordinator so that the
"food dropped" line precedes the first eating line.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from zoo.core.events import (
    AnimalJoinedEvent,
    AnimalLeftEvent,
    FoodDroppedEvent,
    MorningArrivedEvent,
    NightFallenEvent,
    TimerStateChangedEvent,
)
from zoo.core.messages import DEFAULT_MESSAGES, Messages
from zoo.logging_config import log_event

if TYPE_CHECKING:
    from zoo.core.bus import EventBus
    from zoo.core.enclosure import Enclosure
    from zoo.core.types import EnclosureName
    from zoo.storage.journal import Journal

logger = logging.getLogger(__name__)

EnclosureLookup = Callable[["EnclosureName"], "Enclosure | None"]


class Narrator:
    """Template-based narration of zoo events.

    Usage:
        narrator = Narrator(journal, lookup=engine.get_enclosure)
        narrator.attach(bus)
    """

    def __init__(
        self,
        journal: Journal,
        lookup: EnclosureLookup,
        messages: Messages = DEFAULT_MESSAGES,
    ):
        """Initialize the narrator.

        Args:
            journal: Where narrative lines are written
            lookup: Resolves an enclosure name to the live enclosure
            messages: Message catalog to render with
        """
        self.journal = journal
        self.messages = messages
        self._lookup = lookup

    def attach(self, bus: EventBus) -> None:
        """Subscribe to every event the narrator renders."""
        bus.subscribe(AnimalJoinedEvent, self.on_animal_joined)
        bus.subscribe(AnimalLeftEvent, self.on_animal_left)
        bus.subscribe(FoodDroppedEvent, self.on_food_dropped)
        bus.subscribe(NightFallenEvent, self.on_night_fallen)
        bus.subscribe(MorningArrivedEvent, self.on_morning_arrived)
        bus.subscribe(TimerStateChangedEvent, self.on_timer_state_changed)

    def detach(self, bus: EventBus) -> None:
        bus.unsubscribe(AnimalJoinedEvent, self.on_animal_joined)
        bus.unsubscribe(AnimalLeftEvent, self.on_animal_left)
        bus.unsubscribe(FoodDroppedEvent, self.on_food_dropped)
        bus.unsubscribe(NightFallenEvent, self.on_night_fallen)
        bus.unsubscribe(MorningArrivedEvent, self.on_morning_arrived)
        bus.unsubscribe(TimerStateChangedEvent, self.on_timer_state_changed)

    # --- Handlers ---

    def on_animal_joined(self, event: AnimalJoinedEvent) -> None:
        """Announce the newcomer, then let every other member react in order."""
        newcomer = event.animal
        log_event(logger, event.type, f"{newcomer.name} -> {event.enclosure}")
        self.journal.log(
            self.messages.animal_joined.format(animal=newcomer.name, enclosure=event.enclosure)
        )

        enclosure = self._lookup(event.enclosure)
        if enclosure is None:
            return
        for member in enclosure.animals:
            if member is newcomer:
                continue
            reaction = member.react_to_new_neighbor(newcomer)
            self.journal.log(self.messages.neighbor_reaction.format(reaction=reaction))

    def on_animal_left(self, event: AnimalLeftEvent) -> None:
        log_event(logger, event.type, f"{event.animal.name} <- {event.enclosure}")
        self.journal.log(
            self.messages.animal_left.format(animal=event.animal.name, enclosure=event.enclosure)
        )

    def on_food_dropped(self, event: FoodDroppedEvent) -> None:
        log_event(logger, event.type, f"{event.food} -> {event.enclosure}")
        self.journal.log(
            self.messages.food_dropped.format(food=event.food, enclosure=event.enclosure)
        )

    def on_night_fallen(self, event: NightFallenEvent) -> None:
        log_event(logger, event.type, f"day={event.day_number}")
        self.journal.log(
            self.messages.night_fallen.format(day=event.day_number, message=event.message)
        )

    def on_morning_arrived(self, event: MorningArrivedEvent) -> None:
        log_event(logger, event.type, f"day={event.day_number}")
        self.journal.log(event.message)

    def on_timer_state_changed(self, event: TimerStateChangedEvent) -> None:
        log_event(logger, event.type, f"{event.status} interval={event.interval_seconds}")
        if event.status == "started":
            line = self.messages.timer_started
        elif event.status == "stopped":
            line = self.messages.timer_stopped
        else:
            line = self.messages.interval_changed.format(seconds=event.interval_seconds)
        self.journal.log(line)
