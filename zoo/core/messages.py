"""Narrative message catalog.

All visitor-facing lines are rendered from one explicitly passed Messages
object. There is no global locale: components receive the catalog they should
speak with, and tests can pass a custom one.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


NIGHT_EVENTS: tuple[str, ...] = (
    "🦉 The owl started hunting mice",
    "🌙 All the animals are sleeping under the starry sky",
    "🐺 The wolves are howling at the moon",
    "🦝 The raccoon pulled off a midnight raid on the kitchen",
    "🦇 The bats went out hunting",
    "🌃 The night guard is making rounds of the grounds",
    "🦎 The reptiles are warming up under the infrared lamps",
)


class Messages(BaseModel):
    """Templates for every narrative line the zoo produces."""

    model_config = ConfigDict(frozen=True)

    # Enclosure membership
    animal_joined: str = "🐾 {animal} joined enclosure '{enclosure}'"
    neighbor_reaction: str = "  💬 {reaction}"
    animal_left: str = "🏠 {animal} was removed from enclosure '{enclosure}'"
    enclosure_full: str = "⚠️ Enclosure '{enclosure}' is full, {animal} cannot join"

    # Feeding
    food_dropped: str = "🍖 {food} dropped to enclosure '{enclosure}'"
    eating_started: str = "  🍽️ {reaction}"
    eating_finished: str = "  ✅ {animal} finished eating"
    all_fed: str = "🎉 All animals in enclosure '{enclosure}' are fed!"

    # Day/night cycle
    night_fallen: str = "🌙 Day {day}: {message}"
    morning: str = "☀️ Morning has come. The animals are waking up!"
    timer_started: str = "🌙 Night event timer started!"
    timer_stopped: str = "☀️ Timer stopped."
    interval_changed: str = "⏱️ Interval changed: {seconds:g} seconds"
    night_events: tuple[str, ...] = NIGHT_EVENTS

    # Animal actions
    sound_made: str = "🔊 {animal} said: {sound}"
    erratic_action: str = "🎪 CRAZY! {result}"
    no_erratic_action: str = "❌ {animal} can't do anything crazy!"
    started_flying: str = "✈️ {animal} is flying now!"
    landed: str = "✈️ {animal} landed!"
    cannot_fly: str = "❌ {animal} can't fly!"

    # Catalog
    welcome: str = "🎉 Welcome to the Animal Management System!"
    animals_loaded: str = "✅ Loaded {animals} animals and {enclosures} enclosures"
    animal_added: str = "✅ Animal added: {animal}"
    animal_removed: str = "🗑️ Animal removed: {animal}"
    log_cleared: str = "🗑️ Log cleared"


DEFAULT_MESSAGES = Messages()
