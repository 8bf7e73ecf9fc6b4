"""Tests for Enclosure."""

from zoo.core import (
    AnimalJoinedEvent,
    AnimalLeftEvent,
    Cat,
    Enclosure,
    EventBus,
    FoodDroppedEvent,
)


def record(bus: EventBus, *event_types) -> list:
    received = []
    for event_type in event_types:
        bus.subscribe(event_type, received.append)
    return received


class TestAddAnimal:
    def test_add_sets_back_reference(self, bus, cat):
        enclosure = Enclosure("A", 5, bus=bus)
        assert enclosure.add_animal(cat)
        assert enclosure.count == 1
        assert cat.enclosure == "A"
        assert enclosure.contains(cat)

    def test_add_emits_joined_event(self, bus, cat):
        received = record(bus, AnimalJoinedEvent)
        enclosure = Enclosure("A", 5, bus=bus)
        enclosure.add_animal(cat)

        assert len(received) == 1
        assert received[0].animal is cat
        assert received[0].enclosure == "A"

    def test_full_enclosure_rejects_without_mutation(self, bus, cat, dog):
        received = record(bus, AnimalJoinedEvent)
        enclosure = Enclosure("Tiny", 1, bus=bus)
        enclosure.add_animal(cat)

        assert not enclosure.add_animal(dog)
        assert enclosure.count == 1
        assert dog.enclosure is None
        assert len(received) == 1

    def test_arrival_order_preserved(self, cat, dog, bird):
        enclosure = Enclosure("A", 5)
        for animal in (bird, cat, dog):
            enclosure.add_animal(animal)
        assert enclosure.animals == (bird, cat, dog)

    def test_is_full(self, cat, dog):
        enclosure = Enclosure("A", 2)
        enclosure.add_animal(cat)
        assert not enclosure.is_full
        enclosure.add_animal(dog)
        assert enclosure.is_full

    def test_without_bus_events_are_dropped(self, cat):
        enclosure = Enclosure("A", 5)
        assert enclosure.add_animal(cat)


class TestRemoveAnimal:
    def test_remove_clears_back_reference(self, bus, cat):
        received = record(bus, AnimalLeftEvent)
        enclosure = Enclosure("A", 5, bus=bus)
        enclosure.add_animal(cat)

        assert enclosure.remove_animal(cat)
        assert enclosure.count == 0
        assert cat.enclosure is None
        assert received[0].animal is cat

    def test_remove_non_member_returns_false(self, bus, cat, dog):
        home = Enclosure("Home", 5, bus=bus)
        other = Enclosure("Other", 5, bus=bus)
        home.add_animal(cat)

        assert not other.remove_animal(cat)
        assert cat.enclosure == "Home"
        assert home.contains(cat)

    def test_readd_after_remove_restores_membership(self, bus, cat, dog):
        joined = record(bus, AnimalJoinedEvent)
        enclosure = Enclosure("A", 5, bus=bus)
        enclosure.add_animal(cat)
        enclosure.add_animal(dog)

        assert enclosure.remove_animal(cat)
        assert enclosure.add_animal(cat)

        assert enclosure.contains(cat)
        assert enclosure.animals == (dog, cat)
        assert cat.enclosure == "A"
        assert len(joined) == 3
        assert joined[-1].animal is cat

    def test_membership_is_by_identity(self):
        first = Cat(name="Twin", age=2)
        second = Cat(name="Twin", age=2)
        enclosure = Enclosure("A", 5)
        enclosure.add_animal(first)

        assert first == second
        assert not enclosure.contains(second)
        assert not enclosure.remove_animal(second)
        assert enclosure.contains(first)


class TestDropFood:
    def test_drop_food_emits_event(self, bus, cat):
        received = record(bus, FoodDroppedEvent)
        enclosure = Enclosure("A", 5, bus=bus)
        enclosure.add_animal(cat)
        enclosure.drop_food("fish")

        assert received[0].food == "fish"
        assert received[0].enclosure == "A"

    def test_drop_food_into_empty_enclosure_still_emits(self, bus):
        received = record(bus, FoodDroppedEvent)
        Enclosure("Empty", 3, bus=bus).drop_food("fish")
        assert len(received) == 1


class TestRendering:
    def test_str_shows_occupancy(self, cat):
        enclosure = Enclosure("Enclosure A", 5)
        enclosure.add_animal(cat)
        assert str(enclosure) == "Enclosure A (1/5)"

    def test_animals_is_a_snapshot(self, cat, dog):
        enclosure = Enclosure("A", 5)
        enclosure.add_animal(cat)
        snapshot = enclosure.animals
        enclosure.add_animal(dog)
        assert snapshot == (cat,)
