"""Tests for DayNightCycle."""

import asyncio
import logging
import random

import pytest

from zoo.core import (
    MorningArrivedEvent,
    NIGHT_EVENTS,
    NightFallenEvent,
    TimerStateChangedEvent,
)
from zoo.services import DayNightCycle


class TestTick:
    """Manual ticks toggle the state machine."""

    def test_starts_in_day(self, bus):
        cycle = DayNightCycle(bus)
        assert not cycle.is_night
        assert cycle.day_count == 0
        assert not cycle.is_running

    def test_first_tick_brings_night(self, bus, rng):
        received = []
        bus.subscribe(NightFallenEvent, received.append)
        cycle = DayNightCycle(bus, rng=rng)

        event = cycle.tick()

        assert cycle.is_night
        assert cycle.day_count == 1
        assert received == [event]
        assert event.day_number == 1
        assert event.message in NIGHT_EVENTS

    def test_second_tick_brings_morning(self, bus, rng):
        received = []
        bus.subscribe(MorningArrivedEvent, received.append)
        cycle = DayNightCycle(bus, rng=rng)

        cycle.tick()
        cycle.tick()

        assert not cycle.is_night
        assert cycle.day_count == 1
        assert received[0].message == "☀️ Morning has come. The animals are waking up!"

    def test_ten_ticks_make_five_days(self, bus, rng):
        nights, mornings = [], []
        bus.subscribe(NightFallenEvent, nights.append)
        bus.subscribe(MorningArrivedEvent, mornings.append)
        cycle = DayNightCycle(bus, rng=rng)

        for _ in range(10):
            cycle.tick()

        assert cycle.day_count == 5
        assert not cycle.is_night
        assert [e.day_number for e in nights] == [1, 2, 3, 4, 5]
        assert len(mornings) == 5

    def test_night_message_follows_rng(self, bus):
        first = DayNightCycle(bus, rng=random.Random(3)).tick()
        second = DayNightCycle(bus, rng=random.Random(3)).tick()
        assert first.message == second.message


class TestTimer:
    async def test_start_is_idempotent(self, bus, clock):
        states = []
        bus.subscribe(TimerStateChangedEvent, states.append)
        cycle = DayNightCycle(bus, interval_seconds=1.0, sleep=clock.sleep)

        assert cycle.start()
        assert not cycle.start()
        assert cycle.is_running
        assert [s.status for s in states] == ["started"]

        await cycle.shutdown()

    async def test_stop_is_idempotent(self, bus, clock):
        cycle = DayNightCycle(bus, interval_seconds=1.0, sleep=clock.sleep)
        assert not cycle.stop()

        cycle.start()
        assert cycle.stop()
        assert not cycle.stop()
        await cycle.shutdown()
        assert not cycle.is_running

    async def test_running_cycle_ticks(self, bus, clock):
        cycle = DayNightCycle(bus, interval_seconds=2.0, sleep=clock.sleep)
        cycle.start()

        for _ in range(10):
            await asyncio.sleep(0)
        await cycle.shutdown()

        assert cycle.day_count >= 1
        assert all(seconds == 2.0 for seconds in clock.sleeps)

    async def test_no_tick_after_stop(self, bus, clock):
        cycle = DayNightCycle(bus, interval_seconds=1.0, sleep=clock.sleep)
        cycle.start()
        for _ in range(4):
            await asyncio.sleep(0)
        cycle.stop()
        ticks_at_stop = (cycle.day_count, cycle.is_night)

        for _ in range(10):
            await asyncio.sleep(0)

        assert (cycle.day_count, cycle.is_night) == ticks_at_stop

    async def test_failing_subscriber_does_not_stop_cycle(self, bus, clock, caplog):
        failures = []

        def explode_once(event):
            if not failures:
                failures.append(event)
                raise RuntimeError("keeper tripped over a bucket")

        bus.subscribe(NightFallenEvent, explode_once)
        cycle = DayNightCycle(bus, interval_seconds=1.0, sleep=clock.sleep)

        with caplog.at_level(logging.ERROR, logger="zoo.services.day_night"):
            cycle.start()
            for _ in range(10):
                await asyncio.sleep(0)
            assert cycle.is_running
            await cycle.shutdown()

        assert len(failures) == 1
        assert cycle.day_count >= 2
        assert any("keeper tripped over a bucket" in r.getMessage() for r in caplog.records)

    async def test_change_interval_applies_to_next_wait(self, bus, clock):
        cycle = DayNightCycle(bus, interval_seconds=5.0, sleep=clock.sleep)
        cycle.start()
        await asyncio.sleep(0)

        cycle.change_interval(1.0)
        for _ in range(4):
            await asyncio.sleep(0)
        await cycle.shutdown()

        assert clock.sleeps[0] == 5.0
        assert clock.sleeps[-1] == 1.0
        assert cycle.interval_seconds == 1.0

    def test_change_interval_emits_event(self, bus):
        states = []
        bus.subscribe(TimerStateChangedEvent, states.append)
        cycle = DayNightCycle(bus)

        cycle.change_interval(3)

        assert states[0].status == "interval_changed"
        assert states[0].interval_seconds == 3.0

    @pytest.mark.parametrize("seconds", [0, -1])
    def test_invalid_interval_rejected(self, bus, seconds):
        with pytest.raises(ValueError):
            DayNightCycle(bus, interval_seconds=seconds)
        with pytest.raises(ValueError):
            DayNightCycle(bus).change_interval(seconds)

    async def test_real_timer_ticks(self, bus):
        cycle = DayNightCycle(bus, interval_seconds=0.01)
        cycle.start()
        await asyncio.sleep(0.1)
        await cycle.shutdown()
        assert cycle.day_count >= 1
