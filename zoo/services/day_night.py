"""Day/night cycle driver.

Two states, Day and Night, starting in Day. Each tick toggles the state:
Day -> Night increments the day counter and announces a random night event,
Night -> Day announces the morning. While running, a background task ticks
every interval_seconds; the interval is re-read before every wait, so a
change takes effect from the next scheduled tick.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from zoo.core.events import MorningArrivedEvent, NightFallenEvent, TimerStateChangedEvent
from zoo.core.messages import DEFAULT_MESSAGES, Messages
from zoo.logging_config import log_cycle

if TYPE_CHECKING:
    from zoo.core.bus import EventBus

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]

DEFAULT_INTERVAL_SECONDS = 10.0


class DayNightCycle:
    """Periodic day/night toggler emitting events on the bus."""

    def __init__(
        self,
        bus: EventBus,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        messages: Messages = DEFAULT_MESSAGES,
        rng: random.Random | None = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self._validate_interval(interval_seconds)
        self.bus = bus
        self.messages = messages
        self._interval = float(interval_seconds)
        self._rng = rng or random.Random()
        self._sleep = sleep

        self._is_night = False
        self._day_count = 0
        self._task: asyncio.Task | None = None
        self._stopped_task: asyncio.Task | None = None

    @property
    def is_night(self) -> bool:
        return self._is_night

    @property
    def day_count(self) -> int:
        return self._day_count

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def interval_seconds(self) -> float:
        return self._interval

    def tick(self) -> NightFallenEvent | MorningArrivedEvent:
        """Toggle between day and night and emit the matching event."""
        event: NightFallenEvent | MorningArrivedEvent
        if not self._is_night:
            self._is_night = True
            self._day_count += 1
            message = self._rng.choice(self.messages.night_events)
            event = NightFallenEvent(day_number=self._day_count, message=message)
            log_cycle(logger, self._day_count, "NIGHT", message)
        else:
            self._is_night = False
            event = MorningArrivedEvent(day_number=self._day_count, message=self.messages.morning)
            log_cycle(logger, self._day_count, "MORNING")
        self.bus.emit(event)
        return event

    def start(self) -> bool:
        """Start ticking on the running event loop.

        Returns:
            False if the cycle was already running
        """
        if self.is_running:
            return False
        self._task = asyncio.get_running_loop().create_task(self._run(), name="day-night-cycle")
        log_cycle(logger, self._day_count, "STARTED", f"interval={self._interval}s")
        self.bus.emit(TimerStateChangedEvent(status="started", interval_seconds=self._interval))
        return True

    def stop(self) -> bool:
        """Stop ticking. No further tick fires after this returns.

        Returns:
            False if the cycle was not running
        """
        if not self.is_running:
            return False
        assert self._task is not None
        self._task.cancel()
        self._stopped_task, self._task = self._task, None
        log_cycle(logger, self._day_count, "STOPPED")
        self.bus.emit(TimerStateChangedEvent(status="stopped", interval_seconds=self._interval))
        return True

    def change_interval(self, seconds: float) -> None:
        """Set the tick period; applies from the next scheduled tick.

        Raises:
            ValueError: If seconds is not positive
        """
        self._validate_interval(seconds)
        self._interval = float(seconds)
        log_cycle(logger, self._day_count, "INTERVAL", f"{self._interval}s")
        self.bus.emit(TimerStateChangedEvent(status="interval_changed", interval_seconds=self._interval))

    async def shutdown(self) -> None:
        """Stop the cycle and wait for its task to unwind."""
        self.stop()
        task, self._stopped_task = self._stopped_task, None
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                pass

    async def _run(self) -> None:
        while True:
            await self._sleep(self._interval)
            try:
                self.tick()
            except Exception as e:
                # A failing subscriber must not end the cycle
                logger.error(f"Day/night tick failed on day {self._day_count}: {e}", exc_info=True)

    @staticmethod
    def _validate_interval(seconds: float) -> None:
        if seconds <= 0:
            raise ValueError(f"Interval must be positive, got {seconds}")
