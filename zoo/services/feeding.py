"""Feeding coordinator for the zoo.

When food is dropped into an enclosure, every animal present at that moment
eats once, in arrival order, each taking its eating_speed in seconds. The
sequence runs as its own asyncio task so the rest of the zoo stays
responsive, and different enclosures feed concurrently.

Two drops into the same enclosure are serialised: the second sequence waits
for the first to finish (FIFO) so their lines never interleave.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Sequence
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from zoo.core.events import AllFedEvent, AnimalFinishedEatingEvent, FoodDroppedEvent
from zoo.core.messages import DEFAULT_MESSAGES, Messages
from zoo.core.types import EnclosureName, FoodKind
from zoo.logging_config import log_feeding

if TYPE_CHECKING:
    from zoo.core.animals import Animal
    from zoo.core.bus import EventBus
    from zoo.core.enclosure import Enclosure
    from zoo.storage.journal import Journal

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]
EnclosureLookup = Callable[[EnclosureName], "Enclosure | None"]


class FeedingCoordinator:
    """Runs feeding sequences in response to FoodDroppedEvent.

    Handlers are invoked from the bus on the engine's event loop; a running
    loop is required to start a sequence.
    """

    def __init__(
        self,
        bus: EventBus,
        journal: Journal,
        lookup: EnclosureLookup,
        messages: Messages = DEFAULT_MESSAGES,
        time_scale: float = 1.0,
        sleep: Sleep = asyncio.sleep,
    ):
        """Initialize the coordinator.

        Args:
            bus: Event bus for FoodDroppedEvent in and feeding events out
            journal: Where feeding lines are written
            lookup: Resolves an enclosure name to the live enclosure
            messages: Message catalog to render with
            time_scale: Multiplier applied to every eating delay
            sleep: Awaitable delay, injectable for tests
        """
        if time_scale < 0:
            raise ValueError("time_scale must not be negative")

        self.bus = bus
        self.journal = journal
        self.messages = messages
        self.time_scale = time_scale
        self._lookup = lookup
        self._sleep = sleep

        self._locks: dict[EnclosureName, asyncio.Lock] = {}
        self._lock_users: dict[EnclosureName, int] = {}
        self._tasks: dict[EnclosureName, set[asyncio.Task]] = {}

    def attach(self) -> None:
        self.bus.subscribe(FoodDroppedEvent, self.on_food_dropped)

    def detach(self) -> None:
        self.bus.unsubscribe(FoodDroppedEvent, self.on_food_dropped)

    # --- Entry points ---

    def on_food_dropped(self, event: FoodDroppedEvent) -> None:
        """Snapshot the roster and start a feeding task."""
        self.start_feeding(event.enclosure, event.food)

    def start_feeding(self, enclosure: EnclosureName, food: FoodKind) -> asyncio.Task:
        """Start a background feeding sequence for the current roster.

        Returns:
            The task, which resolves to the number of animals fed
        """
        roster = self._roster(enclosure)
        log_feeding(logger, enclosure, "SCHEDULED", details=f"food={food} roster={len(roster)}")

        task = asyncio.get_running_loop().create_task(
            self._run(enclosure, food, roster),
            name=f"feeding-{enclosure}",
        )
        self._tasks.setdefault(enclosure, set()).add(task)
        task.add_done_callback(lambda t: self._on_task_done(enclosure, t))
        return task

    async def feed(self, enclosure: EnclosureName, food: FoodKind) -> int:
        """Run a feeding sequence to completion without the bus.

        Returns:
            Number of animals fed
        """
        return await self._run(enclosure, food, self._roster(enclosure))

    # --- State ---

    def is_feeding(self, enclosure: EnclosureName) -> bool:
        return bool(self._tasks.get(enclosure))

    @property
    def active_count(self) -> int:
        return sum(len(tasks) for tasks in self._tasks.values())

    async def wait_idle(self) -> None:
        """Wait until every scheduled feeding task has finished."""
        while True:
            pending = [
                task for tasks in self._tasks.values() for task in tasks if not task.done()
            ]
            if not pending:
                return
            await asyncio.wait(pending)

    def cancel(self, enclosure: EnclosureName) -> int:
        """Cancel in-flight and queued feedings for one enclosure.

        Returns:
            Number of tasks cancelled
        """
        tasks = self._tasks.get(enclosure, set())
        for task in tasks:
            task.cancel()
        if tasks:
            log_feeding(logger, enclosure, "CANCELLED", details=f"{len(tasks)} task(s)")
        return len(tasks)

    async def shutdown(self) -> None:
        """Cancel every feeding task and wait for them to unwind."""
        pending = [task for tasks in self._tasks.values() for task in tasks]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        logger.debug(f"Feeding coordinator shut down ({len(pending)} task(s) cancelled)")

    # --- Internals ---

    def _roster(self, enclosure: EnclosureName) -> tuple[Animal, ...]:
        found = self._lookup(enclosure)
        return found.animals if found is not None else ()

    @asynccontextmanager
    async def _exclusive(self, enclosure: EnclosureName) -> AsyncIterator[None]:
        """Hold the enclosure's feeding lock.

        The lock is discarded once no sequence holds or waits for it, so
        removed enclosures leave nothing behind.
        """
        lock = self._locks.get(enclosure)
        if lock is None:
            lock = self._locks[enclosure] = asyncio.Lock()
        self._lock_users[enclosure] = self._lock_users.get(enclosure, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[enclosure] -= 1
            if not self._lock_users[enclosure]:
                del self._lock_users[enclosure]
                del self._locks[enclosure]

    async def _run(
        self,
        enclosure: EnclosureName,
        food: FoodKind,
        roster: Sequence[Animal],
    ) -> int:
        async with self._exclusive(enclosure):
            log_feeding(logger, enclosure, "STARTED", details=f"food={food}")
            for animal in roster:
                self.journal.log(
                    self.messages.eating_started.format(reaction=animal.react_to_food(food))
                )
                await self._sleep(animal.eating_speed * self.time_scale)
                self.journal.log(self.messages.eating_finished.format(animal=animal.name))
                log_feeding(logger, enclosure, "ATE", animal=animal.name)
                self.bus.emit(AnimalFinishedEatingEvent(animal_name=animal.name, enclosure=enclosure))

            self.journal.log(self.messages.all_fed.format(enclosure=enclosure))
            self.bus.emit(AllFedEvent(enclosure=enclosure, fed_count=len(roster)))
            log_feeding(logger, enclosure, "ALL_FED", details=f"count={len(roster)}")
        return len(roster)

    def _on_task_done(self, enclosure: EnclosureName, task: asyncio.Task) -> None:
        tasks = self._tasks.get(enclosure)
        if tasks is not None:
            tasks.discard(task)
            if not tasks:
                del self._tasks[enclosure]

        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Feeding in {enclosure} failed: {error}", exc_info=error)
