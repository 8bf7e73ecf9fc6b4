"""
ZooRunner - Runs a ZooEngine in a dedicated thread with a persistent event loop.

Feeding sequences and the day/night cycle are asyncio tasks, so they need a
loop that outlives any single call. The runner owns that loop on its own
thread and marshals every call from other threads onto it, which keeps the
engine single-threaded: all mutations happen on one logical owner.

Architecture:
- Caller threads: submit()/call() hand work to the loop thread-safely
- Runner thread: owns the loop, runs engine operations and background tasks
- Journal listeners fire on the runner thread
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import inspect
import logging
import threading
from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from zoo.engine.zoo import ZooEngine

logger = logging.getLogger(__name__)


class ZooRunner:
    """
    Runs ZooEngine in a dedicated thread with a persistent event loop.

    Usage:
        runner = ZooRunner(engine)
        runner.start()

        # Thread-safe; submit() returns a concurrent.futures.Future
        runner.call(engine.initialize)
        runner.submit(engine.drop_food, "Enclosure A")

        runner.shutdown()
    """

    def __init__(self, engine: "ZooEngine"):
        self._engine = engine
        self._thread: threading.Thread | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._ready = threading.Event()

    @property
    def engine(self) -> "ZooEngine":
        """Access the underlying engine (for callbacks and state queries)."""
        return self._engine

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self, timeout: float = 5.0) -> None:
        """
        Start the runner thread and wait until its loop is accepting work.

        Raises:
            RuntimeError: If the loop does not come up within timeout
        """
        if self.is_running:
            logger.warning("Runner thread already running")
            return

        self._ready.clear()
        self._thread = threading.Thread(target=self._thread_main, daemon=True, name="ZooRunner")
        self._thread.start()
        if not self._ready.wait(timeout):
            raise RuntimeError("Runner event loop did not start")
        logger.info("Runner thread started")

    def submit(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> concurrent.futures.Future:
        """
        Run func(*args, **kwargs) on the runner loop.

        Coroutine results are awaited there. Thread-safe and non-blocking.

        Returns:
            Future resolving to func's (awaited) result

        Raises:
            RuntimeError: If the runner is not started
        """
        loop = self._require_loop()

        async def invoke() -> Any:
            result = func(*args, **kwargs)
            if inspect.isawaitable(result):
                result = await result
            return result

        return asyncio.run_coroutine_threadsafe(invoke(), loop)

    def call(self, func: Callable[..., Any], *args: Any, timeout: float | None = None, **kwargs: Any) -> Any:
        """Run func on the runner loop and block for its result."""
        return self.submit(func, *args, **kwargs).result(timeout)

    def call_soon(self, callback: Callable[..., Any], *args: Any) -> None:
        """Fire-and-forget a plain callable on the runner loop."""
        self._require_loop().call_soon_threadsafe(callback, *args)

    def shutdown(self, timeout: float = 5.0) -> None:
        """
        Shut the engine down and stop the runner thread.

        Blocks until the thread exits (with timeout).
        """
        if self._thread is None or self._loop is None:
            return

        logger.info("Requesting runner shutdown")
        try:
            self.call(self._engine.shutdown, timeout=timeout)
        except Exception as e:
            logger.error(f"Engine shutdown error: {e}", exc_info=True)

        self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread.join(timeout=timeout)
        if self._thread.is_alive():
            logger.warning("Runner thread did not exit cleanly")
        else:
            logger.info("Runner thread shut down")
        self._thread = None

    def _require_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None or not self.is_running:
            raise RuntimeError("Runner not started. Call start() first.")
        return self._loop

    def _thread_main(self) -> None:
        """Entry point for the runner thread - creates and runs the event loop."""
        logger.debug("Runner thread starting event loop")
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        self._loop = loop
        loop.call_soon(self._ready.set)
        try:
            loop.run_forever()
        finally:
            # Clean up pending tasks
            pending = asyncio.all_tasks(loop)
            for task in pending:
                task.cancel()
            if pending:
                loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))
            loop.close()
            self._loop = None
            logger.debug("Runner event loop closed")
