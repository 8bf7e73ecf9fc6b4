"""Shared test fixtures for the zoo."""

import asyncio
import random
import tempfile
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from zoo.core import Bird, Cat, Dog, EventBus, Monkey, Raccoon
from zoo.storage import JsonJournal


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow (skipped by default, run with --run-slow)")


def pytest_addoption(parser):
    """Add --run-slow option to pytest."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="Run slow tests (skipped by default)",
    )


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is passed."""
    if config.getoption("--run-slow"):
        return

    skip_slow = pytest.mark.skip(reason="Slow test (use --run-slow to run)")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture
def temp_data_dir() -> Path:
    """Create a temporary data directory for tests."""
    with tempfile.TemporaryDirectory(prefix="zoo_test_") as tmpdir:
        yield Path(tmpdir)


# =============================================================================
# Time
# =============================================================================


class FakeClock:
    """Deterministic time source for sleeps and journal timestamps.

    sleep() records the requested delay, advances the clock by it and
    yields once to the event loop, so concurrent tasks still interleave.
    """

    def __init__(self, start: datetime = datetime(2024, 5, 1, 9, 0, 0)):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> datetime:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += timedelta(seconds=seconds)
        await asyncio.sleep(0)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


# =============================================================================
# Domain
# =============================================================================


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def journal(clock: FakeClock) -> JsonJournal:
    return JsonJournal(clock=clock)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(42)


@pytest.fixture
def cat() -> Cat:
    return Cat(name="Muri", age=3, favorite_food="cheese")


@pytest.fixture
def dog() -> Dog:
    return Dog(name="Rex", age=5, breed="German Shepherd")


@pytest.fixture
def bird() -> Bird:
    return Bird(name="Piip", age=2, color="yellow")


@pytest.fixture
def raccoon() -> Raccoon:
    return Raccoon(name="Riku", age=4)


@pytest.fixture
def monkey() -> Monkey:
    return Monkey(name="Mango", age=6)
