"""Stateful services for the zoo."""

from .bootstrap import (
    AnimalSeed,
    EnclosureSeed,
    DEFAULT_ANIMALS,
    DEFAULT_ENCLOSURES,
    build_animal,
)
from .day_night import DayNightCycle
from .feeding import FeedingCoordinator
from .narrator import Narrator
from .statistics import (
    KindStatistics,
    ZooStatistics,
    compute_statistics,
)

__all__ = [
    # Bootstrap
    "AnimalSeed",
    "EnclosureSeed",
    "DEFAULT_ANIMALS",
    "DEFAULT_ENCLOSURES",
    "build_animal",
    # Day/night cycle
    "DayNightCycle",
    # Feeding
    "FeedingCoordinator",
    # Narrator
    "Narrator",
    # Statistics
    "KindStatistics",
    "ZooStatistics",
    "compute_statistics",
]
