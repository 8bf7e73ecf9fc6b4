"""Foundational types for the zoo.

This module defines the core types used throughout the system:
- AnimalKind: The closed set of animal variants
- Capability: Optional behaviours a kind may support
- Type aliases for domain identifiers
"""

from __future__ import annotations

from enum import Enum
from typing import NewType

# Type aliases for domain identifiers
AnimalId = NewType("AnimalId", int)
EnclosureName = NewType("EnclosureName", str)
FoodKind = NewType("FoodKind", str)


class AnimalKind(Enum):
    """Closed set of animal variants."""

    CAT = "cat"
    DOG = "dog"
    BIRD = "bird"
    RACCOON = "raccoon"
    MONKEY = "monkey"


class Capability(Enum):
    """Optional behaviours that only some kinds support."""

    ERRATIC_ACTION = "erratic_action"
    FLIGHT = "flight"
