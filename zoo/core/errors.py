"""Domain exceptions for the zoo.

Expected conditions (a full enclosure, a non-member removal) are reported with
booleans. These exceptions cover integrity failures that callers must not ignore.
"""

from __future__ import annotations

from .types import EnclosureName


class ZooError(Exception):
    """Base exception for zoo domain errors."""

    pass


class UnknownAnimalKindError(ZooError):
    """A stored kind tag does not match any known animal kind."""

    def __init__(self, kind: str):
        super().__init__(f"Unknown animal kind: {kind}")
        self.kind = kind


class EnclosureNotFoundError(ZooError):
    """Enclosure with given name not found."""

    def __init__(self, name: EnclosureName):
        super().__init__(f"Enclosure '{name}' not found")
        self.name = name


class DuplicateEnclosureError(ZooError):
    """An enclosure with this name already exists."""

    def __init__(self, name: EnclosureName):
        super().__init__(f"Enclosure with name '{name}' already exists")
        self.name = name


class EnclosureNotEmptyError(ZooError):
    """Enclosure still has members and cannot be removed."""

    def __init__(self, name: EnclosureName, count: int):
        super().__init__(
            f"Cannot remove enclosure '{name}': {count} animal(s) still assigned to it. "
            "Remove animals first."
        )
        self.name = name
        self.count = count


class AnimalNotFoundError(ZooError):
    """Animal is not part of the catalog."""

    pass
