"""Catalog statistics for the zoo."""

from __future__ import annotations

from collections import Counter, defaultdict
from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict

from zoo.core.animals import Animal
from zoo.core.types import AnimalKind, Capability

OLDEST_COUNT = 3


class KindStatistics(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: AnimalKind
    count: int
    average_age: float


class ZooStatistics(BaseModel):
    """Aggregates over the animal catalog."""

    model_config = ConfigDict(frozen=True)

    by_kind: tuple[KindStatistics, ...] = ()
    oldest: tuple[tuple[str, int], ...] = ()
    per_enclosure: dict[str, int] = {}
    total_count: int = 0
    average_age: float = 0.0
    erratic_count: int = 0
    flying_count: int = 0

    def render(self) -> list[str]:
        """Human-readable report lines."""
        lines = ["📊 Animals by type:"]
        for group in self.by_kind:
            lines.append(
                f"  {group.kind.value.capitalize()}: {group.count} "
                f"(average age: {group.average_age:.1f})"
            )

        lines.append("🦴 Oldest animals:")
        for name, age in self.oldest:
            lines.append(f"  {name} - {age} years old")

        lines.append("🏠 Animals in enclosures:")
        for enclosure, count in self.per_enclosure.items():
            lines.append(f"  {enclosure}: {count} animals")

        lines.append("📈 General statistics:")
        lines.append(f"Total animals: {self.total_count}")
        lines.append(f"Average age: {self.average_age:.1f} years")
        lines.append(f"With crazy: {self.erratic_count}")
        lines.append(f"Can fly: {self.flying_count}")
        return lines


def compute_statistics(animals: Iterable[Animal]) -> ZooStatistics:
    """Summarise a collection of animals.

    Groups keep first-seen order; the oldest list is stable for equal ages.
    An empty collection yields zero averages.
    """
    catalog = list(animals)
    if not catalog:
        return ZooStatistics()

    ages_by_kind: dict[AnimalKind, list[int]] = defaultdict(list)
    for animal in catalog:
        ages_by_kind[animal.kind].append(animal.age)

    by_kind = tuple(
        KindStatistics(kind=kind, count=len(ages), average_age=sum(ages) / len(ages))
        for kind, ages in ages_by_kind.items()
    )
    oldest = tuple(
        (animal.name, animal.age)
        for animal in sorted(catalog, key=lambda a: a.age, reverse=True)[:OLDEST_COUNT]
    )
    per_enclosure = Counter(animal.enclosure for animal in catalog if animal.enclosure)

    return ZooStatistics(
        by_kind=by_kind,
        oldest=oldest,
        per_enclosure=dict(per_enclosure),
        total_count=len(catalog),
        average_age=sum(animal.age for animal in catalog) / len(catalog),
        erratic_count=sum(1 for a in catalog if a.has_capability(Capability.ERRATIC_ACTION)),
        flying_count=sum(1 for a in catalog if a.has_capability(Capability.FLIGHT)),
    )
