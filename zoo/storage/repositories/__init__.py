"""Repositories for the zoo database."""

from .animal import AnimalRepository, EnclosureRecord
from .base import BaseRepository

__all__ = [
    "AnimalRepository",
    "BaseRepository",
    "EnclosureRecord",
]
