"""Base repository with common patterns.

Provides the database reference and uniform wrapping of SQLite failures.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterator

import aiosqlite

from zoo.logging_config import log_storage
from ..errors import StorageError

if TYPE_CHECKING:
    from ..database import Database

logger = logging.getLogger(__name__)


class BaseRepository:
    """Base class for all repositories.

    Provides:
    - Database reference
    - storage_errors() wrapper turning aiosqlite errors into StorageError
    """

    def __init__(self, db: Database):
        """Initialize repository with database connection.

        Args:
            db: Connected database instance
        """
        self.db = db

    @contextmanager
    def storage_errors(self, action: str) -> Iterator[None]:
        """Wrap SQLite failures raised inside the block.

        Args:
            action: Human-readable operation, e.g. "add animal"

        Raises:
            StorageError: "Failed to <action>: <cause>" with the original cause
        """
        try:
            yield
        except aiosqlite.Error as e:
            log_storage(logger, action, self.db.path, success=False, details=str(e))
            raise StorageError(f"Failed to {action}: {e}", cause=e) from e
        else:
            log_storage(logger, action, self.db.path)
