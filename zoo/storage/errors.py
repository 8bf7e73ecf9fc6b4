"""Storage exceptions.

Every storage failure is wrapped with a descriptive message and re-raised;
the cause is preserved both as __cause__ and on the exception itself.
"""

from __future__ import annotations


class StorageError(Exception):
    """A persistence operation failed."""

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause


class JournalError(StorageError):
    """Saving or loading the narrative journal failed."""

    pass
