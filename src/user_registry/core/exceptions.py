"""Storage-level exceptions raised by repositories.

Business outcomes (not found, duplicate email) are not exceptions; see
``src.user_registry.core.results``. These exceptions cover the cases where
the storage engine itself failed.
"""

from typing import Any


class StorageError(Exception):
    """The storage backend was unreachable, timed out or returned a fault."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class MissingRecordError(StorageError):
    """An update targeted a row that no longer exists."""

    def __init__(self, record_id: int):
        self.record_id = record_id
        super().__init__(
            f"Record {record_id} does not exist",
            details={"record_id": record_id},
        )


class DuplicateKeyError(StorageError):
    """A unique constraint rejected the write."""

    def __init__(self, field: str, value: Any = None):
        self.field = field
        self.value = value
        super().__init__(
            f"Unique constraint violated on {field}",
            details={"field": field, "value": value},
        )
